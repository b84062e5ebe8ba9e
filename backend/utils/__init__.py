from .parsing import extract_json_block, parse_json_object
from .validation import InputValidator, ValidationError

__all__ = [
    "extract_json_block",
    "parse_json_object",
    "InputValidator",
    "ValidationError",
]
