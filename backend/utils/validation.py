import re
from typing import Optional

class ValidationError(Exception):
    pass

class InputValidator:

    XSS_PATTERNS = [
        re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
        re.compile(r"javascript:", re.IGNORECASE),
        re.compile(r"<iframe", re.IGNORECASE),
    ]

    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')

    SHORT_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{4,32}$')

    @staticmethod
    def sanitize_claim(claim: str, max_length: int = 1000) -> str:
        if not claim or not isinstance(claim, str) or not claim.strip():
            raise ValidationError("Claim is required")

        claim = claim.strip()

        if len(claim) > max_length:
            raise ValidationError(f"Claim too long (max {max_length} characters)")

        for pattern in InputValidator.XSS_PATTERNS:
            if pattern.search(claim):
                raise ValidationError("Claim contains suspicious HTML/JavaScript patterns")

        claim = InputValidator.CONTROL_CHARS_PATTERN.sub('', claim)

        claim = re.sub(r'\s+', ' ', claim)

        return claim

    @staticmethod
    def validate_claim(claim: str, max_length: int = 1000) -> tuple[bool, Optional[str]]:
        try:
            InputValidator.sanitize_claim(claim, max_length)
            return True, None
        except ValidationError as e:
            return False, str(e)

    @staticmethod
    def validate_short_id(short_id: str) -> str:
        if not short_id or not InputValidator.SHORT_ID_PATTERN.fullmatch(short_id):
            raise ValidationError("Missing or malformed shortId")
        return short_id
