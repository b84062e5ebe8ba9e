from typing import Optional, Dict, Any

class FactCheckException(Exception):
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }

class APIException(FactCheckException):
    status_code = 502

class ValidationException(FactCheckException):
    status_code = 400

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Validation failed for {field}: {reason}",
            {"field": field, "reason": reason}
        )

class LLMException(APIException):
    def __init__(self, reason: str, recoverable: bool = True):
        super().__init__(
            f"LLM service error: {reason}",
            {"reason": reason, "recoverable": recoverable}
        )

class CircuitBreakerOpenException(APIException):
    status_code = 503

    def __init__(self, service_name: str, failure_count: int):
        super().__init__(
            f"Circuit breaker open for {service_name}",
            {"service": service_name, "failure_count": failure_count}
        )

class PersistenceException(FactCheckException):
    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Persistence {operation} failed: {reason}",
            {"operation": operation, "reason": reason}
        )

class FactCheckNotFoundException(FactCheckException):
    status_code = 404

    def __init__(self, short_id: str):
        super().__init__(
            "Fact-check not found",
            {"short_id": short_id}
        )

class NormalizationInputException(FactCheckException):
    def __init__(self, received_type: str):
        super().__init__(
            f"Raw model output must be a string or a JSON object, got {received_type}",
            {"received_type": received_type}
        )
