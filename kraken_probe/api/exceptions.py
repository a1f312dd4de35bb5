"""Exceptions raised while signing, sending and validating API requests"""

from typing import Any


class ProbeError(Exception):
    """Base exception for all probe errors; each one fails its scenario"""

    pass


class ConfigurationError(ProbeError):
    """Raised when credentials or settings are missing or invalid at startup"""

    pass


class DecodeError(ProbeError):
    """Raised when base32 or base64 secret material cannot be decoded"""

    pass


class SigningError(ProbeError):
    """Raised when the request signature cannot be computed"""

    pass


class TransportError(ProbeError):
    """Raised when sending a request or reading its response fails"""

    pass


class UnexpectedStatus(ProbeError):
    """Raised when the server answers with a non-success HTTP status"""

    def __init__(self, status: int, body: bytes = b"") -> None:
        self.status = status
        self.body = body
        super().__init__(f"Server responded with HTTP status {status}")


class MalformedResponse(ProbeError):
    """Raised when the response is not JSON or does not match the expected shape"""

    pass


class ValidationFailure(ProbeError):
    """Base exception for a well-formed response that breaks an invariant"""

    pass


class ServerError(ValidationFailure):
    """Raised when the response envelope carries a non-empty error list"""

    def __init__(self, errors: list[Any]) -> None:
        self.errors = errors
        super().__init__(f"Answer contains error: {errors!r}")


class MissingResult(ValidationFailure):
    """Raised when the error list is empty but no result is present"""

    pass


class TimeFormatMismatch(ValidationFailure):
    """Raised when the server time string is not an RFC 2822 date"""

    pass


class TimestampMismatch(ValidationFailure):
    """Raised when the server time string and unixtime disagree"""

    pass


class UnexpectedSymbolSet(ValidationFailure):
    """Raised when the ticker does not contain exactly the expected pair"""

    pass


class InvalidTradeCount(ValidationFailure):
    """Raised when trade counts are zero or today's count is not below the 24h count"""

    pass


class NonPositiveValue(ValidationFailure):
    """Raised when a price or volume field is not a positive number"""

    pass
