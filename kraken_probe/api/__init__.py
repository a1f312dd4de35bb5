"""Request signing and transport modules"""

from kraken_probe.api.auth import (
    Authenticator,
    SignedRequest,
    build_public_request,
    build_signed_request,
    compute_signature,
    derive_otp,
    generate_nonce,
)
from kraken_probe.api.client import ApiResponse, KrakenRestClient
from kraken_probe.api.exceptions import (
    ConfigurationError,
    DecodeError,
    InvalidTradeCount,
    MalformedResponse,
    MissingResult,
    NonPositiveValue,
    ProbeError,
    ServerError,
    SigningError,
    TimeFormatMismatch,
    TimestampMismatch,
    TransportError,
    UnexpectedStatus,
    UnexpectedSymbolSet,
    ValidationFailure,
)

__all__ = [
    "Authenticator",
    "SignedRequest",
    "build_public_request",
    "build_signed_request",
    "compute_signature",
    "derive_otp",
    "generate_nonce",
    "ApiResponse",
    "KrakenRestClient",
    "ProbeError",
    "ConfigurationError",
    "DecodeError",
    "SigningError",
    "TransportError",
    "UnexpectedStatus",
    "MalformedResponse",
    "ValidationFailure",
    "ServerError",
    "MissingResult",
    "TimeFormatMismatch",
    "TimestampMismatch",
    "UnexpectedSymbolSet",
    "InvalidTradeCount",
    "NonPositiveValue",
]
