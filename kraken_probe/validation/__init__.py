"""Response parsing and validation"""

from kraken_probe.validation.payloads import (
    EXPECTED_PAIR,
    Envelope,
    OrdersPayload,
    TickerEntry,
    TickerPayload,
    TimePayload,
)
from kraken_probe.validation.validator import (
    PayloadKind,
    check_response,
    parse_envelope,
    validate,
)

__all__ = [
    "EXPECTED_PAIR",
    "Envelope",
    "OrdersPayload",
    "TickerEntry",
    "TickerPayload",
    "TimePayload",
    "PayloadKind",
    "check_response",
    "parse_envelope",
    "validate",
]
