"""
Response validation: parse raw bytes into a typed envelope, then check it.
"""

from enum import Enum

from pydantic import BaseModel, ValidationError

from kraken_probe.api.exceptions import MalformedResponse
from kraken_probe.utils.logger import get_logger
from kraken_probe.validation.payloads import (
    Envelope,
    OrdersPayload,
    TickerPayload,
    TimePayload,
)

logger = get_logger(__name__)


class PayloadKind(str, Enum):
    """Payload kinds the probe knows how to check"""

    TIME = "time"
    TICKER = "ticker"
    ORDERS = "orders"

    @property
    def payload_type(self) -> type[BaseModel]:
        return _PAYLOAD_TYPES[self]


_PAYLOAD_TYPES: dict[PayloadKind, type[BaseModel]] = {
    PayloadKind.TIME: TimePayload,
    PayloadKind.TICKER: TickerPayload,
    PayloadKind.ORDERS: OrdersPayload,
}


def parse_envelope(kind: PayloadKind | str, raw: bytes | str) -> Envelope:
    """
    Deserialize a response body into Envelope[payload of kind].

    Raises:
        MalformedResponse: If the body is not JSON or does not match the shape
    """
    kind = PayloadKind(kind)
    envelope_type = Envelope[kind.payload_type]  # type: ignore[valid-type]
    try:
        return envelope_type.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedResponse(
            f"Response does not match the {kind.value} format: {e}"
        ) from e


def validate(envelope: Envelope) -> BaseModel:
    """Check an envelope; returns its payload or raises a ValidationFailure."""
    return envelope.check_valid()


def check_response(kind: PayloadKind | str, raw: bytes | str) -> BaseModel:
    """
    Parse and validate a response body in one step.

    Args:
        kind: Expected payload kind
        raw: Response body

    Returns:
        The validated payload
    """
    kind = PayloadKind(kind)
    payload = validate(parse_envelope(kind, raw))
    logger.info("response_valid", kind=kind.value, detail=payload.summary())
    logger.debug(
        "response_payload",
        kind=kind.value,
        payload=payload.model_dump(mode="json", by_alias=True),
    )
    return payload
