"""
Pydantic models for Kraken response envelopes and the payloads they carry.

Each payload model parses the wire shape and knows its own invariants
through check_valid(); the envelope checks the error/result contract first.
"""

import re
from collections.abc import Sequence
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, RootModel, StrictInt, StrictStr

from kraken_probe.api.exceptions import (
    InvalidTradeCount,
    MissingResult,
    NonPositiveValue,
    ServerError,
    TimeFormatMismatch,
    TimestampMismatch,
    UnexpectedSymbolSet,
)

EXPECTED_PAIR = "XXBTZUSD"

TradeCount = Annotated[int, Field(strict=True, ge=0, le=2**64 - 1)]

# [Day, ] D Mon YYYY HH:MM[:SS] zone, nothing after the zone
RFC2822_DATE_TIME = re.compile(
    r"^\s*(?:(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)\s*,\s*)?"
    r"\d{1,2}\s+(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}\s+"
    r"\d{2}:\d{2}(?::\d{2})?\s+"
    r"(?:[+-]\d{4}|UT|GMT|EST|EDT|CST|CDT|MST|MDT|PST|PDT)\s*$",
    re.IGNORECASE,
)


def as_floats(name: str, values: Sequence[str]) -> list[float]:
    """Parse decimal strings; anything unparsable counts as a bad value."""
    try:
        return [float(value) for value in values]
    except ValueError as e:
        raise NonPositiveValue(f"{name} is not numeric: {list(values)!r}") from e


def require_positive(name: str, values: Sequence[str], skip_first: bool = False) -> None:
    numbers = as_floats(name, values)
    checked = numbers[1:] if skip_first else numbers
    if not all(number > 0 for number in checked):
        raise NonPositiveValue(f"{name} must be positive, got {list(values)!r}")


class TimePayload(BaseModel):
    """Result of /0/public/Time"""

    model_config = ConfigDict(populate_by_name=True)

    unixtime: StrictInt
    server_time: StrictStr = Field(..., alias="rfc1123")

    def check_valid(self) -> None:
        # RFC 2822 supersedes RFC 1123, so the server string parses as 2822
        message = f"Server time {self.server_time!r} is not an RFC 2822 date"
        if not RFC2822_DATE_TIME.match(self.server_time):
            raise TimeFormatMismatch(message)
        try:
            parsed = parsedate_to_datetime(self.server_time)
        except (TypeError, ValueError) as e:
            raise TimeFormatMismatch(message) from e

        # -0000 is the only zone that parses without an offset
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)

        timestamp = int(parsed.timestamp())
        if timestamp != self.unixtime:
            raise TimestampMismatch(
                f"Server time {self.server_time!r} is {timestamp}, unixtime is {self.unixtime}"
            )

    def summary(self) -> str:
        return f"Server responded with time: {self.server_time}"


class TickerEntry(BaseModel):
    """Ticker statistics of one pair; pairs are [today, last 24 hours]"""

    model_config = ConfigDict(populate_by_name=True)

    ask: tuple[StrictStr, StrictStr, StrictStr] = Field(..., alias="a")
    bid: tuple[StrictStr, StrictStr, StrictStr] = Field(..., alias="b")
    closed: tuple[StrictStr, StrictStr] = Field(..., alias="c")
    volume: tuple[StrictStr, StrictStr] = Field(..., alias="v")
    weighted_average_volume: tuple[StrictStr, StrictStr] = Field(..., alias="p")
    trade_count: tuple[TradeCount, TradeCount] = Field(..., alias="t")
    low: tuple[StrictStr, StrictStr] = Field(..., alias="l")
    high: tuple[StrictStr, StrictStr] = Field(..., alias="h")
    opening_price: StrictStr = Field(..., alias="o")

    def check_valid(self) -> None:
        today, last_24h = self.trade_count
        if today == 0 or last_24h == 0:
            raise InvalidTradeCount(f"Trade counts must be nonzero, got {list(self.trade_count)}")
        if today >= last_24h:
            raise InvalidTradeCount(
                f"Today's trade count {today} is not below the 24h count {last_24h}"
            )

        require_positive("ask", self.ask)
        require_positive("bid", self.bid)
        require_positive("closed", self.closed)
        require_positive("low", self.low)
        require_positive("high", self.high)
        require_positive("opening_price", (self.opening_price,))

        # Today's slot is zero right after the daily reset
        require_positive("volume", self.volume, skip_first=True)
        require_positive("weighted_average_volume", self.weighted_average_volume, skip_first=True)


class TickerPayload(RootModel[dict[str, TickerEntry]]):
    """Result of /0/public/Ticker, keyed by pair"""

    def check_valid(self) -> None:
        pairs = sorted(self.root)
        if pairs != [EXPECTED_PAIR]:
            raise UnexpectedSymbolSet(f"Expected only {EXPECTED_PAIR}, got {pairs}")
        self.root[EXPECTED_PAIR].check_valid()

    def summary(self) -> str:
        return f"XBT/USD last price: {self.root[EXPECTED_PAIR].closed[0]}"


class OrdersPayload(BaseModel):
    """Result of /0/private/OpenOrders"""

    open: dict[str, Any]

    def check_valid(self) -> None:
        pass

    @property
    def order_ids(self) -> list[str]:
        return list(self.open)

    def summary(self) -> str:
        return f"Got {len(self.open)} open orders: {self.order_ids}"


PayloadT = TypeVar("PayloadT", TimePayload, TickerPayload, OrdersPayload)


class Envelope(BaseModel, Generic[PayloadT]):
    """Outer object of every response: an error list or a result"""

    error: list[Any]
    result: PayloadT | None = None

    def check_valid(self) -> PayloadT:
        """
        Check the error/result contract, then the payload invariants.

        Returns:
            The validated payload

        Raises:
            ServerError: If the error list is not empty
            MissingResult: If there is neither an error nor a result
            ValidationFailure: If the payload breaks one of its invariants
        """
        if self.error:
            raise ServerError(self.error)
        if self.result is None:
            raise MissingResult("Response has an empty error list but no result")
        self.result.check_valid()
        return self.result
