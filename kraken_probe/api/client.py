"""
HTTP transport for probe requests.

Sends one SignedRequest at a time over a shared aiohttp session and hands
back the raw response bytes; parsing is left to the validators.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import aiohttp

from kraken_probe.api.auth import SignedRequest
from kraken_probe.api.exceptions import ProbeError, TransportError, UnexpectedStatus
from kraken_probe.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """Status and raw body of a completed request"""

    url: str
    status: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def ensure_success(self) -> "ApiResponse":
        """Raise UnexpectedStatus unless the status is 2xx"""
        if not self.ok:
            raise UnexpectedStatus(self.status, self.body)
        return self

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class KrakenRestClient:
    """
    Minimal async client for probe requests.

    No retries and no explicit timeout: a failed send fails the scenario.
    Use as an async context manager or call initialize()/close().
    """

    def __init__(self) -> None:
        self._session: aiohttp.ClientSession | None = None
        self._request_count = 0
        self._error_count = 0

    async def __aenter__(self) -> "KrakenRestClient":
        await self.initialize()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def initialize(self) -> None:
        """Open the HTTP session"""
        if not self._session:
            self._session = aiohttp.ClientSession()

    async def close(self) -> None:
        """Close the HTTP session"""
        if self._session:
            await self._session.close()
            self._session = None
            logger.debug("rest_client_closed", **self.get_statistics())

    async def send(self, request: SignedRequest) -> ApiResponse:
        """
        Send a request and read the whole body.

        Args:
            request: Descriptor built by the authenticator

        Returns:
            ApiResponse with status and raw body

        Raises:
            TransportError: On connection, protocol or read failures
        """
        if not self._session:
            raise ProbeError("Client not initialized")

        self._request_count += 1
        logger.debug(
            "kraken_api_request",
            method=request.method,
            url=request.url,
            private=request.is_private,
        )

        try:
            async with self._session.request(
                request.method,
                request.url,
                data=request.body,
                headers=request.headers,
            ) as response:
                body = await response.read()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._error_count += 1
            logger.error("network_error", url=request.url, error=str(e))
            raise TransportError(f"Network error: {e}") from e

        logger.debug("kraken_api_response", url=request.url, status=status, size=len(body))
        return ApiResponse(url=request.url, status=status, body=body)

    def get_statistics(self) -> dict[str, Any]:
        return {
            "total_requests": self._request_count,
            "total_errors": self._error_count,
        }
