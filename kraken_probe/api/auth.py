"""
Request authentication for the Kraken REST API.

Private endpoints are called with a POST whose body carries a nonce and a
two-factor password, and whose API-Sign header is:

    base64(HMAC-SHA512(base64decode(secret), url_path + SHA256(nonce + body)))

Public endpoints are a plain GET with a User-Agent header.
"""

import base64
import hashlib
import hmac
import struct
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from kraken_probe.api.exceptions import DecodeError, SigningError
from kraken_probe.utils.logger import get_logger

if TYPE_CHECKING:
    from kraken_probe.config.schemas import Credentials

logger = get_logger(__name__)

API_DOMAIN = "https://api.kraken.com"
USER_AGENT = "Kraken REST API"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

TOTP_DIGITS = 6
TOTP_STEP_SECONDS = 30


@dataclass(frozen=True)
class SignedRequest:
    """Ready-to-send request descriptor"""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    @property
    def is_private(self) -> bool:
        return "API-Sign" in self.headers


def decode_base32_seed(seed: str) -> bytes:
    """Decode an RFC 4648 base32 seed; trailing padding is optional."""
    padded = seed + "=" * (-len(seed) % 8)
    try:
        return base64.b32decode(padded, casefold=True)
    except ValueError as e:
        raise DecodeError(f"TOTP seed is not valid base32: {e}") from e


def decode_private_key(private_key: str) -> bytes:
    try:
        return base64.b64decode(private_key, validate=True)
    except ValueError as e:
        raise DecodeError(f"Private key is not valid base64: {e}") from e


def generate_nonce() -> int:
    """Current wall-clock time in milliseconds."""
    return time.time_ns() // 1_000_000


def derive_otp(secret_seed: str, for_time: float | None = None) -> str:
    """
    Compute the TOTP code for a base32 seed.

    Args:
        secret_seed: Base32 shared secret
        for_time: Unix time to compute the code for (defaults to now)

    Returns:
        Zero-padded 6 digit code

    Raises:
        DecodeError: If the seed is not valid base32
    """
    key = decode_base32_seed(secret_seed)
    now = time.time() if for_time is None else for_time
    counter = int(now) // TOTP_STEP_SECONDS

    digest = hmac.new(key, struct.pack(">Q", counter), hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    code = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return str(code % 10**TOTP_DIGITS).zfill(TOTP_DIGITS)


def encode_post_data(nonce: int, otp_code: str | None, params: dict[str, Any] | None = None) -> str:
    """Form-encode the POST body; nonce and otp come first."""
    fields: list[tuple[str, Any]] = [("nonce", nonce)]
    if otp_code:
        fields.append(("otp", otp_code))
    if params:
        fields.extend(params.items())
    return urlencode(fields)


def compute_signature(url_path: str, nonce: int, post_data: str, private_key: str) -> str:
    """
    Compute the API-Sign header value.

    Raises:
        DecodeError: If the private key is not valid base64
        SigningError: If the decoded key is empty
    """
    sha256_digest = hashlib.sha256(f"{nonce}{post_data}".encode("utf-8")).digest()

    secret = decode_private_key(private_key)
    if not secret:
        raise SigningError("Private key decodes to an empty HMAC key")

    mac = hmac.new(secret, url_path.encode("utf-8") + sha256_digest, hashlib.sha512)
    return base64.b64encode(mac.digest()).decode("ascii")


def build_signed_request(
    url_path: str,
    nonce: int,
    otp_code: str | None,
    private_key: str,
    public_key: str,
    params: dict[str, Any] | None = None,
    domain: str = API_DOMAIN,
    user_agent: str = USER_AGENT,
) -> SignedRequest:
    """
    Build a signed POST request for a private endpoint.

    The result depends only on the arguments; nothing is sent.
    """
    post_data = encode_post_data(nonce, otp_code, params)
    signature = compute_signature(url_path, nonce, post_data, private_key)

    return SignedRequest(
        method="POST",
        url=f"{domain}{url_path}",
        headers={
            "API-Key": public_key,
            "API-Sign": signature,
            "Content-Type": FORM_CONTENT_TYPE,
            "User-Agent": user_agent,
        },
        body=post_data,
    )


def build_public_request(
    url_path: str,
    params: dict[str, Any] | None = None,
    domain: str = API_DOMAIN,
    user_agent: str = USER_AGENT,
) -> SignedRequest:
    """Build an unauthenticated GET request; params go into the query string."""
    url = f"{domain}{url_path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return SignedRequest(
        method="GET",
        url=url,
        headers={"User-Agent": user_agent},
    )


class Authenticator:
    """
    Builds requests with one set of credentials.

    Each private request gets a fresh nonce from the clock and a two-factor
    password: the static one if configured, otherwise a TOTP code derived
    from the seed.
    """

    def __init__(
        self,
        credentials: "Credentials",
        domain: str = API_DOMAIN,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.credentials = credentials
        self.domain = domain
        self.user_agent = user_agent

    def current_otp(self, for_time: float | None = None) -> str:
        if self.credentials.otp_seed:
            return derive_otp(self.credentials.otp_seed, for_time)
        # Validation guarantees one of the two is set
        return self.credentials.otp or ""

    def public_request(self, url_path: str, params: dict[str, Any] | None = None) -> SignedRequest:
        return build_public_request(url_path, params, self.domain, self.user_agent)

    def private_request(
        self,
        url_path: str,
        params: dict[str, Any] | None = None,
        nonce: int | None = None,
    ) -> SignedRequest:
        """
        Build a signed request for a private endpoint.

        Args:
            url_path: Endpoint path (e.g., '/0/private/OpenOrders')
            params: Endpoint-specific form parameters
            nonce: Explicit nonce, defaults to the current time in ms

        Returns:
            SignedRequest ready to send
        """
        if nonce is None:
            nonce = generate_nonce()

        request = build_signed_request(
            url_path,
            nonce,
            self.current_otp(),
            self.credentials.api_private_key,
            self.credentials.api_public_key,
            params=params,
            domain=self.domain,
            user_agent=self.user_agent,
        )
        logger.debug("signed_private_request", url=request.url, nonce=nonce)
        return request
