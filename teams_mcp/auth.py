"""
Client-credentials token broker for the Bot Framework.

Keeps a single cached bearer token and refreshes it once it gets within
``REFRESH_MARGIN`` seconds of expiry.
"""

import logging
import threading
import time
from typing import Callable, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import (
    InvalidTokenResponse, MissingCredentials, TokenRequestFailed,
    TransportError,
)

logger = logging.getLogger(__name__)

TOKEN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"
DEFAULT_TENANT = "botframework.com"
BOT_SCOPE = "https://api.botframework.com/.default"
REFRESH_MARGIN = 5 * 60.0


class BearerToken(BaseModel):
    """An access token and the epoch second it expires at."""
    model_config = ConfigDict(frozen=True)

    token: str
    expires_at: float

    def is_fresh(self, now: float, margin: float = REFRESH_MARGIN) -> bool:
        return self.expires_at - now > margin

    def __repr__(self) -> str:
        return f"BearerToken(token=<redacted>, expires_at={self.expires_at})"


class _TokenResponse(BaseModel):
    model_config = ConfigDict(strict=True)

    access_token: str = Field(min_length=1)
    expires_in: float
    token_type: Optional[str] = None


class TokenBroker:
    """Produce a currently-valid bearer token, refreshing when stale.

    ``clock`` returns epoch seconds; ``transport`` is passed to
    ``httpx.Client``.
    """

    def __init__(self, client_id: Optional[str], client_secret: Optional[str],
                 tenant_id: Optional[str] = None, *,
                 scope: str = BOT_SCOPE, timeout: float = 30.0,
                 clock: Callable[[], float] = time.time,
                 transport: Optional[httpx.BaseTransport] = None):
        self._client_id = client_id
        self._client_secret = client_secret
        self._tenant_id = tenant_id
        self._scope = scope
        self._timeout = timeout
        self._clock = clock
        self._transport = transport
        self._cached: Optional[BearerToken] = None
        self._lock = threading.Lock()

    @property
    def token_url(self) -> str:
        return TOKEN_URL.format(tenant=self._tenant_id or DEFAULT_TENANT)

    @property
    def cached(self) -> Optional[BearerToken]:
        return self._cached

    @property
    def token(self) -> str:
        return self.get_token().token

    def reset(self) -> None:
        """Forget the cached token; the next call performs an exchange."""
        with self._lock:
            self._cached = None

    def get_token(self) -> BearerToken:
        missing = [name for name, value in (
            ("client_id", self._client_id),
            ("client_secret", self._client_secret)) if not value]
        if missing:
            raise MissingCredentials(missing)

        with self._lock:
            cached = self._cached
            if cached is not None and cached.is_fresh(self._clock()):
                return cached
            token = self._exchange()
            self._cached = token
            return token

    # -- token exchange -----------------------------------------------------
    def _exchange(self) -> BearerToken:
        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "scope": self._scope,
        }
        logger.debug("Requesting token from %s", self.token_url)
        try:
            with httpx.Client(timeout=self._timeout,
                              transport=self._transport) as client:
                resp = client.post(self.token_url, data=form)
        except httpx.TimeoutException:
            raise TransportError("Token request timed out.")
        except httpx.HTTPError as e:
            raise TransportError(f"Token request failed: {e}")

        if not resp.is_success:
            raise TokenRequestFailed(resp.status_code, resp.text)

        issued_at = self._clock()
        try:
            payload = resp.json()
        except ValueError:
            raise InvalidTokenResponse("body is not JSON", resp.text)
        try:
            parsed = _TokenResponse.model_validate(payload)
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(p) for p in err["loc"]) or "(root)"
                for err in e.errors())
            raise InvalidTokenResponse(f"bad or missing {fields}", resp.text)

        logger.info("Obtained bot token (expires in %ds)",
                    int(parsed.expires_in))
        return BearerToken(token=parsed.access_token,
                           expires_at=issued_at + parsed.expires_in)
