"""
Shared HTTP plumbing for the Teams API clients.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..errors import TransportError

logger = logging.getLogger(__name__)


class MessagingClient(ABC):
    """Base for one Teams API variant.

    Subclasses supply the auth header; ``_request`` does the rest.
    """

    def __init__(self, base_url: str, timeout: float = 30.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @abstractmethod
    def _auth_headers(self) -> Dict[str, str]:
        """Return the Authorization header for the next call."""

    def _request(self, method: str, path: str,
                 json: Optional[Dict[str, Any]] = None,
                 params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = self._auth_headers()
        logger.debug("%s %s", method, url)
        try:
            with httpx.Client(timeout=self._timeout,
                              transport=self._transport) as client:
                resp = client.request(method, url, json=json, params=params,
                                      headers=headers)
                resp.raise_for_status()
        except httpx.TimeoutException:
            raise TransportError(f"{method} {path} timed out.")
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"{method} {path} failed ({e.response.status_code}): "
                f"{e.response.text}",
                status_code=e.response.status_code,
                body=e.response.text)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}")

        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError:
            raise TransportError(
                f"{method} {path} returned a non-JSON body",
                status_code=resp.status_code, body=resp.text)
        if not isinstance(data, dict):
            raise TransportError(
                f"{method} {path} returned unexpected JSON",
                status_code=resp.status_code, body=resp.text)
        return data
