"""
HTTP Transport

Authenticated JSON-over-HTTPS primitive the adapters talk through.

Contract:
- non-2xx HTTP statuses are normal returns, passed through untouched
- DNS, connect, TLS and timeout failures raise TransportError
- no retries and no caching

Any object with a matching request() method can stand in for
RequestsTransport (see mocks.sandbox_transport for the test double).
"""
import logging
from typing import Any, Dict, Optional, Protocol, Tuple

import requests
from pydantic import BaseModel

from ..exceptions import TransportError

logger = logging.getLogger(__name__)


class TransportResponse(BaseModel):
    """Status code plus decoded JSON body (None when empty or not JSON)."""

    status_code: int
    body: Any = None
    text: str = ""


class Transport(Protocol):
    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Dict[str, str],
        json_body: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        verify: bool = True,
    ) -> TransportResponse:
        ...


def build_headers(api_token: str) -> Dict[str, str]:
    """Headers sent on every authenticated call."""
    return {
        "Authorization": f"Bearer {api_token}",
        "Content-Type": "application/json",
    }


def decode_body(response: requests.Response) -> Any:
    """Decoded JSON, or None for an empty or non-JSON body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        logger.warning(
            f"Non-JSON response body (HTTP {response.status_code}): {response.text[:200]}"
        )
        return None


class RequestsTransport:
    """
    Transport backed by a requests.Session.

    Timeouts are transport properties, not per call: (connect, read) seconds.
    The session pools connections; share one instance across threads only if
    that is acceptable for requests.Session in the host application.
    """

    def __init__(
        self,
        timeout: Tuple[float, float] = (10.0, 30.0),
        session: Optional[requests.Session] = None
    ):
        self.timeout = timeout
        self.session = session or requests.Session()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Dict[str, str],
        json_body: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        verify: bool = True,
    ) -> TransportResponse:
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                json=json_body,
                params=params or None,
                verify=verify,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Request Error: {method} {url}: {e}")
            raise TransportError(
                f"Request Error: {e}",
                details={"method": method, "url": url, "error_type": type(e).__name__}
            ) from e

        return TransportResponse(
            status_code=response.status_code,
            body=decode_body(response),
            text=response.text,
        )

    def close(self) -> None:
        self.session.close()
