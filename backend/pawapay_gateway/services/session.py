"""
Client Session

Immutable connection configuration plus a swappable transport. Every
operation is a pure function of its arguments and this session; there is no
module-level client or ambient configuration.
"""
import logging
from typing import Any, Dict, Optional

from ..config import GatewayConfig, WireVersion
from .transport import RequestsTransport, Transport, TransportResponse, build_headers

logger = logging.getLogger(__name__)


class GatewaySession:
    """
    One configured connection to the gateway.

    Args:
        config: Explicit GatewayConfig (token, base URL, TLS policy, version)
        transport: Optional transport; defaults to RequestsTransport with the
            config's timeouts. Replaceable later via the transport attribute.
    """

    def __init__(self, config: GatewayConfig, transport: Optional[Transport] = None):
        self._config = config
        self._base_url = config.resolved_base_url
        self.transport: Transport = transport or RequestsTransport(
            timeout=(config.connect_timeout, config.read_timeout)
        )

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_version(self) -> WireVersion:
        return self._config.api_version

    @property
    def ssl_verify(self) -> bool:
        return self._config.ssl_verify

    def url_for(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def request(
        self,
        method: str,
        path: str,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None
    ) -> TransportResponse:
        """Perform one authenticated round-trip; HTTP errors are returned, not raised."""
        logger.info(f"pawaPay {method} {path}")

        response = self.transport.request(
            method,
            self.url_for(path),
            headers=build_headers(self._config.api_token),
            json_body=json_body,
            params=params,
            verify=self._config.ssl_verify,
        )

        if response.status_code not in (200, 201):
            logger.warning(f"pawaPay {method} {path} returned HTTP {response.status_code}")
        else:
            logger.debug(f"pawaPay {method} {path} returned HTTP {response.status_code}")

        return response

    def __repr__(self) -> str:
        return (
            f"GatewaySession(base_url={self._base_url!r}, "
            f"api_version={self._config.api_version.value!r})"
        )
