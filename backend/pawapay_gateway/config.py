"""
pawaPay Gateway Configuration Module

Two layers:
- Settings: environment variables (and .env) for the process entrypoint
- GatewayConfig: the explicit, immutable record every client session is built
  from. The library core only ever reads GatewayConfig, never the environment.
"""
from enum import Enum
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError


class WireVersion(str, Enum):
    """pawaPay HTTP API generation."""
    V1 = "v1"
    V2 = "v2"


# Hosts serve both unversioned (V1) and /v2-prefixed (V2) paths
BASE_URLS: Dict[str, str] = {
    "sandbox": "https://api.sandbox.pawapay.io",
    "production": "https://api.pawapay.io",
}


def resolve_base_url(environment: str) -> str:
    """Map an environment name to its API host."""
    try:
        return BASE_URLS[environment]
    except KeyError:
        raise ConfigurationError(
            f"Invalid environment specified: {environment!r}",
            details={"allowed": sorted(BASE_URLS)}
        ) from None


class GatewayConfig(BaseModel):
    """
    Immutable connection settings for one client session.

    Build it directly (tests, multi-tenant hosts) or from Settings via
    GatewayConfig.from_settings().
    """

    api_token: str = Field(min_length=1, repr=False)
    environment: Literal["sandbox", "production"] = "sandbox"
    base_url: Optional[str] = None
    ssl_verify: bool = True
    api_version: WireVersion = WireVersion.V1
    connect_timeout: float = Field(10.0, gt=0)
    read_timeout: float = Field(30.0, gt=0)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @property
    def resolved_base_url(self) -> str:
        """Explicit base URL when given, otherwise the environment's host."""
        return self.base_url or resolve_base_url(self.environment)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "GatewayConfig":
        """
        Build a config from environment-backed settings.

        The token is looked up per environment, mirroring the
        PAWAPAY_<ENVIRONMENT>_API_TOKEN convention.
        """
        environment = settings.pawapay_environment
        token = (
            settings.pawapay_production_api_token
            if environment == "production"
            else settings.pawapay_sandbox_api_token
        )
        if not token:
            raise ConfigurationError(
                f"API token not found for the selected environment: {environment}",
                details={"variable": f"PAWAPAY_{environment.upper()}_API_TOKEN"}
            )

        ssl_verify = settings.pawapay_ssl_verify
        if ssl_verify is None:
            ssl_verify = environment == "production"

        return cls(
            api_token=token,
            environment=environment,
            base_url=settings.pawapay_base_url,
            ssl_verify=ssl_verify,
            api_version=settings.pawapay_api_version,
            connect_timeout=settings.pawapay_connect_timeout,
            read_timeout=settings.pawapay_read_timeout,
        )


class Settings(BaseSettings):
    """
    Process settings loaded from environment variables.

    Notes:
    - Tokens are per environment; only the selected one is required
    - SSL verification defaults to on in production and off in sandbox
      unless PAWAPAY_SSL_VERIFY is set explicitly
    """

    # pawaPay Connection
    pawapay_environment: Literal["sandbox", "production"] = "sandbox"
    pawapay_sandbox_api_token: str = ""
    pawapay_production_api_token: str = ""
    pawapay_api_version: WireVersion = WireVersion.V1
    pawapay_base_url: Optional[str] = None
    pawapay_ssl_verify: Optional[bool] = None
    pawapay_connect_timeout: float = 10.0
    pawapay_read_timeout: float = 30.0

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Callback receiver
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance (entrypoints only; the client core never reads it)
settings = Settings()
