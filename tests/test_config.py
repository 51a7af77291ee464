"""
Tests for GatewayConfig and environment-backed Settings.
"""
import pytest
from pydantic import ValidationError

from pawapay_gateway.config import GatewayConfig, Settings, WireVersion, resolve_base_url
from pawapay_gateway.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _clear_pawapay_env(monkeypatch):
    for name in (
        "PAWAPAY_ENVIRONMENT",
        "PAWAPAY_SANDBOX_API_TOKEN",
        "PAWAPAY_PRODUCTION_API_TOKEN",
        "PAWAPAY_API_VERSION",
        "PAWAPAY_BASE_URL",
        "PAWAPAY_SSL_VERIFY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_base_urls_per_environment():
    assert resolve_base_url("sandbox") == "https://api.sandbox.pawapay.io"
    assert resolve_base_url("production") == "https://api.pawapay.io"


def test_unknown_environment():
    with pytest.raises(ConfigurationError):
        resolve_base_url("staging")


def test_explicit_base_url_wins_and_loses_trailing_slash():
    config = GatewayConfig(api_token="t", base_url="https://proxy.example/")
    assert config.resolved_base_url == "https://proxy.example"


def test_config_defaults():
    config = GatewayConfig(api_token="t")
    assert config.environment == "sandbox"
    assert config.api_version is WireVersion.V1
    assert config.ssl_verify is True
    assert config.resolved_base_url == "https://api.sandbox.pawapay.io"


def test_config_is_immutable():
    config = GatewayConfig(api_token="t")
    with pytest.raises(ValidationError):
        config.api_version = WireVersion.V2


def test_config_requires_token():
    with pytest.raises(ValidationError):
        GatewayConfig(api_token="")


def test_from_settings_picks_environment_token():
    settings = Settings(
        _env_file=None,
        pawapay_environment="production",
        pawapay_sandbox_api_token="sandbox-token",
        pawapay_production_api_token="live-token",
        pawapay_api_version="v2",
    )
    config = GatewayConfig.from_settings(settings)

    assert config.api_token == "live-token"
    assert config.api_version is WireVersion.V2
    assert config.resolved_base_url == "https://api.pawapay.io"
    assert config.ssl_verify is True


def test_from_settings_sandbox_skips_ssl_verification_by_default():
    settings = Settings(_env_file=None, pawapay_sandbox_api_token="sandbox-token")
    assert GatewayConfig.from_settings(settings).ssl_verify is False


def test_from_settings_explicit_ssl_verify():
    settings = Settings(
        _env_file=None,
        pawapay_sandbox_api_token="sandbox-token",
        pawapay_ssl_verify=True,
    )
    assert GatewayConfig.from_settings(settings).ssl_verify is True


def test_from_settings_missing_token_names_variable():
    settings = Settings(_env_file=None, pawapay_environment="production")
    with pytest.raises(ConfigurationError) as exc_info:
        GatewayConfig.from_settings(settings)
    assert exc_info.value.details["variable"] == "PAWAPAY_PRODUCTION_API_TOKEN"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("PAWAPAY_SANDBOX_API_TOKEN", "env-token")
    monkeypatch.setenv("PAWAPAY_API_VERSION", "v2")

    config = GatewayConfig.from_settings(Settings(_env_file=None))
    assert config.api_token == "env-token"
    assert config.api_version is WireVersion.V2
