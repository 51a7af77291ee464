"""
Shared fixtures for the pawaPay gateway client tests.

Every client here talks to a RecordingTransport, so nothing leaves the
process and each test can inspect exactly what would have been sent.
"""
import pytest

from pawapay_gateway.client import PawaPayClient
from pawapay_gateway.config import GatewayConfig
from pawapay_gateway.mocks.sandbox_transport import RecordingTransport

# Fixed UUIDv4 values so assertions can name them
DEPOSIT_ID = "8917c345-4791-4285-a416-62f24b6982db"
PAYOUT_ID = "2f1c9a40-5b7e-4c1d-9f3a-0e6b2d8c7a15"
REFUND_ID = "c3a1e7d2-9b84-4f60-8e25-71d4b0a9f3c6"

SANDBOX_URL = "https://api.sandbox.pawapay.io"


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def v1_config() -> GatewayConfig:
    return GatewayConfig(api_token="test-token", environment="sandbox", api_version="v1")


@pytest.fixture
def v2_config() -> GatewayConfig:
    return GatewayConfig(api_token="test-token", environment="sandbox", api_version="v2")


@pytest.fixture
def v1_client(v1_config, transport) -> PawaPayClient:
    return PawaPayClient(v1_config, transport=transport)


@pytest.fixture
def v2_client(v2_config, transport) -> PawaPayClient:
    return PawaPayClient(v2_config, transport=transport)
