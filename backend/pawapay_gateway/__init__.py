"""
pawaPay Gateway Client

Version-adapting client for the pawaPay mobile money API. One canonical
operation set, projected onto the V1 or V2 wire format by configuration.
"""
from .client import PawaPayClient, build_request
from .config import GatewayConfig, Settings, WireVersion
from .exceptions import (
    ConfigurationError,
    GatewayRejectionError,
    InputValidationError,
    InvalidAmountError,
    InvalidMetadataFieldError,
    InvalidNarrationError,
    InvalidRequestError,
    InvalidTransactionIdError,
    PawaPayError,
    TooManyMetadataItemsError,
    TransportError,
    UnsupportedOperationError,
)
from .services.validator import generate_transaction_id

__version__ = "0.1.0"

__all__ = [
    "PawaPayClient",
    "build_request",
    "GatewayConfig",
    "Settings",
    "WireVersion",
    "ConfigurationError",
    "GatewayRejectionError",
    "InputValidationError",
    "InvalidAmountError",
    "InvalidMetadataFieldError",
    "InvalidNarrationError",
    "InvalidRequestError",
    "InvalidTransactionIdError",
    "PawaPayError",
    "TooManyMetadataItemsError",
    "TransportError",
    "UnsupportedOperationError",
    "generate_transaction_id",
]
