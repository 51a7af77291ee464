"""
Models package for the pawaPay gateway client.

Exports canonical request records and normalized result records.
"""
from .requests import (
    AvailabilityQuery,
    DepositRequest,
    PaymentPageRequest,
    PayoutRequest,
    RefundRequest,
    StatusQuery,
    TransactionType,
    TransferRequest,
)
from .responses import (
    ActiveConfiguration,
    AvailabilityResult,
    CountryAvailability,
    CountryConfiguration,
    ErrorCategory,
    ErrorClassification,
    GatewayResponse,
    ProviderAvailability,
    ProviderConfiguration,
    StatusResult,
    TransactionStatus,
)

__all__ = [
    "AvailabilityQuery",
    "DepositRequest",
    "PaymentPageRequest",
    "PayoutRequest",
    "RefundRequest",
    "StatusQuery",
    "TransactionType",
    "TransferRequest",
    "ActiveConfiguration",
    "AvailabilityResult",
    "CountryAvailability",
    "CountryConfiguration",
    "ErrorCategory",
    "ErrorClassification",
    "GatewayResponse",
    "ProviderAvailability",
    "ProviderConfiguration",
    "StatusResult",
    "TransactionStatus",
]
