"""
Normalized Result Models

V1 and V2 answer the same questions with structurally different bodies.
These records are the single caller-facing shape both adapters reduce their
responses to. The raw decoded body is always kept for logging and audit.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import WireVersion
from .requests import TransactionType


SUCCESS_HTTP_STATUSES = (200, 201)


class TransactionStatus(str, Enum):
    """Lifecycle status of a deposit, payout, refund or remittance."""
    ACCEPTED = "ACCEPTED"
    ENQUEUED = "ENQUEUED"
    SUBMITTED = "SUBMITTED"
    PROCESSING = "PROCESSING"
    IN_RECONCILIATION = "IN_RECONCILIATION"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REJECTED = "REJECTED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "TransactionStatus":
        """Map a wire status string onto the enum; anything unrecognised is UNKNOWN."""
        text = str(value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            return cls.UNKNOWN


class ErrorCategory(str, Enum):
    REJECTION = "rejection"
    FAILURE = "failure"
    STATUS = "status"


class ErrorClassification(BaseModel):
    """
    Friendly interpretation of a machine code.

    code is uppercased and alias-resolved, so V1 and V2 spellings of the same
    condition classify identically.
    """

    code: str
    category: ErrorCategory
    message: str
    terminal: bool

    model_config = {"frozen": True}


# ============================================================================
# Initiation Result
# ============================================================================

class GatewayResponse(BaseModel):
    """
    Result of an initiation call (deposit, payout, refund, payment page).

    The HTTP status is passed through untouched: 200/201 means the gateway
    took the request; anything else is a rejection to classify.
    """

    http_status: int
    body: Any = None
    api_version: WireVersion
    path: str

    @property
    def ok(self) -> bool:
        return self.http_status in SUCCESS_HTTP_STATUSES

    @property
    def body_status(self) -> Optional[str]:
        """Status field of the response body, uppercased (e.g. ACCEPTED)."""
        if isinstance(self.body, dict) and self.body.get("status") is not None:
            return str(self.body["status"]).strip().upper()
        return None

    @property
    def is_rejected(self) -> bool:
        """Non-success HTTP status, or a 2xx body that reports REJECTED."""
        return not self.ok or self.body_status == TransactionStatus.REJECTED.value

    @property
    def redirect_url(self) -> Optional[str]:
        """Payment page URL to send the customer to (expires after ~15 minutes)."""
        if isinstance(self.body, dict):
            return self.body.get("redirectUrl")
        return None

    def rejection(self) -> Optional[ErrorClassification]:
        """Classify the rejection, or None when the request was accepted."""
        from ..services.failure_codes import classify_response_rejection

        if not self.is_rejected:
            return None
        return classify_response_rejection(self.body)


# ============================================================================
# Status Lookup Result
# ============================================================================

class StatusResult(BaseModel):
    """
    Normalized transaction status.

    found=False with status PROCESSING means the gateway has no record yet
    (V1 empty list, V2 NOT_FOUND). That is never final: the transaction may
    simply not be indexed yet, so callers must poll again.
    """

    transaction_id: str
    transaction_type: TransactionType
    found: bool
    status: TransactionStatus
    raw_status: Optional[str] = None
    final: bool
    failure_code: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    raw: Any = None
    http_status: int
    api_version: WireVersion

    @property
    def message(self) -> str:
        """Friendly text for the status, or for the failure code when there is one."""
        from ..services.failure_codes import classify_failure, describe_status

        if self.failure_code and self.status in (
            TransactionStatus.FAILED, TransactionStatus.REJECTED
        ):
            return classify_failure(self.failure_code)
        if not self.found:
            return "No record yet; the transaction may still be processing. Check again shortly."
        return describe_status(self.raw_status or self.status.value)


# ============================================================================
# Availability / Active Configuration
# ============================================================================

class ProviderAvailability(BaseModel):
    """Operation type -> status (e.g. DEPOSIT -> OPERATIONAL) for one provider."""

    provider: str
    operation_types: Dict[str, str] = Field(default_factory=dict)


class CountryAvailability(BaseModel):
    country: str
    providers: List[ProviderAvailability] = Field(default_factory=list)


class AvailabilityResult(BaseModel):
    """Provider availability per country, same shape for V1 and V2."""

    countries: List[CountryAvailability] = Field(default_factory=list)
    raw: Any = None
    http_status: int
    api_version: WireVersion

    def provider_status(self, provider: str, operation_type: str) -> Optional[str]:
        """Status of one provider/operation pair, or None when not listed."""
        for country in self.countries:
            for entry in country.providers:
                if entry.provider == provider:
                    return entry.operation_types.get(operation_type.upper())
        return None

    def is_operational(self, provider: str, operation_type: str) -> bool:
        return self.provider_status(provider, operation_type) == "OPERATIONAL"


class ProviderConfiguration(BaseModel):
    provider: str
    currencies: List[str] = Field(default_factory=list)
    operation_types: List[str] = Field(default_factory=list)


class CountryConfiguration(BaseModel):
    country: str
    providers: List[ProviderConfiguration] = Field(default_factory=list)


class ActiveConfiguration(BaseModel):
    """Merchant account configuration, same shape for V1 and V2."""

    merchant_id: Optional[str] = None
    merchant_name: Optional[str] = None
    countries: List[CountryConfiguration] = Field(default_factory=list)
    raw: Any = None
    http_status: int
    api_version: WireVersion
