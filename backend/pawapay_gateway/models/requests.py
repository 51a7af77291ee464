"""
Canonical Request Models

One caller-facing record per business operation, independent of the wire
version that will eventually carry it. Field validators delegate to
services.validator so the same rules apply everywhere; version-specific
requirements (e.g. V2 currency) are checked by the adapters.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..exceptions import InvalidRequestError
from ..services.validator import (
    normalize_msisdn,
    validate_amount,
    validate_metadata_count,
    validate_narration,
    validate_uuid4,
)


class TransactionType(str, Enum):
    """Kinds of transaction whose status can be looked up."""
    DEPOSIT = "deposit"
    PAYOUT = "payout"
    REFUND = "refund"
    REMITTANCE = "remittance"


_REQUEST_CONFIG = {
    "frozen": True,
    "extra": "forbid",
    "populate_by_name": True,
}


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _check_currency(v: Any) -> Optional[str]:
    if v is None:
        return None
    code = v.strip().upper() if isinstance(v, str) else ""
    if len(code) != 3 or not code.isalpha():
        raise InvalidRequestError(
            f"The currency '{v}' is not an ISO 4217 code.",
            details={"currency": v}
        )
    return code


def _check_metadata(v: Optional[List[Any]]) -> List[Dict[str, Any]]:
    items = list(v or [])
    validate_metadata_count(items)
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidRequestError(
                f"Metadata item {index} must be an object.",
                details={"index": index}
            )
    return items


# ============================================================================
# Deposit / Payout
# ============================================================================

class TransferRequest(BaseModel):
    """
    Money movement between a mobile wallet and the merchant account.

    provider is the mobile network operator code: sent as "correspondent"
    on V1 and "provider" on V2. narration is V1 statementDescription and
    V2 customerMessage.
    """

    transaction_id: str
    amount: str
    currency: Optional[str] = None
    msisdn: str = Field(validation_alias=AliasChoices("msisdn", "phone_number"))
    provider: str = Field(
        min_length=1,
        validation_alias=AliasChoices("provider", "correspondent")
    )
    narration: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "narration", "statement_description", "customer_message"
        )
    )
    client_reference_id: Optional[str] = None
    metadata: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = _REQUEST_CONFIG

    @field_validator("transaction_id", mode="before")
    @classmethod
    def check_transaction_id(cls, v: Any) -> str:
        return validate_uuid4(v, "transactionId")

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v: Any) -> str:
        return validate_amount(v)

    @field_validator("currency", mode="before")
    @classmethod
    def check_currency(cls, v: Any) -> Optional[str]:
        return _check_currency(_blank_to_none(v))

    @field_validator("msisdn", mode="before")
    @classmethod
    def check_msisdn(cls, v: Any) -> str:
        return normalize_msisdn(v)

    @field_validator("narration", "client_reference_id", mode="before")
    @classmethod
    def blank_is_absent(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("narration")
    @classmethod
    def check_narration(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return validate_narration(v)

    @field_validator("metadata", mode="before")
    @classmethod
    def check_metadata(cls, v: Any) -> List[Dict[str, Any]]:
        return _check_metadata(v)


class DepositRequest(TransferRequest):
    """Collection from the payer's wallet. pre_auth_code is V2 only."""

    pre_auth_code: Optional[str] = None

    @field_validator("pre_auth_code", mode="before")
    @classmethod
    def blank_pre_auth(cls, v: Any) -> Any:
        return _blank_to_none(v)


class PayoutRequest(TransferRequest):
    """Disbursement to the recipient's wallet."""


# ============================================================================
# Refund
# ============================================================================

class RefundRequest(BaseModel):
    """
    Reversal of a completed deposit.

    currency is required by V2 and must match the original deposit.
    """

    refund_id: str
    deposit_id: str
    amount: str
    currency: Optional[str] = None
    metadata: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = _REQUEST_CONFIG

    @field_validator("refund_id", mode="before")
    @classmethod
    def check_refund_id(cls, v: Any) -> str:
        return validate_uuid4(v, "refundId")

    @field_validator("deposit_id", mode="before")
    @classmethod
    def check_deposit_id(cls, v: Any) -> str:
        return validate_uuid4(v, "depositId")

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v: Any) -> str:
        return validate_amount(v)

    @field_validator("currency", mode="before")
    @classmethod
    def check_currency(cls, v: Any) -> Optional[str]:
        return _check_currency(_blank_to_none(v))

    @field_validator("metadata", mode="before")
    @classmethod
    def check_metadata(cls, v: Any) -> List[Dict[str, Any]]:
        return _check_metadata(v)


# ============================================================================
# Hosted Payment Page (V1 widget session / V2 payment page)
# ============================================================================

class PaymentPageRequest(BaseModel):
    """
    Hosted checkout session; the response carries a redirectUrl for the
    customer.

    Either amount + currency or a preformed amount_details mapping may be
    given. phone_number also accepts the legacy msisdn name.
    """

    deposit_id: str
    return_url: str = Field(min_length=1)
    narration: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "narration", "statement_description", "customer_message"
        )
    )
    amount: Optional[str] = None
    currency: Optional[str] = None
    amount_details: Optional[Dict[str, Any]] = None
    phone_number: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("phone_number", "msisdn")
    )
    language: Optional[str] = None
    country: Optional[str] = None
    reason: Optional[str] = None
    metadata: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = _REQUEST_CONFIG

    @field_validator("deposit_id", mode="before")
    @classmethod
    def check_deposit_id(cls, v: Any) -> str:
        return validate_uuid4(v, "depositId")

    @field_validator("narration", "amount", "phone_number", "language", "country", "reason",
                     mode="before")
    @classmethod
    def blank_is_absent(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("narration")
    @classmethod
    def check_narration(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return validate_narration(v)

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return validate_amount(v)

    @field_validator("currency", mode="before")
    @classmethod
    def check_currency(cls, v: Any) -> Optional[str]:
        return _check_currency(_blank_to_none(v))

    @field_validator("amount_details")
    @classmethod
    def check_amount_details(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if v is None:
            return None
        missing = [key for key in ("amount", "currency") if v.get(key) is None]
        if missing:
            raise InvalidRequestError(
                f"amount_details must contain both amount and currency; missing {', '.join(missing)}.",
                details={"field": "amount_details", "missing": missing}
            )
        return {
            **v,
            "amount": validate_amount(v["amount"]),
            "currency": _check_currency(v["currency"]),
        }

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return normalize_msisdn(v, "phoneNumber")

    @field_validator("language", "country")
    @classmethod
    def upper_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v is not None else None

    @field_validator("metadata", mode="before")
    @classmethod
    def check_metadata(cls, v: Any) -> List[Dict[str, Any]]:
        return _check_metadata(v)


# ============================================================================
# Lookups
# ============================================================================

class StatusQuery(BaseModel):
    """Status lookup for one transaction."""

    transaction_id: str
    transaction_type: TransactionType = TransactionType.DEPOSIT

    model_config = _REQUEST_CONFIG

    @field_validator("transaction_id", mode="before")
    @classmethod
    def check_transaction_id(cls, v: Any) -> str:
        return validate_uuid4(v, "transactionId")

    @field_validator("transaction_type", mode="before")
    @classmethod
    def lower_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class AvailabilityQuery(BaseModel):
    """Optional filters for availability / active configuration (V2 only)."""

    country: Optional[str] = None
    operation_type: Optional[str] = None

    model_config = _REQUEST_CONFIG

    @field_validator("country", "operation_type", mode="before")
    @classmethod
    def upper_filter(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return v.strip().upper() if isinstance(v, str) else v

    def as_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.country:
            params["country"] = self.country
        if self.operation_type:
            params["operationType"] = self.operation_type
        return params
