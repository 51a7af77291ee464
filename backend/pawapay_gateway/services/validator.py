"""
Input Validation for pawaPay Requests

Pure checks that run before any payload is built, so malformed input never
costs a network round-trip. Each failure raises a specific
InputValidationError subclass whose message is precise enough for the caller
to self-correct.
"""
import re
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Sequence

from ..exceptions import (
    InvalidAmountError,
    InvalidMetadataFieldError,
    InvalidNarrationError,
    InvalidRequestError,
    InvalidTransactionIdError,
    TooManyMetadataItemsError,
)
from .metadata import iter_metadata_pairs


# Zero, or 1-18 digits without a leading zero, optionally '.' and 1-2 digits
AMOUNT_PATTERN = re.compile(r"^(0|[1-9][0-9]{0,17})(\.[0-9]{1,2})?$")

NARRATION_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9 ]")
NARRATION_MAX_LENGTH = 22

MAX_METADATA_ITEMS = 10
METADATA_NAME_MAX_LENGTH = 50
METADATA_VALUE_MAX_LENGTH = 100
METADATA_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_ ]+$")
METADATA_VALUE_PATTERN = re.compile(r"^[a-zA-Z0-9_\-., ]+$")

UUID4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE
)


# ============================================================================
# Amount
# ============================================================================

def validate_amount(amount: str) -> str:
    """
    Validate an amount string in the gateway's decimal format.

    Args:
        amount: Decimal string such as "100" or "15.50"

    Returns:
        The amount, unchanged

    Raises:
        InvalidAmountError: blank, wrong format or negative
    """
    if not isinstance(amount, str):
        raise InvalidAmountError(
            f"The amount {amount!r} must be given as a decimal string.",
            details={"amount": amount}
        )

    if not amount.strip():
        raise InvalidAmountError(
            "The amount must not be blank.",
            details={"amount": amount}
        )

    if not AMOUNT_PATTERN.match(amount):
        raise InvalidAmountError(
            f"The amount '{amount}' is invalid. The amount must be a number with up to "
            f"18 digits before the decimal point and up to 2 decimal places.",
            details={"amount": amount}
        )

    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise InvalidAmountError(
            f"The amount '{amount}' is not a number.",
            details={"amount": amount}
        ) from None

    if value < 0:
        raise InvalidAmountError(
            f"The amount '{amount}' must not be negative.",
            details={"amount": amount}
        )

    return amount


# ============================================================================
# Narration (statementDescription / customerMessage)
# ============================================================================

def validate_narration(text: str, max_length: int = NARRATION_MAX_LENGTH) -> str:
    """
    Validate the short text shown to the customer.

    Characters are checked first, then length. Both messages carry a
    suggested correction the caller can reuse.

    Raises:
        InvalidNarrationError
    """
    if not isinstance(text, str):
        raise InvalidNarrationError(
            "The statement description must be a string.",
            details={"narration": text}
        )

    if NARRATION_INVALID_CHARS.search(text):
        suggested = NARRATION_INVALID_CHARS.sub("", text)
        raise InvalidNarrationError(
            "The statement description contains invalid characters. Only alphanumeric "
            f"characters and spaces are allowed. Suggested correction: '{suggested}'",
            details={"narration": text, "suggested": suggested}
        )

    if len(text) > max_length:
        suggested = text[:max_length]
        raise InvalidNarrationError(
            f"The statement description exceeds the allowed length of {max_length} "
            f"characters. Suggested correction: '{suggested}'",
            details={"narration": text, "suggested": suggested, "max_length": max_length}
        )

    return text


# ============================================================================
# Metadata
# ============================================================================

def validate_metadata_count(items: Sequence[Any]) -> Sequence[Any]:
    """Reject metadata lists longer than the gateway allows."""
    if len(items) > MAX_METADATA_ITEMS:
        raise TooManyMetadataItemsError(
            f"Number of metadata items must not be more than {MAX_METADATA_ITEMS}. "
            f"You provided {len(items)} items.",
            details={"count": len(items), "max": MAX_METADATA_ITEMS}
        )
    return items


def validate_metadata_field(field_name: str, field_value: Any) -> Dict[str, str]:
    """
    Validate one metadata name/value pair.

    Returns:
        {"fieldName": ..., "fieldValue": ...}

    Raises:
        InvalidMetadataFieldError
    """
    name = "" if field_name is None else str(field_name)
    value = "" if field_value is None else str(field_value)
    details = {"fieldName": name, "fieldValue": value}

    if not name.strip():
        raise InvalidMetadataFieldError("Metadata field name cannot be blank.", details)
    if len(name) > METADATA_NAME_MAX_LENGTH:
        raise InvalidMetadataFieldError(
            f"Metadata field name cannot exceed {METADATA_NAME_MAX_LENGTH} characters.",
            details
        )
    if not METADATA_NAME_PATTERN.match(name):
        raise InvalidMetadataFieldError(
            "Metadata field name can only contain alphanumeric characters, underscores, "
            "and spaces.",
            details
        )

    if not value.strip():
        raise InvalidMetadataFieldError("Metadata field value cannot be blank.", details)
    if len(value) > METADATA_VALUE_MAX_LENGTH:
        raise InvalidMetadataFieldError(
            f"Metadata field value cannot exceed {METADATA_VALUE_MAX_LENGTH} characters.",
            details
        )
    if not METADATA_VALUE_PATTERN.match(value):
        raise InvalidMetadataFieldError(
            "Metadata field value can only contain alphanumeric characters, underscores, "
            "hyphens, periods, commas, and spaces.",
            details
        )

    return {"fieldName": name, "fieldValue": value}


def validate_metadata_fields(items: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Apply validate_metadata_field to every pair in a metadata list.

    Accepts both V1 items ({fieldName, fieldValue}) and V2 items
    ({<name>: <value>}); the isPII flag is not a field and is skipped.
    """
    validate_metadata_count(items)
    return [validate_metadata_field(name, value) for name, value, _ in iter_metadata_pairs(items)]


# ============================================================================
# Identifiers
# ============================================================================

def validate_uuid4(value: Any, field: str = "transactionId") -> str:
    """Require a canonical UUID version 4 string."""
    if isinstance(value, uuid.UUID):
        value = str(value)
    if not isinstance(value, str) or not UUID4_PATTERN.match(value):
        raise InvalidTransactionIdError(
            f"The {field} '{value}' is not a valid UUID version 4.",
            details={"field": field, "value": value}
        )
    return value


def generate_transaction_id() -> str:
    """New UUIDv4 suitable for depositId, payoutId or refundId."""
    return str(uuid.uuid4())


def normalize_msisdn(value: Any, field: str = "msisdn") -> str:
    """Strip everything but digits from a phone number."""
    digits = re.sub(r"\D", "", "" if value is None else str(value))
    if not digits:
        raise InvalidRequestError(
            f"The {field} '{value}' does not contain a phone number.",
            details={"field": field, "value": value}
        )
    return digits
