"""
Tests for input validation (amount, narration, metadata, identifiers).
"""
import uuid

import pytest

from pawapay_gateway.exceptions import (
    InputValidationError,
    InvalidAmountError,
    InvalidMetadataFieldError,
    InvalidNarrationError,
    InvalidRequestError,
    InvalidTransactionIdError,
    TooManyMetadataItemsError,
)
from pawapay_gateway.services.validator import (
    generate_transaction_id,
    normalize_msisdn,
    validate_amount,
    validate_metadata_count,
    validate_metadata_field,
    validate_metadata_fields,
    validate_narration,
    validate_uuid4,
)


# ============================================================================
# Amount
# ============================================================================

@pytest.mark.parametrize("amount", [
    "0",
    "1",
    "100",
    "5.00",
    "15.5",
    "15.50",
    "0.01",
    "1" + "0" * 17,
    "1" + "0" * 17 + ".99",
    "1000000000000000.99",
])
def test_valid_amounts(amount):
    assert validate_amount(amount) == amount


@pytest.mark.parametrize("amount", [
    "",
    "   ",
    "-5",
    "01",
    "1.234",
    "1,000",
    "abc",
    "1e5",
    "1" + "0" * 18,
    ".5",
    "5.",
    "5.555",
    "00.5",
])
def test_invalid_amounts(amount):
    with pytest.raises(InvalidAmountError):
        validate_amount(amount)


def test_amount_must_be_a_string():
    with pytest.raises(InvalidAmountError) as exc_info:
        validate_amount(100)
    assert "decimal string" in exc_info.value.message


def test_amount_error_is_a_value_error():
    with pytest.raises(ValueError):
        validate_amount("-1")


def test_amount_format_message():
    with pytest.raises(InvalidAmountError) as exc_info:
        validate_amount("1.234")
    assert "up to 2 decimal places" in exc_info.value.message
    assert exc_info.value.error_code == "pawapay:input:invalid_amount"


# ============================================================================
# Narration
# ============================================================================

def test_valid_narration():
    assert validate_narration("Order 123") == "Order 123"


def test_narration_invalid_characters_suggest_correction():
    with pytest.raises(InvalidNarrationError) as exc_info:
        validate_narration("Order #123!")
    assert "Suggested correction: 'Order 123'" in exc_info.value.message
    assert exc_info.value.details["suggested"] == "Order 123"


def test_narration_too_long_suggests_truncation():
    text = "A" * 23
    with pytest.raises(InvalidNarrationError) as exc_info:
        validate_narration(text)
    assert exc_info.value.details["suggested"] == "A" * 22
    assert "22" in exc_info.value.message


def test_narration_at_max_length_is_valid():
    assert validate_narration("B" * 22) == "B" * 22


def test_narration_characters_checked_before_length():
    with pytest.raises(InvalidNarrationError) as exc_info:
        validate_narration("x" * 30 + "!")
    assert "invalid characters" in exc_info.value.message


def test_narration_custom_max_length():
    with pytest.raises(InvalidNarrationError):
        validate_narration("Hello world", max_length=5)


# ============================================================================
# Metadata
# ============================================================================

def test_metadata_count_limit():
    validate_metadata_count([{}] * 10)
    with pytest.raises(TooManyMetadataItemsError) as exc_info:
        validate_metadata_count([{}] * 11)
    assert "You provided 11 items" in exc_info.value.message


def test_metadata_field_valid():
    assert validate_metadata_field("order_id", "ORD-1.2, x") == {
        "fieldName": "order_id",
        "fieldValue": "ORD-1.2, x",
    }


@pytest.mark.parametrize("name, value", [
    ("", "value"),
    ("   ", "value"),
    ("n" * 51, "value"),
    ("order-id", "value"),
    ("orderId", ""),
    ("orderId", "v" * 101),
    ("orderId", "bad#value"),
])
def test_metadata_field_invalid(name, value):
    with pytest.raises(InvalidMetadataFieldError):
        validate_metadata_field(name, value)


def test_metadata_fields_accept_both_shapes():
    items = [
        {"fieldName": "orderId", "fieldValue": "ORD1", "isPII": False},
        {"customerId": "C 42", "isPII": True},
    ]
    assert validate_metadata_fields(items) == [
        {"fieldName": "orderId", "fieldValue": "ORD1"},
        {"fieldName": "customerId", "fieldValue": "C 42"},
    ]


def test_metadata_fields_reject_bad_value():
    with pytest.raises(InvalidMetadataFieldError):
        validate_metadata_fields([{"note": "50% off"}])


# ============================================================================
# Identifiers
# ============================================================================

def test_uuid4_valid():
    value = str(uuid.uuid4())
    assert validate_uuid4(value) == value


def test_uuid4_accepts_uuid_objects():
    value = uuid.uuid4()
    assert validate_uuid4(value) == str(value)


@pytest.mark.parametrize("value", [
    "not-a-uuid",
    "",
    None,
    str(uuid.uuid1()),
    "8917c345-4791-5285-a416-62f24b6982db",
])
def test_uuid4_invalid(value):
    with pytest.raises(InvalidTransactionIdError) as exc_info:
        validate_uuid4(value, "depositId")
    assert exc_info.value.details["field"] == "depositId"


def test_generated_ids_are_uuid4():
    first, second = generate_transaction_id(), generate_transaction_id()
    assert first != second
    assert validate_uuid4(first) == first


def test_msisdn_is_reduced_to_digits():
    assert normalize_msisdn("+256 783-456-789") == "256783456789"


def test_msisdn_without_digits_is_rejected():
    with pytest.raises(InvalidRequestError):
        normalize_msisdn("n/a")


def test_all_input_errors_share_a_base():
    for exc_type in (
        InvalidAmountError,
        InvalidNarrationError,
        TooManyMetadataItemsError,
        InvalidMetadataFieldError,
        InvalidTransactionIdError,
        InvalidRequestError,
    ):
        assert issubclass(exc_type, InputValidationError)
