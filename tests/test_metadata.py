"""
Tests for V1 <-> V2 metadata shape translation.
"""
import pytest

from pawapay_gateway.exceptions import InvalidRequestError
from pawapay_gateway.services.metadata import (
    iter_metadata_pairs,
    to_v1_item,
    to_v1_metadata,
    to_v2_item,
    to_v2_metadata,
)


def test_v1_item_to_v2_keeps_pii_flag():
    item = {"fieldName": "orderId", "fieldValue": "X", "isPII": True}
    assert to_v2_item(item) == {"orderId": "X", "isPII": True}


def test_v1_item_without_pii_flag():
    assert to_v2_item({"fieldName": "orderId", "fieldValue": "X"}) == {"orderId": "X"}


def test_v2_item_to_v1():
    item = {"customerId": "C42", "isPII": False}
    assert to_v1_item(item) == {"fieldName": "customerId", "fieldValue": "C42", "isPII": False}


def test_translation_is_idempotent():
    v1 = {"fieldName": "orderId", "fieldValue": "X", "isPII": True}
    v2 = {"orderId": "X", "isPII": True}

    assert to_v1_item(v1) == v1
    assert to_v2_item(v2) == v2
    assert to_v2_item(to_v2_item(v1)) == to_v2_item(v1)
    assert to_v1_item(to_v1_item(v2)) == to_v1_item(v2)


def test_round_trip_preserves_item():
    v1 = {"fieldName": "orderId", "fieldValue": "X", "isPII": True}
    assert to_v1_item(to_v2_item(v1)) == v1


def test_translation_returns_copies():
    item = {"orderId": "X"}
    translated = to_v2_item(item)
    translated["extra"] = "y"
    assert item == {"orderId": "X"}


def test_v2_item_with_several_fields_cannot_go_to_v1():
    with pytest.raises(InvalidRequestError) as exc_info:
        to_v1_item({"a": "1", "b": "2"}, index=3)
    assert exc_info.value.details["index"] == 3


def test_list_translation_preserves_order():
    items = [
        {"fieldName": "orderId", "fieldValue": "ORD1"},
        {"customerId": "C42", "isPII": True},
    ]
    assert to_v2_metadata(items) == [{"orderId": "ORD1"}, {"customerId": "C42", "isPII": True}]
    assert to_v1_metadata(items) == [
        {"fieldName": "orderId", "fieldValue": "ORD1"},
        {"fieldName": "customerId", "fieldValue": "C42", "isPII": True},
    ]


def test_empty_and_missing_lists():
    assert to_v1_metadata(None) == []
    assert to_v2_metadata([]) == []


def test_non_mapping_items_are_rejected():
    with pytest.raises(InvalidRequestError):
        to_v2_metadata(["orderId=1"])


def test_iter_pairs_over_mixed_shapes():
    items = [
        {"fieldName": "orderId", "fieldValue": "ORD1", "isPII": False},
        {"customerId": "C42"},
    ]
    assert list(iter_metadata_pairs(items)) == [
        ("orderId", "ORD1", False),
        ("customerId", "C42", None),
    ]


@pytest.mark.parametrize("flag", [True, False, "false", 0, None])
def test_pii_flag_is_copied_unchanged(flag):
    v1 = {"fieldName": "orderId", "fieldValue": "X", "isPII": flag}
    v2 = {"orderId": "X", "isPII": flag}

    assert to_v2_item(v1)["isPII"] is flag
    assert to_v1_item(v2)["isPII"] is flag
    assert list(iter_metadata_pairs([v1])) == [("orderId", "X", flag)]
