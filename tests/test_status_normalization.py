"""
Tests for status lookups: both wire shapes reduce to the same StatusResult.
"""
import pytest

from pawapay_gateway.exceptions import GatewayRejectionError
from pawapay_gateway.models.requests import TransactionType
from pawapay_gateway.models.responses import TransactionStatus

from conftest import DEPOSIT_ID, PAYOUT_ID, SANDBOX_URL

COMPLETED_RECORD = {
    "depositId": DEPOSIT_ID,
    "status": "COMPLETED",
    "amount": "100",
    "currency": "UGX",
}

FAILED_RECORD = {
    "depositId": DEPOSIT_ID,
    "status": "FAILED",
    "failureReason": {"failureCode": "PAYER_NOT_FOUND", "failureMessage": "..."},
}


def test_v1_empty_list_is_processing(v1_client, transport):
    transport.queue(200, [])
    result = v1_client.fetch_status(DEPOSIT_ID)

    assert transport.last_call.url == f"{SANDBOX_URL}/deposits/{DEPOSIT_ID}"
    assert result.found is False
    assert result.status is TransactionStatus.PROCESSING
    assert result.final is False
    assert result.raw == []


def test_v2_not_found_is_processing(v2_client, transport):
    transport.queue(200, {"status": "NOT_FOUND"})
    result = v2_client.fetch_status(DEPOSIT_ID)

    assert transport.last_call.url == f"{SANDBOX_URL}/v2/deposits/{DEPOSIT_ID}"
    assert result.found is False
    assert result.status is TransactionStatus.PROCESSING
    assert result.final is False
    assert "processing" in result.message


def test_completed_is_the_same_on_both_versions(v1_client, v2_client, transport):
    transport.queue(200, [COMPLETED_RECORD])
    transport.queue(200, {"status": "FOUND", "data": COMPLETED_RECORD})

    v1_result = v1_client.fetch_status(DEPOSIT_ID)
    v2_result = v2_client.fetch_status(DEPOSIT_ID)

    for result in (v1_result, v2_result):
        assert result.found is True
        assert result.status is TransactionStatus.COMPLETED
        assert result.final is True
        assert result.failure_code is None
        assert result.data == COMPLETED_RECORD

    assert v1_result.api_version.value == "v1"
    assert v2_result.api_version.value == "v2"


def test_failed_record_carries_failure_code(v2_client, transport):
    transport.queue(200, {"status": "FOUND", "data": FAILED_RECORD})
    result = v2_client.fetch_status(DEPOSIT_ID)

    assert result.status is TransactionStatus.FAILED
    assert result.final is True
    assert result.failure_code == "PAYER_NOT_FOUND"
    assert result.message == "The phone number does not belong to the specified provider."


@pytest.mark.parametrize("status", ["ACCEPTED", "SUBMITTED", "ENQUEUED", "IN_RECONCILIATION"])
def test_in_flight_statuses_are_not_final(v1_client, transport, status):
    transport.queue(200, [{"depositId": DEPOSIT_ID, "status": status}])
    result = v1_client.fetch_status(DEPOSIT_ID)
    assert result.found is True
    assert result.final is False
    assert result.raw_status == status


def test_unrecognised_status_is_unknown_and_not_final(v1_client, transport):
    transport.queue(200, [{"depositId": DEPOSIT_ID, "status": "SOMETHING_NEW"}])
    result = v1_client.fetch_status(DEPOSIT_ID)
    assert result.status is TransactionStatus.UNKNOWN
    assert result.final is False


def test_v1_bare_object_is_accepted(v1_client, transport):
    transport.queue(200, COMPLETED_RECORD)
    assert v1_client.fetch_status(DEPOSIT_ID).status is TransactionStatus.COMPLETED


@pytest.mark.parametrize("transaction_type, path", [
    ("deposit", "/v2/deposits"),
    ("payout", "/v2/payouts"),
    ("refund", "/v2/refunds"),
    ("remittance", "/v2/remittances"),
])
def test_v2_status_paths(v2_client, transport, transaction_type, path):
    transport.queue(200, {"status": "NOT_FOUND"})
    result = v2_client.fetch_status(PAYOUT_ID, transaction_type)
    assert transport.last_call.url == f"{SANDBOX_URL}{path}/{PAYOUT_ID}"
    assert result.transaction_type is TransactionType(transaction_type)


def test_lookup_http_error_raises(v2_client, transport):
    transport.queue(401, {"errorCode": "AUTHENTICATION_ERROR"})
    with pytest.raises(GatewayRejectionError) as exc_info:
        v2_client.fetch_status(DEPOSIT_ID)

    error = exc_info.value
    assert error.http_status == 401
    assert error.classification.code == "AUTHENTICATION_ERROR"
    assert error.body == {"errorCode": "AUTHENTICATION_ERROR"}
    assert error.details["http_status"] == 401


def test_sandbox_settles_accepted_deposits(v2_client, transport):
    v2_client.initiate_deposit(
        transaction_id=DEPOSIT_ID,
        amount="100",
        currency="UGX",
        msisdn="256783456789",
        provider="MTN_MOMO_UGA",
    )
    result = v2_client.fetch_status(DEPOSIT_ID)
    assert result.found is True
    assert result.final is True
    assert result.status in (TransactionStatus.COMPLETED, TransactionStatus.FAILED)
