"""
Mock pawaPay Sandbox Transport

In-memory stand-in for RequestsTransport. Records every call and answers
like the pawaPay API would, in the shape of whichever wire version the path
belongs to, without touching the network.

Mock Behavior:
- Canned responses queued with queue() are returned first, in order
- Special MSISDNs (REJECTION_MSISDNS) are rejected at initiation
- Other accepted transactions settle deterministically: ~90% COMPLETED,
  the rest FAILED, based on a hash of the transaction id
- Unknown ids look up as V1 [] / V2 {"status": "NOT_FOUND"}
"""
import hashlib
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ..services.transport import TransportResponse

logger = logging.getLogger(__name__)


# Test phone numbers that trigger specific initiation rejections (V1 spelling;
# the V2 response uses the aliased canonical code)
REJECTION_MSISDNS = {
    "256700000001": ("INVALID_PAYER_FORMAT", "INVALID_PHONE_NUMBER"),
    "256700000002": ("AMOUNT_TOO_LARGE", "AMOUNT_OUT_OF_BOUNDS"),
    "256700000003": ("CORRESPONDENT_TEMPORARILY_UNAVAILABLE", "PROVIDER_TEMPORARILY_UNAVAILABLE"),
}

FAILURE_CODES = ["PAYER_NOT_FOUND", "PAYMENT_NOT_APPROVED", "INSUFFICIENT_BALANCE"]

ID_FIELDS = ("depositId", "payoutId", "refundId")
PARTY_FIELDS = ("payer", "recipient")

SANDBOX_AVAILABILITY = {
    "v1": [
        {
            "country": "UGA",
            "correspondents": [
                {
                    "correspondent": "MTN_MOMO_UGA",
                    "operationTypes": [
                        {"operationType": "DEPOSIT", "status": "OPERATIONAL"},
                        {"operationType": "PAYOUT", "status": "OPERATIONAL"},
                    ],
                },
                {
                    "correspondent": "AIRTEL_OAPI_UGA",
                    "operationTypes": [
                        {"operationType": "DEPOSIT", "status": "DELAYED"},
                        {"operationType": "PAYOUT", "status": "CLOSED"},
                    ],
                },
            ],
        }
    ],
    "v2": [
        {
            "country": "UGA",
            "providers": [
                {
                    "provider": "MTN_MOMO_UGA",
                    "operationTypes": {"DEPOSIT": "OPERATIONAL", "PAYOUT": "OPERATIONAL"},
                },
                {
                    "provider": "AIRTEL_OAPI_UGA",
                    "operationTypes": [
                        {"operationType": "DEPOSIT", "status": "DELAYED"},
                        {"operationType": "PAYOUT", "status": "CLOSED"},
                    ],
                },
            ],
        }
    ],
}

SANDBOX_ACTIVE_CONF = {
    "v1": {
        "merchantId": "1001",
        "merchantName": "Sandbox Merchant",
        "countries": [
            {
                "country": "UGA",
                "correspondents": [
                    {
                        "correspondent": "MTN_MOMO_UGA",
                        "currency": "UGX",
                        "ownerName": "MTN",
                        "operationTypes": [
                            {"operationType": "DEPOSIT", "minTransactionLimit": "500"},
                            {"operationType": "PAYOUT", "minTransactionLimit": "500"},
                        ],
                    }
                ],
            }
        ],
    },
    "v2": {
        "companyName": "Sandbox Merchant",
        "countries": [
            {
                "country": "UGA",
                "providers": [
                    {
                        "provider": "MTN_MOMO_UGA",
                        "currencies": [
                            {
                                "currency": "UGX",
                                "operationTypes": {
                                    "DEPOSIT": {"minAmount": "500", "maxAmount": "5000000"},
                                    "PAYOUT": {"minAmount": "500", "maxAmount": "5000000"},
                                },
                            }
                        ],
                    }
                ],
            }
        ],
    },
}


class RecordedCall(BaseModel):
    """One request as the transport received it."""

    method: str
    url: str
    headers: Dict[str, str]
    json_body: Any = None
    params: Optional[Dict[str, str]] = None
    verify: bool = True

    @property
    def path(self) -> str:
        """URL without scheme and host."""
        rest = self.url.split("://", 1)[-1]
        return "/" + rest.split("/", 1)[1] if "/" in rest else "/"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def settle_status(transaction_id: str) -> Dict[str, Any]:
    """
    Deterministic final outcome for an accepted transaction.

    Hash of the id gives a ~90% completion rate, like a busy sandbox.
    """
    hash_value = int(hashlib.sha256(transaction_id.encode()).hexdigest()[:8], 16)
    if hash_value % 10 != 0:
        return {"status": "COMPLETED"}
    return {
        "status": "FAILED",
        "failureReason": {
            "failureCode": FAILURE_CODES[hash_value % len(FAILURE_CODES)],
            "failureMessage": "Sandbox simulated failure",
        },
    }


class RecordingTransport:
    """
    Transport double that records calls and simulates sandbox answers.

    Attributes:
        calls: every RecordedCall, oldest first
        transactions: accepted transaction records keyed by id
    """

    def __init__(self):
        self.calls: List[RecordedCall] = []
        self.transactions: Dict[str, Dict[str, Any]] = {}
        self._queued: List[TransportResponse] = []

    @property
    def last_call(self) -> Optional[RecordedCall]:
        return self.calls[-1] if self.calls else None

    def queue(self, status_code: int, body: Any = None) -> None:
        """Return this response for the next unanswered request."""
        self._queued.append(TransportResponse(status_code=status_code, body=body))

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Dict[str, str],
        json_body: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        verify: bool = True,
    ) -> TransportResponse:
        call = RecordedCall(
            method=method,
            url=url,
            headers=dict(headers),
            json_body=json_body,
            params=params,
            verify=verify,
        )
        self.calls.append(call)
        logger.debug(f"Sandbox transport received {method} {call.path}")

        if self._queued:
            return self._queued.pop(0)

        version = "v2" if call.path.startswith("/v2/") else "v1"
        if method == "POST":
            return self._initiate(call, version)
        return self._lookup(call, version)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _initiate(self, call: RecordedCall, version: str) -> TransportResponse:
        body = call.json_body or {}
        id_field = next((field for field in ID_FIELDS if field in body), "depositId")
        transaction_id = body.get(id_field, "")

        msisdn = self._party_msisdn(body)
        if msisdn in REJECTION_MSISDNS:
            v1_code, v2_code = REJECTION_MSISDNS[msisdn]
            if version == "v2":
                reason = {"failureReason": {"failureCode": v2_code, "failureMessage": v2_code}}
            else:
                reason = {"rejectionReason": {"rejectionCode": v1_code, "rejectionMessage": v1_code}}
            return TransportResponse(
                status_code=400,
                body={id_field: transaction_id, "status": "REJECTED", **reason},
            )

        if call.path.endswith("/widget/sessions") or call.path.endswith("/paymentpage"):
            return TransportResponse(
                status_code=200,
                body={"redirectUrl": f"https://sandbox.paywith.pawapay.io/?token={transaction_id}"},
            )

        self.transactions[transaction_id] = {
            id_field: transaction_id,
            "amount": body.get("amount"),
            "currency": body.get("currency"),
            "created": _now(),
            **settle_status(transaction_id),
        }
        return TransportResponse(
            status_code=200,
            body={id_field: transaction_id, "status": "ACCEPTED", "created": _now()},
        )

    def _lookup(self, call: RecordedCall, version: str) -> TransportResponse:
        path = call.path.split("?", 1)[0]
        if path.endswith("/availability"):
            return TransportResponse(status_code=200, body=SANDBOX_AVAILABILITY[version])
        if path.endswith("/active-conf"):
            return TransportResponse(status_code=200, body=SANDBOX_ACTIVE_CONF[version])

        transaction_id = path.rstrip("/").rsplit("/", 1)[-1]
        record = self.transactions.get(transaction_id)
        if version == "v2":
            if record is None:
                return TransportResponse(status_code=200, body={"status": "NOT_FOUND"})
            return TransportResponse(status_code=200, body={"status": "FOUND", "data": record})
        return TransportResponse(status_code=200, body=[record] if record else [])

    @staticmethod
    def _party_msisdn(body: Dict[str, Any]) -> Optional[str]:
        for field in PARTY_FIELDS:
            party = body.get(field)
            if not isinstance(party, dict):
                continue
            if "address" in party:
                return party["address"].get("value")
            if "accountDetails" in party:
                return party["accountDetails"].get("phoneNumber")
        return body.get("msisdn") or body.get("phoneNumber")
