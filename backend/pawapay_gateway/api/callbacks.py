"""
Callback Receiver Endpoints

pawaPay POSTs the final state of a deposit, payout, refund or remittance to
the merchant's configured callback URL. This receiver only logs the outcome.

Not implemented here:
- Signature verification of the callback body
- Replay / duplicate protection
- Persisting or forwarding the status anywhere
"""
from fastapi import APIRouter, HTTPException, Request
from typing import Any, Dict
import json
import logging

from ..models.requests import TransactionType
from ..services.failure_codes import classify_failure, describe_status, extract_failure_code

logger = logging.getLogger(__name__)

router = APIRouter()

ID_FIELDS = {
    TransactionType.DEPOSIT: "depositId",
    TransactionType.PAYOUT: "payoutId",
    TransactionType.REFUND: "refundId",
    TransactionType.REMITTANCE: "remittanceId",
}


def _invalid_body(kind: str, message: str) -> HTTPException:
    logger.warning(f"Rejected {kind} callback: {message}")
    return HTTPException(
        status_code=400,
        detail={
            "error_code": "pawapay:callback:invalid",
            "message": message,
            "details": {"kind": kind}
        }
    )


@router.post("/callbacks/{kind}")
async def receive_callback(kind: TransactionType, request: Request) -> Dict[str, Any]:
    """
    Receive a pawaPay status callback.

    Path Parameters:
        kind: deposit, payout, refund or remittance

    Body:
        The transaction record as pawaPay sends it; must be a JSON object
        with a "status" field.

    Returns:
        {
            "received": true,
            "kind": str,
            "transaction_id": str | null,
            "status": str
        }

    Raises:
        HTTPException 400: body is not JSON, not an object, or has no status
    """
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise _invalid_body(kind.value, "Callback body is not valid JSON")

    if not isinstance(payload, dict) or not payload.get("status"):
        raise _invalid_body(kind.value, "Invalid callback data")

    status = str(payload["status"]).upper()
    transaction_id = payload.get(ID_FIELDS[kind])

    if status == "COMPLETED":
        logger.info(f"{kind.value.capitalize()} {transaction_id} completed")
    elif status == "FAILED":
        code = extract_failure_code(payload)
        logger.warning(
            f"{kind.value.capitalize()} {transaction_id} failed: {classify_failure(code)}"
        )
    else:
        logger.warning(
            f"Unknown status received for {kind.value} {transaction_id}: "
            f"{status} ({describe_status(status)})"
        )

    return {
        "received": True,
        "kind": kind.value,
        "transaction_id": transaction_id,
        "status": status,
    }
