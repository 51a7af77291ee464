"""
V2 Wire Adapter

/v2-prefixed pawaPay paths.

V2 specifics:
- operator code travels as "provider" inside accountDetails
- payer/recipient is {"type": "MMO", "accountDetails": {"phoneNumber", "provider"}}
- currency is mandatory and sits next to amount
- narration is the optional "customerMessage"; no customerTimestamp
- metadata items are {<fieldName>: <fieldValue>, "isPII"?}
- status lookups return {"status": "FOUND" | "NOT_FOUND", "data": {...}}
- availability and active-conf accept country / operationType filters
"""
import logging
from typing import Any, Dict, Optional

from ..config import WireVersion
from ..exceptions import InvalidRequestError
from ..models.requests import (
    AvailabilityQuery,
    DepositRequest,
    PaymentPageRequest,
    PayoutRequest,
    RefundRequest,
    StatusQuery,
    TransactionType,
    TransferRequest,
)
from ..models.responses import ActiveConfiguration, AvailabilityResult, GatewayResponse, StatusResult
from ..services.metadata import to_v2_metadata
from .base import PaymentGatewayAdapter, compact

logger = logging.getLogger(__name__)


STATUS_PATHS = {
    TransactionType.DEPOSIT: "/v2/deposits",
    TransactionType.PAYOUT: "/v2/payouts",
    TransactionType.REFUND: "/v2/refunds",
    TransactionType.REMITTANCE: "/v2/remittances",
}


def _require_currency(currency: Optional[str], operation: str) -> str:
    if currency is None:
        raise InvalidRequestError(
            f"A currency is required for V2 {operation}.",
            details={"field": "currency", "api_version": "v2"}
        )
    return currency


class WireV2Adapter(PaymentGatewayAdapter):
    """Projects canonical requests onto the V2 API."""

    api_version = WireVersion.V2

    # ------------------------------------------------------------------
    # Deposits / Payouts
    # ------------------------------------------------------------------

    def _transfer_payload(
        self,
        request: TransferRequest,
        id_field: str,
        party_field: str,
        operation: str
    ) -> Dict[str, Any]:
        return compact({
            id_field: request.transaction_id,
            "amount": request.amount,
            "currency": _require_currency(request.currency, operation),
            party_field: {
                "type": "MMO",
                "accountDetails": {
                    "phoneNumber": request.msisdn,
                    "provider": request.provider,
                },
            },
            "customerMessage": request.narration,
            "clientReferenceId": request.client_reference_id,
            "metadata": to_v2_metadata(request.metadata),
        })

    def build_deposit_payload(self, request: DepositRequest) -> Dict[str, Any]:
        payload = self._transfer_payload(request, "depositId", "payer", "deposits")
        if request.pre_auth_code is not None:
            payload["preAuthorisationCode"] = request.pre_auth_code
        return payload

    def build_payout_payload(self, request: PayoutRequest) -> Dict[str, Any]:
        return self._transfer_payload(request, "payoutId", "recipient", "payouts")

    def initiate_deposit(self, request: DepositRequest) -> GatewayResponse:
        payload = self.build_deposit_payload(request)
        logger.info(
            f"Initiating V2 deposit {request.transaction_id} "
            f"({request.amount} {request.currency} via {request.provider})"
        )
        return self._post("/v2/deposits", payload)

    def initiate_payout(self, request: PayoutRequest) -> GatewayResponse:
        payload = self.build_payout_payload(request)
        logger.info(
            f"Initiating V2 payout {request.transaction_id} "
            f"({request.amount} {request.currency} via {request.provider})"
        )
        return self._post("/v2/payouts", payload)

    # ------------------------------------------------------------------
    # Refunds
    # ------------------------------------------------------------------

    def build_refund_payload(self, request: RefundRequest) -> Dict[str, Any]:
        # Must be the currency of the original deposit
        currency = _require_currency(request.currency, "refunds")
        return compact({
            "refundId": request.refund_id,
            "depositId": request.deposit_id,
            "amount": request.amount,
            "currency": currency,
            "metadata": to_v2_metadata(request.metadata),
        })

    def initiate_refund(self, request: RefundRequest) -> GatewayResponse:
        payload = self.build_refund_payload(request)
        logger.info(f"Initiating V2 refund {request.refund_id} of deposit {request.deposit_id}")
        return self._post("/v2/refunds", payload)

    # ------------------------------------------------------------------
    # Payment page
    # ------------------------------------------------------------------

    def _amount_details(self, request: PaymentPageRequest) -> Optional[Dict[str, Any]]:
        if request.amount is not None:
            if request.currency is None:
                raise InvalidRequestError(
                    "A currency is required with amount for the V2 payment page.",
                    details={"field": "currency", "api_version": "v2"}
                )
            return {"amount": request.amount, "currency": request.currency}
        if request.amount_details:
            return dict(request.amount_details)
        return None

    def build_payment_page_payload(self, request: PaymentPageRequest) -> Dict[str, Any]:
        return compact({
            "depositId": request.deposit_id,
            "returnUrl": request.return_url,
            "customerMessage": request.narration,
            "amountDetails": self._amount_details(request),
            "phoneNumber": request.phone_number,
            "language": request.language,
            "country": request.country,
            "reason": request.reason,
            "metadata": to_v2_metadata(request.metadata),
        })

    def create_payment_page(self, request: PaymentPageRequest) -> GatewayResponse:
        payload = self.build_payment_page_payload(request)
        logger.info(f"Creating V2 payment page for deposit {request.deposit_id}")
        return self._post("/v2/paymentpage", payload)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def status_path(self, query: StatusQuery) -> str:
        return f"{STATUS_PATHS[query.transaction_type]}/{query.transaction_id}"

    def fetch_status(self, query: StatusQuery) -> StatusResult:
        response = self._get(self.status_path(query))

        # NOT_FOUND right after initiation usually means "not indexed yet",
        # so it is reported as a missing record (processing), never a failure.
        body = response.body if isinstance(response.body, dict) else {}
        record = None
        if str(body.get("status", "")).upper() == "FOUND" and isinstance(body.get("data"), dict):
            record = body["data"]

        return self._status_result(query, response, record)

    def fetch_availability(self, query: AvailabilityQuery) -> AvailabilityResult:
        return self._availability_result(self._get("/v2/availability", query.as_params()))

    def fetch_active_config(self, query: AvailabilityQuery) -> ActiveConfiguration:
        return self._active_configuration(self._get("/v2/active-conf", query.as_params()))
