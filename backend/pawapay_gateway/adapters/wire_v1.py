"""
V1 Wire Adapter

Unversioned pawaPay paths (/deposits, /payouts, /refunds, ...).

V1 specifics:
- operator code travels as "correspondent"
- payer/recipient is {"type": "MSISDN", "address": {"value": <msisdn>}}
- every deposit/payout carries a customerTimestamp stamped at build time
- narration is the required "statementDescription"
- metadata items are {"fieldName", "fieldValue", "isPII"?}
- status lookups return a list with at most one record
- no remittances, no availability filters
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..config import WireVersion
from ..exceptions import InvalidRequestError, UnsupportedOperationError
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
from ..services.metadata import to_v1_metadata
from .base import PaymentGatewayAdapter, compact

logger = logging.getLogger(__name__)


STATUS_PATHS = {
    TransactionType.DEPOSIT: "/deposits",
    TransactionType.PAYOUT: "/payouts",
    TransactionType.REFUND: "/refunds",
}


def customer_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 timestamp with UTC offset, e.g. 2024-05-01T10:15:30+00:00."""
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="seconds")


def widget_sessions_path(base_url: str) -> str:
    """
    Widget session path for a base URL.

    A base URL that already ends in "v1" must not get a second /v1 segment,
    so only the last two characters are inspected.
    """
    if base_url[-2:] == "v1":
        return "/widget/sessions"
    return "/v1/widget/sessions"


class WireV1Adapter(PaymentGatewayAdapter):
    """Projects canonical requests onto the V1 API."""

    api_version = WireVersion.V1

    # ------------------------------------------------------------------
    # Deposits / Payouts
    # ------------------------------------------------------------------

    def _transfer_payload(
        self,
        request: TransferRequest,
        id_field: str,
        party_field: str
    ) -> Dict[str, Any]:
        if request.narration is None:
            raise InvalidRequestError(
                "A narration (statementDescription) is required for V1 "
                f"{'deposits' if id_field == 'depositId' else 'payouts'}.",
                details={"field": "narration", "api_version": "v1"}
            )
        if request.client_reference_id is not None:
            logger.debug("clientReferenceId is not part of the V1 API; not sent")

        return compact({
            id_field: request.transaction_id,
            "amount": request.amount,
            "currency": request.currency,
            "correspondent": request.provider,
            party_field: {
                "type": "MSISDN",
                "address": {"value": request.msisdn},
            },
            "customerTimestamp": customer_timestamp(),
            "statementDescription": request.narration,
            "metadata": to_v1_metadata(request.metadata),
        })

    def build_deposit_payload(self, request: DepositRequest) -> Dict[str, Any]:
        if request.pre_auth_code is not None:
            logger.debug("preAuthorisationCode is not part of the V1 API; not sent")
        return self._transfer_payload(request, "depositId", "payer")

    def build_payout_payload(self, request: PayoutRequest) -> Dict[str, Any]:
        return self._transfer_payload(request, "payoutId", "recipient")

    def initiate_deposit(self, request: DepositRequest) -> GatewayResponse:
        payload = self.build_deposit_payload(request)
        logger.info(
            f"Initiating V1 deposit {request.transaction_id} "
            f"({request.amount} {request.currency or ''} via {request.provider})"
        )
        return self._post("/deposits", payload)

    def initiate_payout(self, request: PayoutRequest) -> GatewayResponse:
        payload = self.build_payout_payload(request)
        logger.info(
            f"Initiating V1 payout {request.transaction_id} "
            f"({request.amount} {request.currency or ''} via {request.provider})"
        )
        return self._post("/payouts", payload)

    # ------------------------------------------------------------------
    # Refunds
    # ------------------------------------------------------------------

    def build_refund_payload(self, request: RefundRequest) -> Dict[str, Any]:
        if request.currency is not None:
            logger.debug("currency is not part of the V1 refund API; not sent")
        return compact({
            "refundId": request.refund_id,
            "depositId": request.deposit_id,
            "amount": request.amount,
            "metadata": to_v1_metadata(request.metadata),
        })

    def initiate_refund(self, request: RefundRequest) -> GatewayResponse:
        payload = self.build_refund_payload(request)
        logger.info(f"Initiating V1 refund {request.refund_id} of deposit {request.deposit_id}")
        return self._post("/refunds", payload)

    # ------------------------------------------------------------------
    # Widget session (hosted payment page)
    # ------------------------------------------------------------------

    def build_payment_page_payload(self, request: PaymentPageRequest) -> Dict[str, Any]:
        if request.narration is None:
            raise InvalidRequestError(
                "A narration (statementDescription) is required for V1 widget sessions.",
                details={"field": "narration", "api_version": "v1"}
            )

        amount = request.amount
        if amount is None and request.amount_details:
            amount = request.amount_details.get("amount")

        return compact({
            "depositId": request.deposit_id,
            "returnUrl": request.return_url,
            "statementDescription": request.narration,
            "amount": amount,
            "msisdn": request.phone_number,
            "language": request.language,
            "country": request.country,
            "reason": request.reason,
            "metadata": to_v1_metadata(request.metadata),
        })

    def create_payment_page(self, request: PaymentPageRequest) -> GatewayResponse:
        payload = self.build_payment_page_payload(request)
        path = widget_sessions_path(self.session.base_url)
        logger.info(f"Creating V1 widget session for deposit {request.deposit_id}")
        return self._post(path, payload)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def status_path(self, query: StatusQuery) -> str:
        if query.transaction_type not in STATUS_PATHS:
            raise UnsupportedOperationError(
                f"{query.transaction_type.value.capitalize()} status checks are not "
                "available in this version (V1).",
                details={"transaction_type": query.transaction_type.value, "api_version": "v1"}
            )
        return f"{STATUS_PATHS[query.transaction_type]}/{query.transaction_id}"

    def fetch_status(self, query: StatusQuery) -> StatusResult:
        path = self.status_path(query)
        response = self._get(path)

        # A list with at most one record; tolerate a bare object too
        body = response.body
        record = None
        if isinstance(body, list) and body:
            record = body[0]
        elif isinstance(body, dict) and body:
            record = body

        return self._status_result(query, response, record)

    def _ignore_filters(self, query: AvailabilityQuery) -> None:
        if query.as_params():
            logger.debug(f"V1 has no availability filters; ignoring {query.as_params()}")

    def fetch_availability(self, query: AvailabilityQuery) -> AvailabilityResult:
        self._ignore_filters(query)
        return self._availability_result(self._get("/availability"))

    def fetch_active_config(self, query: AvailabilityQuery) -> ActiveConfiguration:
        self._ignore_filters(query)
        return self._active_configuration(self._get("/active-conf"))
