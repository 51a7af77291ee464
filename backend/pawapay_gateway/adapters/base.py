"""
Payment Gateway Adapter Interface

One abstract capability interface, two wire implementations (V1, V2). The
façade holds a reference to the selected adapter instead of branching on the
version in every call.

Shared here:
- request helpers (POST initiation, GET lookup with rejection handling)
- status record -> StatusResult reduction
- availability / active-conf shape normalization, tolerant of both the V1
  correspondent layout and the V2 provider layout
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from ..config import WireVersion
from ..exceptions import GatewayRejectionError
from ..models.requests import (
    AvailabilityQuery,
    DepositRequest,
    PaymentPageRequest,
    PayoutRequest,
    RefundRequest,
    StatusQuery,
)
from ..models.responses import (
    SUCCESS_HTTP_STATUSES,
    ActiveConfiguration,
    AvailabilityResult,
    CountryAvailability,
    CountryConfiguration,
    GatewayResponse,
    ProviderAvailability,
    ProviderConfiguration,
    StatusResult,
    TransactionStatus,
)
from ..services.failure_codes import (
    classify_response_rejection,
    extract_failure_code,
    is_terminal,
)
from ..services.session import GatewaySession
from ..services.transport import TransportResponse

logger = logging.getLogger(__name__)


def compact(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop absent optional fields (None, empty list/dict) instead of sending null."""
    return {
        key: value
        for key, value in payload.items()
        if value is not None and value != [] and value != {}
    }


class PaymentGatewayAdapter(ABC):
    """Capability interface every wire version implements."""

    api_version: WireVersion

    def __init__(self, session: GatewaySession):
        self.session = session

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @abstractmethod
    def initiate_deposit(self, request: DepositRequest) -> GatewayResponse:
        ...

    @abstractmethod
    def initiate_payout(self, request: PayoutRequest) -> GatewayResponse:
        ...

    @abstractmethod
    def initiate_refund(self, request: RefundRequest) -> GatewayResponse:
        ...

    @abstractmethod
    def create_payment_page(self, request: PaymentPageRequest) -> GatewayResponse:
        ...

    @abstractmethod
    def fetch_status(self, query: StatusQuery) -> StatusResult:
        ...

    @abstractmethod
    def fetch_availability(self, query: AvailabilityQuery) -> AvailabilityResult:
        ...

    @abstractmethod
    def fetch_active_config(self, query: AvailabilityQuery) -> ActiveConfiguration:
        ...

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    def _post(self, path: str, payload: Dict[str, Any]) -> GatewayResponse:
        response = self.session.request("POST", path, json_body=payload)
        result = GatewayResponse(
            http_status=response.status_code,
            body=response.body,
            api_version=self.api_version,
            path=path,
        )

        if result.is_rejected:
            classification = result.rejection()
            logger.warning(
                f"pawaPay {self.api_version.value} POST {path} rejected: "
                f"HTTP {result.http_status}, code={classification.code}"
            )
        return result

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> TransportResponse:
        """GET a lookup endpoint; non-2xx raises GatewayRejectionError."""
        response = self.session.request("GET", path, params=params)

        if response.status_code not in SUCCESS_HTTP_STATUSES:
            classification = classify_response_rejection(response.body)
            raise GatewayRejectionError(
                f"pawaPay GET {path} failed with HTTP {response.status_code}: "
                f"{classification.message}",
                http_status=response.status_code,
                body=response.body if response.body is not None else response.text,
                classification=classification,
                details={"path": path, "api_version": self.api_version.value},
            )
        return response

    # ------------------------------------------------------------------
    # Status normalization
    # ------------------------------------------------------------------

    def _status_result(
        self,
        query: StatusQuery,
        response: TransportResponse,
        record: Optional[Dict[str, Any]],
    ) -> StatusResult:
        """
        Reduce one transaction record (or its absence) to a StatusResult.

        A missing record is not an error: the transaction may not be indexed
        yet, so it maps to PROCESSING and is never final.
        """
        if not isinstance(record, dict):
            logger.info(
                f"No {query.transaction_type.value} record yet for {query.transaction_id}; "
                "treating as processing"
            )
            return StatusResult(
                transaction_id=query.transaction_id,
                transaction_type=query.transaction_type,
                found=False,
                status=TransactionStatus.PROCESSING,
                final=False,
                raw=response.body,
                http_status=response.status_code,
                api_version=self.api_version,
            )

        raw_status = record.get("status")
        raw_status = str(raw_status).strip().upper() if raw_status is not None else None
        return StatusResult(
            transaction_id=query.transaction_id,
            transaction_type=query.transaction_type,
            found=True,
            status=TransactionStatus.parse(raw_status),
            raw_status=raw_status,
            final=is_terminal(raw_status),
            failure_code=extract_failure_code(record),
            data=record,
            raw=response.body,
            http_status=response.status_code,
            api_version=self.api_version,
        )

    # ------------------------------------------------------------------
    # Availability / configuration normalization
    # ------------------------------------------------------------------

    @staticmethod
    def _country_entries(body: Any) -> List[Dict[str, Any]]:
        if isinstance(body, dict):
            body = body.get("countries", [])
        if not isinstance(body, list):
            return []
        return [entry for entry in body if isinstance(entry, dict)]

    @staticmethod
    def _provider_entries(country: Dict[str, Any]) -> Iterable[Dict[str, Any]]:
        # V1 lists correspondents, V2 lists providers
        entries = country.get("providers")
        if entries is None:
            entries = country.get("correspondents", [])
        return [entry for entry in entries or [] if isinstance(entry, dict)]

    @staticmethod
    def _provider_code(entry: Dict[str, Any]) -> str:
        return str(entry.get("provider") or entry.get("correspondent") or "")

    @staticmethod
    def operation_type_statuses(operation_types: Any) -> Dict[str, str]:
        """
        Accept either shape of operationTypes:
        - list of {"operationType": ..., "status": ...}
        - map of operationType -> status, or operationType -> {"status": ...}
        """
        statuses: Dict[str, str] = {}
        if isinstance(operation_types, dict):
            for name, value in operation_types.items():
                if isinstance(value, dict):
                    value = value.get("status", "")
                statuses[str(name).upper()] = str(value or "").upper()
        elif isinstance(operation_types, list):
            for item in operation_types:
                if isinstance(item, dict) and item.get("operationType"):
                    statuses[str(item["operationType"]).upper()] = str(
                        item.get("status") or ""
                    ).upper()
        return statuses

    @classmethod
    def operation_type_names(cls, operation_types: Any) -> List[str]:
        if isinstance(operation_types, dict):
            return [str(name).upper() for name in operation_types]
        if isinstance(operation_types, list):
            return [
                str(item["operationType"]).upper()
                for item in operation_types
                if isinstance(item, dict) and item.get("operationType")
            ]
        return []

    def _availability_result(self, response: TransportResponse) -> AvailabilityResult:
        countries = []
        for country in self._country_entries(response.body):
            providers = [
                ProviderAvailability(
                    provider=self._provider_code(entry),
                    operation_types=self.operation_type_statuses(entry.get("operationTypes")),
                )
                for entry in self._provider_entries(country)
            ]
            countries.append(
                CountryAvailability(country=str(country.get("country", "")), providers=providers)
            )

        return AvailabilityResult(
            countries=countries,
            raw=response.body,
            http_status=response.status_code,
            api_version=self.api_version,
        )

    def _active_configuration(self, response: TransportResponse) -> ActiveConfiguration:
        body = response.body if isinstance(response.body, dict) else {}
        countries = []
        for country in self._country_entries(response.body):
            providers = []
            for entry in self._provider_entries(country):
                currencies: List[str] = []
                operation_types: List[str] = []

                # V1: one currency + operationTypes on the correspondent
                if entry.get("currency"):
                    currencies.append(str(entry["currency"]))
                operation_types.extend(self.operation_type_names(entry.get("operationTypes")))

                # V2: operationTypes nested per currency
                for currency in entry.get("currencies") or []:
                    if not isinstance(currency, dict):
                        continue
                    if currency.get("currency"):
                        currencies.append(str(currency["currency"]))
                    operation_types.extend(
                        self.operation_type_names(currency.get("operationTypes"))
                    )

                providers.append(ProviderConfiguration(
                    provider=self._provider_code(entry),
                    currencies=list(dict.fromkeys(currencies)),
                    operation_types=list(dict.fromkeys(operation_types)),
                ))
            countries.append(
                CountryConfiguration(country=str(country.get("country", "")), providers=providers)
            )

        merchant_id = body.get("merchantId")
        merchant_name = body.get("merchantName") or body.get("companyName")
        return ActiveConfiguration(
            merchant_id=str(merchant_id) if merchant_id is not None else None,
            merchant_name=str(merchant_name) if merchant_name is not None else None,
            countries=countries,
            raw=response.body,
            http_status=response.status_code,
            api_version=self.api_version,
        )
