"""
pawaPay Client Façade

Single caller-facing entry point. Each business operation takes one canonical
argument set, validates it into a request model, and hands it to the adapter
selected by the session's configured wire version (or an explicit version=
override).

Every operation therefore has three entry points:
    client.initiate_deposit(...)          # configured version
    client.v1.initiate_deposit(request)   # explicit V1
    client.v2.initiate_deposit(request)   # explicit V2

Usage:
    config = GatewayConfig(api_token="...", environment="sandbox", api_version="v2")
    client = PawaPayClient(config)
    response = client.initiate_deposit(
        transaction_id=generate_transaction_id(),
        amount="100.00",
        currency="UGX",
        msisdn="256783456789",
        provider="MTN_MOMO_UGA",
        narration="Order 123",
    )
    if response.is_rejected:
        print(response.rejection().message)

Polling for a final status is the caller's job: call fetch_status() again
with your own delay until StatusResult.final is True.
"""
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .adapters import PaymentGatewayAdapter, WireV1Adapter, WireV2Adapter
from .config import GatewayConfig, Settings, WireVersion
from .exceptions import InputValidationError, InvalidRequestError
from .models.requests import (
    AvailabilityQuery,
    DepositRequest,
    PaymentPageRequest,
    PayoutRequest,
    RefundRequest,
    StatusQuery,
)
from .models.responses import ActiveConfiguration, AvailabilityResult, GatewayResponse, StatusResult
from .services.session import GatewaySession
from .services.transport import Transport
from .services.validator import generate_transaction_id

logger = logging.getLogger(__name__)

RequestModel = TypeVar("RequestModel", bound=BaseModel)

Metadata = Optional[List[Dict[str, Any]]]


def build_request(model_cls: Type[RequestModel], **fields: Any) -> RequestModel:
    """
    Validate canonical arguments into a request model.

    A specific input error raised by a field validator (bad amount,
    narration, UUID...) propagates as itself; any other pydantic failure
    becomes InvalidRequestError.
    """
    try:
        return model_cls(**fields)
    except ValidationError as e:
        errors = e.errors()
        for error in errors:
            original = (error.get("ctx") or {}).get("error")
            if isinstance(original, InputValidationError):
                raise original from None

        summary = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in errors
        )
        raise InvalidRequestError(
            f"Invalid {model_cls.__name__}: {summary}",
            details={
                "errors": [
                    {"loc": list(error["loc"]), "msg": error["msg"]} for error in errors
                ]
            }
        ) from None


class PawaPayClient:
    """
    Version-dispatching client over one GatewaySession.

    Args:
        config: Explicit connection configuration
        transport: Optional transport (tests pass a recording double)
        adapter: Optional adapter overriding the version-based selection
    """

    def __init__(
        self,
        config: GatewayConfig,
        transport: Optional[Transport] = None,
        adapter: Optional[PaymentGatewayAdapter] = None
    ):
        self.session = GatewaySession(config, transport)
        self.v1 = WireV1Adapter(self.session)
        self.v2 = WireV2Adapter(self.session)
        self.adapter = adapter or self.adapter_for(config.api_version)

        logger.debug(f"PawaPayClient ready: {self.session!r}")

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None
    ) -> "PawaPayClient":
        """Build a client from environment-backed Settings."""
        if settings is None:
            from .config import settings as default_settings
            settings = default_settings
        return cls(GatewayConfig.from_settings(settings), transport=transport)

    @property
    def api_version(self) -> WireVersion:
        return self.adapter.api_version

    def adapter_for(self, version: Optional[Union[str, WireVersion]] = None) -> PaymentGatewayAdapter:
        """Adapter for an explicit version, or the configured one when None."""
        if version is None:
            return self.adapter
        try:
            version = WireVersion(version.lower() if isinstance(version, str) else version)
        except ValueError:
            raise InvalidRequestError(
                f"Unknown API version: {version!r}",
                details={"allowed": [v.value for v in WireVersion]}
            ) from None
        return self.v2 if version is WireVersion.V2 else self.v1

    @staticmethod
    def new_transaction_id() -> str:
        return generate_transaction_id()

    # ========================================================================
    # Initiation
    # ========================================================================

    def initiate_deposit(
        self,
        transaction_id: str,
        amount: str,
        msisdn: str,
        provider: str,
        currency: Optional[str] = None,
        narration: Optional[str] = None,
        client_reference_id: Optional[str] = None,
        pre_auth_code: Optional[str] = None,
        metadata: Metadata = None,
        *,
        version: Optional[Union[str, WireVersion]] = None
    ) -> GatewayResponse:
        """
        Collect funds from the payer's wallet.

        Returns the raw HTTP outcome; check response.is_rejected and
        response.rejection() before treating the deposit as accepted.
        """
        request = build_request(
            DepositRequest,
            transaction_id=transaction_id,
            amount=amount,
            currency=currency,
            msisdn=msisdn,
            provider=provider,
            narration=narration,
            client_reference_id=client_reference_id,
            pre_auth_code=pre_auth_code,
            metadata=metadata,
        )
        return self.adapter_for(version).initiate_deposit(request)

    def initiate_payout(
        self,
        transaction_id: str,
        amount: str,
        msisdn: str,
        provider: str,
        currency: Optional[str] = None,
        narration: Optional[str] = None,
        client_reference_id: Optional[str] = None,
        metadata: Metadata = None,
        *,
        version: Optional[Union[str, WireVersion]] = None
    ) -> GatewayResponse:
        """Send funds to the recipient's wallet."""
        request = build_request(
            PayoutRequest,
            transaction_id=transaction_id,
            amount=amount,
            currency=currency,
            msisdn=msisdn,
            provider=provider,
            narration=narration,
            client_reference_id=client_reference_id,
            metadata=metadata,
        )
        return self.adapter_for(version).initiate_payout(request)

    def initiate_refund(
        self,
        refund_id: str,
        deposit_id: str,
        amount: str,
        currency: Optional[str] = None,
        metadata: Metadata = None,
        *,
        version: Optional[Union[str, WireVersion]] = None
    ) -> GatewayResponse:
        """
        Refund a completed deposit.

        V2 requires the currency of the original deposit and fails before
        sending anything when it is missing.
        """
        request = build_request(
            RefundRequest,
            refund_id=refund_id,
            deposit_id=deposit_id,
            amount=amount,
            currency=currency,
            metadata=metadata,
        )
        return self.adapter_for(version).initiate_refund(request)

    def create_payment_page(
        self,
        deposit_id: str,
        return_url: str,
        narration: Optional[str] = None,
        amount: Optional[str] = None,
        currency: Optional[str] = None,
        amount_details: Optional[Dict[str, Any]] = None,
        phone_number: Optional[str] = None,
        language: Optional[str] = None,
        country: Optional[str] = None,
        reason: Optional[str] = None,
        metadata: Metadata = None,
        *,
        msisdn: Optional[str] = None,
        version: Optional[Union[str, WireVersion]] = None
    ) -> GatewayResponse:
        """
        Create a hosted payment page session (V1 widget / V2 payment page).

        On success response.redirect_url holds the page to send the customer
        to. The provider expires it after about 15 minutes; this client does
        not track that.
        """
        request = build_request(
            PaymentPageRequest,
            deposit_id=deposit_id,
            return_url=return_url,
            narration=narration,
            amount=amount,
            currency=currency,
            amount_details=amount_details,
            phone_number=phone_number if phone_number is not None else msisdn,
            language=language,
            country=country,
            reason=reason,
            metadata=metadata,
        )
        return self.adapter_for(version).create_payment_page(request)

    # ========================================================================
    # Lookups
    # ========================================================================

    def fetch_status(
        self,
        transaction_id: str,
        transaction_type: str = "deposit",
        *,
        version: Optional[Union[str, WireVersion]] = None
    ) -> StatusResult:
        """
        Current status of a deposit, payout, refund or remittance.

        A record the gateway does not know yet comes back as found=False,
        status PROCESSING, final=False. That is ambiguous with an id that was
        never accepted; callers polling after initiation should give up and
        escalate after their own bounded number of attempts rather than
        assume success or failure.
        """
        query = build_request(
            StatusQuery,
            transaction_id=transaction_id,
            transaction_type=transaction_type,
        )
        return self.adapter_for(version).fetch_status(query)

    def fetch_availability(
        self,
        country: Optional[str] = None,
        operation_type: Optional[str] = None,
        *,
        version: Optional[Union[str, WireVersion]] = None
    ) -> AvailabilityResult:
        """Provider availability; filters only apply on V2."""
        query = build_request(AvailabilityQuery, country=country, operation_type=operation_type)
        return self.adapter_for(version).fetch_availability(query)

    def fetch_active_config(
        self,
        country: Optional[str] = None,
        operation_type: Optional[str] = None,
        *,
        version: Optional[Union[str, WireVersion]] = None
    ) -> ActiveConfiguration:
        """Merchant account configuration; filters only apply on V2."""
        query = build_request(AvailabilityQuery, country=country, operation_type=operation_type)
        return self.adapter_for(version).fetch_active_config(query)

    def close(self) -> None:
        close = getattr(self.session.transport, "close", None)
        if close is not None:
            close()
