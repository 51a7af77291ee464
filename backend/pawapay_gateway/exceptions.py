"""
pawaPay Gateway Exception Hierarchy

Every error raised by the gateway client carries a stable error code with a
``pawapay:`` prefix, a human readable message and a details mapping that is
safe to log or return from an API.
"""
from typing import Optional, Dict, Any


class PawaPayError(Exception):
    """
    Base exception for all gateway client errors.

    Callers can catch this single type to handle anything raised by the
    library; subclasses narrow the failure down to input, transport or
    rejection problems.
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(PawaPayError):
    """
    Client configuration is unusable.

    Examples:
    - Unknown environment name
    - No API token for the selected environment
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("pawapay:config:invalid", message, details)


# ============================================================================
# Input Errors (raised before any request is sent)
# ============================================================================

class InputValidationError(PawaPayError, ValueError):
    """
    Caller supplied input that the gateway would reject.

    Also a ValueError so that pydantic validators can raise it directly.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "pawapay:input:invalid"
    ):
        super().__init__(error_code, message, details)


class InvalidAmountError(InputValidationError):
    """Amount is blank, negative or not in the gateway's decimal format."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, "pawapay:input:invalid_amount")


class InvalidNarrationError(InputValidationError):
    """
    Narration (statement description / customer message) is unusable.

    Examples:
    - Contains characters other than letters, digits and spaces
    - Longer than the allowed length
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, "pawapay:input:invalid_narration")


class TooManyMetadataItemsError(InputValidationError):
    """More metadata items than the gateway accepts."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, "pawapay:input:too_many_metadata_items")


class InvalidMetadataFieldError(InputValidationError):
    """Metadata field name or value breaks the gateway's length/charset rules."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, "pawapay:input:invalid_metadata_field")


class InvalidTransactionIdError(InputValidationError):
    """Transaction identifier is not a UUID version 4."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, "pawapay:input:invalid_transaction_id")


class InvalidRequestError(InputValidationError):
    """
    Request is structurally incomplete for the selected wire version.

    Examples:
    - V2 refund without currency
    - V1 deposit without narration
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, "pawapay:input:invalid_request")


# ============================================================================
# Version / Transport / Remote Errors
# ============================================================================

class UnsupportedOperationError(PawaPayError):
    """
    Operation does not exist in the selected wire version.

    Example:
    - Remittance status lookup against V1
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("pawapay:version:unsupported", message, details)


class TransportError(PawaPayError):
    """
    The HTTP round-trip itself failed.

    Examples:
    - DNS resolution or connection refused
    - TLS handshake failure
    - Connect or read timeout
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("pawapay:transport:failed", message, details)


class GatewayRejectionError(PawaPayError):
    """
    Gateway answered with a non-success HTTP status.

    Carries the raw status and body plus the taxonomy classification so the
    caller can log the original payload and show a friendly message.
    """

    def __init__(
        self,
        message: str,
        http_status: int,
        body: Any = None,
        classification: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.http_status = http_status
        self.body = body
        self.classification = classification
        details = dict(details or {})
        details.setdefault("http_status", http_status)
        if classification is not None:
            details.setdefault("code", classification.code)
        super().__init__("pawapay:request:rejected", message, details)
