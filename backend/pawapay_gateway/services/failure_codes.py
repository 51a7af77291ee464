"""
Error Taxonomy / Message Catalog

Turns opaque gateway codes into stable classifications and friendly messages,
regardless of which wire version produced them.

Lookup is two-stage and entirely table driven:
1. normalize: uppercase, trim, then resolve V1/V2 aliases to one canonical code
2. classify: look the canonical code up in the rejection, failure or status table

Nothing in this module raises. Unknown or malformed codes degrade to a
generic "contact support" message.
"""
from typing import Any, Dict, Optional

from ..models.responses import ErrorCategory, ErrorClassification


# Everything is uppercased before lookup, so keys and values are uppercase
CODE_ALIASES: Dict[str, str] = {
    # Provider / correspondent synonyms
    "CORRESPONDENT_TEMPORARILY_UNAVAILABLE": "PROVIDER_TEMPORARILY_UNAVAILABLE",
    # Amount bounds
    "AMOUNT_TOO_SMALL": "AMOUNT_OUT_OF_BOUNDS",
    "AMOUNT_TOO_LARGE": "AMOUNT_OUT_OF_BOUNDS",
    # Phone number format
    "INVALID_RECIPIENT_FORMAT": "INVALID_PHONE_NUMBER",
    "INVALID_PAYER_FORMAT": "INVALID_PHONE_NUMBER",
    # Merchant balance
    "BALANCE_INSUFFICIENT": "PAWAPAY_WALLET_OUT_OF_FUNDS",
    # Already in process
    "TRANSACTION_ALREADY_IN_PROCESS": "PAYMENT_IN_PROGRESS",
    # Recipient wallet limits
    "RECIPIENT_NOT_ALLOWED_TO_RECEIVE": "WALLET_LIMIT_REACHED",
    # Not found across operations
    "DEPOSIT_NOT_FOUND": "NOT_FOUND",
    # Generic
    "OTHER_ERROR": "UNKNOWN_ERROR",
}

# Initiation-time rejections (V1 + V2)
REJECTION_MESSAGES: Dict[str, str] = {
    # Auth / transport
    "NO_AUTHENTICATION": "Authentication header is missing.",
    "AUTHENTICATION_ERROR": "The API token is invalid.",
    "AUTHORISATION_ERROR": "The API token is not authorised for this request.",
    "HTTP_SIGNATURE_ERROR": "The HTTP signature failed verification.",
    "INVALID_INPUT": "We could not parse the request payload.",
    "MISSING_PARAMETER": "A required parameter is missing.",
    "UNSUPPORTED_PARAMETER": "An unsupported parameter was provided.",
    "INVALID_PARAMETER": "A parameter contains an invalid value.",
    "DUPLICATE_METADATA_FIELD": "Duplicate field in metadata.",
    # Amount / currency / provider / country
    "INVALID_AMOUNT": "The amount is not valid for this provider.",
    "AMOUNT_OUT_OF_BOUNDS": "The amount is outside provider limits.",
    "INVALID_CURRENCY": "The currency is not supported by this provider.",
    "INVALID_COUNTRY": "The specified country is not supported.",
    "INVALID_PROVIDER": "The provider is invalid for this request.",
    "INVALID_PHONE_NUMBER": "The phone number format is invalid.",
    # Account enablement
    "DEPOSITS_NOT_ALLOWED": "Deposits are not enabled for this provider on your account.",
    "PAYOUTS_NOT_ALLOWED": "Payouts are not enabled for this provider on your account.",
    "REFUNDS_NOT_ALLOWED": "Refunds are not enabled for this provider on your account.",
    "REMITTANCES_NOT_ALLOWED": "Remittances are not enabled for this provider on your account.",
    # Availability
    "PROVIDER_TEMPORARILY_UNAVAILABLE": (
        "The provider is temporarily unavailable. Please try again later."
    ),
    "INVALID_CORRESPONDENT": "The specified correspondent is not supported.",
    # Refunds (V1)
    "DEPOSIT_NOT_COMPLETED": "The referenced deposit was not completed.",
    "ALREADY_REFUNDED": "The referenced deposit has already been refunded.",
    "IN_PROGRESS": "Another refund transaction is already in progress.",
    # Refunds (V2)
    "NOT_FOUND": "The referenced deposit was not found.",
    "INVALID_STATE": "The deposit is not in a refundable state (or already refunded).",
    # Merchant balance
    "PAWAPAY_WALLET_OUT_OF_FUNDS": "Your pawaPay wallet does not have sufficient funds.",
    "UNKNOWN_ERROR": "An unknown error occurred while processing the request.",
}

# Processing-time failures (V1 + V2 + remittances)
FAILURE_MESSAGES: Dict[str, str] = {
    # Deposits
    "PAYER_NOT_FOUND": "The phone number does not belong to the specified provider.",
    "PAYMENT_NOT_APPROVED": "The customer did not approve the payment.",
    "PAYER_LIMIT_REACHED": "The customer has reached a wallet transaction limit.",
    "PAYMENT_IN_PROGRESS": "The customer already has a payment pending.",
    "INSUFFICIENT_BALANCE": "The customer does not have enough funds.",
    "UNSPECIFIED_FAILURE": "The provider reported a failure without a reason.",
    "UNKNOWN_ERROR": "An unknown error occurred.",
    # Payouts
    "PAWAPAY_WALLET_OUT_OF_FUNDS": "Your pawaPay wallet does not have sufficient funds.",
    "RECIPIENT_NOT_FOUND": "The phone number does not belong to the specified provider.",
    "MANUALLY_CANCELLED": "The payout was cancelled while in queue.",
    # Remittances
    "WALLET_LIMIT_REACHED": "The recipient has reached a wallet limit.",
    # Pending callback
    "NO CALLBACK": "The transaction is pending. Please check the status again shortly.",
}

STATUS_MESSAGES: Dict[str, str] = {
    "ACCEPTED": "Accepted for processing.",
    "ENQUEUED": "Accepted and queued for later processing.",
    "SUBMITTED": "Submitted to the provider.",
    "PROCESSING": "Processing with the provider.",
    "IN_RECONCILIATION": "Being reconciled to determine final status.",
    "COMPLETED": "Successfully completed.",
    "FAILED": "Processed but failed.",
    "REJECTED": "Rejected at initiation.",
    "DUPLICATE_IGNORED": "Duplicate of an already accepted request; ignored.",
    # V2 lookup wrapper statuses
    "FOUND": "Found.",
    "NOT_FOUND": "Not found yet; the transaction may still be processing.",
}

# No further state change is expected once a transaction reaches one of these.
# FOUND / NOT_FOUND wrap a lookup, not a lifecycle, and are never terminal.
TERMINAL_STATUSES = frozenset({"COMPLETED", "FAILED", "REJECTED"})


def _clean(code: Any) -> str:
    if code is None:
        return ""
    try:
        return str(code).strip().upper()
    except Exception:
        return ""


def normalize_code(code: Any) -> str:
    """Uppercase, trim and resolve aliases to the canonical code."""
    cleaned = _clean(code)
    return CODE_ALIASES.get(cleaned, cleaned)


def classify_failure(code: Any) -> str:
    """Friendly message for a processing failure code."""
    canonical = normalize_code(code)
    if canonical in FAILURE_MESSAGES:
        return FAILURE_MESSAGES[canonical]
    # Callers sometimes mix the two kinds of code
    if canonical in REJECTION_MESSAGES:
        return REJECTION_MESSAGES[canonical]
    return f"An unknown error occurred (Code: {canonical}). Please contact support."


def classify_rejection(code: Any) -> str:
    """Friendly message for an initiation rejection code."""
    canonical = normalize_code(code)
    if canonical in REJECTION_MESSAGES:
        return REJECTION_MESSAGES[canonical]
    if canonical in FAILURE_MESSAGES:
        return FAILURE_MESSAGES[canonical]
    return (
        f"Your request was rejected (Code: {canonical}). "
        "Please review the parameters or try again later."
    )


def describe_status(status: Any) -> str:
    """Friendly message for a lifecycle status; unknown statuses echo back."""
    cleaned = _clean(status)
    return STATUS_MESSAGES.get(cleaned, cleaned)


def is_terminal(status: Any) -> bool:
    """Whether a lifecycle status is final."""
    return _clean(status) in TERMINAL_STATUSES


def classify(code: Any, category: ErrorCategory) -> ErrorClassification:
    """Full classification record for a code of the given category."""
    category = ErrorCategory(category)
    if category is ErrorCategory.STATUS:
        cleaned = _clean(code)
        return ErrorClassification(
            code=cleaned,
            category=category,
            message=describe_status(cleaned),
            terminal=is_terminal(cleaned),
        )

    message = (
        classify_rejection(code)
        if category is ErrorCategory.REJECTION
        else classify_failure(code)
    )
    return ErrorClassification(
        code=normalize_code(code),
        category=category,
        message=message,
        # A rejected or failed transaction never changes state again
        terminal=True,
    )


def extract_rejection_code(body: Any) -> Optional[str]:
    """
    Find the machine code in a rejection body.

    Looks at, in order:
    - V1 rejectionReason.rejectionCode
    - V2 failureReason.failureCode
    - top-level errorCode / code / rejectionCode / failureCode
    """
    if not isinstance(body, dict):
        return None

    for container, key in (("rejectionReason", "rejectionCode"), ("failureReason", "failureCode")):
        reason = body.get(container)
        if isinstance(reason, dict) and reason.get(key):
            return _clean(reason[key])

    for key in ("errorCode", "code", "rejectionCode", "failureCode"):
        if body.get(key) not in (None, ""):
            return _clean(body[key])
    return None


def classify_response_rejection(body: Any) -> ErrorClassification:
    """Classify a rejection body; bodies without a code classify as UNKNOWN_ERROR."""
    code = extract_rejection_code(body) or "UNKNOWN_ERROR"
    return classify(code, ErrorCategory.REJECTION)


def extract_failure_code(data: Any) -> Optional[str]:
    """Failure (or rejection) code carried by a transaction status record."""
    if not isinstance(data, dict):
        return None
    reason = data.get("failureReason")
    if isinstance(reason, dict) and reason.get("failureCode"):
        return _clean(reason["failureCode"])
    reason = data.get("rejectionReason")
    if isinstance(reason, dict) and reason.get("rejectionCode"):
        return _clean(reason["rejectionCode"])
    return None
