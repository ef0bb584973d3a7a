"""Errors raised while resolving and updating checkout sessions."""


class PaymentSessionError(Exception):
    """Base class for checkout session errors."""


class SessionNotFoundError(PaymentSessionError):
    """No record exists for the session in any source."""


class SessionAlreadyUsedError(PaymentSessionError):
    """The booking already completed its downstream scheduling step."""


class SessionTooOldError(PaymentSessionError):
    """The paid session is past its reuse window."""


class PaymentProcessorError(PaymentSessionError):
    """The payment processor call failed."""


class WebhookSignatureError(PaymentSessionError):
    """The webhook payload could not be verified."""


class CheckoutValidationError(PaymentSessionError):
    """The checkout request does not match the catalog."""


class BookingUpdateError(PaymentSessionError):
    """The booking update request is incomplete."""
