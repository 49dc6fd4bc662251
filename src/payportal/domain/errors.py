"""Domain level exceptions shared by the portal services."""

from __future__ import annotations


INVALID_LINK_MESSAGE = "Invalid or tampered payment link. Please request a new link."


class ConfigurationError(RuntimeError):
    """Raised when required configuration (e.g. the link secret) is missing."""


class MalformedPaymentLinkError(ValueError):
    """A payment link query is missing one of the required fields."""


class InvalidPaymentLinkError(ValueError):
    """A payment link failed verification.

    The message is always the generic one so callers cannot tell a tampered
    field from a rotated secret or an expired link.
    """

    def __init__(self) -> None:
        super().__init__(INVALID_LINK_MESSAGE)


class WebhookSignatureError(ValueError):
    """Stripe webhook signature header is missing, malformed or does not match."""


class PaymentProviderError(RuntimeError):
    """The payment provider rejected a request or could not be reached."""


class CustomerNotFoundError(ValueError):
    """Customer does not exist at the payment provider or has been deleted."""


class EmailDeliveryError(RuntimeError):
    """The email gateway refused or failed to deliver a message."""


class PaymentNotFoundError(ValueError):
    """Payment intent does not exist at the payment provider."""
