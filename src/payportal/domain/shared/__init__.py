"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .gateway_protocols import (
    EmailSenderProtocol,
    PaymentProviderFactory,
    PaymentProviderProtocol,
)

__all__ = ["EmailSenderProtocol", "PaymentProviderFactory", "PaymentProviderProtocol"]
