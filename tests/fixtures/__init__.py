"""In-memory test doubles for the portal gateways."""

from .in_memory_gateways import InMemoryEmailSender, InMemoryPaymentProvider

__all__ = ["InMemoryEmailSender", "InMemoryPaymentProvider"]
