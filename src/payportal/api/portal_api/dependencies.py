"""Dependencies for the Portal API."""

from __future__ import annotations

from functools import lru_cache

from ...application.use_cases.checkout import CheckoutService
from ...application.use_cases.customers import CustomerDirectoryService
from ...application.use_cases.payment_link import PaymentLinkService
from ...application.use_cases.webhooks import WebhookService
from ...crypto.payment_link import PaymentLinkCodec
from ...domain.shared import PaymentProviderFactory
from ...envs.portal_env import Settings, get_settings
from ...infrastructure.sendgrid_client import AsyncSendGridClient
from ...infrastructure.stripe_client import AsyncStripeClient


@lru_cache()
def get_settings_dependency() -> Settings:
    return get_settings()


@lru_cache()
def get_payment_link_codec() -> PaymentLinkCodec:
    settings = get_settings_dependency()
    return PaymentLinkCodec(settings.payment_link_secret)


def get_email_sender() -> AsyncSendGridClient:
    settings = get_settings_dependency()
    return AsyncSendGridClient(
        settings.sendgrid_api_key,
        settings.sendgrid_from_email,
        base_url=settings.sendgrid_api_base_url,
    )


def get_payment_provider_factory() -> PaymentProviderFactory:
    settings = get_settings_dependency()

    def factory() -> AsyncStripeClient:
        return AsyncStripeClient(
            settings.stripe_secret_key, base_url=settings.stripe_api_base_url
        )

    return factory


def get_payment_link_service() -> PaymentLinkService:
    settings = get_settings_dependency()
    return PaymentLinkService(
        get_payment_link_codec(),
        settings.portal_base_url,
        ttl_days=settings.payment_link_ttl_days,
        email_sender=get_email_sender(),
        portal_name=settings.app_name,
    )


def get_checkout_service() -> CheckoutService:
    return CheckoutService(get_payment_link_service(), get_payment_provider_factory())


def get_webhook_service() -> WebhookService:
    settings = get_settings_dependency()
    return WebhookService(settings.stripe_webhook_secret)


def get_customer_directory_service() -> CustomerDirectoryService:
    return CustomerDirectoryService(get_payment_provider_factory())
