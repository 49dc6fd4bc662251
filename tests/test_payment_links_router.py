"""Unit tests for payment link API routes."""

import unittest
from urllib.parse import urlsplit

from fastapi import FastAPI
from fastapi.testclient import TestClient

from payportal.api.portal_api.dependencies import get_payment_link_service
from payportal.api.portal_api.routers.payment_links import router
from payportal.application.use_cases.payment_link import PaymentLinkService
from payportal.crypto.payment_link import PaymentLinkCodec
from payportal.domain.errors import INVALID_LINK_MESSAGE
from tests.fixtures import InMemoryEmailSender


class TestPaymentLinksRouter(unittest.TestCase):
    """Test cases for payment links router."""

    def setUp(self):
        """Set up test fixtures."""
        self.app = FastAPI()
        self.app.include_router(router, prefix="/api/v1")

        self.email_sender = InMemoryEmailSender()
        self.service = PaymentLinkService(
            PaymentLinkCodec("test-secret"),
            "https://pay.example.com",
            email_sender=self.email_sender,
        )
        self.app.dependency_overrides[get_payment_link_service] = lambda: self.service

        self.client = TestClient(self.app)
        self.link_request = {
            "customer_id": "cus_ABC123",
            "amount": "999.00",
            "currency": "usd",
            "invoice_date": "2025-10-01",
            "invoice_description": "Invoice #5 & Co.",
        }

    def tearDown(self):
        """Clean up after tests."""
        self.app.dependency_overrides.clear()

    def _build(self):
        response = self.client.post("/api/v1/payment-links", json=self.link_request)
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_build_payment_link(self):
        """Building a link returns a signed URL in minor units."""
        body = self._build()

        self.assertTrue(body["url"].startswith("https://pay.example.com/pay?"))
        self.assertEqual(body["amt"], "99900")
        self.assertEqual(len(body["signature"]), 64)
        self.assertIn("invoiceDesc=Invoice+%235+%26+Co.", body["url"])

    def test_build_payment_link_validation_error(self):
        """Customer ids without the provider prefix are rejected."""
        self.link_request["customer_id"] = "ABC123"

        response = self.client.post("/api/v1/payment-links", json=self.link_request)

        self.assertEqual(response.status_code, 422)

    def test_verify_payment_link(self):
        """A freshly built link verifies and returns its decoded fields."""
        query = urlsplit(self._build()["url"]).query

        response = self.client.post("/api/v1/payment-links/verify", json={"query": query})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["invoice_desc"], "Invoice #5 & Co.")
        self.assertEqual(response.json()["cid"], "cus_ABC123")

    def test_verify_tampered_payment_link(self):
        """Tampered links return only the generic message."""
        query = urlsplit(self._build()["url"]).query.replace("amt=99900", "amt=99901")

        response = self.client.post("/api/v1/payment-links/verify", json={"query": query})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": INVALID_LINK_MESSAGE})

    def test_send_payment_link_email(self):
        """Emailing a link delivers it through the email gateway."""
        url = self._build()["url"]

        response = self.client.post(
            "/api/v1/payment-links/email",
            json={
                "customer_email": "ada@example.com",
                "customer_name": "Ada",
                "amount": "99900",
                "currency": "usd",
                "payment_url": url,
                "invoice_description": "Invoice #5 & Co.",
                "invoice_date": "2025-10-01",
            },
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "recipient": "ada@example.com"})
        self.assertEqual(len(self.email_sender.sent), 1)
        self.assertIn(url, self.email_sender.sent[0].text)

    def test_send_payment_link_email_delivery_failure(self):
        """Gateway failures are reported as a bad gateway."""
        self.email_sender.fail = True

        response = self.client.post(
            "/api/v1/payment-links/email",
            json={
                "customer_email": "ada@example.com",
                "customer_name": "Ada",
                "amount": "99900",
                "currency": "usd",
                "payment_url": "https://pay.example.com/pay",
                "invoice_description": "Retainer",
                "invoice_date": "2025-10-01",
            },
        )

        self.assertEqual(response.status_code, 502)


if __name__ == "__main__":
    unittest.main()
