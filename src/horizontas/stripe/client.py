"""Thin wrapper around Stripe SDK.

Purpose:
- Keep stripe.* imports out of domain code.
- Bound every call with an HTTP timeout and no automatic network retries;
  a failed checkout is re-attempted only by the guest.
- Never log full Stripe payloads (only IDs + correlation metadata).

Runs server side only: the secret key must never be shipped to a browser.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import stripe

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 10


class StripeGatewayError(RuntimeError):
    """Stripe rejected the request or could not be reached."""


class StripeClient:
    """Wrapper for Stripe Checkout operations.

    Usage:
        client = StripeClient()  # reads STRIPE_SECRET_KEY from env
        session = client.create_checkout_session(
            amount_cents=45000,
            currency="eur",
            product_name='Šeimyninis apartamentas "Māra"',
            customer_email="guest@example.com",
            idempotency_key="booking:4f1c...:checkout_session",
            success_url="https://example.com/success",
            cancel_url="https://example.com/fail",
        )
        print(session["session_id"], session["url"])
    """

    def __init__(self, api_key: str | None = None, timeout: float | None = None) -> None:
        """Initialize the Stripe client.

        Args:
            api_key: Stripe secret key. Defaults to STRIPE_SECRET_KEY env var.
            timeout: HTTP timeout in seconds. Defaults to STRIPE_TIMEOUT_SECONDS.

        Raises:
            RuntimeError: If no API key is provided or found in environment.
        """
        self._api_key = api_key or os.environ.get("STRIPE_SECRET_KEY")
        if not self._api_key:
            raise RuntimeError(
                "Stripe API key not provided. "
                "Set STRIPE_SECRET_KEY or pass api_key parameter."
            )
        self._timeout = timeout or float(
            os.environ.get("STRIPE_TIMEOUT_SECONDS", _DEFAULT_TIMEOUT_SECONDS)
        )

    def _client(self) -> stripe.StripeClient:
        return stripe.StripeClient(
            self._api_key,
            http_client=stripe.RequestsClient(timeout=self._timeout),
            max_network_retries=0,
        )

    def create_checkout_session(
        self,
        *,
        amount_cents: int,
        currency: str,
        product_name: str,
        idempotency_key: str,
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
        metadata: dict[str, str] | None = None,
        correlation_id: str | None = None,
    ) -> dict[str, Any]:
        """Create a one-line-item Stripe Checkout Session.

        Args:
            amount_cents: Amount in minor units.
            currency: Currency code (e.g., 'eur').
            product_name: Line item label shown on the payment page.
            idempotency_key: Idempotency key for this attempt.
            success_url: Redirect URL after payment.
            cancel_url: Redirect URL when the guest abandons payment.
            customer_email: Receipt address, prefilled on the payment page.
            metadata: String key/value pairs attached to the session.
            correlation_id: Optional correlation ID for logging.

        Returns:
            Dict with session_id, url, and status.

        Raises:
            StripeGatewayError: On any API or network failure.
        """
        params: dict[str, Any] = {
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": currency.lower(),
                        "unit_amount": amount_cents,
                        "product_data": {
                            "name": product_name,
                        },
                    },
                    "quantity": 1,
                }
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
        }

        if customer_email:
            params["customer_email"] = customer_email
        if metadata:
            params["metadata"] = metadata

        try:
            session = self._client().v1.checkout.sessions.create(
                params=params,
                options={"idempotency_key": idempotency_key},
            )
        except stripe.StripeError as exc:
            logger.error(
                "stripe_checkout_session_failed",
                extra={
                    "extra_fields": {
                        "error_type": type(exc).__name__,
                        "http_status": getattr(exc, "http_status", None),
                        "correlation_id": correlation_id,
                    },
                },
            )
            raise StripeGatewayError(str(exc)) from exc

        # Log only IDs, never full payload
        logger.info(
            "stripe_checkout_session_created",
            extra={
                "extra_fields": {
                    "session_id": session.id,
                    "correlation_id": correlation_id,
                },
            },
        )

        return {
            "session_id": session.id,
            "url": session.url,
            "status": session.status,
        }
