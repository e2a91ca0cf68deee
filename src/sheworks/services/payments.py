"""Payment processor client (Stripe payment intents over HTTP)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from sheworks.core.settings import settings

# Configure logger for this module
logger = logging.getLogger(__name__)


class PaymentError(RuntimeError):
    """Raised when the payment processor rejects or fails a request."""


class PaymentsDisabledError(PaymentError):
    """Raised when no payment processor key is configured."""


class PaymentClient:
    """Creates payment intents with the configured processor."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        secret_key: str | None = None,
        api_url: str | None = None,
    ) -> None:
        self._client = client
        self.secret_key = secret_key if secret_key is not None else settings.stripe_secret_key
        self.api_url = (api_url or settings.stripe_api_url).rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.secret_key)

    async def create_payment_intent(self, amount: float, currency: str = "usd") -> str:
        """Create a card payment intent and return its client secret.

        Args:
            amount: Amount in major currency units; sent to the processor in cents.
            currency: Three-letter ISO currency code.

        Raises:
            PaymentsDisabledError: If no secret key is configured.
            PaymentError: If the processor call fails.
        """
        if not self.enabled:
            raise PaymentsDisabledError("Payment processing is not configured")

        form: dict[str, Any] = {
            "amount": int(round(amount * 100)),
            "currency": currency.lower(),
            "payment_method_types[]": "card",
        }
        try:
            response = await self._client.post(
                f"{self.api_url}/v1/payment_intents",
                data=form,
                headers={"Authorization": f"Bearer {self.secret_key}"},
                timeout=settings.payment_http_timeout_seconds,
            )
        except httpx.HTTPError as exc:
            logger.warning("Payment processor request failed: %s", exc)
            raise PaymentError(f"Payment processor request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            logger.warning("Payment processor responded with %s", response.status_code)
            raise PaymentError(f"Payment processor responded with {response.status_code}")

        secret = response.json().get("client_secret")
        if not secret:
            raise PaymentError("Payment processor response carried no client secret")
        return str(secret)
