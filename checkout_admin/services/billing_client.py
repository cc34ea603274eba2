"""Client for the external checkout billing API."""

import logging
from typing import Any

import httpx

from checkout_admin.config import settings
from checkout_admin.metrics import BILLING_CALLS
from checkout_admin.services.envelope import Envelope, EnvelopeError

logger = logging.getLogger(__name__)

RENEWAL_METHOD = "productRtPaypal"
CANCEL_METHOD = "cancelSubscriptionProduct"


class BillingAPIError(RuntimeError):
    pass


class BillingClient:
    """Sends sealed payloads to the billing endpoint, one attempt per call.

    Requests are form posts with the ciphertext in ``data``. Responses carry
    a ciphertext either as the raw body or under a JSON ``data`` key.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        envelope: Envelope | None = None,
    ) -> None:
        self._base_url = base_url or settings.billing_api_url
        self._timeout = timeout or settings.billing_api_timeout
        self._envelope = envelope or Envelope.from_settings()

    def is_configured(self) -> bool:
        return bool(self._base_url)

    def _ciphertext(self, resp: httpx.Response) -> str:
        content_type = resp.headers.get("content-type", "")
        if "json" in content_type:
            body = resp.json()
            if isinstance(body, dict) and isinstance(body.get("data"), str):
                return body["data"]
            raise EnvelopeError("Billing API returned an unexpected JSON body")
        return resp.text

    def call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.is_configured():
            raise BillingAPIError("Billing API is not configured")
        sealed = self._envelope.seal({**payload, "method": method})
        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.post(self._base_url, data={"data": sealed})
            resp.raise_for_status()
            result = self._envelope.open(self._ciphertext(resp))
        except httpx.HTTPError as exc:
            BILLING_CALLS.labels(method, "http_error").inc()
            logger.error("Billing API %s request failed: %s", method, exc)
            raise BillingAPIError(f"Billing API request failed: {exc}") from exc
        except (EnvelopeError, ValueError) as exc:
            BILLING_CALLS.labels(method, "bad_response").inc()
            logger.error("Billing API %s returned an unreadable response: %s", method, exc)
            raise BillingAPIError("Billing API returned an unreadable response") from exc
        BILLING_CALLS.labels(method, "ok").inc()
        logger.info("Billing API %s completed with status %s", method, result.get("status"))
        return result

    def charge_renewal(self, product_id: str, product_name: str | None) -> dict[str, Any]:
        return self.call(
            RENEWAL_METHOD,
            {"productId": product_id, "productName": product_name or ""},
        )

    def cancel_subscription(
        self,
        product_id: str,
        user_id: str,
        product_name: str | None,
        reason: str,
        cancelled_type: str | None,
    ) -> dict[str, Any]:
        return self.call(
            CANCEL_METHOD,
            {
                "productId": product_id,
                "userId": user_id,
                "productName": product_name or "",
                "cancelReason": reason,
                "cancelledType": cancelled_type or "",
                "lang": "en",
            },
        )
