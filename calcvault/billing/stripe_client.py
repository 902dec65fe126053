"""
Minimal Stripe REST client.

Only the four calls the pro subscription needs. Stripe takes form-encoded
bodies with bracketed keys for nested fields (metadata[userId]=1).
"""
import logging
import requests

from calcvault.shared.config import settings

logger = logging.getLogger(__name__)


class StripeError(RuntimeError):
    pass


class StripeClient:
    def __init__(self, secret_key: str | None = None, api_base: str | None = None,
                 session: requests.Session | None = None, timeout: float = 10):
        self.secret_key = secret_key if secret_key is not None else settings.STRIPE_SECRET_KEY
        self.api_base = (api_base or settings.STRIPE_API_BASE).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, path: str, data: dict) -> dict:
        if not self.secret_key:
            raise StripeError("Missing required Stripe secret: STRIPE_SECRET_KEY")
        try:
            r = self.session.post(
                f"{self.api_base}/{path}",
                data=data,
                auth=(self.secret_key, ""),
                timeout=self.timeout,
            )
            body = r.json()
        except (requests.RequestException, ValueError) as e:
            raise StripeError(f"Stripe request failed: {e}")
        if r.status_code >= 400:
            message = (body.get("error") or {}).get("message") or f"HTTP {r.status_code}"
            raise StripeError(message)
        return body

    def create_customer(self, metadata: dict) -> dict:
        return self._post("customers", _flatten("metadata", metadata))

    def create_product(self, name: str) -> dict:
        return self._post("products", {"name": name})

    def create_price(self, product_id: str, unit_amount: int, currency: str, interval: str = "month") -> dict:
        return self._post("prices", {
            "product": product_id,
            "unit_amount": unit_amount,
            "currency": currency,
            "recurring[interval]": interval,
        })

    def create_payment_intent(self, amount: int, currency: str, customer: str, metadata: dict) -> dict:
        return self._post("payment_intents", {
            "amount": amount,
            "currency": currency,
            "customer": customer,
            **_flatten("metadata", metadata),
        })


def _flatten(prefix: str, values: dict) -> dict:
    return {f"{prefix}[{k}]": str(v) for k, v in values.items()}


def get_stripe() -> StripeClient:
    # FastAPI dep
    return StripeClient()
