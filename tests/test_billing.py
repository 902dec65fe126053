import pytest

from calcvault.billing.stripe_client import StripeClient, StripeError, get_stripe
from calcvault.main import app


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        return self._body


class FakeSession:
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def post(self, url, data=None, auth=None, timeout=None):
        path = url.rsplit("/", 1)[-1]
        self.calls.append((path, data, auth))
        if path == self.fail_on:
            return FakeResponse(402, {"error": {"message": "Your card was declined."}})
        bodies = {
            "customers": {"id": "cus_1"},
            "products": {"id": "prod_1"},
            "prices": {"id": "price_1"},
            "payment_intents": {"id": "pi_1", "client_secret": "pi_1_secret"},
        }
        return FakeResponse(200, bodies[path])


@pytest.fixture
def stripe_session(client):
    session = FakeSession()
    app.dependency_overrides[get_stripe] = lambda: StripeClient(secret_key="sk_test", session=session)
    yield session
    app.dependency_overrides.pop(get_stripe, None)


def test_create_subscription(client, stripe_session):
    r = client.post("/api/create-subscription", json={"userId": 7})
    assert r.status_code == 200
    assert r.json()["clientSecret"] == "pi_1_secret"
    assert r.json()["paymentIntentId"] == "pi_1"

    paths = [c[0] for c in stripe_session.calls]
    assert paths == ["customers", "products", "prices", "payment_intents"]
    _, price, _ = stripe_session.calls[2]
    assert price["unit_amount"] == 1000 and price["recurring[interval]"] == "month"
    _, intent, auth = stripe_session.calls[3]
    assert intent["metadata[userId]"] == "7" and intent["metadata[type]"] == "pro_subscription"
    assert auth == ("sk_test", "")


def test_stripe_error_becomes_400(client):
    session = FakeSession(fail_on="payment_intents")
    app.dependency_overrides[get_stripe] = lambda: StripeClient(secret_key="sk_test", session=session)
    try:
        r = client.post("/api/create-subscription", json={"userId": 7})
    finally:
        app.dependency_overrides.pop(get_stripe, None)
    assert r.status_code == 400
    assert r.json()["detail"]["error"]["message"] == "Your card was declined."


def test_missing_secret_key():
    with pytest.raises(StripeError, match="STRIPE_SECRET_KEY"):
        StripeClient(secret_key="", session=FakeSession()).create_product("x")


def test_activate_pro_flips_tier(client):
    uid = client.post("/api/users", json={"pin": "9090"}).json()["id"]
    r = client.post("/api/activate-pro", json={"userId": uid, "stripeCustomerId": "cus_1"})
    u = r.json()
    assert u["subscriptionType"] == "pro" and u["subscriptionStatus"] == "active"
    assert u["maxStorage"] == 0 and u["stripeCustomerId"] == "cus_1"
    assert client.get(f"/api/settings/{uid}").json()["isPremium"] is True
    assert client.get(f"/api/storage/{uid}").json()["isUnlimited"] is True
    assert client.post("/api/activate-pro", json={"userId": 12345}).status_code == 404
