import logging
from datetime import datetime
from sqlalchemy.orm import Session

from calcvault.shared.config import settings
from calcvault.accounts.models import User
from calcvault.accounts.service import update_user_stripe
from calcvault.billing.stripe_client import StripeClient
from calcvault.preferences.service import get_settings, create_settings

logger = logging.getLogger(__name__)

PRODUCT_NAME = "CalcVault Pro Subscription"

def create_subscription(client: StripeClient, user_id: int) -> dict:
    """
    Set up the monthly pro charge for a user and return the payment intent's
    client secret for the payment form. The tier only flips once the
    payment is confirmed (see activate_pro).
    """
    meta = {"userId": user_id}
    customer = client.create_customer(meta)
    product = client.create_product(PRODUCT_NAME)
    client.create_price(product["id"], settings.PRO_PRICE_CENTS, settings.PRO_CURRENCY, interval="month")
    intent = client.create_payment_intent(
        settings.PRO_PRICE_CENTS,
        settings.PRO_CURRENCY,
        customer["id"],
        {**meta, "type": "pro_subscription"},
    )
    logger.info("subscription intent %s created for user %s", intent["id"], user_id)
    return {
        "paymentIntentId": intent["id"],
        "clientSecret": intent["client_secret"],
        "customerId": customer["id"],
    }

def activate_pro(
    db: Session,
    user_id: int,
    stripe_customer_id: str | None = None,
    stripe_subscription_id: str | None = None,
    subscription_end_date: datetime | None = None,
) -> User | None:
    user = update_user_stripe(
        db,
        user_id,
        stripe_customer_id=stripe_customer_id,
        stripe_subscription_id=stripe_subscription_id,
        subscription_type="pro",
        subscription_status="active",
        max_storage=0,
        subscription_end_date=subscription_end_date,
    )
    if not user:
        return None
    prefs = get_settings(db, user_id) or create_settings(db, user_id)
    prefs.is_premium = True
    db.commit()
    logger.info("user %s upgraded to pro", user_id)
    return user
