import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from calcvault.shared.db import get_db
from calcvault.shared.schemas import CamelModel
from calcvault.accounts.schemas import UserOut
from calcvault.billing.service import create_subscription, activate_pro
from calcvault.billing.stripe_client import StripeClient, StripeError, get_stripe

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Billing"])

class SubscriptionIn(CamelModel):
    user_id: int

class ActivateIn(CamelModel):
    user_id: int
    stripe_customer_id: str | None = None
    stripe_subscription_id: str | None = None
    subscription_end_date: datetime | None = None

@router.post("/create-subscription")
def api_create_subscription(inb: SubscriptionIn, stripe: StripeClient = Depends(get_stripe)):
    try:
        return create_subscription(stripe, inb.user_id)
    except StripeError as e:
        logger.error("Subscription creation error: %s", e)
        raise HTTPException(400, {"error": {"message": str(e)}})

@router.post("/activate-pro", response_model=UserOut)
def api_activate_pro(inb: ActivateIn, db: Session = Depends(get_db)):
    user = activate_pro(db, inb.user_id, inb.stripe_customer_id, inb.stripe_subscription_id, inb.subscription_end_date)
    if not user:
        raise HTTPException(404, "User not found")
    return user
