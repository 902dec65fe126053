import logging
from datetime import datetime
from sqlalchemy import select
from sqlalchemy.orm import Session

from calcvault.accounts.models import User
from calcvault.preferences.service import create_settings

logger = logging.getLogger(__name__)

SECURITY_QUESTIONS = (
    "What is your mother's maiden name?",
    "What was your first pet's name?",
    "What city were you born in?",
    "What is your favorite color?",
)

def validate_pin_setup(pin: str, confirm_pin: str, question: str, answer: str) -> None:
    """Raises ValueError with the message shown on the setup form."""
    if len(pin) != 4 or not pin.isdigit():
        raise ValueError("PIN must be 4 digits")
    if pin != confirm_pin:
        raise ValueError("PINs do not match")
    if not question or not answer:
        raise ValueError("Security question and answer are required")

def create_user(
    db: Session,
    pin: str,
    security_question: str | None = None,
    security_answer: str | None = None,
    subscription_type: str = "free",
) -> User:
    if get_user_by_pin(db, pin):
        raise ValueError("PIN already exists")
    u = User(
        pin=pin,
        security_question=security_question,
        security_answer=security_answer,
        subscription_type=subscription_type,
        max_storage=0 if subscription_type == "pro" else 50,
    )
    db.add(u); db.commit(); db.refresh(u)
    # every user starts with default preferences
    create_settings(db, u.id)
    logger.info("created user %s (%s)", u.id, u.subscription_type)
    return u

def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)

def get_user_by_pin(db: Session, pin: str) -> User | None:
    return db.scalars(select(User).where(User.pin == pin)).first()

def get_user_by_security_answer(db: Session, answer: str) -> User | None:
    return db.scalars(select(User).where(User.security_answer == answer)).first()

def get_user_by_stripe_customer_id(db: Session, customer_id: str) -> User | None:
    return db.scalars(select(User).where(User.stripe_customer_id == customer_id)).first()

def update_user_stripe(
    db: Session,
    user_id: int,
    stripe_customer_id: str | None = None,
    stripe_subscription_id: str | None = None,
    subscription_type: str | None = None,
    subscription_status: str | None = None,
    max_storage: float | None = None,
    subscription_end_date: datetime | None = None,
) -> User | None:
    u = db.get(User, user_id)
    if not u:
        return None
    changes = {
        "stripe_customer_id": stripe_customer_id,
        "stripe_subscription_id": stripe_subscription_id,
        "subscription_type": subscription_type,
        "subscription_status": subscription_status,
        "max_storage": max_storage,
        "subscription_end_date": subscription_end_date,
    }
    for field, value in changes.items():
        if value is not None:
            setattr(u, field, value)
    db.commit(); db.refresh(u)
    return u
