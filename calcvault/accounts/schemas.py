from datetime import datetime
from pydantic import Field
from calcvault.shared.schemas import CamelModel, CamelORMModel

class UserCreate(CamelModel):
    pin: str = Field(min_length=1, max_length=16)
    security_question: str | None = None
    security_answer: str | None = None
    subscription_type: str = Field(default="free", pattern="^(free|pro)$")

class PinSetupIn(CamelModel):
    pin: str
    confirm_pin: str
    security_question: str = ""
    security_answer: str = ""

class PinIn(CamelModel):
    pin: str

class UserOut(CamelORMModel):
    id: int
    pin: str
    security_question: str | None = None
    subscription_type: str
    subscription_status: str
    stripe_customer_id: str | None = None
    stripe_subscription_id: str | None = None
    subscription_end_date: datetime | None = None
    used_storage: float
    max_storage: float
    created_at: datetime

class RecoveryOut(CamelModel):
    pin: str
