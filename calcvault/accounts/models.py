from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from calcvault.shared.db import Base

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pin: Mapped[str] = mapped_column(String(16), index=True)
    security_question: Mapped[str | None] = mapped_column(String(255), nullable=True)
    security_answer: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    subscription_type: Mapped[str] = mapped_column(String(16), default="free")        # free|pro
    stripe_customer_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    stripe_subscription_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    subscription_status: Mapped[str] = mapped_column(String(16), default="inactive")  # active|inactive|canceled
    subscription_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # megabytes; max_storage == 0 means no cap
    used_storage: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), default=0)
    max_storage: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), default=50)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    @property
    def is_pro(self) -> bool:
        return self.subscription_type == "pro"
