from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from calcvault.shared.db import Base

class UserSettings(Base):
    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    theme: Mapped[str] = mapped_column(String(8), default="light")    # light|dark
    language: Mapped[str] = mapped_column(String(8), default="en")    # en|ar
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False)
