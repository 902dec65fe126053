from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from calcvault.shared.db import Base

class File(Base):
    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)

    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(16))         # image|video|document
    size: Mapped[int] = mapped_column(Integer)
    mime_type: Mapped[str] = mapped_column(String(127), default="")
    data: Mapped[str] = mapped_column(Text)               # data URL
    folder: Mapped[str] = mapped_column(String(16), default="general", index=True)  # images|videos|documents|general
    is_compressed: Mapped[bool] = mapped_column(Boolean, default=False)
    original_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    storage_type: Mapped[str] = mapped_column(String(8), default="local")  # local|cloud

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
