from sqlalchemy import select
from sqlalchemy.orm import Session

from calcvault.preferences.models import UserSettings

def create_settings(
    db: Session, user_id: int, theme: str = "light", language: str = "en", is_premium: bool = False
) -> UserSettings:
    s = UserSettings(user_id=user_id, theme=theme, language=language, is_premium=is_premium)
    db.add(s); db.commit(); db.refresh(s)
    return s

def get_settings(db: Session, user_id: int) -> UserSettings | None:
    return db.scalars(select(UserSettings).where(UserSettings.user_id == user_id)).first()

def update_settings(db: Session, user_id: int, **changes) -> UserSettings | None:
    s = get_settings(db, user_id)
    if not s:
        return None
    for field, value in changes.items():
        if value is not None:
            setattr(s, field, value)
    db.commit(); db.refresh(s)
    return s
