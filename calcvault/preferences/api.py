from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from calcvault.shared.db import get_db
from calcvault.preferences.schemas import SettingsCreate, SettingsUpdate, SettingsOut
from calcvault.preferences.service import create_settings, get_settings, update_settings

router = APIRouter(prefix="/api/settings", tags=["Settings"])

@router.post("", response_model=SettingsOut)
def api_create_settings(inb: SettingsCreate, db: Session = Depends(get_db)):
    return create_settings(db, inb.user_id, inb.theme, inb.language, inb.is_premium)

@router.get("/{user_id}", response_model=SettingsOut)
def api_get_settings(user_id: int, db: Session = Depends(get_db)):
    s = get_settings(db, user_id)
    if not s:
        raise HTTPException(404, "Settings not found")
    return s

@router.put("/{user_id}", response_model=SettingsOut)
def api_update_settings(user_id: int, inb: SettingsUpdate, db: Session = Depends(get_db)):
    s = update_settings(db, user_id, **inb.model_dump(exclude_unset=True))
    if not s:
        raise HTTPException(404, "Settings not found")
    return s
