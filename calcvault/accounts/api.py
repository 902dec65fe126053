from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from calcvault.shared.db import get_db
from calcvault.accounts.schemas import UserCreate, UserOut, PinIn, PinSetupIn, RecoveryOut
from calcvault.accounts.service import (
    create_user, get_user_by_pin, get_user_by_security_answer, validate_pin_setup,
)

router = APIRouter(prefix="/api", tags=["Users"])

@router.post("/auth", response_model=UserOut)
def pin_login(inb: PinIn, db: Session = Depends(get_db)):
    user = get_user_by_pin(db, inb.pin)
    if not user:
        raise HTTPException(404, "User not found")
    return user

@router.post("/users", response_model=UserOut)
def api_create_user(inb: UserCreate, db: Session = Depends(get_db)):
    try:
        return create_user(db, inb.pin, inb.security_question, inb.security_answer, inb.subscription_type)
    except ValueError as e:
        raise HTTPException(400, str(e))

@router.post("/users/setup", response_model=UserOut)
def api_pin_setup(inb: PinSetupIn, db: Session = Depends(get_db)):
    try:
        validate_pin_setup(inb.pin, inb.confirm_pin, inb.security_question, inb.security_answer)
        return create_user(db, inb.pin, inb.security_question, inb.security_answer)
    except ValueError as e:
        raise HTTPException(400, str(e))

@router.get("/users/recovery/{security_answer}", response_model=RecoveryOut)
def api_recover_pin(security_answer: str, db: Session = Depends(get_db)):
    user = get_user_by_security_answer(db, security_answer)
    if not user:
        raise HTTPException(404, "User not found")
    return {"pin": user.pin}

@router.get("/users/{pin}", response_model=UserOut)
def api_get_user(pin: str, db: Session = Depends(get_db)):
    user = get_user_by_pin(db, pin)
    if not user:
        raise HTTPException(404, "User not found")
    return user
