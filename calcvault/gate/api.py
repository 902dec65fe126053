from typing import List
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from calcvault.shared.config import settings
from calcvault.gate.calculator import Calculator

router = APIRouter(prefix="/gate", tags=["Gate"])

class KeysIn(BaseModel):
    keys: List[str] = Field(min_length=1, description="Calculator keys in order, e.g. ['1','2','3','4','=']")

@router.post("/evaluate")
def evaluate(inb: KeysIn):
    calc = Calculator()
    try:
        identity = calc.press_many(inb.keys)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {
        "display": calc.display,
        "state": calc.state.value,
        "unlocked": identity is not None,
        "user": identity.to_dict() if identity else None,
        # the client waits this long before switching to the file manager
        "delay": settings.SECRET_DELAY if identity else 0,
    }
