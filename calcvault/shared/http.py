from fastapi import HTTPException
from typing import Any, Optional

from calcvault.shared.errors import VaultError, PersistenceFailure

def err(message: str, code: str = "bad_request", status: int = 400, details: Optional[Any] = None):
    raise HTTPException(status_code=status, detail={"ok": False, "error": {"code": code, "message": message, "details": details}})

def raise_vault_error(e: VaultError):
    """Storage failures are the server's problem (500); anything else is the caller's (400)."""
    status = 500 if isinstance(e, PersistenceFailure) else 400
    err(e.message, code=e.code, status=status, details={"filename": e.filename} if e.filename else None)
