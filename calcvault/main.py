import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import inspect

from calcvault.shared.config import settings
from calcvault.shared.db import Base, engine

# import models so they register with Base.metadata
from calcvault.accounts import models as accounts_models  # noqa: F401
from calcvault.cloud import models as cloud_models  # noqa: F401
from calcvault.preferences import models as preferences_models  # noqa: F401

# Routers Import
from calcvault.accounts.api import router as accounts_router
from calcvault.billing.api import router as billing_router
from calcvault.cloud.api import router as cloud_router
from calcvault.gate.api import router as gate_router
from calcvault.preferences.api import router as preferences_router
from calcvault.vault.api import router as vault_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

TAGS_METADATA = [
    {"name": "Gate", "description": "Calculator evaluation and secret-code unlock"},
    {"name": "Vault", "description": "Free tier: local vault with a storage cap"},
    {"name": "Cloud files", "description": "Pro tier: database-backed files, no cap"},
    {"name": "Users", "description": "PIN lookup, setup and recovery"},
    {"name": "Settings", "description": "Theme and language preferences"},
    {"name": "Billing", "description": "Pro subscription payments"},
    {"name": "Health", "description": "Service health"},
]

app = FastAPI(
    title="CalcVault",
    version="0.1.0",
    description="Calculator-disguised personal file vault.",
    openapi_tags=TAGS_METADATA,
)

# ---- DEV-ONLY error handler (helps you see real errors in Swagger) ----
if os.getenv("ENV", settings.ENV) == "dev":
    @app.exception_handler(Exception)
    async def _dev_ex_handler(request: Request, exc: Exception):
        logging.getLogger(__name__).exception("Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

# ----------------------------------------------------------------------


@app.on_event("startup")
def _init_db():
    Base.metadata.create_all(bind=engine)

@app.get("/healthz", tags=["Health"])
def healthz():
    return {"ok": True}

@app.get("/__debug/tables")
def _tables():
    return {"tables": inspect(engine).get_table_names()}

# Routers
app.include_router(gate_router)
app.include_router(vault_router)
app.include_router(cloud_router)
app.include_router(accounts_router)
app.include_router(preferences_router)
app.include_router(billing_router)
