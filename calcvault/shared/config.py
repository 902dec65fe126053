# calcvault/shared/config.py
from pydantic import BaseModel
import os

class Settings(BaseModel):
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Relational store (pro tier). Defaults to a sqlite file under ./storage
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    # Local key/value store (free tier), one JSON document per user key
    VAULT_DIR: str | None = os.getenv("VAULT_DIR")
    # Mounted free-tier managers kept in memory by the vault routes
    VAULT_CACHE_SIZE: int = int(os.getenv("VAULT_CACHE_SIZE", "32"))

    # Free tier limits
    FREE_MAX_STORAGE_MB: int = int(os.getenv("FREE_MAX_STORAGE_MB", "50"))
    MAX_FILE_BYTES: int = int(os.getenv("MAX_FILE_BYTES", str(10 * 1024 * 1024)))

    # Image compression
    IMAGE_MAX_DIMENSION: int = int(os.getenv("IMAGE_MAX_DIMENSION", "800"))
    IMAGE_QUALITY: int = int(os.getenv("IMAGE_QUALITY", "60"))

    # Disguise gate: seconds between the "=" result and the view switch
    SECRET_DELAY: float = float(os.getenv("SECRET_DELAY", "0.5"))

    # Stripe (pro subscription)
    STRIPE_SECRET_KEY: str = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_API_BASE: str = os.getenv("STRIPE_API_BASE", "https://api.stripe.com/v1")
    PRO_PRICE_CENTS: int = int(os.getenv("PRO_PRICE_CENTS", "1000"))
    PRO_CURRENCY: str = os.getenv("PRO_CURRENCY", "usd")

settings = Settings()
