from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from calcvault.shared.config import settings

# Local SQLite DB under ./storage/ (created if missing) unless DATABASE_URL is set
ROOT = Path(__file__).resolve().parents[2]   # project root
STORAGE_DIR = ROOT / "storage"

if settings.DATABASE_URL:
    DB_URL = settings.DATABASE_URL
else:
    STORAGE_DIR.mkdir(parents=True, exist_ok=True)
    DB_URL = f"sqlite:///{(STORAGE_DIR / 'calcvault.db').as_posix()}"

_engine_kwargs = {}
if DB_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
if DB_URL in ("sqlite://", "sqlite:///:memory:"):
    # in-memory sqlite: one shared connection, otherwise each session sees an empty DB
    _engine_kwargs["poolclass"] = StaticPool

engine = create_engine(DB_URL, **_engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

class Base(DeclarativeBase):
    pass

# FastAPI dep
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
