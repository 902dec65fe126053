import os

# must be set before calcvault.shared.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"

from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from calcvault.main import app
from calcvault.shared.db import Base, engine, SessionLocal
from calcvault.vault import api as vault_api
from calcvault.vault.store import MemoryStore


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def kv():
    return MemoryStore()


@pytest.fixture
def client(kv):
    app.dependency_overrides[vault_api.get_kv] = lambda: kv
    vault_api._MANAGERS.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    vault_api._MANAGERS.clear()


@pytest.fixture
def make_image():
    def _make(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
        buf = BytesIO()
        Image.new(mode, (width, height), color=(200, 40, 40) if mode == "RGB" else (200, 40, 40, 128)).save(buf, format=fmt)
        return buf.getvalue()
    return _make
