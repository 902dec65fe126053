"""
Keyed local persistence for the free tier.

A KeyValueStore holds string values under string keys and reads/writes each
key all-or-nothing. LocalRecordStore keeps one key per user holding the JSON
array of that user's FileRecords and rewrites the whole array on every
change; whoever writes last wins.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from calcvault.shared.errors import PersistenceFailure
from calcvault.vault.records import FileRecord

logger = logging.getLogger(__name__)

KEY_PREFIX = "calcpro_files_"


def key_for(user_id: int) -> str:
    return f"{KEY_PREFIX}{user_id}"


class MemoryStore:
    """In-process key/value store (tests, throwaway sessions)."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonDirStore:
    """One file per key under a directory. Writes go through a temp file + rename."""

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        name = Path(key).name
        if not name or name != key:
            raise PersistenceFailure(f"invalid store key: {key!r}")
        return self.root / f"{name}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceFailure(f"could not read {key}: {e}")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as out:
                out.write(value)
            os.replace(tmp, path)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise PersistenceFailure(f"could not write {key}: {e}")

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceFailure(f"could not remove {key}: {e}")


class LocalRecordStore:
    def __init__(self, kv):
        self.kv = kv

    def load(self, user_id: int) -> list[FileRecord]:
        raw = self.kv.get(key_for(user_id))
        if not raw:
            return []
        try:
            items = json.loads(raw)
            return [FileRecord.model_validate(item) for item in items]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.exception("Unreadable vault document for user %s", user_id)
            raise PersistenceFailure(f"stored files for user {user_id} are unreadable: {e}")

    def save(self, user_id: int, records: Iterable[FileRecord]) -> None:
        payload = json.dumps([r.to_json() for r in records])
        self.kv.set(key_for(user_id), payload)

    def append(self, user_id: int, records: list[FileRecord]) -> list[FileRecord]:
        merged = self.load(user_id) + list(records)
        self.save(user_id, merged)
        return list(records)

    def remove(self, user_id: int, ids: Iterable[str]) -> int:
        doomed = set(ids)
        current = self.load(user_id)
        remaining = [r for r in current if r.id not in doomed]
        self.save(user_id, remaining)
        return len(current) - len(remaining)
