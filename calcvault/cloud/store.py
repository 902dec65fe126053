"""Record store over the files table, so cloud uploads reuse the vault pipeline."""
import logging
from typing import Iterable

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from calcvault.cloud.models import File
from calcvault.cloud.service import refresh_used_storage
from calcvault.shared.errors import PersistenceFailure
from calcvault.vault.records import FileRecord

logger = logging.getLogger(__name__)

def to_record(f: File) -> FileRecord:
    return FileRecord(
        id=str(f.id),
        name=f.name,
        type=f.type,
        size=f.size,
        mime_type=f.mime_type,
        data=f.data,
        user_id=f.user_id,
        compressed=f.is_compressed,
        original_size=f.original_size,
    )

class CloudRecordStore:
    def __init__(self, db: Session):
        self.db = db

    def load(self, user_id: int) -> list[FileRecord]:
        try:
            rows = self.db.scalars(select(File).where(File.user_id == user_id).order_by(File.id))
            return [to_record(f) for f in rows]
        except SQLAlchemyError as e:
            logger.exception("Could not load files for user %s", user_id)
            raise PersistenceFailure(f"could not load files: {e}")

    def append(self, user_id: int, records: list[FileRecord]) -> list[FileRecord]:
        rows = [
            File(
                user_id=user_id,
                name=r.name,
                type=r.type,
                size=r.size,
                mime_type=r.mime_type,
                data=r.data,
                folder=r.folder,
                is_compressed=r.compressed,
                original_size=r.original_size,
                storage_type="cloud",
            )
            for r in records
        ]
        try:
            self.db.add_all(rows)
            self.db.commit()
            for f in rows:
                self.db.refresh(f)
            refresh_used_storage(self.db, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Could not store %d file(s) for user %s", len(rows), user_id)
            raise PersistenceFailure(f"could not store files: {e}")
        return [to_record(f) for f in rows]

    def remove(self, user_id: int, ids: Iterable[str]) -> int:
        keys = [int(i) for i in ids if str(i).isdigit()]
        if not keys:
            return 0
        try:
            res = self.db.execute(delete(File).where(File.user_id == user_id, File.id.in_(keys)))
            self.db.commit()
            refresh_used_storage(self.db, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Could not delete files for user %s", user_id)
            raise PersistenceFailure(f"could not delete files: {e}")
        return res.rowcount

def pro_manager(db: Session, user_id: int, notify=None):
    """Unlimited tier: files go to the database uncompressed, no storage cap."""
    from calcvault.vault.ingest import IngestionPipeline
    from calcvault.vault.manager import FileManager
    pipeline = IngestionPipeline(max_storage_mb=0, compress_images=False)
    return FileManager(user_id, CloudRecordStore(db), pipeline, notify=notify)
