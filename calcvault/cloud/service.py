import logging
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from calcvault.accounts.models import User
from calcvault.cloud.models import File
from calcvault.vault.quota import storage_stats

logger = logging.getLogger(__name__)

def create_file(db: Session, **fields) -> File:
    f = File(**fields)
    db.add(f); db.commit(); db.refresh(f)
    refresh_used_storage(db, f.user_id)
    return f

def list_files(db: Session, user_id: int) -> list[File]:
    return list(db.scalars(select(File).where(File.user_id == user_id).order_by(File.id)))

def list_files_in_folder(db: Session, user_id: int, folder: str) -> list[File]:
    return list(db.scalars(
        select(File).where(File.user_id == user_id, File.folder == folder).order_by(File.id)
    ))

def delete_file(db: Session, file_id: int, user_id: int) -> bool:
    res = db.execute(delete(File).where(File.id == file_id, File.user_id == user_id))
    db.commit()
    if not res.rowcount:
        return False
    refresh_used_storage(db, user_id)
    return True

def refresh_used_storage(db: Session, user_id: int) -> None:
    user = db.get(User, user_id)
    if not user:
        return
    user.used_storage = round(storage_stats(list_files(db, user_id), 0).used_mb, 2)
    db.commit()

def get_storage_stats(db: Session, user_id: int) -> dict:
    """
    Pro users and unknown ids report total 0 / isUnlimited, the no-cap
    sentinel. Free users report against their max_storage.
    """
    user = db.get(User, user_id)
    if not user:
        return {"used": 0, "total": 0, "isUnlimited": True, "percentage": None}
    cap = 0 if user.is_pro else user.max_storage
    stats = storage_stats(list_files(db, user_id), cap)
    return {
        "used": round(stats.used_mb, 2),
        "total": stats.total_mb,
        "isUnlimited": stats.is_unlimited,
        "percentage": stats.percentage,
    }
