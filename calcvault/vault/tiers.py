from calcvault.shared.config import settings
from calcvault.vault.ingest import IngestionPipeline
from calcvault.vault.manager import FileManager
from calcvault.vault.store import LocalRecordStore

def free_manager(kv, user_id: int, notify=None) -> FileManager:
    """Free tier: local key/value document, images compressed, capped storage."""
    pipeline = IngestionPipeline(max_storage_mb=settings.FREE_MAX_STORAGE_MB)
    return FileManager(user_id, LocalRecordStore(kv), pipeline, notify=notify)
