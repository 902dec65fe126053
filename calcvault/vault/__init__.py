from .records import FileRecord, classify
from .store import MemoryStore, JsonDirStore, LocalRecordStore
from .ingest import IngestionPipeline, IngestResult, BytesUpload
from .quota import StorageStats, storage_stats
from .manager import FileManager, Download

__all__ = [
    "FileRecord",
    "classify",
    "MemoryStore",
    "JsonDirStore",
    "LocalRecordStore",
    "IngestionPipeline",
    "IngestResult",
    "BytesUpload",
    "StorageStats",
    "storage_stats",
    "FileManager",
    "Download",
]
