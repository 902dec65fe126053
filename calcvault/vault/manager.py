"""
File manager for one unlocked user.

Owns the in-memory record set: loaded once at mount, and written back to the
record store right after every add or delete. Uploads are serialized with an
`uploading` flag; a second upload while one is running is ignored.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from starlette.concurrency import run_in_threadpool

from calcvault.shared.errors import VaultError
from calcvault.vault.encoding import parse_data_url
from calcvault.vault.ingest import IngestionPipeline, IngestResult
from calcvault.vault.quota import StorageStats, storage_stats
from calcvault.vault.records import FileRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Download:
    filename: str
    mime_type: str
    content: bytes


def _log_notice(e: VaultError) -> None:
    logger.warning("notice: %s", e.message)


class FileManager:
    def __init__(
        self,
        user_id: int,
        store,
        pipeline: IngestionPipeline | None = None,
        notify: Callable[[VaultError], None] | None = None,
    ):
        self.user_id = user_id
        self.store = store
        self.pipeline = pipeline or IngestionPipeline()
        self.notify = notify or _log_notice
        self.records: list[FileRecord] = []
        self.selected: set[str] = set()
        self.uploading = False
        self.mounted = False

    @property
    def max_storage_mb(self) -> float:
        return self.pipeline.max_storage_mb

    def mount(self) -> "FileManager":
        self.records = self.store.load(self.user_id)
        self.selected.clear()
        self.mounted = True
        logger.info("user %s: mounted %d file(s)", self.user_id, len(self.records))
        return self

    def _ensure_mounted(self):
        if not self.mounted:
            self.mount()

    @property
    def stats(self) -> StorageStats:
        return storage_stats(self.records, self.max_storage_mb)

    @property
    def can_upload(self) -> bool:
        return not self.uploading and not self.stats.is_full

    def files(self, folder: str | None = None) -> list[FileRecord]:
        self._ensure_mounted()
        if folder is None:
            return list(self.records)
        return [r for r in self.records if r.folder == folder]

    def get(self, file_id: str) -> FileRecord | None:
        self._ensure_mounted()
        return next((r for r in self.records if r.id == file_id), None)

    async def upload(self, batch: Iterable) -> IngestResult:
        self._ensure_mounted()
        batch = list(batch)
        if self.uploading:
            logger.info("user %s: upload ignored, a batch is already running", self.user_id)
            for upload in batch:
                await upload.close()
            return IngestResult(busy=True)

        self.uploading = True
        try:
            result = await self.pipeline.run(
                self.user_id,
                batch,
                used_bytes=self.stats.used_bytes,
                taken_ids={r.id for r in self.records},
                on_warning=self.notify,
            )
            if result.records:
                stored = await run_in_threadpool(self.store.append, self.user_id, result.records)
                self.records = self.records + list(stored)
                result.records = list(stored)
        finally:
            self.uploading = False
        return result

    def toggle_select(self, file_id: str) -> bool:
        """Flip selection of one file; returns whether it is now selected."""
        if file_id in self.selected:
            self.selected.discard(file_id)
            return False
        self.selected.add(file_id)
        return True

    def delete(self, ids: Iterable[str]) -> int:
        self._ensure_mounted()
        doomed = set(ids) & {r.id for r in self.records}
        if not doomed:
            return 0
        self.store.remove(self.user_id, doomed)
        self.records = [r for r in self.records if r.id not in doomed]
        self.selected -= doomed
        logger.info("user %s: deleted %d file(s)", self.user_id, len(doomed))
        return len(doomed)

    def delete_selected(self) -> int:
        count = self.delete(self.selected)
        self.selected.clear()
        return count

    def download(self, file_id: str) -> Download | None:
        rec = self.get(file_id)
        if not rec:
            return None
        mime, content = parse_data_url(rec.data)
        return Download(filename=rec.name, mime_type=rec.mime_type or mime, content=content)
