"""
File ingestion: turn a batch of uploads into FileRecords.

Files are handled one at a time. Oversize and undecodable files are skipped
with a warning; the first file that would push the user past the plan cap
stops the rest of the batch. Whatever was admitted before the stop is kept.
The caller persists the returned records.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Iterable

from starlette.concurrency import run_in_threadpool

from calcvault.shared.config import settings
from calcvault.shared.errors import VaultError, OversizeFile, QuotaExceeded, DecodeFailure
from calcvault.vault.compress import compress_image
from calcvault.vault.encoding import to_data_url
from calcvault.vault.quota import MB
from calcvault.vault.records import FileRecord, classify

logger = logging.getLogger(__name__)


class BytesUpload:
    """In-memory upload with the same surface as starlette's UploadFile."""

    def __init__(self, filename: str, content: bytes, content_type: str = ""):
        self.filename = filename
        self.content_type = content_type
        self._content = content
        self.closed = False

    @property
    def size(self) -> int:
        return len(self._content)

    async def read(self, size: int = -1) -> bytes:
        return self._content

    async def close(self) -> None:
        self.closed = True


@dataclass
class IngestResult:
    records: list[FileRecord] = field(default_factory=list)
    warnings: list[VaultError] = field(default_factory=list)
    stopped: bool = False   # batch ended early on the storage cap
    busy: bool = False      # ignored: another batch was in flight

    @property
    def admitted_bytes(self) -> int:
        return sum(r.size for r in self.records)

    def messages(self) -> list[str]:
        return [w.message for w in self.warnings]


def new_file_id(taken: set[str]) -> str:
    while True:
        fid = uuid.uuid4().hex
        if fid not in taken:
            return fid


class IngestionPipeline:
    def __init__(
        self,
        max_storage_mb: float = settings.FREE_MAX_STORAGE_MB,
        max_file_bytes: int = settings.MAX_FILE_BYTES,
        compress_images: bool = True,
        max_dimension: int | None = None,
        quality: int | None = None,
    ):
        self.max_storage_mb = max_storage_mb
        self.max_file_bytes = max_file_bytes
        self.compress_images = compress_images
        self.max_dimension = max_dimension
        self.quality = quality

    @property
    def cap_bytes(self) -> int | None:
        if not self.max_storage_mb:
            return None
        return int(self.max_storage_mb * MB)

    def _remaining_mb(self, used: int) -> float:
        return max(self.max_storage_mb - used / MB, 0.0)

    async def run(
        self,
        user_id: int,
        batch: Iterable,
        used_bytes: int = 0,
        taken_ids: Iterable[str] = (),
        on_warning: Callable[[VaultError], None] | None = None,
    ) -> IngestResult:
        """
        Process uploads in order. `used_bytes` is what the user already
        stores; `taken_ids` are ids new records must not reuse. Every upload
        is closed before returning, whatever happened to it.
        """
        uploads = list(batch)
        result = IngestResult()
        taken = set(taken_ids)
        cap = self.cap_bytes

        def warn(e: VaultError):
            logger.warning("user %s: %s", user_id, e.message)
            result.warnings.append(e)
            if on_warning:
                on_warning(e)

        try:
            for upload in uploads:
                name = upload.filename or "upload.bin"
                used = used_bytes + result.admitted_bytes
                try:
                    content = None
                    size = getattr(upload, "size", None)
                    if size is None:
                        content = await self._read(upload, name)
                        size = len(content)

                    if size > self.max_file_bytes:
                        limit_mb = self.max_file_bytes // MB
                        raise OversizeFile(f"File {name} exceeds the {limit_mb}MB limit", filename=name)

                    if cap is not None and used + size > cap:
                        raise QuotaExceeded(
                            f"Storage limit reached. You have {self._remaining_mb(used):.1f}MB remaining.",
                            filename=name,
                        )

                    if content is None:
                        content = await self._read(upload, name)
                    record = await self._build(user_id, name, upload.content_type or "", content, taken)

                    # compressed payloads can outgrow the raw file, re-check what gets stored
                    if cap is not None and used + record.size > cap:
                        raise QuotaExceeded(
                            f"Storage limit reached. You have {self._remaining_mb(used):.1f}MB remaining.",
                            filename=name,
                        )
                except QuotaExceeded as e:
                    warn(e)
                    result.stopped = True
                    break
                except VaultError as e:
                    if e.filename is None:
                        e.filename = name
                    warn(e)
                    continue
                except Exception:
                    logger.exception("Error processing file %s", name)
                    warn(DecodeFailure(f"Error processing file: {name}", filename=name))
                    continue

                taken.add(record.id)
                result.records.append(record)
        finally:
            for upload in uploads:
                await upload.close()

        logger.info(
            "user %s: ingested %d of %d file(s), %d bytes%s",
            user_id, len(result.records), len(uploads), result.admitted_bytes,
            " (stopped at storage cap)" if result.stopped else "",
        )
        return result

    async def _read(self, upload, name: str) -> bytes:
        try:
            return await upload.read()
        except OSError as e:
            raise DecodeFailure(f"Error processing file: {name} ({e})", filename=name)

    async def _build(self, user_id: int, name: str, mime: str, content: bytes, taken: set[str]) -> FileRecord:
        kind = classify(mime)
        if kind == "image" and self.compress_images:
            img = await run_in_threadpool(compress_image, content, self.max_dimension, self.quality)
            data, size, compressed = img.data, img.size, True
        else:
            data, size, compressed = to_data_url(content, mime), len(content), False
        return FileRecord(
            id=new_file_id(taken),
            name=name,
            type=kind,
            size=size,
            mime_type=mime,
            data=data,
            user_id=user_id,
            compressed=compressed,
            original_size=len(content),
        )
