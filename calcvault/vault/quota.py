from dataclasses import dataclass
from typing import Iterable

from calcvault.vault.records import FileRecord

MB = 1024 * 1024

@dataclass(frozen=True)
class StorageStats:
    used_bytes: int
    used_mb: float
    total_mb: float          # 0 means no cap
    is_unlimited: bool
    percentage: float | None  # None when unlimited

    @property
    def remaining_mb(self) -> float | None:
        if self.is_unlimited:
            return None
        return max(self.total_mb - self.used_mb, 0.0)

    @property
    def is_full(self) -> bool:
        return not self.is_unlimited and self.used_mb >= self.total_mb

    @property
    def level(self) -> str:
        # storage bar colour: green / yellow above 70% / red above 90%
        if self.percentage is None or self.percentage <= 70:
            return "ok"
        if self.percentage <= 90:
            return "warning"
        return "critical"

    def to_dict(self) -> dict:
        return {
            "used": round(self.used_mb, 2),
            "total": self.total_mb,
            "isUnlimited": self.is_unlimited,
            "percentage": self.percentage,
            "usedBytes": self.used_bytes,
            "level": self.level,
        }

def used_bytes(records: Iterable[FileRecord]) -> int:
    return sum(r.size for r in records)

def percentage(used_mb: float, total_mb: float) -> float | None:
    if not total_mb:
        return None
    return used_mb / total_mb * 100

def storage_stats(records: Iterable[FileRecord], max_storage_mb: float) -> StorageStats:
    """Used/total for a record set. max_storage_mb == 0 is the no-cap sentinel."""
    used = used_bytes(records)
    used_mb = used / MB
    unlimited = not max_storage_mb
    return StorageStats(
        used_bytes=used,
        used_mb=used_mb,
        total_mb=0 if unlimited else float(max_storage_mb),
        is_unlimited=unlimited,
        percentage=percentage(used_mb, max_storage_mb),
    )
