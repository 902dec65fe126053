from calcvault.vault.quota import MB, storage_stats, percentage
from calcvault.vault.records import FileRecord


def rec(i, size):
    return FileRecord(id=str(i), name=f"f{i}", type="document", size=size,
                      mime_type="text/plain", data="data:text/plain;base64,", user_id=1)


def test_empty_set():
    s = storage_stats([], 50)
    assert s.used_bytes == 0 and s.used_mb == 0
    assert s.percentage == 0
    assert s.level == "ok"


def test_half_full():
    s = storage_stats([rec(1, 20 * MB), rec(2, 5 * MB)], 50)
    assert s.used_mb == 25
    assert s.percentage == 50
    assert s.remaining_mb == 25
    assert not s.is_full


def test_unlimited_sentinel():
    s = storage_stats([rec(1, 500 * MB)], 0)
    assert s.is_unlimited
    assert s.total_mb == 0
    assert s.percentage is None
    assert s.remaining_mb is None
    assert not s.is_full
    assert s.to_dict()["isUnlimited"] is True


def test_levels_and_full():
    assert storage_stats([rec(1, 40 * MB)], 50).level == "warning"
    assert storage_stats([rec(1, 46 * MB)], 50).level == "critical"
    assert storage_stats([rec(1, 50 * MB)], 50).is_full


def test_percentage_helper():
    assert percentage(25, 50) == 50
    assert percentage(3, 0) is None
