import json

import pytest

from calcvault.shared.errors import PersistenceFailure
from calcvault.vault.records import FileRecord, classify
from calcvault.vault.store import JsonDirStore, LocalRecordStore, MemoryStore, key_for


def rec(i, size=10, user_id=7):
    return FileRecord(id=f"id{i}", name=f"file {i}.txt", type="document", size=size,
                      mime_type="text/plain", data="data:text/plain;base64,", user_id=user_id,
                      compressed=True, original_size=99)


@pytest.mark.parametrize("mime,kind", [
    ("image/png", "image"),
    ("video/mp4", "video"),
    ("application/pdf", "document"),
    ("", "document"),
    ("IMAGE/JPEG", "image"),
])
def test_classify(mime, kind):
    assert classify(mime) == kind


def test_empty_user_loads_nothing():
    assert LocalRecordStore(MemoryStore()).load(1) == []


def test_append_and_remove_rewrite_the_user_document():
    kv = MemoryStore()
    store = LocalRecordStore(kv)
    store.append(7, [rec(1), rec(2)])
    store.append(7, [rec(3)])
    assert [r.id for r in store.load(7)] == ["id1", "id2", "id3"]
    assert store.remove(7, {"id2", "missing"}) == 1
    assert [r.id for r in store.load(7)] == ["id1", "id3"]
    assert store.load(8) == []


def test_document_uses_camelcase_keys_only(tmp_path):
    store = LocalRecordStore(JsonDirStore(tmp_path))
    store.save(7, [rec(1)])
    doc = json.loads((tmp_path / f"{key_for(7)}.json").read_text())
    assert doc == [{
        "id": "id1", "name": "file 1.txt", "type": "document", "size": 10,
        "mimeType": "text/plain", "data": "data:text/plain;base64,", "userId": 7,
    }]
    assert LocalRecordStore(JsonDirStore(tmp_path)).load(7)[0].name == "file 1.txt"


def test_records_are_immutable():
    r = rec(1)
    with pytest.raises(Exception):
        r.size = 1


def test_unreadable_document(tmp_path):
    kv = JsonDirStore(tmp_path)
    kv.set(key_for(3), "{not json")
    with pytest.raises(PersistenceFailure):
        LocalRecordStore(kv).load(3)


def test_dir_store_rejects_path_keys(tmp_path):
    with pytest.raises(PersistenceFailure):
        JsonDirStore(tmp_path).set("../escape", "x")


def test_dir_store_remove(tmp_path):
    kv = JsonDirStore(tmp_path)
    kv.set("k", "v")
    assert kv.get("k") == "v"
    kv.remove("k")
    assert kv.get("k") is None
