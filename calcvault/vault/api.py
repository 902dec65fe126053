from collections import OrderedDict
from functools import lru_cache
from typing import List
from urllib.parse import quote
from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File as Upload
from fastapi.responses import Response
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from calcvault.shared.config import settings
from calcvault.shared.db import STORAGE_DIR
from calcvault.shared.errors import VaultError
from calcvault.shared.http import raise_vault_error
from calcvault.vault.manager import FileManager
from calcvault.vault.store import JsonDirStore
from calcvault.vault.tiers import free_manager

router = APIRouter(prefix="/vault", tags=["Vault"])

# user_id -> mounted manager, least recently used first
_MANAGERS: OrderedDict[int, FileManager] = OrderedDict()

@lru_cache
def get_kv():
    return JsonDirStore(settings.VAULT_DIR or STORAGE_DIR / "vault")

def _evict():
    # a manager mid-upload stays until its batch is written
    idle = [uid for uid, m in _MANAGERS.items() if not m.uploading]
    for uid in idle[: max(len(_MANAGERS) - settings.VAULT_CACHE_SIZE, 0)]:
        del _MANAGERS[uid]

async def manager_for(user_id: int, kv=Depends(get_kv)) -> FileManager:
    m = _MANAGERS.get(user_id)
    if m is None or m.store.kv is not kv:
        try:
            m = await run_in_threadpool(free_manager(kv, user_id).mount)
        except VaultError as e:
            raise_vault_error(e)
        _MANAGERS[user_id] = m
    _MANAGERS.move_to_end(user_id)
    _evict()
    return m

def content_disposition(filename: str) -> str:
    """attachment header that survives any filename; RFC 6266 filename* plus an ASCII fallback."""
    fallback = "".join(c if 32 <= ord(c) < 127 else "_" for c in filename)
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    value = f'attachment; filename="{fallback}"'
    quoted = quote(filename)
    if quoted != filename:
        value += f"; filename*=UTF-8''{quoted}"
    return value

class DeleteIn(BaseModel):
    ids: List[str]

def _listing(rec, include_data: bool) -> dict:
    out = rec.to_json()
    if not include_data:
        out.pop("data")
    return out

@router.get("/{user_id}/files")
def vault_list(
    folder: str | None = Query(None, pattern="^(images|videos|documents)$"),
    include_data: bool = Query(True),
    m: FileManager = Depends(manager_for),
):
    return {"items": [_listing(r, include_data) for r in m.files(folder)], "stats": m.stats.to_dict()}

@router.post("/{user_id}/files")
async def vault_upload(files: List[UploadFile] = Upload(...), m: FileManager = Depends(manager_for)):
    try:
        result = await m.upload(files)
    except VaultError as e:
        raise_vault_error(e)
    return {
        "files": [_listing(r, include_data=False) for r in result.records],
        "warnings": result.messages(),
        "stopped": result.stopped,
        "busy": result.busy,
        "stats": m.stats.to_dict(),
    }

@router.delete("/{user_id}/files")
def vault_delete(inb: DeleteIn, m: FileManager = Depends(manager_for)):
    try:
        deleted = m.delete(inb.ids)
    except VaultError as e:
        raise_vault_error(e)
    return {"deleted": deleted, "stats": m.stats.to_dict()}

@router.get("/{user_id}/files/{file_id}/download")
def vault_download(file_id: str, m: FileManager = Depends(manager_for)):
    try:
        dl = m.download(file_id)
    except VaultError as e:
        raise_vault_error(e)
    if not dl:
        raise HTTPException(404, "File not found")
    return Response(
        content=dl.content,
        media_type=dl.mime_type or "application/octet-stream",
        headers={"Content-Disposition": content_disposition(dl.filename)},
    )

@router.get("/{user_id}/stats")
def vault_stats(m: FileManager = Depends(manager_for)):
    return {**m.stats.to_dict(), "canUpload": m.can_upload}
