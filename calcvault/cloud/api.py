from typing import List
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File as Upload
from sqlalchemy.orm import Session

from calcvault.shared.db import get_db
from calcvault.shared.errors import VaultError
from calcvault.shared.http import raise_vault_error
from calcvault.cloud.schemas import FileCreate, FileOut, StorageStatsOut, UploadOut
from calcvault.cloud.service import (
    create_file, list_files, list_files_in_folder, delete_file, get_storage_stats,
)
from calcvault.cloud.store import pro_manager

router = APIRouter(prefix="/api", tags=["Cloud files"])

FOLDERS = {"images", "videos", "documents", "general"}

@router.post("/files", response_model=FileOut)
def api_create_file(inb: FileCreate, db: Session = Depends(get_db)):
    return create_file(db, **inb.model_dump())

@router.post("/files/{user_id}/upload", response_model=UploadOut)
async def api_upload_files(user_id: int, files: List[UploadFile] = Upload(...), db: Session = Depends(get_db)):
    manager = pro_manager(db, user_id)
    try:
        result = await manager.upload(files)
    except VaultError as e:
        raise_vault_error(e)
    return {
        "files": [r.to_json() for r in result.records],
        "warnings": result.messages(),
        "stopped": result.stopped,
        "busy": result.busy,
    }

@router.get("/files/{user_id}", response_model=List[FileOut])
def api_list_files(user_id: int, db: Session = Depends(get_db)):
    return list_files(db, user_id)

@router.get("/files/{user_id}/{folder}", response_model=List[FileOut])
def api_list_folder(user_id: int, folder: str, db: Session = Depends(get_db)):
    if folder not in FOLDERS:
        raise HTTPException(404, "Unknown folder")
    return list_files_in_folder(db, user_id, folder)

@router.delete("/files/{file_id}/{user_id}")
def api_delete_file(file_id: int, user_id: int, db: Session = Depends(get_db)):
    if not delete_file(db, file_id, user_id):
        raise HTTPException(404, "File not found")
    return {"success": True}

@router.get("/storage/{user_id}", response_model=StorageStatsOut)
def api_storage_stats(user_id: int, db: Session = Depends(get_db)):
    return get_storage_stats(db, user_id)
