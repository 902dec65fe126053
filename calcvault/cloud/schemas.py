from datetime import datetime
from typing import List
from pydantic import Field
from calcvault.shared.schemas import CamelModel, CamelORMModel

class FileCreate(CamelModel):
    user_id: int
    name: str = Field(min_length=1, max_length=255)
    type: str = Field(pattern="^(image|video|document)$")
    size: int = Field(ge=0)
    mime_type: str = ""
    data: str
    folder: str = Field(default="general", pattern="^(images|videos|documents|general)$")
    is_compressed: bool = False
    original_size: int | None = None
    storage_type: str = Field(default="cloud", pattern="^(local|cloud)$")

class FileOut(CamelORMModel):
    id: int
    user_id: int
    name: str
    type: str
    size: int
    mime_type: str
    data: str
    folder: str
    is_compressed: bool
    original_size: int | None = None
    storage_type: str
    created_at: datetime

class StorageStatsOut(CamelModel):
    used: float
    total: float
    is_unlimited: bool
    percentage: float | None = None

class UploadOut(CamelModel):
    files: List[dict]
    warnings: List[str]
    stopped: bool = False
    busy: bool = False
