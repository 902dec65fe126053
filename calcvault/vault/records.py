from typing import Literal
from pydantic import BaseModel, ConfigDict, Field

FileKind = Literal["image", "video", "document"]

# cloud tier groups files into one folder per kind
FOLDERS: dict[str, str] = {"image": "images", "video": "videos", "document": "documents"}

def classify(mime_type: str | None) -> FileKind:
    mime = (mime_type or "").lower()
    if mime.startswith("image/"):
        return "image"
    if mime.startswith("video/"):
        return "video"
    return "document"

def folder_for(kind: str) -> str:
    return FOLDERS.get(kind, "general")

class FileRecord(BaseModel):
    """
    One stored file. Serialized with the camelCase keys the vault document
    has always used (mimeType, userId). Immutable once built.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    type: FileKind
    size: int
    mime_type: str = Field(alias="mimeType")
    data: str
    user_id: int = Field(alias="userId")

    # ingestion bookkeeping, not part of the stored document
    compressed: bool = Field(default=False, exclude=True)
    original_size: int | None = Field(default=None, exclude=True)

    @property
    def folder(self) -> str:
        return folder_for(self.type)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)
