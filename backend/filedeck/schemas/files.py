"""File manager schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class FileItem(BaseModel):
    """One file or folder in a listing."""
    model_config = ConfigDict(from_attributes=True)

    name: str
    type: Literal["file", "folder"]
    size_bytes: int | None = None  # None for folders
    modified_at: datetime
    relative_path: str


class FileListResponse(BaseModel):
    items: list[FileItem]
    current_path: str


class CreateFolderRequest(BaseModel):
    path: str = ""
    name: str


class MoveRequest(BaseModel):
    """Move or rename. For rename, destination_path is the new leaf name."""
    source_path: str
    destination_path: str
    action: Literal["move", "rename"] = "move"


class ActionResponse(BaseModel):
    success: bool = True
    message: str
    path: str | None = None


class FileContentResponse(BaseModel):
    """Preview payload: binary content is base64-encoded."""
    type: Literal["text", "binary"]
    content: str
    name: str
    size: int
    mime_type: str | None = None


class StorageStats(BaseModel):
    """Storage usage in bytes. Disk fields are None when no probe succeeded."""
    used: int
    total: int | None = None
    free: int | None = None
    available: int | None = None
