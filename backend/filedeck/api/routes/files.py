"""File manager routes: list, upload, folders, delete, move/rename, download, preview, storage."""

from __future__ import annotations

import asyncio
import base64
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse

from filedeck.api.deps import get_app_settings, get_services
from filedeck.config import Settings
from filedeck.schemas.files import (
    ActionResponse,
    CreateFolderRequest,
    FileContentResponse,
    FileItem,
    FileListResponse,
    MoveRequest,
    StorageStats,
)
from filedeck.services import Services
from filedeck.services.content_reader import TEXT

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=FileListResponse)
async def list_files(path: str = "", services: Services = Depends(get_services)):
    """List files and folders in ``path`` (root when empty)."""
    entries = await asyncio.to_thread(services.catalog.list, path)
    return FileListResponse(
        items=[FileItem.model_validate(e) for e in entries],
        current_path=path,
    )


@router.post("/upload", response_model=ActionResponse)
async def upload_file(
    file: UploadFile = File(...),
    path: str = Form(""),
    services: Services = Depends(get_services),
    settings: Settings = Depends(get_app_settings),
):
    """Store an uploaded file in ``path``, overwriting an existing one."""
    limit = settings.max_upload_bytes
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(413, f"File exceeds {settings.max_upload_mb} MB upload limit")

    rel = await asyncio.to_thread(services.files.upload, path, file.filename or "", data)
    return ActionResponse(message="File uploaded", path=rel)


@router.post("/folders", response_model=ActionResponse)
async def create_folder(body: CreateFolderRequest, services: Services = Depends(get_services)):
    rel = await asyncio.to_thread(services.files.create_folder, body.path, body.name)
    return ActionResponse(message="Folder created", path=rel)


@router.delete("", response_model=ActionResponse)
async def delete_entry(path: str, services: Services = Depends(get_services)):
    """Delete a file, or a folder with everything in it."""
    await asyncio.to_thread(services.files.delete, path)
    return ActionResponse(message="Deleted successfully")


@router.patch("", response_model=ActionResponse)
async def move_entry(body: MoveRequest, services: Services = Depends(get_services)):
    if body.action == "rename":
        rel = await asyncio.to_thread(services.files.rename, body.source_path, body.destination_path)
    else:
        rel = await asyncio.to_thread(services.files.move, body.source_path, body.destination_path)
    return ActionResponse(message="Operation successful", path=rel)


@router.get("/download")
async def download_file(path: str, services: Services = Depends(get_services)):
    target = await asyncio.to_thread(services.files.download, path)
    return FileResponse(
        target.path,
        media_type="application/octet-stream",
        filename=target.filename,
    )


@router.get("/read", response_model=FileContentResponse)
async def read_file(path: str, services: Services = Depends(get_services)):
    """File content for preview."""
    result = await asyncio.to_thread(services.reader.read, path)
    if result.kind == TEXT:
        content = result.content
    else:
        content = base64.b64encode(result.content).decode("ascii")
    return FileContentResponse(
        type=result.kind,
        content=content,
        name=result.name,
        size=result.size,
        mime_type=result.mime_type,
    )


@router.get("/storage", response_model=StorageStats)
async def storage_stats(services: Services = Depends(get_services)):
    """Bytes used under the root plus host disk capacity (best effort)."""
    snapshot = await asyncio.to_thread(services.usage.usage)
    return StorageStats(
        used=snapshot.used_bytes,
        total=snapshot.total_bytes,
        free=snapshot.free_bytes,
        available=snapshot.available_bytes,
    )
