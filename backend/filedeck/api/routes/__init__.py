"""API route registration."""

from fastapi import APIRouter

from filedeck.api.routes import chat, files, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
