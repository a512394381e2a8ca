"""Liveness endpoints for the file manager API."""

from fastapi import APIRouter

from filedeck import __version__
from filedeck.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Report that FileDeck is up and which version is serving."""
    return HealthResponse(version=__version__)


@router.get("/ping")
async def ping():
    """Bare liveness check for load balancers; touches no storage."""
    return {"status": "ok"}
