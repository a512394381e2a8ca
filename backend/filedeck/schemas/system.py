"""System schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness payload returned by /health."""
    status: str = "ok"
    version: str
    service: str = "filedeck"
