"""FileDeck configuration: Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "FileDeck"
    debug: bool = False
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Storage paths (relative resolved from backend/ at runtime)
    storage_root: str = "./storage"
    chat_file: str = "./data/chat.json"

    # Uploads are read into memory, so keep this bounded
    max_upload_mb: int = 100

    # Disk free-space probe
    probe_timeout_seconds: float = 5.0

    uvicorn_workers: int = 1

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="FILEDECK_",
        extra="ignore",
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        # Env values arrive undecoded: either a JSON list or "a,b,c"
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:3000"]

    @field_validator("probe_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("probe_timeout_seconds must be positive")
        return value

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Ensure storage paths are absolute."""
        base = Path(__file__).resolve().parent.parent  # backend/
        for field in ("storage_root", "chat_file"):
            val = getattr(self, field)
            if not Path(val).is_absolute():
                setattr(self, field, str(base / val))
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
