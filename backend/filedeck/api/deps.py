"""FastAPI dependency injection: per-app services and settings."""

from __future__ import annotations

from fastapi import Request

from filedeck.config import Settings
from filedeck.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
