"""FastAPI dependency injection: per-app settings."""

from __future__ import annotations

from fastapi import Request

from dirserve.config import Settings


def get_config(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings
