"""dirserve configuration: Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "dirserve"
    debug: bool = False
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Browsing
    base_url: str = "/files"
    root: str = "."  # sandboxed directory served under base_url
    time_format: str = "%Y-%m-%d %H:%M:%S"

    uvicorn_workers: int = 1

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="DIRSERVE_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:5173"]

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, value: str) -> str:
        """Leading slash, no trailing slash; the site root becomes ''."""
        value = value.strip().strip("/")
        return f"/{value}" if value else ""

    @model_validator(mode="after")
    def _resolve_root(self) -> "Settings":
        """Ensure the served root is absolute."""
        self.root = str(Path(self.root).expanduser().resolve())
        return self

    @property
    def cookie_scope(self) -> str:
        return self.base_url or "/"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
