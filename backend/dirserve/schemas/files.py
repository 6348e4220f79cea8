"""File schemas: JSON form of single-file and listing pages."""

from datetime import datetime

from pydantic import BaseModel


class FileItem(BaseModel):
    """File metadata for single-file pages and listings."""
    name: str
    path: str
    url: str
    is_directory: bool = False
    size_bytes: int
    mode: str
    modified_at: datetime | None = None
    mime_type: str | None = None
    type: str | None = None
    content: str | None = None  # text files only


class ListingResponse(BaseModel):
    """One directory listing."""
    name: str
    path: str
    items: list[FileItem] = []
    num_dirs: int
    num_files: int
    sort: str
    order: str
    items_limited_to: int = 0
