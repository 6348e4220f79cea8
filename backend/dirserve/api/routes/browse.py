"""File browsing routes: listings, single files, delete and rename."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from dirserve.api.deps import get_config
from dirserve.config import Settings
from dirserve.services.browse import serve_as_html
from dirserve.services.file_info import get_file_info

logger = logging.getLogger(__name__)
router = APIRouter()


def _url_path(config: Settings, file_path: str) -> str:
    """Decoded request path; request.url would cut it at a literal '?' or '#'."""
    return f"{config.base_url}/{file_path}"


@router.get("/{file_path:path}", include_in_schema=False)
def browse(file_path: str, request: Request, config: Settings = Depends(get_config)):
    """Listing page for directories, single-file page for everything else."""
    info = get_file_info(_url_path(config, file_path), config)
    return serve_as_html(info, request, config)


@router.delete("/{file_path:path}")
def delete_entry(file_path: str, config: Settings = Depends(get_config)):
    """Delete a file, or a directory with everything in it."""
    info = get_file_info(_url_path(config, file_path), config)
    return Response(status_code=info.delete(config))


@router.patch("/{file_path:path}")
def rename_entry(file_path: str, request: Request, config: Settings = Depends(get_config)):
    """Rename to the name in the Rename-To header; redirects to the new URL."""
    info = get_file_info(_url_path(config, file_path), config)
    return info.rename(request.headers, config)
