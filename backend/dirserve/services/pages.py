"""Page rendering: Jinja2 HTML pages and their JSON equivalent."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from dirserve.config import Settings
from dirserve.schemas.files import FileItem, ListingResponse
from dirserve.services.file_info import FileInfo
from dirserve.services.listing import Listing
from dirserve.utils.formatting import human_size, human_time

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["humansize"] = human_size
templates.env.filters["humantime"] = human_time


@dataclass
class PageInfo:
    name: str
    path: str
    data: FileInfo | Listing
    config: Settings


def _file_item(info: FileInfo) -> FileItem:
    return FileItem(
        name=info.name,
        path=info.path,
        url=info.url,
        is_directory=info.is_dir,
        size_bytes=info.size,
        mode=info.mode_string,
        modified_at=info.mod_time,
        mime_type=info.mimetype or None,
        type=info.type.value if info.type else None,
        content=info.content or None,
    )


class Page:
    """A single-file or listing page ready to be written out."""

    def __init__(self, info: PageInfo):
        self.info = info

    def render_html(self, request: Request, template: str) -> HTMLResponse:
        return templates.TemplateResponse(
            request,
            f"{template}.html",
            {
                "page": self.info,
                "data": self.info.data,
                "base_url": self.info.config.base_url,
                "time_format": self.info.config.time_format,
            },
        )

    def render_json(self) -> JSONResponse:
        data = self.info.data
        if isinstance(data, Listing):
            payload = ListingResponse(
                name=data.name,
                path=data.path,
                items=[_file_item(fi) for fi in data.items],
                num_dirs=data.num_dirs,
                num_files=data.num_files,
                sort=data.sort,
                order=data.order,
                items_limited_to=data.items_limited_to,
            )
        else:
            payload = _file_item(data)
        return JSONResponse(payload.model_dump(mode="json"))
