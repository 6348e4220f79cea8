"""Dispatch a resolved entry to the single-file or listing page."""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import Request, Response, status
from fastapi.responses import RedirectResponse

from dirserve.config import Settings
from dirserve.services.errors import FileStatusError
from dirserve.services.file_info import FileInfo
from dirserve.services.listing import handle_sort_order, load_directory_contents
from dirserve.services.pages import Page, PageInfo

logger = logging.getLogger(__name__)


def wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "")


def serve_as_html(info: FileInfo, request: Request, config: Settings) -> Response:
    """Render the listing page for directories, the single-file page otherwise."""
    if info.is_dir:
        return serve_listing(info, request, config)
    return serve_single_file(info, request, config)


def serve_single_file(info: FileInfo, request: Request, config: Settings) -> Response:
    try:
        info.get_extended_file_info(config)
    except OSError as err:
        raise FileStatusError.from_error(err, entry=info) from err

    page = Page(PageInfo(name=info.path, path=info.path, data=info, config=config))
    if wants_json(request):
        return page.render_json()
    return page.render_html(request, "single")


def serve_listing(info: FileInfo, request: Request, config: Settings) -> Response:
    # Child links are relative, so the directory URL must end with '/'
    if not info.url.endswith("/"):
        target = quote(info.url) + "/"
        query = request.scope.get("query_string", b"").decode("latin-1")
        if query:
            target += "?" + query
        return RedirectResponse(target, status_code=status.HTTP_301_MOVED_PERMANENTLY)

    try:
        listing = load_directory_contents(info, config)
    except OSError as err:
        logger.error("Failed to load directory %s: %s", info.path, err)
        raise FileStatusError.from_error(err, entry=info) from err

    try:
        options = handle_sort_order(request.query_params, request.cookies)
    except ValueError as err:
        raise FileStatusError(status.HTTP_400_BAD_REQUEST, error=err, entry=info) from err

    listing.sort = options.sort
    listing.order = options.order
    listing.apply_sort()
    listing.apply_limit(options.limit)

    page = Page(PageInfo(name=listing.name, path=listing.path, data=listing, config=config))
    if wants_json(request):
        response = page.render_json()
    else:
        response = page.render_html(request, "listing")

    for key, value in options.cookies.items():
        response.set_cookie(
            key,
            value,
            path=config.cookie_scope,
            secure=request.url.scheme == "https",
        )
    return response
