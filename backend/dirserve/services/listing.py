"""Directory listings with sort, order and limit handling."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Mapping, Protocol
from urllib.parse import quote

from dirserve.config import Settings
from dirserve.services.file_info import FileInfo
from dirserve.utils.paths import SandboxedRoot

logger = logging.getLogger(__name__)

SORT_BY_NAME = "name"
SORT_BY_NAME_DIR_FIRST = "namedirfirst"
SORT_BY_SIZE = "size"
SORT_BY_TIME = "time"

SORT_KEYS = (SORT_BY_NAME, SORT_BY_NAME_DIR_FIRST, SORT_BY_SIZE, SORT_BY_TIME)
SORT_ORDERS = ("asc", "desc")

DEFAULT_SORT = SORT_BY_NAME_DIR_FIRST
DEFAULT_ORDER = "asc"


class DirEntryLike(Protocol):
    name: str

    def is_dir(self, *, follow_symlinks: bool = True) -> bool: ...

    def stat(self, *, follow_symlinks: bool = True): ...


@dataclass
class Listing:
    """All entries of one directory plus the sort state of the request."""

    name: str
    path: str
    items: list[FileInfo] = field(default_factory=list)
    num_dirs: int = 0
    num_files: int = 0
    sort: str = ""
    order: str = ""
    items_limited_to: int = 0

    def apply_sort(self) -> None:
        """Sort items in place by ``sort``; 'desc' reverses the result."""
        reverse = self.order == "desc"

        if self.sort == SORT_BY_NAME:
            self.items.sort(key=lambda fi: fi.name.lower(), reverse=reverse)
        elif self.sort == SORT_BY_NAME_DIR_FIRST:
            self.items.sort(key=lambda fi: (not fi.is_dir, fi.name.lower()), reverse=reverse)
        elif self.sort == SORT_BY_SIZE:
            self.items.sort(key=lambda fi: (not fi.is_dir, fi.size), reverse=reverse)
        elif self.sort == SORT_BY_TIME:
            self.items.sort(
                key=lambda fi: fi.mod_time or datetime.min.replace(tzinfo=timezone.utc),
                reverse=reverse,
            )

    def apply_limit(self, limit: int) -> None:
        if 0 < limit <= len(self.items):
            self.items = self.items[:limit]
            self.items_limited_to = limit


@dataclass
class SortOptions:
    sort: str
    order: str
    limit: int = 0
    cookies: dict[str, str] = field(default_factory=dict)  # values to remember


def handle_sort_order(query: Mapping[str, str], cookies: Mapping[str, str]) -> SortOptions:
    """Read sort/order/limit from the query, falling back to remembered cookies.

    Raises ValueError for an unknown sort key or order, or a non-integer limit.
    """
    sort = query.get("sort", "")
    order = query.get("order", "")
    limit_query = query.get("limit", "")
    remember: dict[str, str] = {}

    if not sort:
        sort = cookies.get("sort") or DEFAULT_SORT
        if sort not in SORT_KEYS:
            sort = DEFAULT_SORT
    elif sort in SORT_KEYS:
        remember["sort"] = sort
    else:
        raise ValueError(f"Unknown sort key: {sort!r}")

    if not order:
        order = cookies.get("order") or DEFAULT_ORDER
        if order not in SORT_ORDERS:
            order = DEFAULT_ORDER
    elif order in SORT_ORDERS:
        remember["order"] = order
    else:
        raise ValueError(f"Unknown sort order: {order!r}")

    limit = 0
    if limit_query:
        try:
            limit = int(limit_query)
        except ValueError:
            raise ValueError(f"Invalid limit: {limit_query!r}") from None

    return SortOptions(sort=sort, order=order, limit=limit, cookies=remember)


def directory_listing(entries: Iterable[DirEntryLike], url_path: str) -> Listing:
    """Convert raw directory entries into a Listing.

    Directory names get a trailing '/'. Every child URL is prefixed with
    './' so names containing ':' are not taken for a URL scheme.
    """
    items: list[FileInfo] = []
    dir_count = file_count = 0

    for entry in entries:
        is_dir = entry.is_dir(follow_symlinks=False)
        name = entry.name
        st = entry.stat(follow_symlinks=False)

        if is_dir:
            name += "/"
            dir_count += 1
        else:
            file_count += 1

        items.append(
            FileInfo(
                path=posixpath.normpath(posixpath.join(url_path, entry.name)),
                is_dir=is_dir,
                name=name,
                size=st.st_size,
                url="./" + quote(name),
                mod_time=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                mode=st.st_mode,
            )
        )

    base = posixpath.basename(url_path)
    return Listing(
        name=base if base and base != "." else "/",
        path=url_path,
        items=items,
        num_dirs=dir_count,
        num_files=file_count,
    )


def load_directory_contents(info: FileInfo, config: Settings) -> Listing:
    """Read every entry of the directory behind ``info``.

    OSError propagates to the caller.
    """
    with SandboxedRoot(config.root).scandir(info.path) as entries:
        return directory_listing(entries, info.path)
