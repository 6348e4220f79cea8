"""File metadata, content classification and file mutations."""

from __future__ import annotations

import logging
import mimetypes
import os
import posixpath
import shutil
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Mapping
from urllib.parse import quote

from fastapi import Response, status
from fastapi.responses import RedirectResponse

from dirserve.config import Settings
from dirserve.services.errors import FileStatusError
from dirserve.utils.formatting import human_size, human_time
from dirserve.utils.paths import SandboxedRoot, resolve_request_path

logger = logging.getLogger(__name__)

RENAME_HEADER = "Rename-To"


class SimplifiedType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    TEXT = "text"


def simplify_mime_type(mimetype: str | None) -> SimplifiedType:
    """Bucket a MIME type by its primary component; anything unmatched is text."""
    lowered = (mimetype or "").lower()
    for kind in (SimplifiedType.VIDEO, SimplifiedType.AUDIO, SimplifiedType.IMAGE):
        if lowered.startswith(kind.value):
            return kind
    return SimplifiedType.TEXT


@dataclass
class FileInfo:
    """Metadata for one file or directory, built fresh for each request."""

    path: str
    is_dir: bool = False
    name: str = ""
    size: int = 0
    url: str = ""
    mod_time: datetime | None = None
    mode: int = 0
    mimetype: str = ""
    type: SimplifiedType | None = None
    content: str = ""

    @property
    def mode_string(self) -> str:
        return stat.filemode(self.mode)

    def human_size(self) -> str:
        return human_size(self.size)

    def human_mod_time(self, fmt: str) -> str:
        if self.mod_time is None:
            return ""
        return human_time(self.mod_time, fmt)

    def get_extended_file_info(self, config: Settings) -> None:
        """Fill mimetype and type; text files also get their content loaded.

        Raises OSError when a text file cannot be read.
        """
        self.mimetype = mimetypes.guess_type(self.path)[0] or ""
        self.type = simplify_mime_type(self.mimetype)

        if self.type is SimplifiedType.TEXT:
            self.read(config)

    def read(self, config: Settings) -> None:
        """Load the whole file into ``content``."""
        target = SandboxedRoot(config.root).resolve(self.path)
        with open(target, "rb") as f:
            raw = f.read()
        self.content = raw.decode("utf-8", errors="replace")

    def delete(self, config: Settings) -> int:
        """Remove the entry; directories are removed with all their contents."""
        self._refuse_root()
        target = SandboxedRoot(config.root).resolve(self.path)
        try:
            # a link to a directory is removed as a link, not followed
            if self.is_dir and not os.path.islink(target):
                shutil.rmtree(target)
            else:
                os.remove(target)
        except OSError as err:
            raise FileStatusError.from_error(err, entry=self) from err

        logger.info("Deleted %s", self.path)
        return status.HTTP_200_OK

    def rename(self, headers: Mapping[str, str], config: Settings) -> Response:
        """Rename to the name given in the Rename-To header and redirect there.

        The new name is substituted for the first occurrence of the current
        name in both the path and the URL. It is not checked for '..' or for
        collisions; the sandboxed root still bounds the destination.
        """
        new_name = headers.get(RENAME_HEADER)
        if not new_name:
            return Response(status_code=status.HTTP_400_BAD_REQUEST)

        self._refuse_root()
        root = SandboxedRoot(config.root)
        new_path = self.path.replace(self.name, new_name, 1)
        try:
            os.rename(root.resolve(self.path), root.resolve(new_path))
        except OSError as err:
            raise FileStatusError.from_error(err, entry=self) from err

        logger.info("Renamed %s -> %s", self.path, new_path)
        return RedirectResponse(
            quote(self.url.replace(self.name, new_name, 1)),
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )

    def _refuse_root(self) -> None:
        if self.path == ".":
            raise FileStatusError(
                status.HTTP_403_FORBIDDEN,
                entry=self,
                detail="The served root cannot be modified",
            )


def get_file_info(url_path: str, config: Settings) -> FileInfo:
    """Stat the entry behind a request path.

    Raises FileStatusError with the mapped status, the original OSError and
    the partially filled FileInfo when the entry cannot be opened.
    """
    root = SandboxedRoot(config.root)
    path = resolve_request_path(url_path, config.base_url)
    info = FileInfo(path=path)

    try:
        st = root.stat(path)
    except OSError as err:
        raise FileStatusError.from_error(err, entry=info) from err

    info.is_dir = stat.S_ISDIR(st.st_mode)
    info.mod_time = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
    info.name = posixpath.basename(path) if path != "." else Path(config.root).name
    info.size = st.st_size
    info.mode = st.st_mode
    info.url = url_path
    return info
