"""Request path resolution and the sandboxed filesystem root."""

from __future__ import annotations

import os
import posixpath
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def clean_path(path: str) -> str:
    """Canonicalize a relative path; '..' can never climb above the root."""
    cleaned = posixpath.normpath("/" + path.replace("\\", "/")).lstrip("/")
    return cleaned or "."


def resolve_request_path(url_path: str, base_url: str) -> str:
    """Strip the first occurrence of base_url and return a clean relative path.

    Ill-formed input degrades to whatever the canonicalization makes of it;
    the later stat call reports the real error.
    """
    path = url_path.replace(base_url, "", 1) if base_url else url_path
    return clean_path(path)


class SandboxedRoot:
    """Filesystem view rooted at one directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def resolve(self, path: str) -> Path:
        cleaned = clean_path(path)
        if cleaned == ".":
            return self.directory
        return self.directory / cleaned

    @contextmanager
    def open(self, path: str) -> Iterator[int]:
        """Open a file or directory read-only; the descriptor is always closed."""
        fd = os.open(self.resolve(path), os.O_RDONLY)
        try:
            yield fd
        finally:
            os.close(fd)

    def stat(self, path: str) -> os.stat_result:
        with self.open(path) as fd:
            return os.fstat(fd)

    @contextmanager
    def scandir(self, path: str) -> Iterator[Iterator[os.DirEntry]]:
        with os.scandir(self.resolve(path)) as entries:
            yield entries
