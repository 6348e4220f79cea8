"""OS error to HTTP status translation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, status

if TYPE_CHECKING:
    from dirserve.services.file_info import FileInfo


def error_to_http_code(err: BaseException) -> int:
    """Map a filesystem error onto the HTTP status reported to the client."""
    if isinstance(err, FileNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(err, PermissionError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(err, FileExistsError):
        return status.HTTP_410_GONE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class FileStatusError(HTTPException):
    """HTTP error raised by the file services, keeping the original cause."""

    def __init__(
        self,
        status_code: int,
        error: BaseException | None = None,
        entry: FileInfo | None = None,
        detail: Any = None,
    ):
        if detail is None and error is not None:
            detail = getattr(error, "strerror", None) or str(error)
        super().__init__(status_code=status_code, detail=detail)
        self.error = error
        self.entry = entry

    @classmethod
    def from_error(cls, err: BaseException, entry: FileInfo | None = None) -> "FileStatusError":
        return cls(error_to_http_code(err), error=err, entry=entry)
