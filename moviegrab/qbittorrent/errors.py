"""Errors reported by the qBittorrent Web API client."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Category of a qBittorrent client failure."""

    HTTP_REQUEST_ERROR = "HttpRequestError"
    INCORRECT_LOGIN = "IncorrectLogin"
    TORRENT_ADD_ERROR = "TorrentAddError"
    BAD_PARAMETERS = "BadParameters"
    REQUEST_ERROR = "RequestError"
    TORRENT_NOT_FOUND = "TorrentNotFound"
    TORRENT_NOT_DOWNLOADING = "TorrentNotDownloading"
    CATEGORY_DOES_NOT_EXIST = "CategoryDoesNotExist"
    SERDE_ERROR = "SerdeError"


def _describe(kind: ErrorKind, detail: Any) -> str:
    if kind is ErrorKind.HTTP_REQUEST_ERROR:
        return f"RequestError: {detail}"
    if kind is ErrorKind.BAD_PARAMETERS:
        return f"Bad Parameter: {detail}"
    if kind is ErrorKind.SERDE_ERROR:
        return f"SerdeError: {detail}"
    return kind.value


class QbittorrentError(Exception):
    """A failed call to qBittorrent.

    ``detail`` carries the offending parameter for bad parameters, or the
    underlying error for request and decoding failures.
    """

    def __init__(self, kind: ErrorKind, message: str, detail: Optional[Any] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        return f"<{_describe(self.kind, self.detail)}>: {self.message}"