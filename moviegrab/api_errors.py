"""Errors reported to callers of the service."""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base class of errors the service reports to its callers."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidParamError(ApiError):
    """A request parameter has a value that is not allowed."""

    def __init__(self, param: Any) -> None:
        super().__init__(f"Incorrect param: {param}")
        self.param = str(param)


class MissingQueryError(ApiError):
    """A torrent search names neither a query nor an IMDB id."""

    def __init__(self) -> None:
        super().__init__("At least `imdb` or `query` must be defined.")


class InvalidMagnetError(ApiError):
    """A link that should be a magnet link is not one."""


class MovieFileNotFoundError(ApiError):
    """A downloaded torrent contains no movie file."""


class TorrentNotFoundError(ApiError):
    """A downloaded torrent is missing from disk."""


class ImdbNotFoundError(ApiError):
    """No movie has the requested IMDB id."""

    def __init__(self, imdb: str) -> None:
        super().__init__(f"IMDB ID not found: {imdb}")
        self.imdb = imdb