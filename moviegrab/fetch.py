"""HTTP helpers shared by the torrent providers."""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Optional, Union

import httpx

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """What went wrong while talking to a provider."""

    HTTP_REQUEST = "HttpRequestError"
    STATUS_CODE = "StatusCodeError"
    PARSING = "ParsingError"
    SCRAPING = "ScrapingError"


class SearchError(Exception):
    """A failed provider request or an unreadable provider response."""

    def __init__(self, kind: ErrorKind, message: str, cause: Optional[Any] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


async def log_request(request: httpx.Request) -> None:
    """Event hook that logs each outgoing request at debug level."""
    logger.debug('%s "%s"', request.method, request.url)


async def get_text(url: Union[str, httpx.URL], client: httpx.AsyncClient) -> str:
    """Fetch ``url`` and return the body; any non-2xx status is an error."""
    try:
        response = await client.get(url)
    except httpx.HTTPError as error:
        raise SearchError(ErrorKind.HTTP_REQUEST, "Request Error", error) from error

    if not response.is_success:
        raise SearchError(
            ErrorKind.STATUS_CODE,
            f'Request to "{url}" failed with {response.status_code}',
            response,
        )
    return response.text


async def get_json(url: Union[str, httpx.URL], client: httpx.AsyncClient) -> Any:
    """Fetch ``url`` and decode the body as JSON."""
    text = await get_text(url, client)
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise SearchError(ErrorKind.PARSING, "Parsing Error", error) from error