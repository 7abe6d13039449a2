"""Torrent search across providers, merged, filtered and sorted."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from moviegrab.api_errors import ImdbNotFoundError, MissingQueryError
from moviegrab.context import Context
from moviegrab.movie_properties import Codec, Quality, Source
from moviegrab.search_options import Category, MovieOptions, Order, SearchOptions, SortColumn
from moviegrab.torrent import Provider, Torrent

logger = logging.getLogger(__name__)

_DESCENDING = Order.parse("descending")


@dataclass
class SearchTorrentsParameters:
    """What to search for and how to narrow and order the results."""

    query: Optional[str] = None
    imdb: Optional[str] = None
    category: Category = Category.ALL
    sort: SortColumn = SortColumn.SEEDERS
    order: Order = _DESCENDING
    limit: int = 0
    quality: list[Quality] = field(default_factory=list)
    codec: list[Codec] = field(default_factory=list)
    source: list[Source] = field(default_factory=list)
    providers: set[Provider] = field(default_factory=set)


@dataclass(frozen=True)
class ProviderError:
    """A provider whose search failed, and why."""

    provider: Provider
    error: str


@dataclass
class SearchResponse:
    """Found torrents and the providers that failed."""

    torrents: list[Torrent]
    errors: list[ProviderError]


def _describe(error: BaseException) -> str:
    kind = getattr(error, "kind", None)
    label = kind.name if isinstance(kind, Enum) else type(error).__name__
    return f"{label}: {error}"


def _wanted(torrent: Torrent, params: SearchTorrentsParameters) -> bool:
    props = torrent.movie_properties
    if props is None:
        return False
    if params.source and props.source not in params.source:
        return False
    if params.codec and props.codec not in params.codec:
        return False
    if params.quality and props.quality not in params.quality:
        return False
    return True


_SORT_KEYS = {
    SortColumn.ADDED: lambda t: t.added,
    SortColumn.LEECHERS: lambda t: t.leechers,
    SortColumn.SEEDERS: lambda t: t.seeders,
    SortColumn.SIZE: lambda t: t.size,
}


def collect_torrents(
    responses: Iterable[Any], params: SearchTorrentsParameters
) -> SearchResponse:
    """Merge torrents by info hash, drop failed providers into errors, filter and sort."""
    grouped: dict[str, Torrent] = {}
    errors: list[ProviderError] = []

    for response in responses:
        error = getattr(response, "error", None)
        torrents = response.torrents
        if error is None and isinstance(torrents, BaseException):
            error = torrents
        if error is not None:
            logger.error("Error:\n%r", error)
            errors.append(ProviderError(response.provider, _describe(error)))
            continue
        for torrent in torrents:
            existing = grouped.get(torrent.info_hash)
            if existing is None:
                grouped[torrent.info_hash] = torrent
            else:
                existing.merge(torrent)

    found = [t for t in grouped.values() if _wanted(t, params)]
    found.sort(key=_SORT_KEYS[params.sort])
    if str(params.order) == str(_DESCENDING):
        found.reverse()
    if params.limit:
        found = found[: params.limit]
    return SearchResponse(torrents=found, errors=errors)


async def search_torrents(context: Context, params: SearchTorrentsParameters) -> SearchResponse:
    """Search by free text, or by IMDB id through the movie's title."""
    if params.query is not None:
        options = SearchOptions(params.query, params.category, params.sort, params.order)
        responses = await context.torrent_client.search(options, params.providers)
    elif params.imdb is not None:
        movie = await context.movie_info_client.from_imdb(params.imdb)
        if movie is None:
            raise ImdbNotFoundError(params.imdb)
        options = MovieOptions(params.imdb, movie.format(), params.sort, params.order)
        responses = await context.torrent_client.search_movie(options, params.providers)
    else:
        raise MissingQueryError()
    return collect_torrents(responses, params)