"""The interface every torrent search provider implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Optional

import httpx

from moviegrab.fetch import SearchError
from moviegrab.search_options import MovieOptions, SearchOptions
from moviegrab.torrent import Provider, Torrent


@dataclass
class ProviderResponse:
    """Outcome of one provider's search: its torrents, or the error it hit."""

    provider: Provider
    torrents: list[Torrent] = field(default_factory=list)
    error: Optional[SearchError] = None


class TorrentProvider(ABC):
    """A search site that returns torrents for a query or a movie."""

    PROVIDER: ClassVar[Provider]

    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http

    @abstractmethod
    async def search(self, options: SearchOptions) -> list[Torrent]:
        """Search by free text."""

    @abstractmethod
    async def search_movie(self, options: MovieOptions) -> list[Torrent]:
        """Search for one movie."""

    async def search_provider(self, options: SearchOptions) -> ProviderResponse:
        """Run :meth:`search`, capturing a search error in the response."""
        try:
            torrents = await self.search(options)
        except SearchError as error:
            return ProviderResponse(self.PROVIDER, error=error)
        return ProviderResponse(self.PROVIDER, torrents)

    async def search_movies_provider(self, options: MovieOptions) -> ProviderResponse:
        """Run :meth:`search_movie`, capturing a search error in the response."""
        try:
            torrents = await self.search_movie(options)
        except SearchError as error:
            return ProviderResponse(self.PROVIDER, error=error)
        return ProviderResponse(self.PROVIDER, torrents)