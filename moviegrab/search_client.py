"""Searching several torrent providers at once."""

from __future__ import annotations

import asyncio
from typing import Iterable, Optional

import httpx

from moviegrab.fetch import log_request
from moviegrab.providers.base import ProviderResponse, TorrentProvider
from moviegrab.providers.bitsearch import BitSearch
from moviegrab.providers.piratebay import PirateBay
from moviegrab.providers.yts import Yts
from moviegrab.search_options import MovieOptions, SearchOptions
from moviegrab.torrent import Provider

_PROVIDER_TYPES: dict[Provider, type[TorrentProvider]] = {
    Provider.PIRATE_BAY: PirateBay,
    Provider.YTS: Yts,
    Provider.BIT_SEARCH: BitSearch,
}


class TorrentClient:
    """Runs a search on the chosen providers concurrently."""

    def __init__(self, http: Optional[httpx.AsyncClient] = None) -> None:
        self._owns_http = http is None
        self.http = http if http is not None else httpx.AsyncClient(
            event_hooks={"request": [log_request]}, timeout=30.0
        )

    def _providers(self, providers: Optional[Iterable[Provider]]) -> list[TorrentProvider]:
        selected = set(providers or ()) or Provider.all()
        return [
            _PROVIDER_TYPES[provider](self.http)
            for provider in Provider
            if provider in selected and provider in _PROVIDER_TYPES
        ]

    async def search(
        self, options: SearchOptions, providers: Optional[Iterable[Provider]] = None
    ) -> list[ProviderResponse]:
        """Free-text search; no providers means all of them, an empty query finds nothing."""
        if not options.query:
            return []
        return list(
            await asyncio.gather(
                *(provider.search_provider(options) for provider in self._providers(providers))
            )
        )

    async def search_movie(
        self, options: MovieOptions, providers: Optional[Iterable[Provider]] = None
    ) -> list[ProviderResponse]:
        """Movie search; no providers means all of them, an empty IMDB id finds nothing."""
        if not options.imdb:
            return []
        return list(
            await asyncio.gather(
                *(
                    provider.search_movies_provider(options)
                    for provider in self._providers(providers)
                )
            )
        )

    async def search_all(self, options: SearchOptions) -> list[ProviderResponse]:
        """Free-text search on every provider."""
        return await self.search(options, Provider.all())

    async def search_movie_all(self, options: MovieOptions) -> list[ProviderResponse]:
        """Movie search on every provider."""
        return await self.search_movie(options, Provider.all())

    async def aclose(self) -> None:
        """Close the HTTP client if this object created it."""
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "TorrentClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()