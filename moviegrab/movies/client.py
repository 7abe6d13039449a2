"""Client of the movie information API."""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from moviegrab.fetch import log_request
from moviegrab.movies.models import MovieInfo, TmdbId

BASE_URL = "https://api.radarr.video/v1/"


class MovieInfoError(Exception):
    """A failed request to the movie information API or an unreadable answer."""

    def __init__(self, cause: Any) -> None:
        super().__init__(f"RequestError: {cause}")
        self.cause = cause


class MovieInfoClient:
    """Looks up movies by TMDB or IMDB id; successful answers are kept and reused."""

    def __init__(self, http: Optional[httpx.AsyncClient] = None) -> None:
        self._owns_http = http is None
        self.http = http if http is not None else httpx.AsyncClient(
            event_hooks={"request": [log_request]}, timeout=30.0
        )
        self._cache: dict[str, tuple[int, str]] = {}

    async def _get(self, path: str) -> tuple[int, str]:
        url = BASE_URL + path
        cached = self._cache.get(url)
        if cached is not None:
            return cached
        try:
            response = await self.http.get(url)
        except httpx.HTTPError as error:
            raise MovieInfoError(error) from error
        result = (response.status_code, response.text)
        if response.is_success:
            self._cache[url] = result
        return result

    async def from_imdb(self, imdb: str) -> Optional[MovieInfo]:
        """The movie with this IMDB id, or ``None`` if there is none."""
        _, body = await self._get(f"movie/imdb/{imdb}")
        try:
            data = json.loads(body)
            if not isinstance(data, list):
                raise ValueError("expected a list of movies")
            movies = [MovieInfo.from_json(item) for item in data]
        except ValueError as error:
            raise MovieInfoError(error) from error
        return movies[0] if movies else None

    async def from_tmdb(self, tmdb: TmdbId) -> Optional[MovieInfo]:
        """The movie with this TMDB id, or ``None`` when the API answers with a client error."""
        status, body = await self._get(f"movie/{tmdb}")
        if 400 <= status < 500:
            return None
        try:
            return MovieInfo.from_json(json.loads(body))
        except ValueError as error:
            raise MovieInfoError(error) from error

    async def aclose(self) -> None:
        """Close the HTTP client if this object created it."""
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "MovieInfoClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()