"""Search provider backed by the YTS JSON API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping
from urllib.parse import urlencode

from moviegrab.fetch import ErrorKind, SearchError, get_json
from moviegrab.movie_properties import Codec, MovieProperties, Quality, Source
from moviegrab.providers.base import TorrentProvider
from moviegrab.search_options import Category, MovieOptions, SearchOptions, SortColumn
from moviegrab.torrent import EPOCH, YTS_TRACKERS, Provider, Torrent, format_magnet

API_URL = "https://yts.mx/api/v2"

_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1
_U64_MAX = 2**64 - 1


def _parsing_error(what: str) -> SearchError:
    return SearchError(ErrorKind.PARSING, f"Parsing Error: {what}")


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise _parsing_error(f"expected an object for `{what}`")
    return value


def _str_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise _parsing_error(f"invalid field `{key}`")
    return value


def _int_field(data: Mapping[str, Any], key: str, *, signed: bool = False) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise _parsing_error(f"invalid field `{key}`")
    low, high = (_I64_MIN, _I64_MAX) if signed else (0, _U64_MAX)
    if not low <= value <= high:
        raise _parsing_error(f"field `{key}` out of range")
    return value


def _timestamp(seconds: int) -> datetime:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return EPOCH


@dataclass(frozen=True)
class YtsTorrent:
    """One torrent of a YTS movie, together with the movie it belongs to."""

    title: str
    imdb: str
    size_bytes: int
    peers: int
    seeds: int
    date_uploaded_unix: int
    quality: str
    hash: str
    video_codec: str
    source: str

    @property
    def name(self) -> str:
        """Display name built from the movie title and the torrent's properties."""
        return f"{self.title} [{self.quality}] [{self.source}] {self.video_codec}"

    def to_torrent(self) -> Torrent:
        """Convert to the common torrent record."""
        name = self.name
        return Torrent(
            added=_timestamp(self.date_uploaded_unix),
            category="movies",
            file_count=0,
            id=self.hash,
            info_hash=self.hash,
            leechers=self.peers,
            name=name,
            seeders=self.seeds,
            size=self.size_bytes,
            provider={Provider.YTS},
            magnet=format_magnet(self.hash, name, YTS_TRACKERS),
            movie_properties=MovieProperties.create(
                self.imdb,
                Quality.from_name(name),
                Codec.from_name(name),
                Source.from_name(name),
            ),
        )


_SORTS = {
    SortColumn.ADDED: "date_added",
    SortColumn.LEECHERS: "peers",
    SortColumn.SIZE: "",
    SortColumn.SEEDERS: "seeds",
}


class Yts(TorrentProvider):
    """YTS, a movie-only provider."""

    PROVIDER = Provider.YTS

    @staticmethod
    def format_sort(column: SortColumn) -> str:
        """The YTS sort key; sorting by size is not supported and gives ``""``."""
        return _SORTS[column]

    @staticmethod
    def format_search_url(options: SearchOptions) -> str:
        """URL of a free-text movie listing."""
        query = urlencode(
            [
                ("query_term", options.query),
                ("sort_by", Yts.format_sort(options.sort)),
                ("order_by", str(options.order)),
            ]
        )
        return f"{API_URL}/list_movies.json?{query}"

    @staticmethod
    def format_movie_url(options: MovieOptions) -> str:
        """URL of the details of one movie by IMDB id."""
        return f"{API_URL}/movie_details.json?{urlencode([('imdb_id', options.imdb)])}"

    @staticmethod
    def movie_to_torrents(movie: Mapping[str, Any]) -> list[YtsTorrent]:
        """Flatten a YTS movie object into its torrents."""
        movie = _mapping(movie, "movie")
        title = _str_field(movie, "title_long")
        imdb = _str_field(movie, "imdb_code")
        torrents = movie.get("torrents")
        if torrents is None:
            return []
        if not isinstance(torrents, list):
            raise _parsing_error("invalid field `torrents`")
        result = []
        for item in torrents:
            data = _mapping(item, "torrents")
            result.append(
                YtsTorrent(
                    title=title,
                    imdb=imdb,
                    size_bytes=_int_field(data, "size_bytes"),
                    peers=_int_field(data, "peers"),
                    seeds=_int_field(data, "seeds"),
                    date_uploaded_unix=_int_field(data, "date_uploaded_unix", signed=True),
                    quality=_str_field(data, "quality"),
                    hash=_str_field(data, "hash"),
                    video_codec=_str_field(data, "video_codec"),
                    source=_str_field(data, "type"),
                )
            )
        return result

    async def search(self, options: SearchOptions) -> list[Torrent]:
        if options.category not in (Category.ALL, Category.VIDEO):
            return []
        response = _mapping(await get_json(self.format_search_url(options), self.http), "response")
        data = _mapping(response.get("data"), "data")
        movies = data.get("movies")
        if movies is None:
            return []
        if not isinstance(movies, list):
            raise _parsing_error("invalid field `movies`")
        return [
            torrent.to_torrent()
            for movie in movies
            for torrent in self.movie_to_torrents(movie)
        ]

    async def search_movie(self, options: MovieOptions) -> list[Torrent]:
        response = _mapping(await get_json(self.format_movie_url(options), self.http), "response")
        data = _mapping(response.get("data"), "data")
        return [torrent.to_torrent() for torrent in self.movie_to_torrents(data.get("movie"))]