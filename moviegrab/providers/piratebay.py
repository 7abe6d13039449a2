"""Search provider backed by the apibay JSON API."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Mapping
from urllib.parse import urlencode

from moviegrab.fetch import ErrorKind, SearchError, get_json
from moviegrab.movie_properties import Codec, MovieProperties, Quality, Source
from moviegrab.providers.base import TorrentProvider
from moviegrab.search_options import Category, MovieOptions, SearchOptions
from moviegrab.torrent import EPOCH, PIRATEBAY_TRACKERS, Provider, Torrent, format_magnet

API_URL = "https://apibay.org/q.php"

_UINT = re.compile(r"\+?[0-9]+")
_INT = re.compile(r"[+-]?[0-9]+")
_U64_MAX = 2**64 - 1
_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1


def _parse_uint(text: str) -> int:
    if not _UINT.fullmatch(text):
        return 0
    value = int(text)
    return value if value <= _U64_MAX else 0


def _parse_timestamp(text: str) -> datetime:
    seconds = int(text) if _INT.fullmatch(text) else 0
    if not _I64_MIN <= seconds <= _I64_MAX:
        seconds = 0
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return EPOCH


@dataclass(frozen=True)
class PirateBayTorrent:
    """One entry of an apibay response; every field arrives as a string."""

    id: str
    name: str
    info_hash: str
    leechers: str
    seeders: str
    num_files: str
    size: str
    username: str
    added: str
    status: str
    category: str
    imdb: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "PirateBayTorrent":
        """Read an entry; missing or non-string fields raise a parsing error."""
        values = {}
        for item in fields(cls):
            value = data.get(item.name) if isinstance(data, Mapping) else None
            if not isinstance(value, str):
                raise SearchError(
                    ErrorKind.PARSING, f"Parsing Error: invalid field `{item.name}`"
                )
            values[item.name] = value
        return cls(**values)

    def to_torrent(self) -> Torrent:
        """Convert to the common torrent record; unparsable numbers become zero."""
        return Torrent(
            added=_parse_timestamp(self.added),
            category=self.category,
            file_count=_parse_uint(self.num_files),
            id=self.id,
            info_hash=self.info_hash,
            leechers=_parse_uint(self.leechers),
            name=self.name,
            seeders=_parse_uint(self.seeders),
            size=_parse_uint(self.size),
            provider={Provider.PIRATE_BAY},
            magnet=format_magnet(self.info_hash, self.name, PIRATEBAY_TRACKERS),
            movie_properties=MovieProperties.create(
                self.imdb,
                Quality.from_name(self.name),
                Codec.from_name(self.name),
                Source.from_name(self.name),
            ),
        )


_CATEGORIES = {
    Category.ALL: "",
    Category.APPLICATIONS: "300",
    Category.AUDIO: "100",
    Category.VIDEO: "200",
    Category.GAMES: "400",
    Category.OTHER: "600",
}


class PirateBay(TorrentProvider):
    """The Pirate Bay, queried through apibay."""

    PROVIDER = Provider.PIRATE_BAY

    @staticmethod
    def format_category(category: Category) -> str:
        """The apibay category code."""
        return _CATEGORIES[category]

    @staticmethod
    def format_url(options: SearchOptions) -> str:
        """URL of a free-text search."""
        query = urlencode(
            [("q", options.query), ("cat", PirateBay.format_category(options.category))]
        )
        return f"{API_URL}?{query}"

    @staticmethod
    def format_movie_url(options: MovieOptions) -> str:
        """URL of a search by IMDB id."""
        return f"{API_URL}?{urlencode([('q', options.imdb)])}"

    @staticmethod
    def is_empty_torrent(torrent: PirateBayTorrent) -> bool:
        """Whether the entry is apibay's placeholder for "no results"."""
        return (
            torrent.id == "0"
            and torrent.size == "0"
            and torrent.category == "0"
            and torrent.num_files == "0"
            and torrent.added == "0"
        )

    async def _search_request(self, url: str) -> list[Torrent]:
        data = await get_json(url, self.http)
        if not isinstance(data, list):
            raise SearchError(ErrorKind.PARSING, "Parsing Error: expected a list")
        entries = [PirateBayTorrent.from_json(item) for item in data]
        if len(entries) == 1 and self.is_empty_torrent(entries[0]):
            return []
        return [entry.to_torrent() for entry in entries]

    async def search(self, options: SearchOptions) -> list[Torrent]:
        return await self._search_request(self.format_url(options))

    async def search_movie(self, options: MovieOptions) -> list[Torrent]:
        torrents = await self._search_request(self.format_movie_url(options))
        return [
            torrent
            for torrent in torrents
            if torrent.movie_properties is not None
            and torrent.movie_properties.imdb == options.imdb
        ]