"""Search provider that scrapes the BitSearch result pages."""

from __future__ import annotations

import re
import string
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlencode

from bs4 import BeautifulSoup
from bs4.element import Tag

from moviegrab.fetch import ErrorKind, SearchError, get_text
from moviegrab.movie_properties import Codec, MovieProperties, Quality, Source
from moviegrab.providers.base import TorrentProvider
from moviegrab.round_robin import RoundRobin
from moviegrab.search_options import Category, MovieOptions, SearchOptions, SortColumn
from moviegrab.titles import is_title_match
from moviegrab.torrent import EPOCH, Provider, Torrent

BITSEARCH_APIS = (
    "https://bitsearch.to/search",
    "https://solidtorrents.to/search",
)

_ROUND_ROBIN = RoundRobin(BITSEARCH_APIS)
_INFO_HASH = re.compile(r"urn:btih:([A-F\d]+)")
_UINT = re.compile(r"\+?[0-9]+")
_U64_MAX = 2**64 - 1

_CATEGORIES = {
    Category.ALL: "",
    Category.APPLICATIONS: "5",
    Category.AUDIO: "7",
    Category.VIDEO: "1",
    Category.GAMES: "6",
    Category.OTHER: "",
}

_SORTS = {
    SortColumn.ADDED: "date",
    SortColumn.LEECHERS: "leechers",
    SortColumn.SIZE: "size",
    SortColumn.SEEDERS: "seeders",
}

_UNITS = {
    "b": 1,
    "k": 10**3,
    "kb": 10**3,
    "m": 10**6,
    "mb": 10**6,
    "g": 10**9,
    "gb": 10**9,
    "t": 10**12,
    "tb": 10**12,
    "p": 10**15,
    "pb": 10**15,
    "ki": 2**10,
    "kib": 2**10,
    "mi": 2**20,
    "mib": 2**20,
    "gi": 2**30,
    "gib": 2**30,
    "ti": 2**40,
    "tib": 2**40,
    "pi": 2**50,
    "pib": 2**50,
}


def _parse_byte_size(text: str) -> int:
    """Read sizes such as ``1.5 GB`` or ``700 MiB`` as a byte count."""
    if _UINT.fullmatch(text) and int(text) <= _U64_MAX:
        return int(text)
    number = ""
    for ch in text:
        if ch in string.digits or ch == ".":
            number += ch
        else:
            break
    value = float(number)
    suffix = text.lstrip(string.whitespace + string.digits + ".")
    unit = _UNITS.get(suffix.lower())
    if unit is None:
        raise ValueError(f"unknown size unit {suffix!r}")
    return max(0, min(int(value * unit), _U64_MAX))


def _parse_uint(text: str, message: str) -> int:
    if not _UINT.fullmatch(text) or int(text) > _U64_MAX:
        raise SearchError(ErrorKind.SCRAPING, message)
    return int(text)


def _parse_date(text: str) -> datetime:
    try:
        parsed = datetime.strptime(f"{text} 00:00", "%b %d, %Y %H:%M")
    except ValueError:
        return EPOCH
    return parsed.replace(tzinfo=timezone.utc)


def _element_text(element: Optional[Tag]) -> str:
    return "" if element is None else element.get_text().strip()


def _scraping_error(message: str) -> SearchError:
    return SearchError(ErrorKind.SCRAPING, message)


class BitSearch(TorrentProvider):
    """BitSearch and its mirror, used in turn."""

    PROVIDER = Provider.BIT_SEARCH

    @staticmethod
    def format_category(category: Category) -> str:
        """The BitSearch category code."""
        return _CATEGORIES[category]

    @staticmethod
    def expand_number(number: str) -> str:
        """Expand abbreviated counts with one decimal, such as ``1.2K``, to digits."""
        if "K" in number:
            return number.replace("K", "00").replace(".", "")
        if "M" in number:
            return number.replace("M", "00000").replace(".", "")
        if "B" in number:
            return number.replace("B", "00000000").replace(".", "")
        return number

    @staticmethod
    def format_sort(column: SortColumn) -> str:
        """The BitSearch sort key."""
        return _SORTS[column]

    @staticmethod
    def format_url(options: SearchOptions) -> str:
        """URL of a search on the next mirror in rotation."""
        query = urlencode(
            [
                ("q", options.query),
                ("sort", BitSearch.format_sort(options.sort)),
                ("order", str(options.order)),
                ("category", BitSearch.format_category(options.category)),
            ]
        )
        return f"{_ROUND_ROBIN.next_url()}?{query}"

    @staticmethod
    def parse_results(html: str) -> list[Torrent]:
        """Scrape the torrents from a result page; rows without a size are skipped."""
        soup = BeautifulSoup(html, "html.parser")
        torrents = []
        for row in soup.select(".search-result"):
            stats = row.select(".stats div")

            def stat(index: int) -> str:
                return _element_text(stats[index]) if index < len(stats) else ""

            size = stat(1)
            seeders = BitSearch.expand_number(stat(2))
            leechers = BitSearch.expand_number(stat(3))
            added = _parse_date(stat(4))

            if not size:
                continue

            link = row.select_one(".dl-magnet")
            if link is None:
                raise _scraping_error("Could not find the magnet link")
            href = link.get("href")
            if href is None:
                raise _scraping_error("Magnet link does not have an href attribute")
            magnet = str(href).replace("dn=%5BBitsearch.to%5D+", "dn=")

            found = _INFO_HASH.search(magnet)
            if found is None:
                raise _scraping_error("Could not find the info hash in the magnet link")
            info_hash = found.group(0).replace("urn:btih:", "")

            title = row.select_one("h5 a")
            if title is None:
                raise _scraping_error("Could not find the name in the html response")
            name = title.get_text()

            category = _element_text(row.select_one(".category"))
            leechers_count = _parse_uint(leechers, "Leechers is not a number")
            seeders_count = _parse_uint(seeders, "Seeders is not a number")
            try:
                size_bytes = _parse_byte_size(size)
            except ValueError:
                raise _scraping_error(
                    "Size is not a number, or cannot be parsed by ByteSize"
                ) from None

            torrents.append(
                Torrent(
                    added=added,
                    category=category,
                    file_count=0,
                    id=info_hash,
                    info_hash=info_hash,
                    leechers=leechers_count,
                    name=name,
                    seeders=seeders_count,
                    size=size_bytes,
                    provider={Provider.BIT_SEARCH},
                    magnet=magnet,
                    movie_properties=MovieProperties.create(
                        "",
                        Quality.from_name(name),
                        Codec.from_name(name),
                        Source.from_name(name),
                    ),
                )
            )
        return torrents

    async def search(self, options: SearchOptions) -> list[Torrent]:
        body = await get_text(self.format_url(options), self.http)
        return self.parse_results(body)

    async def search_movie(self, options: MovieOptions) -> list[Torrent]:
        """Search by the movie's title and keep releases whose names match it."""
        if not options.title:
            return []
        search = SearchOptions(options.title, Category.VIDEO, options.sort, options.order)
        torrents = await self.search(search)
        return [t for t in torrents if is_title_match(options.title, t.name)]