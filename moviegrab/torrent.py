"""The torrent record shared by all providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional
from urllib.parse import quote

from moviegrab.movie_properties import MovieProperties

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _udp(host: str, port: int, announce: bool = True) -> str:
    suffix = "/announce" if announce else ""
    return f"udp://{host}:{port}{suffix}"


PIRATEBAY_TRACKERS = tuple(
    _udp(host, port, announce)
    for host, port, announce in (
        ("47.ip-51-68-199.eu", 6969, True),
        ("9.rarbg.to", 2920, True),
        ("opentracker.i2p.rocks", 6969, True),
        ("tracker.coppersurfer.tk", 6969, True),
        ("tracker.cyberia.is", 6969, True),
        ("tracker.dler.org", 6969, True),
        ("tracker.internetwarriors.net", 1337, True),
        ("tracker.leechers-paradise.org", 6969, True),
        ("tracker.openbittorrent.com", 6969, True),
        ("tracker.opentrackr.org", 1337, False),
        ("tracker.pirateparty.gr", 6969, True),
    )
)

YTS_TRACKERS = tuple(
    _udp(host, port, announce)
    for host, port, announce in (
        ("open.demonii.com", 1337, True),
        ("tracker.openbittorrent.com", 80, False),
        ("tracker.coppersurfer.tk", 6969, False),
        ("glotorrents.pw", 6969, True),
        ("tracker.opentrackr.org", 1337, True),
        ("torrent.gresille.org", 80, True),
        ("p4p.arenabg.com", 1337, False),
        ("tracker.leechers-paradise.org", 6969, False),
    )
)

_FILLABLE = ("category", "file_count", "id", "leechers", "name", "seeders", "size", "magnet")


class Provider(Enum):
    """A torrent search site."""

    PIRATE_BAY = "PirateBay"
    X1337 = "1337x"
    YTS = "Yts"
    BIT_SEARCH = "BitSearch"

    @classmethod
    def all(cls) -> set["Provider"]:
        """Every known provider."""
        return set(cls)


@dataclass
class Torrent:
    """A search result, possibly merged from several providers."""

    added: datetime = EPOCH
    category: str = ""
    file_count: int = 0
    id: str = ""
    info_hash: str = ""
    leechers: int = 0
    name: str = ""
    seeders: int = 0
    size: int = 0
    provider: set[Provider] = field(default_factory=set)
    magnet: str = ""
    movie_properties: Optional[MovieProperties] = None

    def merge(self, other: "Torrent") -> None:
        """Fill empty fields from ``other`` and add its providers."""
        if self.added == EPOCH:
            self.added = other.added
        for name in _FILLABLE:
            if not getattr(self, name):
                setattr(self, name, getattr(other, name))
        if self.movie_properties is None:
            self.movie_properties = other.movie_properties
        elif other.movie_properties is not None:
            self.movie_properties.merge(other.movie_properties)
        self.provider |= other.provider


def format_magnet(info_hash: str, name: str, trackers: Iterable[str]) -> str:
    """Build a magnet link with percent-encoded trackers and display name."""
    encoded = "&tr=".join(quote(tracker, safe="") for tracker in trackers)
    return f"magnet:?xt=urn:btih:{info_hash}&tr={encoded}&dn={quote(name, safe='')}"