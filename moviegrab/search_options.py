"""Search parameters for torrent providers and parsing of their text forms."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SearchOption(Enum):
    """The search parameter that failed to parse."""

    CATEGORY = "category"
    ORDER = "order"
    SORT = "sort"

    def __str__(self) -> str:
        return self.value


class InvalidOptionError(ValueError):
    """Raised when a search parameter cannot be parsed from text."""

    def __init__(self, option: SearchOption) -> None:
        super().__init__(f"invalid {option}")
        self.option = option


class Category(Enum):
    """Broad content category of a torrent search."""

    ALL = "all"
    AUDIO = "audio"
    VIDEO = "video"
    APPLICATIONS = "applications"
    GAMES = "games"
    OTHER = "other"

    @classmethod
    def parse(cls, text: str) -> "Category":
        """Parse a category name, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise InvalidOptionError(SearchOption.CATEGORY) from None


_ORDER_ALIASES = {
    "a": "asc",
    "asc": "asc",
    "ascending": "asc",
    "d": "desc",
    "desc": "desc",
    "descending": "desc",
}


class Order(Enum):
    """Sort direction."""

    DESCENDING = "desc"
    ASCENDING = "asc"

    @classmethod
    def parse(cls, text: str) -> "Order":
        """Parse an order such as ``asc``, ``d`` or ``descending``, ignoring case."""
        value = _ORDER_ALIASES.get(text.lower())
        if value is None:
            raise InvalidOptionError(SearchOption.ORDER)
        return cls(value)

    def __str__(self) -> str:
        return self.value


_SORT_ALIASES = {
    "time": "added",
    "date": "added",
    "added": "added",
    "size": "size",
    "leechers": "leechers",
    "seeders": "seeders",
}


class SortColumn(Enum):
    """Column that search results are sorted by."""

    SEEDERS = "seeders"
    ADDED = "added"
    SIZE = "size"
    LEECHERS = "leechers"

    @classmethod
    def parse(cls, text: str) -> "SortColumn":
        """Parse a sort column name, ignoring case; ``time`` and ``date`` mean added."""
        value = _SORT_ALIASES.get(text.lower())
        if value is None:
            raise InvalidOptionError(SearchOption.SORT)
        return cls(value)


@dataclass(frozen=True)
class SearchOptions:
    """A free-text torrent search."""

    query: str
    category: Category = Category.ALL
    sort: SortColumn = SortColumn.SEEDERS
    order: Order = Order.DESCENDING


@dataclass(frozen=True)
class MovieOptions:
    """A torrent search for one movie, identified by its IMDB id."""

    imdb: str
    title: Optional[str] = None
    sort: SortColumn = SortColumn.SEEDERS
    order: Order = Order.DESCENDING