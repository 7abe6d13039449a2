"""Movie metadata records as returned by the movie information API."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

TmdbId = int

_U16 = (0, 2**16 - 1)
_U32 = (0, 2**32 - 1)
_I32 = (-(2**31), 2**31 - 1)
_FRACTION = re.compile(r"\.(\d+)")

T = TypeVar("T")


def _object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for `{what}`")
    return data


def _field(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"missing field `{key}`")
    return data[key]


def _str(data: Mapping[str, Any], key: str) -> str:
    value = _field(data, key)
    if not isinstance(value, str):
        raise ValueError(f"invalid field `{key}`: expected a string")
    return value


def _opt_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"invalid field `{key}`: expected a string")
    return value


def _int(data: Mapping[str, Any], key: str, bounds: tuple[int, int]) -> int:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"invalid field `{key}`: expected an integer")
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"field `{key}` out of range")
    return value


def _float(data: Mapping[str, Any], key: str) -> float:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"invalid field `{key}`: expected a number")
    return float(value)


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = _field(data, key)
    if not isinstance(value, list):
        raise ValueError(f"invalid field `{key}`: expected a list")
    return value


def _items(data: Mapping[str, Any], key: str, read: Callable[[Any], T]) -> list[T]:
    return [read(item) for item in _list(data, key)]


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    values = _list(data, key)
    if not all(isinstance(value, str) for value in values):
        raise ValueError(f"invalid field `{key}`: expected strings")
    return list(values)


def _parse_datetime(text: str) -> datetime:
    normalized = text
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    normalized = _FRACTION.sub(
        lambda m: "." + (m.group(1) + "000000")[:6], normalized, count=1
    )
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        raise ValueError(f"invalid date time {text!r}") from None
    if parsed.tzinfo is None:
        raise ValueError(f"date time {text!r} has no offset")
    return parsed.astimezone(timezone.utc)


def _opt_datetime(data: Mapping[str, Any], key: str) -> Optional[datetime]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"invalid field `{key}`: expected a date time")
    return _parse_datetime(value)


def find_image_url(images: Iterable[Mapping[str, Any]], cover_type: str) -> Optional[str]:
    """URL of the first image of the given cover type, if any."""
    for image in images:
        image = _object(image, "Images")
        if _str(image, "CoverType") == cover_type:
            return _str(image, "Url")
    return None


def _image_url(data: Mapping[str, Any], cover_type: str) -> Optional[str]:
    images = _list(data, "Images")
    # Every image is validated, as the whole list is decoded before searching it.
    for image in images:
        image = _object(image, "Images")
        _str(image, "CoverType")
        _str(image, "Url")
    return find_image_url(images, cover_type)


@dataclass(frozen=True)
class Certification:
    """Age rating of a movie in one country."""

    country: str
    certification: str


def _certification(data: Any) -> Certification:
    data = _object(data, "Certifications")
    return Certification(
        country=_str(data, "Country"), certification=_str(data, "Certification")
    )


@dataclass(frozen=True)
class Collection:
    """A series of movies the movie belongs to."""

    name: str
    tmdb_id: TmdbId


def _collection(data: Any) -> Optional[Collection]:
    if data is None:
        return None
    data = _object(data, "Collection")
    return Collection(name=_str(data, "Name"), tmdb_id=_int(data, "TmdbId", _U32))


@dataclass(frozen=True)
class CastItem:
    """An actor of the movie."""

    name: str
    order: int
    character: str
    tmdb_id: TmdbId
    credit_id: str
    headshot_url: Optional[str]


def _cast_item(data: Any) -> CastItem:
    data = _object(data, "Cast")
    return CastItem(
        name=_str(data, "Name"),
        order=_int(data, "Order", _I32),
        character=_str(data, "Character"),
        tmdb_id=_int(data, "TmdbId", _U32),
        credit_id=_str(data, "CreditId"),
        headshot_url=_image_url(data, "Headshot"),
    )


@dataclass(frozen=True)
class CrewItem:
    """A crew member of the movie."""

    name: str
    job: str
    department: str
    tmdb_id: TmdbId
    credit_id: str
    headshot_url: Optional[str]


def _crew_item(data: Any) -> CrewItem:
    data = _object(data, "Crew")
    return CrewItem(
        name=_str(data, "Name"),
        job=_str(data, "Job"),
        department=_str(data, "Department"),
        tmdb_id=_int(data, "TmdbId", _U32),
        credit_id=_str(data, "CreditId"),
        headshot_url=_image_url(data, "Headshot"),
    )


@dataclass(frozen=True)
class Credits:
    """Cast and crew of a movie."""

    cast: list[CastItem]
    crew: list[CrewItem]

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Credits":
        """Read a credits object."""
        data = _object(data, "Credits")
        return cls(cast=_items(data, "Cast", _cast_item), crew=_items(data, "Crew", _crew_item))


@dataclass(frozen=True)
class MovieRating:
    """A score and the number of votes behind it."""

    value: float
    count: int


def _rating(data: Mapping[str, Any], key: str) -> Optional[MovieRating]:
    value = data.get(key)
    if value is None:
        return None
    value = _object(value, key)
    return MovieRating(value=_float(value, "Value"), count=_int(value, "Count", _I32))


@dataclass(frozen=True)
class MovieRatings:
    """Ratings of a movie on the sites that have one."""

    tmdb: Optional[MovieRating] = None
    imdb: Optional[MovieRating] = None
    metacritic: Optional[MovieRating] = None
    rotten_tomatoes: Optional[MovieRating] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "MovieRatings":
        """Read a ratings object; absent ratings are ``None``."""
        data = _object(data, "MovieRatings")
        return cls(
            tmdb=_rating(data, "Tmdb"),
            imdb=_rating(data, "Imdb"),
            metacritic=_rating(data, "Metacritic"),
            rotten_tomatoes=_rating(data, "RottenTomatoes"),
        )


@dataclass(frozen=True)
class Recommendation:
    """A related movie."""

    tmdb_id: TmdbId
    title: str


def _recommendation(data: Any) -> Recommendation:
    data = _object(data, "Recommendations")
    return Recommendation(tmdb_id=_int(data, "TmdbId", _U32), title=_str(data, "Title"))


@dataclass
class MovieInfo:
    """Everything the movie information API knows about one movie."""

    imdb_id: Optional[str]
    overview: str
    title: str
    original_title: str
    runtime: int
    year: int
    movie_ratings: MovieRatings
    genres: list[str]
    poster_url: Optional[str]
    physical_release: Optional[datetime]
    digital_release: Optional[datetime]
    in_cinema: Optional[datetime]
    recommendations: list[Recommendation]
    credits: Credits
    studio: str
    youtube_trailer_id: Optional[str]
    certifications: list[Certification]
    collection: Optional[Collection]
    original_language: str
    homepage: str
    tmdb_id: TmdbId

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "MovieInfo":
        """Read a movie object; raises ``ValueError`` on missing or malformed fields."""
        data = _object(data, "movie")
        return cls(
            imdb_id=_opt_str(data, "ImdbId"),
            overview=_str(data, "Overview"),
            title=_str(data, "Title"),
            original_title=_str(data, "OriginalTitle"),
            runtime=_int(data, "Runtime", _U16),
            year=_int(data, "Year", _U16),
            movie_ratings=MovieRatings.from_json(_field(data, "MovieRatings")),
            genres=_str_list(data, "Genres"),
            poster_url=_image_url(data, "Poster"),
            physical_release=_opt_datetime(data, "PhysicalRelease"),
            digital_release=_opt_datetime(data, "DigitalRelease"),
            in_cinema=_opt_datetime(data, "InCinema"),
            recommendations=_items(data, "Recommendations", _recommendation),
            credits=Credits.from_json(_field(data, "Credits")),
            studio=_str(data, "Studio"),
            youtube_trailer_id=_opt_str(data, "YoutubeTrailerId"),
            certifications=_items(data, "Certifications", _certification),
            collection=_collection(data.get("Collection")),
            original_language=_str(data, "OriginalLanguage"),
            homepage=_str(data, "Homepage"),
            tmdb_id=_int(data, "TmdbId", _U32),
        )

    def format(self) -> str:
        """The movie as ``"<title> (<year>)"``."""
        return f"{self.title} ({self.year})"