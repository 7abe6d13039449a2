"""Normalising release names and matching them against movie titles."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

MULTIPLE_SPACES = re.compile(r"\s{2,}")
REMOVE_AFTER_YEAR = re.compile(r"\W*(19|20)\d\d\D.*")
REMOVE_TAGS_REGEX = re.compile(r"\[.*\]|\(.*\)")
YEAR_REGEX = re.compile(r"(19|20)\d\d")
SITE_REGEX = re.compile(r"(www\.)?\w+\.(com|me|to)")
BOUNDARIES_REGEX = re.compile(r"[-._:]")


def normalize_title(title: str) -> str:
    """Drop non-ASCII characters, lower-case, collapse runs of whitespace and trim."""
    ascii_only = "".join(ch for ch in title if ord(ch) < 128)
    return MULTIPLE_SPACES.sub(" ", ascii_only.lower()).strip()


def parse_title(title: str) -> str:
    """Reduce a release name to ``"<title> (<year>)"``, or ``""`` without a year."""
    title = normalize_title(title)

    year = YEAR_REGEX.search(title)
    if year is None:
        return ""

    title = REMOVE_AFTER_YEAR.sub("", title, count=1)
    title = REMOVE_TAGS_REGEX.sub("", title)
    title = SITE_REGEX.sub("", title)
    title = BOUNDARIES_REGEX.sub(" ", title)

    return f"{title.strip()} ({year.group(0)})"


def _levenshtein(first: str, second: str) -> int:
    previous = list(range(len(second) + 1))
    for i, a in enumerate(first, start=1):
        current = [i]
        for j, b in enumerate(second, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (a != b),
                )
            )
        previous = current
    return previous[-1]


def levenshtein_percentage(first: str, second: str) -> float:
    """Similarity in [0, 1]: one minus edit distance over the longer length.

    Two empty strings give NaN, which never counts as a match.
    """
    max_len = max(len(first), len(second))
    if max_len == 0:
        return float("nan")
    return 1.0 - _levenshtein(first, second) / max_len


def is_title_match(movie_title: str, torrent_title: str) -> bool:
    """Whether a release name refers to the given movie title."""
    parsed = parse_title(torrent_title)
    similarity = levenshtein_percentage(normalize_title(movie_title), parsed)
    matches = similarity > 0.8
    if not matches:
        logger.debug("Incorrect movie: %s", parsed)
    return matches