"""Video properties guessed from torrent names."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


class Codec(Enum):
    """Video codec."""

    UNKNOWN = "Unknown"
    AVC = "avc"
    HEVC = "hevc"
    XVID = "xvid"

    @classmethod
    def from_name(cls, name: str) -> "Codec":
        """Guess the codec from a release name."""
        lowered = _ascii_lower(name)
        for codec, pattern in _CODEC_PATTERNS:
            if pattern.search(lowered):
                return codec
        return cls.UNKNOWN


_CODEC_PATTERNS = (
    (Codec.AVC, re.compile(r"\b([xh].?264|avc)\b")),
    (Codec.HEVC, re.compile(r"\b([xh].?265|hevc)\b")),
    (Codec.XVID, re.compile(r"\bx-?vid(?:hd)?\b")),
)


class Quality(Enum):
    """Vertical resolution of the video."""

    UNKNOWN = "Unknown"
    P480 = "480p"
    P540 = "540p"
    P576 = "576p"
    P720 = "720p"
    P1080 = "1080p"
    P2160 = "2160p"

    @classmethod
    def from_name(cls, name: str) -> "Quality":
        """Guess the resolution from a release name.

        When nothing matches, bare three- or four-digit numbers in the name are
        read as resolutions (``1080`` as ``1080p``) and the match is retried.
        """
        found = _match_quality(_ascii_lower(name))
        if found is not None:
            return found
        with_suffix = _SOME_DIGITS.sub(lambda m: m.group(0) + "p", name)
        found = _match_quality(with_suffix)
        return cls.UNKNOWN if found is None else found


_QUALITY_PATTERNS = (
    (Quality.P480, re.compile(r"\D(?:480p|640x480|848x480)\b")),
    (Quality.P540, re.compile(r"\D(?:540p)\b")),
    (Quality.P576, re.compile(r"\D(?:576p)\b")),
    (Quality.P720, re.compile(r"\D(?:720p|1280x720|960p|hdcam(?:rip)?|hdt[cs])\b")),
    (Quality.P1080, re.compile(r"\D(?:1080p|1920x1080|1440p|FHD|1080i|4kto1080p)\b")),
    (
        Quality.P2160,
        re.compile(
            r"\D(?:2160p|3840x2160|4k[-_. ](?:UHD|HEVC|BD|H\.?265)|(?:UHD|HEVC|BD|H\.?265)[-_. ]4k)\b"
        ),
    ),
)
_SOME_DIGITS = re.compile(r"\d{3,4}")


def _match_quality(text: str) -> Optional[Quality]:
    for quality, pattern in _QUALITY_PATTERNS:
        if pattern.search(text):
            return quality
    return None


class Source(Enum):
    """Where the video was ripped from."""

    UNKNOWN = "Unknown"
    CAM = "Cam"
    TELESYNC = "Telesync"
    TELECINE = "Telecine"
    DVD = "Dvd"
    HDTV = "Hdtv"
    HDRIP = "Hdrip"
    WEB_RIP = "WebRip"
    WEB_DL = "WebDL"
    BLU_RAY = "BluRay"

    @classmethod
    def from_name(cls, name: str) -> "Source":
        """Guess the source from a release name."""
        lowered = _ascii_lower(name)
        for source, pattern in _SOURCE_PATTERNS:
            if pattern.search(lowered):
                return source
        return cls.UNKNOWN


_SOURCE_PATTERNS = (
    (Source.CAM, re.compile(r"\b(?:cam|hqcam|hdcam|camrip|hdcamrip)\b")),
    (Source.TELESYNC, re.compile(r"\b(?:telesync|hd-?ts|ts|pdvd|predvdrip)\b")),
    (Source.TELECINE, re.compile(r"\b(?:telecine|hd-?tc|tc)\b")),
    (Source.DVD, re.compile(r"\b(?:(?:hd)?dvd(?:rip)?|xvidvd|dvdr)\b")),
    (
        Source.HDTV,
        re.compile(
            r"\b(?:hdtv|pdtv|dsr|dsrrip|satrip|dthrip|dvbrip|dtvrip|tvrip|hdtvrip)\b"
        ),
    ),
    (Source.HDRIP, re.compile(r"\b(?:hdrip|web-?dlrip)\b")),
    (Source.WEB_RIP, re.compile(r"\b(?:web-?rip)\b")),
    (Source.WEB_DL, re.compile(r"\b(?:web|web-?dl|webrip)\b")),
    (
        Source.BLU_RAY,
        re.compile(r"\b(?:blu-?ray|bdrip|brip|brrip|bdr|bd|bdiso|bdmv|bdremux)\b"),
    ),
)


@dataclass
class MovieProperties:
    """Properties of a movie release."""

    quality: Quality = Quality.UNKNOWN
    codec: Codec = Codec.UNKNOWN
    source: Source = Source.UNKNOWN
    imdb: Optional[str] = None

    @classmethod
    def create(
        cls, imdb: str, quality: Quality, codec: Codec, source: Source
    ) -> "MovieProperties":
        """Build properties; an empty IMDB id is stored as ``None``."""
        return cls(quality=quality, codec=codec, source=source, imdb=imdb or None)

    def merge(self, other: "MovieProperties") -> None:
        """Fill unknown fields from ``other``."""
        if self.codec is Codec.UNKNOWN:
            self.codec = other.codec
        if self.quality is Quality.UNKNOWN:
            self.quality = other.quality
        if self.source is Source.UNKNOWN:
            self.source = other.source
        if self.imdb is None:
            self.imdb = other.imdb