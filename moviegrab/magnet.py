"""Parsing and formatting of magnet links."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlsplit

UNKNOWN = "Unknown"


@dataclass
class Magnet:
    """The parts of a magnet link that matter for adding a torrent."""

    display_name: str = UNKNOWN
    trackers: list[str] = field(default_factory=list)
    info_hash: str = UNKNOWN

    @classmethod
    def from_url(cls, url: str) -> "Magnet":
        """Parse a magnet link.

        Raises ``ValueError`` when the text is not a URL or not a magnet link.
        """
        try:
            parts = urlsplit(url)
        except ValueError as error:
            raise ValueError(str(error)) from error

        if parts.scheme != "magnet":
            raise ValueError("Not a magnet link")

        pairs = parse_qsl(parts.query, keep_blank_values=True)

        def first(key: str) -> str | None:
            return next((value for name, value in pairs if name == key), None)

        display_name = first("dn")
        info_hash = first("xt")
        return cls(
            display_name=UNKNOWN if display_name is None else display_name,
            trackers=[value for name, value in pairs if name == "tr"],
            info_hash=UNKNOWN if info_hash is None else info_hash.replace("urn:btih:", ""),
        )

    def to_url(self) -> str:
        """Format the link again, with the hash first and then the name and trackers."""
        trackers = "&tr=".join(self.trackers)
        return f"magnet:?xt=urn:btih:{self.info_hash}&dn={self.display_name}&tr={trackers}"