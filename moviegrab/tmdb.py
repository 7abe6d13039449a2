"""Reading the TMDB id that tracked torrents carry at the end of their name."""

from __future__ import annotations

import re
from typing import Optional

_TMDB_SUFFIX = re.compile(r"\(([0-9]{1,8})\)\Z")


def get_tmdb(name: str) -> Optional[int]:
    """The TMDB id in a trailing ``(<digits>)`` of a torrent name, if present."""
    found = _TMDB_SUFFIX.search(name)
    if found is None:
        return None
    return int(found.group(1))