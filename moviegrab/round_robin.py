"""Rotation over a fixed list of mirror URLs."""

from __future__ import annotations

import threading
from typing import Sequence


class RoundRobin:
    """Hands out URLs in turn, starting with the second one."""

    def __init__(self, urls: Sequence[str]) -> None:
        if not urls:
            raise ValueError("RoundRobin needs at least one URL")
        self._urls = list(urls)
        self._index = 0
        self._lock = threading.Lock()

    def next_url(self) -> str:
        """Advance the rotation and return the URL it lands on."""
        with self._lock:
            self._index += 1
            return self._urls[self._index % len(self._urls)]