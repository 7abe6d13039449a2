"""Shared state of the running service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

logger = logging.getLogger(__name__)


class Context:
    """The clients, the configuration and the movie tracking switch."""

    def __init__(
        self, torrent_client: Any, qbittorrent_client: Any, movie_info_client: Any, config: Any
    ) -> None:
        self.torrent_client = torrent_client
        self.qbittorrent_client = qbittorrent_client
        self.movie_info_client = movie_info_client
        self.config = config
        self._tracking = asyncio.Event()
        self._tracking.set()

    @property
    def movie_tracking_enabled(self) -> bool:
        """Whether the background tracking loop may run."""
        return self._tracking.is_set()

    def enable_movie_tracking(self) -> None:
        """Turn tracking on and wake the loop waiting for it."""
        if not self._tracking.is_set():
            logger.info("Enabling movie progress tracking")
            self._tracking.set()

    def disable_movie_tracking(self) -> None:
        """Turn tracking off until it is enabled again."""
        if self._tracking.is_set():
            logger.info("Disabling movie progress tracking")
            self._tracking.clear()

    async def wait_until_enabled(self) -> None:
        """Return once tracking is enabled."""
        while not self._tracking.is_set():
            logger.info("Progress tracking (temporarily) disabled")
            await self._tracking.wait()