"""Adding tracked movies and importing them once they finish downloading."""

from __future__ import annotations

import asyncio
import logging
import re

from moviegrab.api_errors import ApiError, InvalidMagnetError
from moviegrab.context import Context
from moviegrab.importer import import_movie
from moviegrab.magnet import Magnet
from moviegrab.movies.client import MovieInfoError
from moviegrab.qbittorrent.errors import QbittorrentError
from moviegrab.qbittorrent.models import AddTorrentOptions
from moviegrab.tmdb import get_tmdb

logger = logging.getLogger(__name__)

_RESERVED = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f\x80-\x9f]+')
_OUTER_PERIODS = re.compile(r"^\.+|\.+$")
_WINDOWS_RESERVED = re.compile(r"^(con|prn|aux|nul|com\d|lpt\d)$", re.IGNORECASE)


def filenamify(name: str) -> str:
    """Make ``name`` safe to use as a file or folder name."""
    result = _RESERVED.sub("_", name)
    result = _OUTER_PERIODS.sub("_", result)
    if _WINDOWS_RESERVED.match(result):
        result += "_"
    return result


async def track_movie(context: Context, url: str, tmdb: int) -> None:
    """Add a magnet link to qBittorrent, tagged with the TMDB id, and start tracking."""
    try:
        magnet = Magnet.from_url(url)
    except ValueError as error:
        raise InvalidMagnetError(str(error)) from error

    options = AddTorrentOptions(
        category=context.config.qbittorrent.category,
        rename=f"{magnet.display_name} ({tmdb})",
    )
    await context.qbittorrent_client.add_torrent(url, options)
    context.enable_movie_tracking()


async def movie_tracking(context: Context) -> None:
    """Watch tracked torrents and import each one when it completes."""
    config = context.config
    if config.disable_movie_tracking:
        logger.info("Movie progress check is disabled")
        return

    logger.info("Starting background movie progress tracking")
    max_timeout_active = config.movie_tracking_max_timeout_active
    timeout_inactive = config.movie_tracking_timeout_inactive
    min_timeout = config.movie_tracking_min_timeout
    category = config.qbittorrent.category
    qb = context.qbittorrent_client

    await qb.ensure_category(category, "")

    while True:
        min_eta = max_timeout_active
        await context.wait_until_enabled()

        logger.debug("Checking for torrents to import")
        torrents = await qb.torrents_sync()
        watching = 0
        active = 0

        for torrent in torrents:
            if torrent.category != category:
                continue
            name = torrent.name

            if torrent.progress != 1.0:
                watching += 1
                if torrent.state.is_active():
                    active += 1
                min_eta = max(min(min_eta, torrent.eta, max_timeout_active), min_timeout)
                logger.debug(
                    "%s: Progress: %.2f%%, ETA: %d min, State: %s",
                    name,
                    round(torrent.progress * 100.0),
                    torrent.eta // 60,
                    torrent.state,
                )
                continue

            tmdb = get_tmdb(name)
            if tmdb is None:
                logger.warning("No TMDB id found for %s", name)
                continue
            movie = await context.movie_info_client.from_tmdb(tmdb)
            if movie is None:
                logger.warning("No movie found for TMDB id: %s", tmdb)
                continue

            movie_name = movie.format()
            logger.info('Importing "%s" as "%s"', name, movie_name)
            local_path = torrent.content_path.replace(
                config.remote_download_path, config.local_download_path
            )
            dest_folder = config.movies_path / filenamify(movie_name)
            await import_movie(
                local_path,
                dest_folder,
                config.import_movie_max_depth,
                config.subtitle_language_map,
            )

            if config.delete_torrent_after_import:
                await qb.delete_torrent(torrent.hash, config.delete_torrent_files)
            else:
                await qb.set_category(torrent.hash, config.category_after_import)

        if watching == 0:
            logger.info("No torrents to track")
            context.disable_movie_tracking()
            continue
        if active == 0:
            min_eta = timeout_inactive
            logger.info("No active torrents")
        else:
            logger.info("Watching %d/%d torrents", active, watching)

        logger.info("Waiting: %ss", min_eta)
        await asyncio.sleep(min_eta)


async def background(context: Context) -> None:
    """Run movie tracking, logging the error that stops it."""
    try:
        await movie_tracking(context)
    except (ApiError, QbittorrentError, MovieInfoError, OSError) as error:
        logger.error("MovieTracking error: %r", error)