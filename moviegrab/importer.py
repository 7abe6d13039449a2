"""Copying a finished download into the movie library."""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Mapping, Optional, Pattern, Union

from moviegrab.api_errors import TorrentNotFoundError
from moviegrab.movie_files import MovieFiles
from moviegrab.subtitles import parse_subtitle_language

logger = logging.getLogger(__name__)


async def import_movie(
    local_path: Union[str, Path],
    dest_folder: Union[str, Path],
    max_depth: int,
    language_map: Optional[Mapping[str, Pattern[str]]] = None,
) -> None:
    """Copy the movie file, and the subtitles that can be named, into ``dest_folder``."""
    local_path = Path(local_path)
    dest_folder = Path(dest_folder)
    language_map = language_map or {}

    if not local_path.exists():
        raise TorrentNotFoundError(f"Torrent not found on disk at {local_path}")

    movie_files = await asyncio.to_thread(MovieFiles.find, local_path, max_depth)
    await asyncio.to_thread(dest_folder.mkdir, parents=True, exist_ok=True)

    movie_dest = dest_folder / (movie_files.movie.name or "Unknown Movie")
    logger.info("Copying to %s", movie_dest)
    await asyncio.to_thread(shutil.copy, movie_files.movie, movie_dest)
    logger.info("Movie copied to: %s", movie_dest)

    target_base = movie_dest.stem
    for subtitle in movie_files.subtitles:
        stem = subtitle.stem
        extension = subtitle.suffix[1:]
        if not stem or not extension or not target_base:
            continue
        new_name = parse_subtitle_language(stem, extension, target_base, language_map)
        if new_name is None:
            continue
        logger.info("Importing subtitle %s as %s", stem, new_name)
        dest_subtitle = dest_folder / new_name
        await asyncio.to_thread(shutil.copy, subtitle, dest_subtitle)
        logger.debug("Subtitle copied to: %s", dest_subtitle)