"""Finding the movie file and subtitles inside a downloaded torrent."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from moviegrab.api_errors import MovieFileNotFoundError
from moviegrab.subtitles import SUBTITLE_FILE_EXTENSIONS

logger = logging.getLogger(__name__)

MEDIA_FILE_EXTENSIONS = (
    "asf", "avi", "divx", "dvr-ms", "f4v", "flv", "img", "iso", "m2t", "m2ts", "m2v", "m4v",
    "mk3d", "mkv", "mov", "mp4", "mpeg", "mpg", "mts", "ogg", "ogm", "ogv", "rec", "rmvb", "ts",
    "webm", "wmv", "wtv", "3gp",
)


def folder_files(path: Union[str, Path], max_depth: int) -> list[Path]:
    """Regular files in ``path``, descending at most ``max_depth`` folders deep."""
    result: list[Path] = []
    with os.scandir(path) as entries:
        for entry in entries:
            if entry.is_dir(follow_symlinks=False) and max_depth > 0:
                result.extend(folder_files(entry.path, max_depth - 1))
            elif entry.is_file(follow_symlinks=False):
                result.append(Path(entry.path))
    return result


def _extension(path: Path) -> str:
    return path.suffix[1:]


@dataclass
class MovieFiles:
    """The movie file of a torrent and the subtitles that came with it."""

    movie: Path
    subtitles: list[Path] = field(default_factory=list)

    @classmethod
    def find(cls, local_path: Union[str, Path], max_depth: int) -> "MovieFiles":
        """Pick the largest media file and collect the subtitles.

        A path that is itself a file is taken as the movie. Raises
        ``MovieFileNotFoundError`` when a folder holds no media file.
        """
        local_path = Path(local_path)
        if stat.S_ISREG(local_path.stat().st_mode):
            return cls(movie=local_path)

        movie = None
        highest_size = 0
        subtitles = []
        for path in folder_files(local_path, max_depth):
            extension = _extension(path)
            if not extension:
                continue
            if extension in MEDIA_FILE_EXTENSIONS:
                size = path.stat().st_size
                logger.debug("Found file: %s, %db", path, size)
                if size >= highest_size:
                    highest_size = size
                    movie = path
            elif extension in SUBTITLE_FILE_EXTENSIONS:
                logger.debug("Found subtitle: %s", path)
                subtitles.append(path)

        if movie is None:
            raise MovieFileNotFoundError("No movie file found in torrent.")
        return cls(movie=movie, subtitles=subtitles)