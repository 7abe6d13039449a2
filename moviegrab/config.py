"""Service configuration read from the environment and a YAML file."""

from __future__ import annotations

import copy
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Pattern, Union

import yaml

from moviegrab.subtitles import compile_language_map

logger = logging.getLogger(__name__)

_REQUIRED = object()
_USIZE = (0, 2**64 - 1)
_U16 = (0, 2**16 - 1)
_U8 = (0, 2**8 - 1)
_INT_TEXT = re.compile(r"[+-]?[0-9]+")


class ConfigError(Exception):
    """The configuration is missing a value or holds one that is not allowed."""


def _get(data: Mapping[str, Any], key: str, default: Any = _REQUIRED) -> Any:
    if key in data:
        return data[key]
    if default is _REQUIRED:
        raise ConfigError(f"missing field `{key}`")
    return default


def _str(data: Mapping[str, Any], key: str, default: Any = _REQUIRED) -> str:
    value = _get(data, key, default)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ConfigError(f"invalid value for `{key}`: expected a string")


def _bool(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = _get(data, key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ConfigError(f"invalid value for `{key}`: expected a boolean")


def _int(data: Mapping[str, Any], key: str, default: int, bounds: tuple[int, int]) -> int:
    value = _get(data, key, default)
    if isinstance(value, str) and _INT_TEXT.fullmatch(value.strip()):
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"invalid value for `{key}`: expected an integer")
    low, high = bounds
    if not low <= value <= high:
        raise ConfigError(f"invalid value for `{key}`: out of range")
    return value


def _languages(data: Mapping[str, Any]) -> frozenset[str]:
    value = _get(data, "languages", ["US"])
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",") if part.strip()]
    if not isinstance(value, (list, tuple, set, frozenset)) or not all(
        isinstance(item, str) for item in value
    ):
        raise ConfigError("invalid value for `languages`: expected a list of strings")
    return frozenset(value)


def _language_map(data: Mapping[str, Any]) -> dict[str, Pattern[str]]:
    value = _get(data, "subtitle_language_map", {})
    if not isinstance(value, Mapping) or not all(isinstance(k, str) for k in value):
        raise ConfigError("invalid value for `subtitle_language_map`: expected a mapping")
    try:
        return compile_language_map(dict(value))
    except ValueError as error:
        raise ConfigError(f"invalid value for `subtitle_language_map`: {error}") from error


@dataclass(frozen=True)
class QbittorrentConfig:
    """How to reach qBittorrent and which category tracked torrents use."""

    username: str
    password: str
    url: str
    category: str = "torrent-api"


@dataclass(frozen=True)
class Config:
    """All settings of the service."""

    qbittorrent: QbittorrentConfig
    remote_download_path: str
    local_download_path: str
    movies_path: Path
    languages: frozenset[str] = frozenset({"US"})
    disable_movie_tracking: bool = False
    movie_tracking_max_timeout_active: int = 60
    movie_tracking_timeout_inactive: int = 3600
    movie_tracking_min_timeout: int = 1
    delete_torrent_after_import: bool = False
    delete_torrent_files: bool = False
    category_after_import: str = ""
    hide_movies_no_imdb: bool = True
    hide_movies_below_runtime: int = 30
    import_movie_max_depth: int = 2
    subtitle_language_map: dict[str, Pattern[str]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Config":
        """Build and validate a configuration; raises ``ConfigError``."""
        if not isinstance(data, Mapping):
            raise ConfigError("configuration must be a mapping")
        qb_data = _get(data, "qbittorrent")
        if not isinstance(qb_data, Mapping):
            raise ConfigError("invalid value for `qbittorrent`: expected a mapping")
        qbittorrent = QbittorrentConfig(
            _str(qb_data, "username"),
            _str(qb_data, "password"),
            _str(qb_data, "url"),
            _str(qb_data, "category", "torrent-api"),
        )
        movies_path = _get(data, "movies_path")
        if not isinstance(movies_path, (str, os.PathLike)):
            raise ConfigError("invalid value for `movies_path`: expected a path")

        config = cls(
            qbittorrent=qbittorrent,
            remote_download_path=_str(data, "remote_download_path"),
            local_download_path=_str(data, "local_download_path"),
            movies_path=Path(movies_path),
            languages=_languages(data),
            disable_movie_tracking=_bool(data, "disable_movie_tracking", False),
            movie_tracking_max_timeout_active=_int(
                data, "movie_tracking_max_timeout_active", 60, _USIZE
            ),
            movie_tracking_timeout_inactive=_int(
                data, "movie_tracking_timeout_inactive", 3600, _USIZE
            ),
            movie_tracking_min_timeout=_int(data, "movie_tracking_min_timeout", 1, _USIZE),
            delete_torrent_after_import=_bool(data, "delete_torrent_after_import", False),
            delete_torrent_files=_bool(data, "delete_torrent_files", False),
            category_after_import=_str(data, "category_after_import", ""),
            hide_movies_no_imdb=_bool(data, "hide_movies_no_imdb", True),
            hide_movies_below_runtime=_int(data, "hide_movies_below_runtime", 30, _U16),
            import_movie_max_depth=_int(data, "import_movie_max_depth", 2, _U8),
            subtitle_language_map=_language_map(data),
        )

        if config.category_after_import == config.qbittorrent.category:
            raise ConfigError("category_after_import cannot be the same as category")
        if not config.delete_torrent_after_import and config.delete_torrent_files:
            raise ConfigError(
                "delete_torrent_files cannot be true if delete_torrent_after_import is false"
            )
        return config


def _deep_merge(base: dict[str, Any], update: Mapping[str, Any]) -> None:
    for key, value in update.items():
        if isinstance(base.get(key), dict) and isinstance(value, Mapping):
            _deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(dict(value) if isinstance(value, Mapping) else value)


def _nested_environment(environ: Mapping[str, str]) -> dict[str, Any]:
    nested: dict[str, Any] = {}
    for key, value in environ.items():
        parts = [part for part in key.lower().split("_") if part]
        if not parts:
            continue
        node = nested
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
    return nested


def load_config(
    path: Union[str, Path] = "config.yaml", environ: Optional[Mapping[str, str]] = None
) -> Config:
    """Read the configuration.

    Environment variables come first, both as flat lower-cased keys and split
    on ``_`` into nested keys; the YAML file, if present, overrides them.
    """
    environ = os.environ if environ is None else environ
    merged: dict[str, Any] = {}
    _deep_merge(merged, {key.lower(): value for key, value in environ.items()})
    _deep_merge(merged, _nested_environment(environ))

    path = Path(path)
    if path.exists():
        try:
            document = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as error:
            raise ConfigError(f"cannot read {path}: {error}") from error
        if document is not None:
            if not isinstance(document, Mapping):
                raise ConfigError(f"{path} must hold a mapping")
            _deep_merge(merged, document)

    config = Config.from_mapping(merged)
    logger.debug("%r", config)
    return config