"""Request parameters and response records of the qBittorrent Web API."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from moviegrab.qbittorrent.errors import ErrorKind, QbittorrentError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _serde_error(what: str) -> QbittorrentError:
    return QbittorrentError(ErrorKind.SERDE_ERROR, "Serde Error", what)


def join_hashes(hashes: Optional[Iterable[str]]) -> Optional[str]:
    """Join torrent hashes with ``|`` as the Web API expects; ``None`` stays ``None``."""
    if hashes is None:
        return None
    return "|".join(hashes)


def merge_values(current: Any, update: Any) -> Any:
    """Merge a JSON update into a JSON value and return the result.

    Objects are merged key by key, recursively; any other value is replaced.
    Objects in ``current`` are updated in place.
    """
    if isinstance(current, dict) and isinstance(update, dict):
        for key, value in update.items():
            current[key] = merge_values(current.get(key), value)
        return current
    return update


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _encode(obj: Any) -> dict[str, str]:
    """Encode dataclass fields for a form or query, skipping ``None``."""
    encoded = {}
    for item in fields(obj):
        value = getattr(obj, item.name)
        if item.metadata.get("hashes"):
            value = join_hashes(value)
        if value is None:
            continue
        encoded[item.metadata.get("wire", item.name)] = _form_value(value)
    return encoded


def _wire(name: str) -> Any:
    return field(default=None, metadata={"wire": name})


@dataclass(frozen=True)
class AddCategoryOptions:
    """Form for creating or editing a category."""

    name: str
    save_path: str

    def to_form(self) -> dict[str, str]:
        """The form fields of the request."""
        return {"category": self.name, "savePath": self.save_path}


@dataclass(frozen=True)
class AddTorrentOptions:
    """Form for adding torrents; unset options are left to qBittorrent."""

    urls: str = ""
    savepath: Optional[str] = None
    cookie: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    skip_checking: Optional[bool] = None
    paused: Optional[bool] = None
    root_folder: Optional[bool] = None
    rename: Optional[str] = None
    up_limit: Optional[int] = _wire("upLimit")
    dl_limit: Optional[int] = _wire("dlLimit")
    auto_tmm: Optional[bool] = _wire("autoTMM")
    sequential_download: Optional[bool] = _wire("sequentialDownload")
    first_last_piece_prio: Optional[bool] = _wire("firstLastPiecePrio")

    def to_form(self) -> dict[str, str]:
        """The form fields of the request."""
        return _encode(self)


@dataclass(frozen=True)
class Category:
    """A qBittorrent category."""

    name: str
    save_path: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Category":
        """Read a category object of the Web API."""
        if not isinstance(data, Mapping):
            raise _serde_error("expected a category object")
        name = data.get("name")
        save_path = data.get("savePath")
        if not isinstance(name, str):
            raise _serde_error("invalid field `name`")
        if not isinstance(save_path, str):
            raise _serde_error("invalid field `savePath`")
        return cls(name=name, save_path=save_path)


@dataclass(frozen=True)
class DeleteTorrentsParameters:
    """Form for deleting torrents."""

    hashes: list[str]
    delete_files: bool = False

    def to_form(self) -> dict[str, str]:
        """The form fields of the request."""
        return {
            "deleteFiles": _form_value(self.delete_files),
            "hashes": join_hashes(self.hashes) or "",
        }


@dataclass(frozen=True)
class GetTorrentsParameters:
    """Filters of the torrent list."""

    filter: Optional[str] = None
    category: Optional[str] = None
    tag: Optional[str] = None
    sort: Optional[str] = None
    reverse: Optional[bool] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    hashes: Optional[list[str]] = field(default=None, metadata={"hashes": True})

    def to_query(self) -> dict[str, str]:
        """The query parameters of the request."""
        return _encode(self)


@dataclass(frozen=True)
class SetCategoryOptions:
    """Form for moving torrents to a category."""

    hashes: str
    category: str

    def to_form(self) -> dict[str, str]:
        """The form fields of the request."""
        return {"hashes": self.hashes, "category": self.category}


class TorrentState(Enum):
    """State of a torrent as reported by qBittorrent."""

    ERROR = "error"
    MISSING_FILES = "missingFiles"
    UPLOADING = "uploading"
    PAUSED_UP = "pausedUP"
    QUEUED_UP = "queuedUP"
    STALLED_UP = "stalledUP"
    CHECKING_UP = "checkingUP"
    FORCED_UP = "forcedUP"
    ALLOCATING = "allocating"
    DOWNLOADING = "downloading"
    META_DL = "metaDL"
    PAUSED_DL = "pausedDL"
    QUEUED_DL = "queuedDL"
    STALLED_DL = "stalledDL"
    CHECKING_DL = "checkingDL"
    FORCED_DL = "forcedDL"
    CHECKING_RESUME_DATA = "checkingResumeData"
    MOVING = "moving"
    STOPPED_UP = "stoppedUP"
    UNKNOWN = "unknown"

    def is_active(self) -> bool:
        """Whether the torrent is making download progress, or may be."""
        return self in _ACTIVE_STATES


_ACTIVE_STATES = frozenset(
    {
        TorrentState.ALLOCATING,
        TorrentState.DOWNLOADING,
        TorrentState.META_DL,
        TorrentState.CHECKING_DL,
        TorrentState.FORCED_DL,
        TorrentState.CHECKING_RESUME_DATA,
        TorrentState.UNKNOWN,
    }
)


def _uint() -> Any:
    return field(metadata={"unsigned": True})


def _convert(name: str, kind: str, unsigned: bool, value: Any) -> Any:
    if kind == "datetime":
        if isinstance(value, bool) or not isinstance(value, int):
            raise _serde_error(f"invalid timestamp `{name}`")
        try:
            return EPOCH + timedelta(seconds=value)
        except OverflowError:
            raise _serde_error(f"timestamp `{name}` out of range") from None
    if kind == "int":
        if isinstance(value, bool) or not isinstance(value, int) or (unsigned and value < 0):
            raise _serde_error(f"invalid field `{name}`")
        return value
    if kind == "float":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _serde_error(f"invalid field `{name}`")
        return float(value)
    if kind == "bool":
        if not isinstance(value, bool):
            raise _serde_error(f"invalid field `{name}`")
        return value
    if kind == "str":
        if not isinstance(value, str):
            raise _serde_error(f"invalid field `{name}`")
        return value
    if kind == "TorrentState":
        try:
            return TorrentState(value)
        except ValueError:
            raise _serde_error(f"unknown torrent state {value!r}") from None
    raise TypeError(f"unsupported field type {kind}")


@dataclass(frozen=True)
class Torrent:
    """A torrent as listed by qBittorrent."""

    added_on: datetime
    amount_left: int = _uint()
    auto_tmm: bool = field()
    availability: float = field()
    category: str = field()
    completed: int = _uint()
    completion_on: datetime = field()
    content_path: str = field()
    dl_limit: int = field()
    dlspeed: int = _uint()
    downloaded: int = _uint()
    downloaded_session: int = _uint()
    eta: int = _uint()
    f_l_piece_prio: bool = field()
    force_start: bool = field()
    hash: str = field(metadata={"key": "infohash_v1"})
    last_activity: datetime = field()
    magnet_uri: str = field()
    max_ratio: float = field()
    max_seeding_time: int = field()
    name: str = field()
    num_complete: int = _uint()
    num_incomplete: int = _uint()
    num_leechs: int = _uint()
    num_seeds: int = _uint()
    priority: int = field()
    progress: float = field()
    ratio: float = field()
    ratio_limit: float = field()
    save_path: str = field()
    seeding_time_limit: int = field()
    seen_complete: datetime = field()
    seq_dl: bool = field()
    size: int = _uint()
    state: TorrentState = field()
    super_seeding: bool = field()
    tags: str = field()
    time_active: int = _uint()
    total_size: int = field()
    tracker: str = field()
    up_limit: int = field()
    uploaded: int = _uint()
    uploaded_session: int = _uint()
    upspeed: int = _uint()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Torrent":
        """Read a torrent object; every field is required, timestamps are in seconds."""
        if not isinstance(data, Mapping):
            raise _serde_error("expected a torrent object")
        values = {}
        for item in fields(cls):
            key = item.metadata.get("key", item.name)
            if key not in data:
                raise _serde_error(f"missing field `{key}`")
            values[item.name] = _convert(
                key, str(item.type), item.metadata.get("unsigned", False), data[key]
            )
        return cls(**values)


@dataclass(frozen=True)
class SyncResult:
    """Decoded torrents and categories of the synchronised state."""

    torrents: list[Torrent]
    categories: list[Category]


def _json_dict(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise _serde_error(f"invalid field `{key}`")
    return copy.deepcopy(value)


def _json_str_list(data: Mapping[str, Any], key: str) -> list[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _serde_error(f"invalid field `{key}`")
    return list(value)


@dataclass
class SyncMainData:
    """Raw state of qBittorrent's incremental main-data synchronisation."""

    rid: int
    full_update: bool = False
    torrents: dict[str, Any] = field(default_factory=dict)
    torrents_removed: list[str] = field(default_factory=list)
    categories: dict[str, Any] = field(default_factory=dict)
    categories_removed: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "SyncMainData":
        """Read a main-data response; only ``rid`` is required."""
        if not isinstance(data, Mapping):
            raise _serde_error("expected a main data object")
        rid = data.get("rid")
        if isinstance(rid, bool) or not isinstance(rid, int) or rid < 0:
            raise _serde_error("invalid field `rid`")
        full_update = data.get("full_update", False)
        if not isinstance(full_update, bool):
            raise _serde_error("invalid field `full_update`")
        return cls(
            rid=rid,
            full_update=full_update,
            torrents=_json_dict(data, "torrents"),
            torrents_removed=_json_str_list(data, "torrents_removed"),
            categories=_json_dict(data, "categories"),
            categories_removed=_json_str_list(data, "categories_removed"),
        )

    def update(self, other: "SyncMainData") -> None:
        """Apply an incremental update: removals first, then merged changes."""
        self.rid = other.rid
        self.full_update = other.full_update

        for torrent_hash in other.torrents_removed:
            self.torrents.pop(torrent_hash, None)
        for torrent_hash, torrent in other.torrents.items():
            if torrent_hash in self.torrents:
                self.torrents[torrent_hash] = merge_values(self.torrents[torrent_hash], torrent)
            else:
                self.torrents[torrent_hash] = torrent

        for name in other.categories_removed:
            self.categories.pop(name, None)
        for name, category in other.categories.items():
            if name in self.categories:
                self.categories[name] = merge_values(self.categories[name], category)
            else:
                self.categories[name] = category

    def to_result(self) -> SyncResult:
        """Decode the current torrents and categories."""
        return SyncResult(
            torrents=[Torrent.from_json(value) for value in self.torrents.values()],
            categories=[Category.from_json(value) for value in self.categories.values()],
        )