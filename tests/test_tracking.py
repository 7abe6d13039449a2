import asyncio
import logging
from dataclasses import dataclass

import pytest

from moviegrab.api_errors import InvalidMagnetError
from moviegrab.config import Config
from moviegrab.context import Context
from moviegrab.qbittorrent.errors import ErrorKind, QbittorrentError
from moviegrab.qbittorrent.models import TorrentState
from moviegrab.tracking import background, filenamify, movie_tracking, track_movie


@dataclass
class FakeTorrent:
    name: str
    category: str
    progress: float
    eta: int
    state: TorrentState
    content_path: str
    hash: str


class FakeQb:
    def __init__(self, torrents=(), fail=None):
        self.torrents = list(torrents)
        self.fail = fail
        self.calls = []

    async def ensure_category(self, name, save_path):
        if self.fail is not None:
            raise self.fail
        self.calls.append(("ensure_category", name, save_path))

    async def torrents_sync(self):
        return self.torrents

    async def set_category(self, torrent_hash, category):
        self.calls.append(("set_category", torrent_hash, category))

    async def delete_torrent(self, torrent_hash, delete_files):
        self.calls.append(("delete_torrent", torrent_hash, delete_files))

    async def add_torrent(self, url, options):
        self.calls.append(("add_torrent", url, options))


class FakeMovie:
    def format(self):
        return "The Matrix (1999)"


class FakeMovieClient:
    async def from_tmdb(self, tmdb):
        return FakeMovie() if tmdb == 603 else None


def make_config(tmp_path, **extra):
    data = {
        "qbittorrent": {"username": "user", "password": "password", "url": "http://localhost"},
        "remote_download_path": "/remote",
        "local_download_path": str(tmp_path / "downloads"),
        "movies_path": str(tmp_path / "movies"),
        "category_after_import": "done",
    }
    data.update(extra)
    return Config.from_mapping(data)


def test_filenamify_keeps_safe_names():
    assert filenamify("The Matrix (1999)") == "The Matrix (1999)"


def test_filenamify_removes_reserved_characters():
    result = filenamify('a<b>c:d"e/f\\g|h?i*j')
    assert not any(ch in result for ch in '<>:"/\\|?*')
    assert result.startswith("a") and result.endswith("j")


def test_filenamify_windows_reserved():
    assert filenamify("con") == "con_"


@pytest.mark.asyncio
async def test_track_movie_adds_and_enables(tmp_path):
    qb = FakeQb()
    context = Context(None, qb, None, make_config(tmp_path))
    context.disable_movie_tracking()
    url = "magnet:?xt=urn:btih:1234567890&dn=Test&tr=udp://test.com"
    await track_movie(context, url, 603)
    assert context.movie_tracking_enabled is True
    name, added_url, options = qb.calls[0]
    assert (name, added_url) == ("add_torrent", url)
    assert options.rename == "Test (603)"
    assert options.category == "torrent-api"


@pytest.mark.asyncio
async def test_track_movie_invalid_magnet(tmp_path):
    qb = FakeQb()
    context = Context(None, qb, None, make_config(tmp_path))
    with pytest.raises(InvalidMagnetError):
        await track_movie(context, "https://google.com", 603)
    assert qb.calls == []


@pytest.mark.asyncio
async def test_tracking_disabled_returns(tmp_path):
    qb = FakeQb()
    context = Context(None, qb, None, make_config(tmp_path, disable_movie_tracking=True))
    await asyncio.wait_for(movie_tracking(context), 1)
    assert qb.calls == []


def _completed_download(tmp_path):
    folder = tmp_path / "downloads" / "The Matrix 1999 (603)"
    folder.mkdir(parents=True)
    (folder / "movie.mp4").write_bytes(bytes(10))
    return FakeTorrent(
        name="The Matrix 1999 (603)",
        category="torrent-api",
        progress=1.0,
        eta=0,
        state=TorrentState.UPLOADING,
        content_path="/remote/The Matrix 1999 (603)",
        hash="abc",
    )


@pytest.mark.asyncio
async def test_completed_torrent_is_imported(tmp_path):
    qb = FakeQb([_completed_download(tmp_path)])
    context = Context(None, qb, FakeMovieClient(), make_config(tmp_path))
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(movie_tracking(context), 1)
    assert (tmp_path / "movies" / "The Matrix (1999)" / "movie.mp4").exists()
    assert qb.calls[0] == ("ensure_category", "torrent-api", "")
    assert ("set_category", "abc", "done") in qb.calls
    assert context.movie_tracking_enabled is False


@pytest.mark.asyncio
async def test_completed_torrent_deleted_after_import(tmp_path):
    qb = FakeQb([_completed_download(tmp_path)])
    config = make_config(tmp_path, delete_torrent_after_import=True)
    context = Context(None, qb, FakeMovieClient(), config)
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(movie_tracking(context), 1)
    assert ("delete_torrent", "abc", False) in qb.calls
    assert not any(call[0] == "set_category" for call in qb.calls)


@pytest.mark.asyncio
async def test_background_logs_errors(tmp_path, caplog):
    error = QbittorrentError(ErrorKind.REQUEST_ERROR, "boom")
    context = Context(None, FakeQb(fail=error), None, make_config(tmp_path))
    with caplog.at_level(logging.ERROR):
        await asyncio.wait_for(background(context), 1)
    assert any("MovieTracking error" in record.getMessage() for record in caplog.records)