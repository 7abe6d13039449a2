from datetime import datetime

import pytest

from moviegrab.qbittorrent.errors import ErrorKind, QbittorrentError
from moviegrab.qbittorrent.models import (
    AddCategoryOptions,
    AddTorrentOptions,
    Category,
    DeleteTorrentsParameters,
    GetTorrentsParameters,
    SetCategoryOptions,
    SyncMainData,
    Torrent,
    TorrentState,
    join_hashes,
    merge_values,
)


def _torrent_json(**overrides):
    data = {
        "added_on": 1700000000,
        "amount_left": 0,
        "auto_tmm": False,
        "availability": 1.0,
        "category": "movies",
        "completed": 100,
        "completion_on": -1,
        "content_path": "/downloads/Movie",
        "dl_limit": -1,
        "dlspeed": 0,
        "downloaded": 100,
        "downloaded_session": 0,
        "eta": 8640000,
        "f_l_piece_prio": False,
        "force_start": False,
        "infohash_v1": "abc123",
        "last_activity": 1700000200,
        "magnet_uri": "magnet:?xt=urn:btih:abc123",
        "max_ratio": -1,
        "max_seeding_time": -1,
        "name": "Movie (603)",
        "num_complete": 1,
        "num_incomplete": 0,
        "num_leechs": 0,
        "num_seeds": 0,
        "priority": 0,
        "progress": 0.5,
        "ratio": 0.0,
        "ratio_limit": -2,
        "save_path": "/downloads",
        "seeding_time_limit": -2,
        "seen_complete": 1700000300,
        "seq_dl": False,
        "size": 100,
        "state": "downloading",
        "super_seeding": False,
        "tags": "",
        "time_active": 10,
        "total_size": 100,
        "tracker": "",
        "up_limit": -1,
        "uploaded": 0,
        "uploaded_session": 0,
        "upspeed": 0,
    }
    data.update(overrides)
    return data


def test_join_hashes():
    assert join_hashes(["a", "b", "c"]) == "a|b|c"
    assert join_hashes(None) is None


def test_merge_values_merges_objects_recursively():
    current = {"a": 1, "b": {"c": 2, "d": 3}}
    merged = merge_values(current, {"b": {"c": 5}, "e": 6})
    assert merged == {"a": 1, "b": {"c": 5, "d": 3}, "e": 6}


def test_merge_values_replaces_non_objects():
    assert merge_values({"a": 1}, [1, 2]) == [1, 2]
    assert merge_values(3, {"a": 1}) == {"a": 1}


def test_add_category_form():
    form = AddCategoryOptions("movies", "/dl").to_form()
    assert form == {"category": "movies", "savePath": "/dl"}


def test_add_torrent_form_skips_unset_and_renames():
    options = AddTorrentOptions(urls="u", category="movies", paused=True, up_limit=5)
    assert options.to_form() == {
        "urls": "u",
        "category": "movies",
        "paused": "true",
        "upLimit": "5",
    }


def test_delete_torrents_form():
    form = DeleteTorrentsParameters(["a", "b"], False).to_form()
    assert form == {"deleteFiles": "false", "hashes": "a|b"}


def test_get_torrents_query():
    params = GetTorrentsParameters(filter="downloading", reverse=False, hashes=["x", "y"])
    assert params.to_query() == {"filter": "downloading", "reverse": "false", "hashes": "x|y"}
    assert GetTorrentsParameters().to_query() == {}


def test_set_category_form():
    assert SetCategoryOptions("h", "films").to_form() == {"hashes": "h", "category": "films"}


def test_category_from_json():
    category = Category.from_json({"name": "movies", "savePath": "/dl"})
    assert category == Category("movies", "/dl")


def test_category_from_json_missing_field():
    with pytest.raises(QbittorrentError) as info:
        Category.from_json({"name": "movies"})
    assert info.value.kind is ErrorKind.SERDE_ERROR


def test_torrent_from_json():
    data = _torrent_json()
    torrent = Torrent.from_json(data)
    assert torrent.hash == data["infohash_v1"]
    assert torrent.added_on.timestamp() == data["added_on"]
    assert torrent.completion_on.timestamp() == data["completion_on"]
    assert isinstance(torrent.added_on, datetime) and torrent.added_on.tzinfo is not None
    assert torrent.state is TorrentState.DOWNLOADING
    assert torrent.max_ratio == -1.0
    assert torrent.progress == 0.5
    assert torrent.name == data["name"]


def test_torrent_from_json_missing_field():
    data = _torrent_json()
    del data["infohash_v1"]
    with pytest.raises(QbittorrentError) as info:
        Torrent.from_json(data)
    assert info.value.kind is ErrorKind.SERDE_ERROR


@pytest.mark.parametrize(
    "overrides",
    [{"state": "flying"}, {"size": -1}, {"progress": "half"}, {"seq_dl": 1}],
)
def test_torrent_from_json_rejects_bad_values(overrides):
    with pytest.raises(QbittorrentError) as info:
        Torrent.from_json(_torrent_json(**overrides))
    assert info.value.kind is ErrorKind.SERDE_ERROR


def test_torrent_state_wire_names():
    assert TorrentState("pausedUP") is TorrentState.PAUSED_UP
    assert TorrentState("checkingResumeData") is TorrentState.CHECKING_RESUME_DATA


@pytest.mark.parametrize(
    "wire_name, active",
    [
        ("error", False),
        ("missingFiles", False),
        ("uploading", False),
        ("pausedUP", False),
        ("queuedUP", False),
        ("stalledUP", False),
        ("checkingUP", False),
        ("forcedUP", False),
        ("allocating", True),
        ("downloading", True),
        ("metaDL", True),
        ("pausedDL", False),
        ("queuedDL", False),
        ("stalledDL", False),
        ("checkingDL", True),
        ("forcedDL", True),
        ("checkingResumeData", True),
        ("moving", False),
        ("stoppedUP", False),
        ("unknown", True),
    ],
)
def test_active_states(wire_name, active):
    assert TorrentState(wire_name).is_active() is active


def test_torrent_state_active_from_json():
    torrent = Torrent.from_json(_torrent_json(state="stalledUP"))
    assert torrent.state.is_active() is False


def test_sync_main_data_defaults():
    data = SyncMainData.from_json({"rid": 4})
    assert data.rid == 4
    assert data.full_update is False
    assert data.torrents == {}
    assert data.categories_removed == []


def test_sync_main_data_requires_rid():
    with pytest.raises(QbittorrentError) as info:
        SyncMainData.from_json({"full_update": True})
    assert info.value.kind is ErrorKind.SERDE_ERROR


def test_sync_main_data_update_and_result():
    full = SyncMainData.from_json(
        {
            "rid": 1,
            "full_update": True,
            "torrents": {"h1": _torrent_json(), "h2": _torrent_json(infohash_v1="h2")},
            "categories": {"movies": {"name": "movies", "savePath": "/dl"}},
        }
    )
    partial = SyncMainData.from_json(
        {
            "rid": 2,
            "torrents": {"h1": {"progress": 1.0}},
            "torrents_removed": ["h2"],
            "categories": {"movies": {"savePath": "/films"}},
        }
    )
    full.update(partial)
    assert full.rid == 2
    assert full.full_update is False
    assert set(full.torrents) == {"h1"}

    result = full.to_result()
    assert [t.progress for t in result.torrents] == [1.0]
    assert result.torrents[0].name == "Movie (603)"
    assert result.categories == [Category("movies", "/films")]


def test_sync_main_data_removes_categories():
    data = SyncMainData.from_json(
        {"rid": 1, "full_update": True, "categories": {"a": {"name": "a", "savePath": ""}}}
    )
    data.update(SyncMainData.from_json({"rid": 2, "categories_removed": ["a"]}))
    assert data.to_result().categories == []