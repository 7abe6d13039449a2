import pytest

from moviegrab.tmdb import get_tmdb


def test_trailing_id():
    assert get_tmdb("The Matrix (603)") == 603


def test_leading_zeros():
    assert get_tmdb("Movie (00012345)") == 12345


@pytest.mark.parametrize(
    "name",
    [
        "The Matrix",
        "The Matrix (603) extra",
        "Movie (123456789)",
        "Movie ()",
        "Movie (60a3)",
        "Movie (603)\n",
    ],
)
def test_no_id(name):
    assert get_tmdb(name) is None


def test_only_last_group_counts():
    assert get_tmdb("Movie (1999) (604)") == 604