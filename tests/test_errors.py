import pytest

from moviegrab.qbittorrent.errors import ErrorKind, QbittorrentError


def test_incorrect_login_text():
    error = QbittorrentError(ErrorKind.INCORRECT_LOGIN, "Incorrect login")
    assert str(error) == "<IncorrectLogin>: Incorrect login"


def test_bad_parameter_text():
    error = QbittorrentError(ErrorKind.BAD_PARAMETERS, "Name is empty", "name")
    assert str(error) == "<Bad Parameter: name>: Name is empty"
    assert error.detail == "name"


def test_http_error_includes_cause():
    cause = ConnectionError("boom")
    error = QbittorrentError(ErrorKind.HTTP_REQUEST_ERROR, "Request Error", cause)
    assert str(error) == "<RequestError: boom>: Request Error"
    assert error.detail is cause


def test_serde_error_includes_cause():
    error = QbittorrentError(ErrorKind.SERDE_ERROR, "Serde Error", "bad json")
    assert str(error).startswith("<SerdeError: bad json>")


@pytest.mark.parametrize(
    "kind",
    [
        ErrorKind.TORRENT_ADD_ERROR,
        ErrorKind.REQUEST_ERROR,
        ErrorKind.TORRENT_NOT_FOUND,
        ErrorKind.TORRENT_NOT_DOWNLOADING,
        ErrorKind.CATEGORY_DOES_NOT_EXIST,
    ],
)
def test_plain_kinds_show_their_name(kind):
    error = QbittorrentError(kind, "msg")
    assert str(error) == f"<{kind.value}>: msg"


def test_error_keeps_kind_and_message():
    error = QbittorrentError(ErrorKind.TORRENT_ADD_ERROR, "Could not add torrent")
    assert error.kind is ErrorKind.TORRENT_ADD_ERROR
    assert error.message == "Could not add torrent"
    assert error.args == ("Could not add torrent",)