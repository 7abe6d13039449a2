from moviegrab.api_errors import (
    ApiError,
    ImdbNotFoundError,
    InvalidMagnetError,
    InvalidParamError,
    MissingQueryError,
    MovieFileNotFoundError,
)
from moviegrab.search_options import SearchOption


def test_invalid_param_message():
    error = InvalidParamError("sort")
    assert str(error) == "Incorrect param: sort"
    assert error.param == "sort"


def test_invalid_param_from_search_option():
    error = InvalidParamError(SearchOption.CATEGORY)
    assert str(error) == "Incorrect param: category"


def test_missing_query_message():
    assert str(MissingQueryError()) == "At least `imdb` or `query` must be defined."


def test_imdb_not_found_message():
    error = ImdbNotFoundError("tt1234567")
    assert str(error) == "IMDB ID not found: tt1234567"
    assert error.imdb == "tt1234567"


def test_plain_errors_keep_message():
    error = MovieFileNotFoundError("No movie file found in torrent.")
    assert error.message == "No movie file found in torrent."


def test_invalid_magnet_is_api_error_with_message():
    error = InvalidMagnetError("Not a magnet link")
    assert isinstance(error, ApiError) and error.message == "Not a magnet link"