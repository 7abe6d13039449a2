import pytest

from moviegrab.api_errors import MovieFileNotFoundError
from moviegrab.movie_files import MovieFiles, folder_files


def test_get_folder_files(tmp_path):
    for name in ("file1", "file2", "file3"):
        (tmp_path / name).touch()

    assert len(folder_files(tmp_path, 0)) == 3
    assert len(folder_files(tmp_path, 1)) == 3

    subs = tmp_path / "Subs"
    subs.mkdir()
    (subs / "sub1").touch()

    assert len(folder_files(tmp_path, 0)) == 3
    assert len(folder_files(tmp_path, 1)) == 4


def test_get_movie_files(tmp_path):
    movie_path = tmp_path / "movie.mp4"
    movie_path.touch()

    files = MovieFiles.find(tmp_path, 1)
    assert files.movie == movie_path
    assert len(files.subtitles) == 0

    subs = tmp_path / "Subs"
    subs.mkdir()
    sub_path = subs / "sub.srt"
    sub_path.touch()

    files = MovieFiles.find(tmp_path, 1)
    assert files.movie == movie_path
    assert files.subtitles == [sub_path]


def test_get_larger_movie(tmp_path):
    (tmp_path / "movie.mp4").touch()
    larger = tmp_path / "larger_movie.mp4"
    larger.write_bytes(bytes(100))

    files = MovieFiles.find(tmp_path, 1)
    assert files.movie == larger
    assert len(files.subtitles) == 0


def test_file_path_is_the_movie(tmp_path):
    movie_path = tmp_path / "anything.bin"
    movie_path.touch()
    files = MovieFiles.find(movie_path, 0)
    assert files.movie == movie_path
    assert files.subtitles == []


def test_no_movie_raises(tmp_path):
    (tmp_path / "readme.txt").touch()
    with pytest.raises(MovieFileNotFoundError) as info:
        MovieFiles.find(tmp_path, 1)
    assert info.value.message == "No movie file found in torrent."


def test_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        MovieFiles.find(tmp_path / "missing", 1)


def test_depth_limits_search(tmp_path):
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    (nested / "movie.mkv").touch()
    with pytest.raises(MovieFileNotFoundError):
        MovieFiles.find(tmp_path, 1)
    assert MovieFiles.find(tmp_path, 2).movie == nested / "movie.mkv"