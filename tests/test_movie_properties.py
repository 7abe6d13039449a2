import pytest

from moviegrab.movie_properties import Codec, MovieProperties, Quality, Source


def test_merge():
    props1 = MovieProperties.create("1", Quality.UNKNOWN, Codec.AVC, Source.UNKNOWN)
    props2 = MovieProperties.create("2", Quality.P1080, Codec.UNKNOWN, Source.BLU_RAY)

    props1.merge(props2)

    assert props1.quality is Quality.P1080
    assert props1.codec is Codec.AVC
    assert props1.source is Source.BLU_RAY
    assert props1.imdb == "1"


def test_merge_fills_missing_imdb():
    props1 = MovieProperties.create("", Quality.P720, Codec.HEVC, Source.WEB_RIP)
    props2 = MovieProperties.create("tt0133093", Quality.P1080, Codec.AVC, Source.BLU_RAY)

    props1.merge(props2)

    assert props1 == MovieProperties(Quality.P720, Codec.HEVC, Source.WEB_RIP, "tt0133093")


def test_create_empty_imdb_is_none():
    props = MovieProperties.create("", Quality.UNKNOWN, Codec.UNKNOWN, Source.UNKNOWN)
    assert props.imdb is None


@pytest.mark.parametrize(
    "name, expected",
    [
        ("The.Matrix.1999.1080p.BluRay.x264", Codec.AVC),
        ("Movie 2020 720p WEBRip x265", Codec.HEVC),
        ("Some.Movie.DVDRip.XviD", Codec.XVID),
        ("Movie H.264 AAC", Codec.AVC),
        ("Movie HEVC", Codec.HEVC),
        ("Plain Movie Name", Codec.UNKNOWN),
    ],
)
def test_codec_from_name(name, expected):
    assert Codec.from_name(name) is expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("The.Matrix.1999.1080p.BluRay.x264", Quality.P1080),
        ("Movie 2020 720p WEBRip x265", Quality.P720),
        ("Movie.480p.DVDRip", Quality.P480),
        ("Movie 2160p UHD", Quality.P2160),
        ("Movie.HDTS", Quality.P720),
        ("Movie 1080 HDR", Quality.P1080),
        ("Movie FHD", Quality.P1080),
        ("Some.Movie.DVDRip.XviD", Quality.UNKNOWN),
    ],
)
def test_quality_from_name(name, expected):
    assert Quality.from_name(name) is expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("The.Matrix.1999.1080p.BluRay.x264", Source.BLU_RAY),
        ("Movie 2020 720p WEBRip x265", Source.WEB_RIP),
        ("Some.Movie.DVDRip.XviD", Source.DVD),
        ("Movie.HDTS", Source.TELESYNC),
        ("Movie CAM", Source.CAM),
        ("Movie.HDTV", Source.HDTV),
        ("Movie.WEB-DL", Source.WEB_DL),
        ("Plain Movie Name", Source.UNKNOWN),
    ],
)
def test_source_from_name(name, expected):
    assert Source.from_name(name) is expected


def test_serialized_names():
    assert Codec.from_name("Movie x264").value == "avc"
    assert Codec.from_name("Plain Movie Name").value == "Unknown"
    assert Quality.from_name("Movie 1080p").value == "1080p"
    assert Source.from_name("Movie BluRay").value == "BluRay"