# moviegrab

moviegrab is an asyncio library for finding movie torrents across several
public indexes, watching their downloads in qBittorrent and copying each
finished movie (with its subtitles) into a movie library under a clean
`Title (Year)` folder name.

## What it contains

- **Torrent search** (`moviegrab.search_client.TorrentClient`) — queries
  The Pirate Bay, YTS and BitSearch concurrently. Each provider's outcome
  comes back as a `ProviderResponse` holding its torrents or the
  `SearchError` it hit.
- **Merged results** (`moviegrab.search_service`) — `search_torrents` and
  `collect_torrents` merge torrents that share an info hash, filter them by
  quality, codec and source, sort, order and limit them.
- **Release-name parsing** (`moviegrab.movie_properties`, `moviegrab.titles`)
  — `Quality`, `Codec` and `Source` guessed from a torrent name, and
  `parse_title` / `is_title_match` for comparing names with movie titles.
- **Magnet links** (`moviegrab.magnet.Magnet`).
- **qBittorrent data** (`moviegrab.qbittorrent.models`,
  `moviegrab.qbittorrent.errors`) — request forms such as
  `AddTorrentOptions`, the `Torrent` and `Category` records, `TorrentState`
  and `SyncMainData` for applying incremental sync updates.
- **Movie information** (`moviegrab.movies.client.MovieInfoClient`) — looks
  movies up by IMDb id (`from_imdb`) or TMDB id (`from_tmdb`) and returns
  `MovieInfo` records.
- **Importing** (`moviegrab.importer.import_movie`) — picks the largest video
  file out of a download, copies it into a destination folder and renames
  subtitles by language with `moviegrab.subtitles.parse_subtitle_language`.
- **Tracking** (`moviegrab.tracking`) — `track_movie` queues a magnet link
  tagged with a TMDB id, and `movie_tracking` / `background` watch the
  configured category and import each torrent whose name ends in a TMDB id in
  parentheses, such as `The Matrix (603)`.
- **Configuration** (`moviegrab.config`) — `load_config` and
  `Config.from_mapping`.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

`load_config()` reads environment variables and then `config.yaml` in the
working directory, whose values take precedence. Environment variable names
are lower-cased and also split on `_` into nested keys, so `QBITTORRENT_URL`
sets `qbittorrent.url`.

```yaml
qbittorrent:
  username: admin
  password: password
  url: http://localhost:8080
  category: torrent-api          # default

remote_download_path: /downloads       # path as qBittorrent sees it
local_download_path: /mnt/downloads    # same folder as this machine sees it
movies_path: /mnt/media/movies

languages: [US]
disable_movie_tracking: false
movie_tracking_max_timeout_active: 60  # seconds between checks while downloading
movie_tracking_timeout_inactive: 3600  # seconds between checks while stalled
movie_tracking_min_timeout: 1
delete_torrent_after_import: false
delete_torrent_files: false
category_after_import: ""
hide_movies_no_imdb: true
hide_movies_below_runtime: 30
import_movie_max_depth: 2

subtitle_language_map:
  en: '^(english|eng|.*\.(en|eng))$'
  nl: '^(dutch|dut|nl|.*\.(nl|dut))$'
```

`ConfigError` is raised for a missing or invalid value, and for two refused
combinations: `category_after_import` equal to the qBittorrent category, and
`delete_torrent_files` without `delete_torrent_after_import`.

## Examples

Reading properties from a release name:

```python
from moviegrab.movie_properties import Codec, Quality, Source
from moviegrab.titles import parse_title

name = "The.Matrix.1999.1080p.BluRay.x264"
Quality.from_name(name)   # Quality.P1080
Codec.from_name(name)     # Codec.AVC
Source.from_name(name)    # Source.BLU_RAY
parse_title(name)         # "the matrix (1999)"
```

Working with magnet links:

```python
from moviegrab.magnet import Magnet

magnet = Magnet.from_url("magnet:?xt=urn:btih:1234567890&dn=Test&tr=udp://test.com")
magnet.info_hash   # "1234567890"
magnet.to_url()
```

Searching every provider at once:

```python
import asyncio

import httpx

from moviegrab.search_client import TorrentClient
from moviegrab.search_options import Category, Order, SearchOptions, SortColumn


async def main() -> None:
    async with httpx.AsyncClient() as http:
        client = TorrentClient(http)
        options = SearchOptions("the matrix", Category.VIDEO, SortColumn.SEEDERS, Order.DESCENDING)
        for response in await client.search_all(options):
            print(response.provider, len(response.torrents), response.error)


asyncio.run(main())
```

## What it does not do

- There is no command-line program and no server: the package is a library,
  and running the tracker means calling `moviegrab.tracking.background` with a
  `moviegrab.context.Context` from your own asyncio program.
- There is no HTTP client for qBittorrent. The package holds the Web API's
  request forms, records and errors, but the `qbittorrent_client` given to
  `Context` must be supplied by you: an object with async `add_torrent`,
  `ensure_category`, `torrents_sync`, `delete_torrent` and `set_category`
  methods working with the types in `moviegrab.qbittorrent.models`.