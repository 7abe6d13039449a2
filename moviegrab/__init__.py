"""Movie torrent search, download tracking and library import."""

__version__ = "0.1.0"