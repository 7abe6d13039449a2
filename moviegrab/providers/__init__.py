"""Torrent index providers."""