"""A terminal music player for MP3 folders, with playlists, a queue and search."""

__version__ = "0.1.0"