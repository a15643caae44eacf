"""Discord jukebox bot: per-guild voice playback orchestration."""

__version__ = "0.1.0"
