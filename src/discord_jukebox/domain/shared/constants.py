"""Centralized constants for provider routing, resolver budgets, audio and limits."""

from __future__ import annotations


class ProviderConstants:
    """Hosts and prefixes used to route a track request to a resolution strategy."""

    YOUTUBE_HOSTS = ("youtube.com", "youtu.be", "music.youtube.com", "m.youtube.com")
    SOUNDCLOUD_HOSTS = ("soundcloud.com", "on.soundcloud.com", "snd.sc")
    SEARCH_PREFIX = "ytsearch1:"


class ResolverConstants:
    """Default argument budgets for each resolution strategy."""

    EXECUTABLE = "yt-dlp"
    FORMAT_DEFAULT = "bestaudio/best"

    # Fast path: forced API variant for the alternate provider
    FAST_EXTRACTOR_VARIANT = "soundcloud:formats=http_aac,http_mp3"
    FAST_SOCKET_TIMEOUT = 15

    # Robust path: extended retry set after the fast path fails
    ROBUST_RETRIES = 10
    ROBUST_FRAGMENT_RETRIES = 10
    ROBUST_SOCKET_TIMEOUT = 60

    # Search: results are usually available quickly
    SEARCH_RETRIES = 2
    SEARCH_SOCKET_TIMEOUT = 10

    DIRECT_RETRIES = 3
    DIRECT_SOCKET_TIMEOUT = 30


class AudioConstants:
    """Audio and FFmpeg configuration constants."""

    FFMPEG_BEFORE_OPTIONS_DEFAULT = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    FFMPEG_OPTIONS_DEFAULT = "-vn"  # No video

    DEFAULT_VOLUME = 0.5
    CONNECT_TIMEOUT_SECONDS = 10.0


class LogLevels:
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LimitConstants:
    """Numeric limits and constraints."""

    # Queue display
    QUEUE_DISPLAY_LIMIT = 10
    MAX_TITLE_DISPLAY_LENGTH = 80

    # Discord limits
    MAX_MESSAGE_LENGTH = 2000
