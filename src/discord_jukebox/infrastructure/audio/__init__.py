"""Audio infrastructure - yt-dlp media tool and its output models."""

from discord_jukebox.infrastructure.audio.models import AudioFormatInfo, YtDlpTrackInfo
from discord_jukebox.infrastructure.audio.ytdlp_tool import YtDlpTool, build_command

__all__ = [
    "AudioFormatInfo",
    "YtDlpTool",
    "YtDlpTrackInfo",
    "build_command",
]
