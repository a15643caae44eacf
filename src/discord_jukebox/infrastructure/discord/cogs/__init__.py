"""Discord cogs - command handlers and gateway listeners."""

from discord_jukebox.infrastructure.discord.cogs.playback_cog import PlaybackCog
from discord_jukebox.infrastructure.discord.cogs.voice_events_cog import VoiceEventsCog

__all__ = [
    "PlaybackCog",
    "VoiceEventsCog",
]
