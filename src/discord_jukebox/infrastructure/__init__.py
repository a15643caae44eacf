"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, voice transport and channel messenger adapters)
- Audio (yt-dlp media tool)
"""

from discord_jukebox.infrastructure.discord.adapters.voice_transport import DiscordVoiceTransport
from discord_jukebox.infrastructure.discord.bot import create_bot

__all__ = [
    "create_bot",
    "DiscordVoiceTransport",
]
