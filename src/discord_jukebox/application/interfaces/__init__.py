"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from discord_jukebox.application.interfaces.channel_messenger import ChannelMessenger
from discord_jukebox.application.interfaces.media_tool import MediaInfo, MediaTool
from discord_jukebox.application.interfaces.voice_transport import (
    TrackEventCallback,
    TrackHandle,
    TrackInfo,
    TrackSubscription,
    VoiceConnection,
    VoiceTransport,
)

__all__ = [
    "ChannelMessenger",
    "MediaInfo",
    "MediaTool",
    "TrackEventCallback",
    "TrackHandle",
    "TrackInfo",
    "TrackSubscription",
    "VoiceConnection",
    "VoiceTransport",
]
