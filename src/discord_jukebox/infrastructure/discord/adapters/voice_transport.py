"""Discord voice transport: connection management and FFmpeg-backed track handles."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from discord_jukebox.application.interfaces.voice_transport import (
    TrackEventCallback,
    TrackHandle,
    TrackInfo,
    TrackSubscription,
    VoiceConnection,
    VoiceTransport,
)
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.value_objects import TrackEventKind
from discord_jukebox.domain.shared.exceptions import AlreadyConnectedError, TransportError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....domain.music.entities import ResolvedTrack

logger = logging.getLogger(__name__)


class HandleSubscription(TrackSubscription):
    """A callback registered on one DiscordTrackHandle for one event kind."""

    def __init__(
        self, handle: DiscordTrackHandle, kind: TrackEventKind, callback: TrackEventCallback
    ) -> None:
        self._handle = handle
        self.kind = kind
        self.callback = callback
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._handle._discard(self)


class DiscordTrackHandle(TrackHandle):
    """Wraps one ``VoiceClient.play`` call.

    discord.py invokes the ``after`` hook from its player thread exactly once;
    it is bridged onto the bot loop with ``run_coroutine_threadsafe``.
    """

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        loop: asyncio.AbstractEventLoop,
        *,
        guild_id: int,
        title: str,
    ) -> None:
        self._vc = voice_client
        self._loop = loop
        self._guild_id = guild_id
        self.title = title
        self._subscriptions: list[HandleSubscription] = []
        self._finished = False
        self._error: str | None = None

    def subscribe(self, kind: TrackEventKind, callback: TrackEventCallback) -> TrackSubscription:
        subscription = HandleSubscription(self, kind, callback)
        self._subscriptions.append(subscription)
        return subscription

    def _discard(self, subscription: HandleSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def stop(self) -> None:
        if self._finished:
            return
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()

    async def info(self) -> TrackInfo:
        if self._error is None and not self._vc.is_connected():
            raise TransportError(
                "info", ErrorMessages.NOT_VOICE_CONNECTED.format(guild_id=self._guild_id)
            )
        return TrackInfo(
            playing=not self._finished and self._vc.is_playing(),
            error=self._error,
        )

    def on_player_finished(self, error: Exception | None = None) -> None:
        """``after`` hook; runs on the player thread."""
        self._finished = True
        if error is not None:
            self._error = str(error) or type(error).__name__
            logger.warning(LogTemplates.PLAYER_ERROR, self._guild_id, error)

        kind = TrackEventKind.ERRORED if error is not None else TrackEventKind.ENDED
        asyncio.run_coroutine_threadsafe(self.dispatch(kind), self._loop)

    async def dispatch(self, kind: TrackEventKind) -> None:
        for subscription in list(self._subscriptions):
            if subscription.kind is not kind or subscription.cancelled:
                continue
            try:
                await subscription.callback(kind, self)
            except Exception:
                logger.exception(LogTemplates.PLAYER_ERROR, self._guild_id, kind.value)


class DiscordVoiceTransport(VoiceTransport):
    def __init__(self, bot: discord.Client, settings: AudioSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        self._volume = self._settings.default_volume
        self._ffmpeg_options = self._settings.ffmpeg_options
        self._connect_timeout = self._settings.connect_timeout_seconds

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    async def connect(self, guild_id: int, channel_id: int) -> VoiceConnection:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            raise TransportError(
                "connect", ErrorMessages.NO_VOICE_CHANNEL.format(channel_id=channel_id)
            )
        if guild.voice_client is not None:
            raise AlreadyConnectedError(guild_id)

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise TransportError(
                "connect", ErrorMessages.NO_VOICE_CHANNEL.format(channel_id=channel_id)
            )

        try:
            async with asyncio.timeout(self._connect_timeout):
                await channel.connect(self_deaf=True)
        except TimeoutError as exc:
            raise TransportError(
                "connect", ErrorMessages.CONNECT_TIMEOUT.format(channel_id=channel_id)
            ) from exc
        except discord.DiscordException as exc:
            raise TransportError("connect", str(exc)) from exc

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
        return VoiceConnection(guild_id=guild_id, channel_id=channel.id)

    async def disconnect(self, guild_id: int) -> None:
        guild = self._bot.get_guild(guild_id)
        vc = guild.voice_client if guild is not None else None
        if vc is None:
            return

        try:
            await vc.disconnect(force=True)
        except discord.DiscordException as exc:
            raise TransportError("disconnect", str(exc)) from exc
        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)

    async def play(self, connection: VoiceConnection, track: ResolvedTrack) -> TrackHandle:
        vc = self._get_voice_client(connection.guild_id)
        if vc is None or not vc.is_connected():
            raise TransportError(
                "play", ErrorMessages.NOT_VOICE_CONNECTED.format(guild_id=connection.guild_id)
            )

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        handle = DiscordTrackHandle(
            vc,
            asyncio.get_running_loop(),
            guild_id=connection.guild_id,
            title=track.title,
        )
        try:
            source = discord.FFmpegPCMAudio(
                track.stream_url,
                before_options=self._ffmpeg_options.get("before_options", ""),
                options=self._ffmpeg_options.get("options", ""),
            )
            volume_source = discord.PCMVolumeTransformer(source, volume=self._volume)
            vc.play(volume_source, after=handle.on_player_finished)
        except discord.ClientException as exc:
            raise TransportError("play", str(exc)) from exc

        return handle
