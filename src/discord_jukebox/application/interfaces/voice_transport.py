"""Port interface for the voice transport and its per-track handles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from discord_jukebox.domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import ResolvedTrack
    from ...domain.music.value_objects import TrackEventKind


TrackEventCallback = Callable[["TrackEventKind", "TrackHandle"], Awaitable[None]]
"""Coroutine invoked with the event kind and the handle that emitted it."""


@dataclass(frozen=True)
class VoiceConnection:
    """Opaque reference to one guild's voice connection."""

    guild_id: int
    channel_id: int


@dataclass(frozen=True)
class TrackInfo:
    """Diagnostic snapshot of a track handle."""

    playing: bool
    error: str | None = None


class TrackSubscription(ABC):
    """Cancellable registration of one callback on one track handle."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop delivering events to the callback. Idempotent."""
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class TrackHandle(ABC):
    """Control surface for one playing track."""

    @abstractmethod
    def subscribe(self, kind: TrackEventKind, callback: TrackEventCallback) -> TrackSubscription:
        """Register ``callback`` for ``kind`` events emitted by this handle only."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Halt this track immediately."""
        ...

    @abstractmethod
    async def info(self) -> TrackInfo:
        """Fetch diagnostic info; raises TransportError when unavailable."""
        ...


class VoiceTransport(ABC):
    """Interface for Discord voice channel operations."""

    @abstractmethod
    async def connect(
        self, guild_id: DiscordSnowflake, channel_id: ChannelIdField
    ) -> VoiceConnection:
        """Connect to a voice channel.

        Raises AlreadyConnectedError when a voice client already exists for the
        guild, TransportError on any other failure.
        """
        ...

    @abstractmethod
    async def disconnect(self, guild_id: DiscordSnowflake) -> None:
        """Disconnect from voice in a guild. No-op when not connected."""
        ...

    @abstractmethod
    async def play(self, connection: VoiceConnection, track: ResolvedTrack) -> TrackHandle:
        """Start playing a resolved track; raises TransportError on failure."""
        ...
