"""Per-guild playback session state."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from ...application.interfaces.voice_transport import VoiceConnection
from ...domain.music.entities import PlaybackQueue, QueueEntry
from ...domain.shared.exceptions import TransportError
from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class GuildSession:
    """One guild's exclusive voice connection, queue and status channel.

    ``lock`` serialises every queue mutation for the guild. Chat I/O and media
    resolution never run while it is held.
    """

    guild_id: int
    connection: VoiceConnection
    text_channel_id: int
    queue: PlaybackQueue = field(init=False)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    closed: bool = False

    def __post_init__(self) -> None:
        self.queue = PlaybackQueue(guild_id=self.guild_id)

    @property
    def voice_channel_id(self) -> int:
        return self.connection.channel_id

    async def halt(self) -> list[QueueEntry]:
        """Finish every entry and stop the playing track. Caller holds ``lock``."""
        current = self.queue.current
        handle = current.handle if current is not None else None
        removed = self.queue.clear()
        if handle is not None:
            try:
                await handle.stop()
            except TransportError as exc:
                logger.warning(LogTemplates.PLAYER_ERROR, self.guild_id, exc.message)
        return removed


@dataclass(frozen=True)
class JoinResult:
    """Outcome of a join: the session plus whether this call created it."""

    session: GuildSession
    created: bool
