"""Guild Session Registry - exactly one voice session per guild.

Lock order is always guild lock, then session lock. The registry lock is only
held long enough to fetch or create a guild lock.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import AlreadyConnectedError, NotConnectedError, TransportError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import ChannelIdField, DiscordSnowflake
from .guild_session import GuildSession, JoinResult

if TYPE_CHECKING:
    from ..interfaces.voice_transport import VoiceConnection, VoiceTransport

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Creates, looks up and tears down guild sessions."""

    def __init__(self, transport: VoiceTransport) -> None:
        self._transport = transport
        self._sessions: dict[int, GuildSession] = {}
        self._guild_locks: dict[int, asyncio.Lock] = {}
        self._registry_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    @property
    def guild_ids(self) -> list[int]:
        return list(self._sessions)

    def get(self, guild_id: DiscordSnowflake) -> GuildSession | None:
        return self._sessions.get(guild_id)

    def require(self, guild_id: DiscordSnowflake) -> GuildSession:
        session = self._sessions.get(guild_id)
        if session is None:
            raise NotConnectedError(guild_id)
        return session

    async def join(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: ChannelIdField,
        text_channel_id: ChannelIdField,
    ) -> JoinResult:
        """Return the guild's session, connecting first if there is none."""
        lock = await self._guild_lock(guild_id)
        async with lock:
            existing = self._sessions.get(guild_id)
            if existing is not None:
                logger.debug(LogTemplates.SESSION_REUSED, guild_id)
                return JoinResult(session=existing, created=False)

            connection = await self._connect(guild_id, voice_channel_id)
            session = GuildSession(
                guild_id=guild_id, connection=connection, text_channel_id=text_channel_id
            )
            self._sessions[guild_id] = session
            logger.info(LogTemplates.SESSION_CREATED, guild_id, voice_channel_id)
            return JoinResult(session=session, created=True)

    async def leave(self, guild_id: DiscordSnowflake) -> None:
        """Halt playback, disconnect and drop the guild's session."""
        lock = await self._guild_lock(guild_id)
        async with lock:
            session = self._sessions.pop(guild_id, None)
            if session is None:
                raise NotConnectedError(guild_id)

            async with session.lock:
                session.closed = True
                await session.halt()

            await self._transport.disconnect(guild_id)
            logger.info(LogTemplates.SESSION_DESTROYED, guild_id)

    async def handle_transport_disconnect(self, guild_id: DiscordSnowflake) -> bool:
        """Drop a session whose voice connection went away underneath it.

        Entries are finished without touching the transport. Returns True when
        a session was dropped.
        """
        lock = await self._guild_lock(guild_id)
        async with lock:
            session = self._sessions.pop(guild_id, None)
            if session is None:
                return False

            async with session.lock:
                session.closed = True
                session.queue.clear()

            logger.warning(LogTemplates.SESSION_ORPHANED, guild_id)
            return True

    async def shutdown(self) -> None:
        """Leave every guild; used on process shutdown."""
        guild_ids = self.guild_ids
        if guild_ids:
            logger.info(LogTemplates.REGISTRY_SHUTDOWN, len(guild_ids))
        for guild_id in guild_ids:
            try:
                await self.leave(guild_id)
            except NotConnectedError:
                continue
            except TransportError as exc:
                logger.warning(LogTemplates.PLAYER_ERROR, guild_id, exc.message)

    async def _guild_lock(self, guild_id: int) -> asyncio.Lock:
        async with self._registry_lock:
            return self._guild_locks.setdefault(guild_id, asyncio.Lock())

    async def _connect(self, guild_id: int, channel_id: int) -> VoiceConnection:
        try:
            return await self._transport.connect(guild_id, channel_id)
        except AlreadyConnectedError:
            logger.warning(LogTemplates.STALE_CONNECTION, guild_id)
            await self._transport.disconnect(guild_id)
            return await self._transport.connect(guild_id, channel_id)
