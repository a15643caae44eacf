"""Playback Application Service - queue operations for one guild session.

Every mutation runs under the session lock. Resolution in ``play`` happens
before the lock is taken so a slow media tool never blocks skip or stop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import NotConnectedError, QueueEmptyError, TransportError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import QueueEntry, QueueStatus, ResolvedTrack
    from ...domain.music.value_objects import Requester
    from ..interfaces.voice_transport import TrackHandle, VoiceTransport
    from .event_notifier import EventNotifier
    from .guild_session import GuildSession
    from .session_registry import SessionRegistry
    from .source_resolver import SourceResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayResult:
    """Where a newly queued entry landed and whether it started right away."""

    entry: QueueEntry
    position: int
    started: bool


@dataclass(frozen=True)
class SkipResult:
    skipped: QueueEntry
    now_playing: QueueEntry | None


class PlaybackApplicationService:
    """Orchestrates the resolver, queue, voice transport and event notifier."""

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        resolver: SourceResolver,
        transport: VoiceTransport,
        notifier: EventNotifier,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._transport = transport
        self._notifier = notifier

        self._notifier.set_advance_callback(self.start_next_locked)

    async def play(
        self,
        guild_id: DiscordSnowflake,
        query: str,
        requester: Requester | None = None,
    ) -> PlayResult:
        """Resolve ``query`` and enqueue it on the guild's session."""
        session = self._registry.require(guild_id)
        request = self._resolver.parse_request(query, requester)
        track = await self._resolver.resolve(request)
        return await self.enqueue(session, track, requester)

    async def enqueue(
        self,
        session: GuildSession,
        track: ResolvedTrack,
        requester: Requester | None = None,
    ) -> PlayResult:
        """Append a track; start it when the queue is idle.

        If the transport refuses the new entry it is marked FAILED and the
        TransportError propagates.
        """
        async with session.lock:
            if session.closed:
                raise NotConnectedError(session.guild_id)

            entry = session.queue.append(track, requester)
            position = session.queue.position_of(entry)
            logger.info(LogTemplates.TRACK_ENQUEUED, track.title, session.guild_id, position)

            started = session.queue.is_idle
            if started:
                await self._start_entry(session, entry)

        return PlayResult(entry=entry, position=position, started=started)

    async def skip(self, guild_id: DiscordSnowflake) -> SkipResult:
        """Finish the playing entry and start the next pending one, if any."""
        session = self._registry.require(guild_id)
        async with session.lock:
            current = session.queue.current
            if current is None:
                raise QueueEmptyError(guild_id)

            handle = current.handle
            session.queue.complete(current)
            await self._stop_handle(session, handle)
            logger.info(LogTemplates.TRACK_SKIPPED, current.title, guild_id)

            now_playing, _ = await self.start_next_locked(session)

        return SkipResult(skipped=current, now_playing=now_playing)

    async def stop(self, guild_id: DiscordSnowflake) -> int:
        """Finish and clear every entry, halting playback. Returns entries removed."""
        session = self._registry.require(guild_id)
        async with session.lock:
            removed = await session.halt()
        if removed:
            logger.info(LogTemplates.QUEUE_STOPPED, guild_id, len(removed))
        return len(removed)

    async def status(self, guild_id: DiscordSnowflake, limit: int | None = None) -> QueueStatus:
        session = self._registry.require(guild_id)
        async with session.lock:
            return session.queue.status(limit)

    async def start_next_locked(
        self, session: GuildSession
    ) -> tuple[QueueEntry | None, list[QueueEntry]]:
        """Start the next pending entry, failing past any the transport refuses.

        Caller holds ``session.lock``. Returns the started entry (or None when the
        queue went idle) and the entries that failed on the way.
        """
        failed: list[QueueEntry] = []
        while (entry := session.queue.next_pending()) is not None:
            try:
                await self._start_entry(session, entry)
            except TransportError:
                failed.append(entry)
                continue
            return entry, failed

        logger.debug(LogTemplates.QUEUE_IDLE, session.guild_id)
        return None, failed

    async def _start_entry(self, session: GuildSession, entry: QueueEntry) -> None:
        try:
            handle = await self._transport.play(session.connection, entry.track)
        except TransportError as exc:
            logger.warning(
                LogTemplates.TRACK_PLAY_FAILED, entry.title, session.guild_id, exc.message
            )
            session.queue.fail(entry, exc.message)
            raise

        session.queue.start(entry, handle)
        self._notifier.watch(session, entry)
        logger.info(LogTemplates.TRACK_STARTED, entry.title, session.guild_id)

    @staticmethod
    async def _stop_handle(session: GuildSession, handle: TrackHandle | None) -> None:
        if handle is None:
            return
        try:
            await handle.stop()
        except TransportError as exc:
            logger.warning(LogTemplates.PLAYER_ERROR, session.guild_id, exc.message)
