"""Event Notifier - reacts to per-track lifecycle events.

Every entry that starts playing gets its own subscriptions on its own track
handle. When an event arrives the queue is advanced under the session lock,
but only if that entry is still the session's PLAYING entry; late or duplicate
events (after skip, stop, leave, or the second of ended+errored) are dropped.
Status messages go out after the lock is released.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import TYPE_CHECKING

from ...domain.music.value_objects import TrackEventKind
from ...domain.shared.exceptions import TransportError
from ...domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import QueueEntry
    from ..interfaces.channel_messenger import ChannelMessenger
    from ..interfaces.voice_transport import TrackHandle
    from .guild_session import GuildSession

logger = logging.getLogger(__name__)

AdvanceResult = tuple["QueueEntry | None", list["QueueEntry"]]
AdvanceCallback = Callable[["GuildSession"], Awaitable[AdvanceResult]]


class EventNotifier:
    """Subscribes to track handles and turns their events into queue progress."""

    def __init__(self, messenger: ChannelMessenger) -> None:
        self._messenger = messenger
        self._advance: AdvanceCallback | None = None

    def set_advance_callback(self, callback: AdvanceCallback) -> None:
        """Install the routine that starts the next pending entry (lock held)."""
        self._advance = callback

    def watch(self, session: GuildSession, entry: QueueEntry) -> None:
        """Subscribe to ENDED and ERRORED on exactly ``entry``'s handle."""
        handle = entry.handle
        if handle is None:
            return
        callback = partial(self.handle_event, session, entry)
        entry.attach_subscriptions([handle.subscribe(kind, callback) for kind in TrackEventKind])

    async def handle_event(
        self,
        session: GuildSession,
        entry: QueueEntry,
        kind: TrackEventKind,
        handle: TrackHandle,
    ) -> None:
        logger.debug(LogTemplates.TRACK_EVENT, kind.value, entry.title, session.guild_id)

        detail: str | None = None
        if kind is TrackEventKind.ERRORED:
            detail = await self._describe_failure(entry, handle)

        async with session.lock:
            if session.closed or not session.queue.is_current(entry):
                logger.debug(
                    LogTemplates.STALE_TRACK_EVENT, kind.value, entry.title, session.guild_id
                )
                return

            match kind:
                case TrackEventKind.ENDED:
                    session.queue.complete(entry)
                case TrackEventKind.ERRORED:
                    session.queue.fail(entry, detail)

            next_entry, failed = await self._start_next(session)

        messages = [self._status_text(kind, entry, detail)]
        messages.extend(
            DiscordUIMessages.STATUS_TRACK_ERRORED.format(
                title=f.title, detail=f.failure_reason or ErrorMessages.TRACK_INFO_UNAVAILABLE
            )
            for f in failed
        )
        if next_entry is not None:
            messages.append(DiscordUIMessages.NOW_PLAYING.format(title=next_entry.track.display_title))

        for text in messages:
            await self._post(session.text_channel_id, text)

    async def _start_next(self, session: GuildSession) -> AdvanceResult:
        if self._advance is None:
            return None, []
        return await self._advance(session)

    @staticmethod
    async def _describe_failure(entry: QueueEntry, handle: TrackHandle) -> str:
        try:
            info = await handle.info()
        except TransportError as exc:
            logger.debug(LogTemplates.TRACK_INFO_FAILED, entry.title, exc.message)
            return ErrorMessages.TRACK_INFO_UNAVAILABLE
        return info.error or ErrorMessages.TRACK_INFO_UNAVAILABLE

    @staticmethod
    def _status_text(kind: TrackEventKind, entry: QueueEntry, detail: str | None) -> str:
        if kind is TrackEventKind.ENDED:
            return DiscordUIMessages.STATUS_TRACK_FINISHED.format(title=entry.title)
        return DiscordUIMessages.STATUS_TRACK_ERRORED.format(
            title=entry.title, detail=detail or ErrorMessages.TRACK_INFO_UNAVAILABLE
        )

    async def _post(self, channel_id: int, text: str) -> None:
        try:
            await self._messenger.send(channel_id, text)
        except Exception as exc:
            logger.warning(LogTemplates.STATUS_SEND_FAILED, channel_id, exc)
