"""Core domain entities for the music bounded context."""

from __future__ import annotations

import itertools
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from discord_jukebox.domain.music.value_objects import (
    EntryState,
    Provider,
    Requester,
    ResolverArgs,
    ResolveStage,
)
from discord_jukebox.domain.shared.constants import ProviderConstants
from discord_jukebox.domain.shared.exceptions import InvalidOperationError
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.domain.shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    StreamUriStr,
    TrackTitleStr,
)


def format_duration(seconds: int | None) -> str:
    """Format seconds as MM:SS or HH:MM:SS."""
    if seconds is None:
        return "Unknown"

    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class TrackRequest(BaseModel):
    """Immutable user request: the raw query plus the provider it was routed to."""

    model_config = ConfigDict(frozen=True, strict=True)

    query: NonEmptyStr
    provider: Provider
    requester: Requester | None = None

    @property
    def is_url(self) -> bool:
        return self.provider.is_url

    @classmethod
    def parse(
        cls,
        query: str,
        requester: Requester | None = None,
        *,
        primary_hosts: tuple[str, ...] = ProviderConstants.YOUTUBE_HOSTS,
        alternate_hosts: tuple[str, ...] = ProviderConstants.SOUNDCLOUD_HOSTS,
    ) -> TrackRequest:
        """Build a request from raw user input, inferring its provider."""
        cleaned = query.strip()
        if not cleaned:
            raise ValueError(ErrorMessages.EMPTY_QUERY)

        provider = Provider.infer(
            cleaned, primary_hosts=primary_hosts, alternate_hosts=alternate_hosts
        )
        return cls(query=cleaned, provider=provider, requester=requester)


class ResolvedTrack(BaseModel):
    """Immutable stream descriptor produced by the source resolver."""

    model_config = ConfigDict(frozen=True, strict=True)

    stream_url: StreamUriStr
    title: TrackTitleStr
    webpage_url: NonEmptyStr | None = None
    duration_seconds: DurationSeconds | None = None
    uploader: NonEmptyStr | None = None
    provenance: ResolveStage
    args: ResolverArgs = Field(default_factory=ResolverArgs)

    @property
    def duration_formatted(self) -> str:
        return format_duration(self.duration_seconds)

    @property
    def display_title(self) -> str:
        """Get display title with duration if available."""
        if self.duration_seconds:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title


class QueueEntry(BaseModel):
    """A resolved track waiting in, or playing from, a guild queue.

    The transport handle and its event subscriptions are only held while the
    entry is PLAYING and are released on the way to FINISHED or FAILED.
    """

    model_config = ConfigDict(strict=True, arbitrary_types_allowed=True)

    entry_id: NonNegativeInt
    track: ResolvedTrack
    requester: Requester | None = None
    state: EntryState = EntryState.PENDING
    failure_reason: str | None = None

    handle: Any = None
    subscriptions: list[Any] = Field(default_factory=list)

    @property
    def is_playing(self) -> bool:
        return self.state is EntryState.PLAYING

    @property
    def title(self) -> str:
        return self.track.title

    def transition_to(self, new_state: EntryState) -> None:
        if self.state.is_terminal:
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Entry {self.entry_id} is already {self.state.value}",
            )
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition entry from {self.state.value} to {new_state.value}",
            )
        self.state = new_state

    def start(self, handle: Any) -> None:
        self.transition_to(EntryState.PLAYING)
        self.handle = handle

    def attach_subscriptions(self, subscriptions: list[Any]) -> None:
        self.subscriptions.extend(subscriptions)

    def finish(self) -> None:
        self.transition_to(EntryState.FINISHED)
        self.release()

    def fail(self, reason: str | None = None) -> None:
        self.transition_to(EntryState.FAILED)
        self.failure_reason = reason
        self.release()

    def release(self) -> None:
        """Cancel event subscriptions and drop the transport handle."""
        for subscription in self.subscriptions:
            subscription.cancel()
        self.subscriptions.clear()
        self.handle = None


class EntrySummary(BaseModel):
    """Read-only view of one queue entry for display."""

    model_config = ConfigDict(frozen=True)

    position: PositiveInt
    title: str
    duration_seconds: int | None = None
    requester_name: str | None = None
    webpage_url: str | None = None
    state: EntryState

    @property
    def duration_formatted(self) -> str:
        return format_duration(self.duration_seconds)

    @classmethod
    def from_entry(cls, entry: QueueEntry, position: int) -> EntrySummary:
        return cls(
            position=position,
            title=entry.track.title,
            duration_seconds=entry.track.duration_seconds,
            requester_name=entry.requester.display_name if entry.requester else None,
            webpage_url=entry.track.webpage_url,
            state=entry.state,
        )


class QueueStatus(BaseModel):
    """Snapshot of a guild queue: length, current entry and what comes next."""

    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake
    length: NonNegativeInt
    current: EntrySummary | None = None
    upcoming: tuple[EntrySummary, ...] = ()

    @property
    def is_idle(self) -> bool:
        return self.current is None


class PlaybackQueue(BaseModel):
    """Ordered entries for one guild with at most one PLAYING entry.

    Entries leave the sequence as soon as they reach FINISHED or FAILED, so the
    PLAYING entry (when any) is always at the head.
    """

    model_config = ConfigDict(strict=True)

    guild_id: DiscordSnowflake
    entries: list[QueueEntry] = Field(default_factory=list)

    _ids: itertools.count = PrivateAttr(default_factory=itertools.count)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def current(self) -> QueueEntry | None:
        for entry in self.entries:
            if entry.is_playing:
                return entry
        return None

    @property
    def is_idle(self) -> bool:
        return self.current is None

    def is_current(self, entry: QueueEntry) -> bool:
        """True while ``entry`` is this queue's PLAYING entry."""
        return entry.is_playing and self.current is entry

    def pending(self) -> list[QueueEntry]:
        return [e for e in self.entries if e.state is EntryState.PENDING]

    def next_pending(self) -> QueueEntry | None:
        pending = self.pending()
        return pending[0] if pending else None

    def position_of(self, entry: QueueEntry) -> int:
        """1-based position of an entry in the queue."""
        return self.entries.index(entry) + 1

    def append(self, track: ResolvedTrack, requester: Requester | None = None) -> QueueEntry:
        entry = QueueEntry(entry_id=next(self._ids), track=track, requester=requester)
        self.entries.append(entry)
        return entry

    def start(self, entry: QueueEntry, handle: Any) -> None:
        """Mark ``entry`` PLAYING with its transport handle."""
        current = self.current
        if current is not None and current is not entry:
            raise InvalidOperationError(
                operation="start",
                current_state=current.state.value,
                message=f"Guild {self.guild_id} is already playing '{current.title}'",
            )
        entry.start(handle)

    def complete(self, entry: QueueEntry) -> None:
        """Mark ``entry`` FINISHED and drop it from the sequence."""
        entry.finish()
        self._discard(entry)

    def fail(self, entry: QueueEntry, reason: str | None = None) -> None:
        """Mark ``entry`` FAILED and drop it from the sequence."""
        entry.fail(reason)
        self._discard(entry)

    def clear(self) -> list[QueueEntry]:
        """Finish every entry and empty the queue; returns the removed entries."""
        removed = list(self.entries)
        for entry in removed:
            entry.finish()
        self.entries.clear()
        return removed

    def status(self, limit: int | None = None) -> QueueStatus:
        summaries = [
            EntrySummary.from_entry(entry, position)
            for position, entry in enumerate(self.entries, start=1)
        ]
        current = next((s for s in summaries if s.state is EntryState.PLAYING), None)
        upcoming = [s for s in summaries if s.state is EntryState.PENDING]
        if limit is not None:
            upcoming = upcoming[:limit]
        return QueueStatus(
            guild_id=self.guild_id,
            length=len(self.entries),
            current=current,
            upcoming=tuple(upcoming),
        )

    def _discard(self, entry: QueueEntry) -> None:
        if entry in self.entries:
            self.entries.remove(entry)
