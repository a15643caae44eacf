"""
Music Bounded Context

Track requests, resolved stream descriptors and the per-guild playback queue.
"""

from discord_jukebox.domain.music.entities import (
    EntrySummary,
    PlaybackQueue,
    QueueEntry,
    QueueStatus,
    ResolvedTrack,
    TrackRequest,
)
from discord_jukebox.domain.music.value_objects import (
    EntryState,
    Provider,
    Requester,
    ResolverArgs,
    ResolveStage,
    TrackEventKind,
)

__all__ = [
    # Entities
    "TrackRequest",
    "ResolvedTrack",
    "QueueEntry",
    "PlaybackQueue",
    "QueueStatus",
    "EntrySummary",
    # Value Objects
    "Provider",
    "ResolveStage",
    "EntryState",
    "TrackEventKind",
    "Requester",
    "ResolverArgs",
]
