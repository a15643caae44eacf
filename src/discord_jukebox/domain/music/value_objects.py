"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from urllib.parse import urlparse


class Provider(Enum):
    """Source provider inferred from a track request.

    - YOUTUBE: primary provider, resolves to a direct stream in one step
    - SOUNDCLOUD: alternate provider that needs indirection (fast path, then robust)
    - GENERIC_URL: any other URL, handled like the primary provider
    - SEARCH: free text, resolved through a search prefix
    """

    YOUTUBE = "youtube"
    SOUNDCLOUD = "soundcloud"
    GENERIC_URL = "generic_url"
    SEARCH = "search"

    @property
    def is_url(self) -> bool:
        return self is not Provider.SEARCH

    @classmethod
    def infer(
        cls,
        query: str,
        *,
        primary_hosts: tuple[str, ...],
        alternate_hosts: tuple[str, ...],
    ) -> Provider:
        """Classify a raw request by scheme prefix and host."""
        lowered = query.strip().lower()
        if not lowered.startswith(("http://", "https://")):
            return cls.SEARCH

        host = (urlparse(lowered).hostname or "").removeprefix("www.")
        if _host_matches(host, alternate_hosts):
            return cls.SOUNDCLOUD
        if _host_matches(host, primary_hosts):
            return cls.YOUTUBE
        return cls.GENERIC_URL


def _host_matches(host: str, domains: tuple[str, ...]) -> bool:
    return any(host == d or host.endswith("." + d) for d in domains)


class ResolveStage(Enum):
    """Resolution strategy that produced (or failed to produce) a stream."""

    DIRECT = "direct"
    FAST = "fast"
    ROBUST = "robust"
    SEARCH = "search"


class EntryState(Enum):
    """Queue entry lifecycle with enforced transitions.

    State transitions:
    - PENDING -> PLAYING (playback started)
    - PENDING -> FINISHED (stopped before it played)
    - PENDING -> FAILED (transport refused it)
    - PLAYING -> FINISHED (ended, skipped or stopped)
    - PLAYING -> FAILED (track errored)

    FINISHED and FAILED are terminal.
    """

    PENDING = "pending"
    PLAYING = "playing"
    FINISHED = "finished"
    FAILED = "failed"

    def can_transition_to(self, target: EntryState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            EntryState.PENDING: {EntryState.PLAYING, EntryState.FINISHED, EntryState.FAILED},
            EntryState.PLAYING: {EntryState.FINISHED, EntryState.FAILED},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_terminal(self) -> bool:
        return self in {EntryState.FINISHED, EntryState.FAILED}


class TrackEventKind(Enum):
    """Lifecycle events the voice transport emits per track."""

    ENDED = "ended"
    ERRORED = "errored"


@dataclass(frozen=True)
class Requester:
    """Who asked for a track, kept for display only."""

    user_id: int
    display_name: str

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class ResolverArgs:
    """Argument set handed to the media tool for one resolution attempt."""

    no_playlist: bool = True
    format_filter: str | None = "bestaudio/best"
    retries: int | None = None
    fragment_retries: int | None = None
    abort_on_unavailable_fragment: bool = False
    socket_timeout: int | None = None
    extractor_variant: str | None = None
    skip_cert_check: bool = False
    search_prefix: str | None = None

    def with_overrides(self, **changes: object) -> ResolverArgs:
        """Return a copy with selected fields replaced."""
        return replace(self, **changes)
