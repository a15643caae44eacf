import asyncio

import pytest

from discord_jukebox.application.interfaces.channel_messenger import ChannelMessenger
from discord_jukebox.application.interfaces.media_tool import MediaInfo, MediaTool
from discord_jukebox.application.interfaces.voice_transport import (
    TrackHandle,
    TrackInfo,
    TrackSubscription,
    VoiceConnection,
    VoiceTransport,
)
from discord_jukebox.domain.music.value_objects import TrackEventKind
from discord_jukebox.domain.shared.exceptions import (
    AlreadyConnectedError,
    MediaToolError,
    TransportError,
)

# ============================================================================
# Transport Fakes
# ============================================================================


class FakeSubscription(TrackSubscription):
    def __init__(self, handle, kind, callback):
        self._handle = handle
        self.kind = kind
        self.callback = callback
        self._cancelled = False

    @property
    def cancelled(self):
        return self._cancelled

    def cancel(self):
        self._cancelled = True


class FakeTrackHandle(TrackHandle):
    """Track handle whose events are fired by the test via ``fire``."""

    def __init__(self, track, *, error=None, info_raises=False):
        self.track = track
        self.error = error
        self.info_raises = info_raises
        self.subscriptions: list[FakeSubscription] = []
        self.stopped = False

    def subscribe(self, kind, callback):
        subscription = FakeSubscription(self, kind, callback)
        self.subscriptions.append(subscription)
        return subscription

    async def stop(self):
        self.stopped = True

    async def info(self):
        if self.info_raises:
            raise TransportError("info", "voice client gone")
        return TrackInfo(playing=not self.stopped, error=self.error)

    @property
    def live_subscriptions(self):
        return [s for s in self.subscriptions if not s.cancelled]

    async def fire(self, kind: TrackEventKind) -> None:
        for subscription in list(self.subscriptions):
            if subscription.kind is kind and not subscription.cancelled:
                await subscription.callback(kind, self)


class FakeTransport(VoiceTransport):
    """In-memory voice transport recording connects, disconnects and handles."""

    def __init__(self):
        self.connected: dict[int, int] = {}
        self.connect_calls: list[tuple[int, int]] = []
        self.disconnect_calls: list[int] = []
        self.handles: list[FakeTrackHandle] = []
        self.stale_guilds: set[int] = set()
        self.refuse_titles: set[str] = set()
        self.connect_error: Exception | None = None
        self.connect_delay = 0.0

    async def connect(self, guild_id, channel_id):
        self.connect_calls.append((guild_id, channel_id))
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.connect_error is not None:
            raise self.connect_error
        if guild_id in self.stale_guilds or guild_id in self.connected:
            raise AlreadyConnectedError(guild_id)
        self.connected[guild_id] = channel_id
        return VoiceConnection(guild_id=guild_id, channel_id=channel_id)

    async def disconnect(self, guild_id):
        self.disconnect_calls.append(guild_id)
        self.stale_guilds.discard(guild_id)
        self.connected.pop(guild_id, None)

    async def play(self, connection, track):
        if track.title in self.refuse_titles:
            raise TransportError("play", f"cannot play {track.title}")
        handle = FakeTrackHandle(track)
        self.handles.append(handle)
        return handle

    @property
    def last_handle(self) -> FakeTrackHandle:
        return self.handles[-1]


# ============================================================================
# Media Tool / Messenger Fakes
# ============================================================================


class FakeMediaTool(MediaTool):
    """Media tool that answers from a scripted list of results or errors."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls: list[tuple[str, object]] = []

    async def run(self, request, args):
        self.calls.append((request, args))
        result = self.results.pop(0) if self.results else None
        if isinstance(result, Exception):
            raise result
        return request if result is None else result

    def parse(self, output):
        if isinstance(output, MediaInfo):
            return output
        title = output.rsplit("/", 1)[-1] or "untitled"
        return MediaInfo(stream_url=f"https://cdn.example/{title}.opus", title=title)


class FakeMessenger(ChannelMessenger):
    def __init__(self, fail=False):
        self.sent: list[tuple[int, str]] = []
        self.fail = fail

    async def send(self, channel_id, text):
        if self.fail:
            raise RuntimeError("channel unavailable")
        self.sent.append((channel_id, text))

    def texts(self, channel_id=None):
        return [t for c, t in self.sent if channel_id is None or c == channel_id]


def tool_failure(message="ERROR: Unable to extract", returncode=1):
    return MediaToolError(returncode, message)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def messenger():
    return FakeMessenger()


@pytest.fixture
def media_tool():
    return FakeMediaTool()


@pytest.fixture
def resolver(media_tool):
    from discord_jukebox.application.services.source_resolver import SourceResolver

    return SourceResolver(media_tool)


@pytest.fixture
def registry(transport):
    from discord_jukebox.application.services.session_registry import SessionRegistry

    return SessionRegistry(transport)


@pytest.fixture
def notifier(messenger):
    from discord_jukebox.application.services.event_notifier import EventNotifier

    return EventNotifier(messenger)


@pytest.fixture
def playback_service(registry, resolver, transport, notifier):
    from discord_jukebox.application.services.playback_service import (
        PlaybackApplicationService,
    )

    return PlaybackApplicationService(
        registry=registry, resolver=resolver, transport=transport, notifier=notifier
    )


@pytest.fixture
def make_track():
    """Factory for ResolvedTrack instances."""
    from discord_jukebox.domain.music.entities import ResolvedTrack
    from discord_jukebox.domain.music.value_objects import ResolveStage

    def _make(title="Test Track", duration=180, stage=ResolveStage.DIRECT):
        return ResolvedTrack(
            stream_url=f"https://cdn.example/{title}.opus",
            title=title,
            webpage_url=f"https://a.example/{title}",
            duration_seconds=duration,
            provenance=stage,
        )

    return _make
