"""
End-to-end playback flow through the container with in-memory adapters.

join -> play -> track ends -> queue idle, completion message posted.
"""

import pytest

from conftest import FakeMediaTool, FakeMessenger, FakeTransport
from discord_jukebox.config.container import Container
from discord_jukebox.config.settings import Settings
from discord_jukebox.domain.music.value_objects import EntryState, ResolveStage, TrackEventKind


@pytest.fixture
def container():
    container = Container(Settings(_env_file=None))
    container._voice_transport = FakeTransport()
    container._channel_messenger = FakeMessenger()
    container._media_tool = FakeMediaTool()
    return container


class TestPlaybackFlow:
    @pytest.mark.asyncio
    async def test_direct_track_plays_to_completion(self, container):
        await container.initialize()
        registry = container.session_registry
        service = container.playback_service
        transport = container.voice_transport
        messenger = container.channel_messenger

        joined = await registry.join(1, 10, 10)
        assert joined.created

        result = await service.play(1, "https://a.example/track")
        assert result.entry.track.provenance is ResolveStage.DIRECT

        status = await service.status(1)
        assert status.length == 1
        assert status.current is not None
        assert status.current.state is EntryState.PLAYING

        await transport.last_handle.fire(TrackEventKind.ENDED)

        status = await service.status(1)
        assert status.is_idle
        assert status.length == 0
        assert any("track" in text for text in messenger.texts(10))

    @pytest.mark.asyncio
    async def test_queue_plays_in_order(self, container):
        await container.initialize()
        service = container.playback_service
        transport = container.voice_transport
        await container.session_registry.join(1, 10, 10)

        for name in ("a", "b", "c"):
            await service.play(1, f"https://a.example/{name}")

        played = []
        while transport.handles and len(played) < 3:
            handle = transport.handles[len(played)]
            played.append(handle.track.title)
            await handle.fire(TrackEventKind.ENDED)

        assert played == ["a", "b", "c"]
        assert (await service.status(1)).is_idle

    @pytest.mark.asyncio
    async def test_shutdown_leaves_sessions(self, container):
        await container.initialize()
        await container.session_registry.join(1, 10, 10)

        await container.shutdown()

        assert len(container.session_registry) == 0
        assert container.voice_transport.disconnect_calls == [1]
