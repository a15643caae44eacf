"""
Unit Tests for EventNotifier

Tests for:
- Queue advance on ENDED and ERRORED events
- Status messages posted to the session's text channel
- Stale and duplicate events being ignored
- Messenger failures never breaking the queue
"""

import pytest
import pytest_asyncio

from conftest import FakeMessenger
from discord_jukebox.application.services.event_notifier import EventNotifier
from discord_jukebox.domain.music.value_objects import EntryState, TrackEventKind
from discord_jukebox.domain.shared.messages import ErrorMessages


@pytest_asyncio.fixture
async def session(registry):
    return (await registry.join(1, 10, 100)).session


class TestEnded:
    """Tests for the ENDED event."""

    @pytest.mark.asyncio
    async def test_ended_advances_to_next(self, playback_service, session, transport, messenger):
        first = (await playback_service.play(1, "https://a.example/one")).entry
        second = (await playback_service.play(1, "https://a.example/two")).entry

        await transport.handles[0].fire(TrackEventKind.ENDED)

        assert first.state is EntryState.FINISHED
        assert second.state is EntryState.PLAYING
        assert messenger.texts(100) == [
            "Track finished: **one**",
            "Now playing: **two**",
        ]

    @pytest.mark.asyncio
    async def test_ended_on_last_entry_goes_idle(
        self, playback_service, session, transport, messenger
    ):
        await playback_service.play(1, "https://a.example/one")

        await transport.last_handle.fire(TrackEventKind.ENDED)

        assert session.queue.is_idle
        assert len(session.queue) == 0
        assert messenger.texts() == ["Track finished: **one**"]

    @pytest.mark.asyncio
    async def test_duplicate_event_is_ignored(
        self, playback_service, session, transport, messenger
    ):
        await playback_service.play(1, "https://a.example/one")
        second = (await playback_service.play(1, "https://a.example/two")).entry
        handle = transport.handles[0]
        callbacks = [s.callback for s in handle.subscriptions]

        await handle.fire(TrackEventKind.ENDED)
        for callback in callbacks:
            await callback(TrackEventKind.ENDED, handle)

        assert second.state is EntryState.PLAYING
        assert len(transport.handles) == 2
        assert len(messenger.sent) == 2

    @pytest.mark.asyncio
    async def test_subscriptions_cancelled_after_advance(self, playback_service, session, transport):
        await playback_service.play(1, "https://a.example/one")
        handle = transport.last_handle

        await handle.fire(TrackEventKind.ENDED)

        assert handle.live_subscriptions == []


class TestErrored:
    """Tests for the ERRORED event."""

    @pytest.mark.asyncio
    async def test_errored_fails_entry_with_detail(
        self, playback_service, session, transport, messenger
    ):
        entry = (await playback_service.play(1, "https://a.example/one")).entry
        await playback_service.play(1, "https://a.example/two")
        handle = transport.handles[0]
        handle.error = "403 Forbidden"

        await handle.fire(TrackEventKind.ERRORED)

        assert entry.state is EntryState.FAILED
        assert entry.failure_reason == "403 Forbidden"
        assert messenger.texts(100) == [
            "Error playing **one**: 403 Forbidden",
            "Now playing: **two**",
        ]

    @pytest.mark.asyncio
    async def test_errored_without_info(self, playback_service, session, transport, messenger):
        entry = (await playback_service.play(1, "https://a.example/one")).entry
        handle = transport.last_handle
        handle.info_raises = True

        await handle.fire(TrackEventKind.ERRORED)

        assert entry.state is EntryState.FAILED
        assert messenger.texts() == [
            f"Error playing **one**: {ErrorMessages.TRACK_INFO_UNAVAILABLE}"
        ]

    @pytest.mark.asyncio
    async def test_ended_then_errored_only_advances_once(
        self, playback_service, session, transport, messenger
    ):
        entry = (await playback_service.play(1, "https://a.example/one")).entry
        await playback_service.play(1, "https://a.example/two")
        handle = transport.handles[0]
        errored = next(s for s in handle.subscriptions if s.kind is TrackEventKind.ERRORED)

        await handle.fire(TrackEventKind.ENDED)
        await errored.callback(TrackEventKind.ERRORED, handle)

        assert entry.state is EntryState.FINISHED
        assert len(transport.handles) == 2

    @pytest.mark.asyncio
    async def test_refused_next_entries_are_reported(
        self, playback_service, session, transport, messenger
    ):
        await playback_service.play(1, "https://a.example/one")
        await playback_service.play(1, "https://a.example/bad")
        await playback_service.play(1, "https://a.example/good")
        transport.refuse_titles.add("bad")

        await transport.handles[0].fire(TrackEventKind.ENDED)

        texts = messenger.texts(100)
        assert texts[0] == "Track finished: **one**"
        assert texts[1].startswith("Error playing **bad**:")
        assert texts[2] == "Now playing: **good**"


class TestStaleEvents:
    """Events arriving after stop or leave must not touch the queue."""

    @pytest.mark.asyncio
    async def test_event_after_stop_is_ignored(
        self, playback_service, session, transport, messenger
    ):
        entry = (await playback_service.play(1, "https://a.example/one")).entry
        handle = transport.last_handle
        callbacks = [s.callback for s in handle.subscriptions]
        await playback_service.stop(1)

        await handle.fire(TrackEventKind.ENDED)
        for callback in callbacks:
            await callback(TrackEventKind.ENDED, handle)

        assert entry.state is EntryState.FINISHED
        assert messenger.sent == []

    @pytest.mark.asyncio
    async def test_event_after_leave_is_ignored(
        self, playback_service, registry, session, transport, messenger
    ):
        await playback_service.play(1, "https://a.example/one")
        handle = transport.last_handle
        callbacks = [s.callback for s in handle.subscriptions]
        await registry.leave(1)

        for callback in callbacks:
            await callback(TrackEventKind.ERRORED, handle)

        assert messenger.sent == []
        assert len(transport.handles) == 1


class TestMessengerFailures:
    @pytest.mark.asyncio
    async def test_send_failure_does_not_stop_the_queue(
        self, registry, resolver, transport, session
    ):
        from discord_jukebox.application.services.playback_service import (
            PlaybackApplicationService,
        )

        service = PlaybackApplicationService(
            registry=registry,
            resolver=resolver,
            transport=transport,
            notifier=EventNotifier(FakeMessenger(fail=True)),
        )
        await service.play(1, "https://a.example/one")
        second = (await service.play(1, "https://a.example/two")).entry

        await transport.handles[0].fire(TrackEventKind.ENDED)

        assert second.state is EntryState.PLAYING

    @pytest.mark.asyncio
    async def test_without_advance_callback_queue_just_drains(self, notifier, session, transport, make_track):
        entry = session.queue.append(make_track("solo"))
        handle = await transport.play(session.connection, entry.track)
        session.queue.start(entry, handle)
        notifier.watch(session, entry)

        await handle.fire(TrackEventKind.ENDED)

        assert entry.state is EntryState.FINISHED
        assert session.queue.is_idle
