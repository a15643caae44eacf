"""
Unit Tests for PlaybackCog

Tests for the hybrid commands:
- join / leave
- play (started vs queued, resolve failures, empty input)
- skip / stop / queue
- Mapping of domain errors to user-facing replies
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from discord_jukebox.application.services.guild_session import JoinResult
from discord_jukebox.application.services.playback_service import PlayResult, SkipResult
from discord_jukebox.domain.music.entities import PlaybackQueue, QueueStatus
from discord_jukebox.domain.music.value_objects import Requester, ResolveStage
from discord_jukebox.domain.shared.constants import LimitConstants
from discord_jukebox.domain.shared.exceptions import (
    InvalidOperationError,
    NotConnectedError,
    QueueEmptyError,
    ResolveError,
    TransportError,
)
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.infrastructure.discord.cogs.playback_cog import (
    PlaybackCog,
    error_text,
    setup,
)

GUILD_ID = 111111111
TEXT_CHANNEL_ID = 222222222
VOICE_CHANNEL_ID = 444444444


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.session_registry = MagicMock()
    container.session_registry.join = AsyncMock()
    container.session_registry.leave = AsyncMock()

    container.playback_service = MagicMock()
    container.playback_service.play = AsyncMock()
    container.playback_service.skip = AsyncMock()
    container.playback_service.stop = AsyncMock()
    container.playback_service.status = AsyncMock()
    return container


@pytest.fixture
def cog(mock_container):
    return PlaybackCog(MagicMock(), mock_container)


@pytest.fixture
def ctx():
    """Create a mock commands.Context for a member in a voice channel."""
    ctx = MagicMock()
    ctx.send = AsyncMock()
    ctx.defer = AsyncMock()
    ctx.guild.id = GUILD_ID
    ctx.channel.id = TEXT_CHANNEL_ID
    ctx.command.name = "play"

    ctx.author.id = 333333333
    ctx.author.display_name = "TestUser"
    ctx.author.voice.channel.id = VOICE_CHANNEL_ID
    ctx.author.voice.channel.name = "Music"
    return ctx


@pytest.fixture
def entries(make_track):
    queue = PlaybackQueue(guild_id=GUILD_ID)
    return [queue.append(make_track(name, duration=None)) for name in ("first", "second")]


def _sent(ctx) -> str:
    return ctx.send.call_args[0][0]


# =============================================================================
# Join / Leave
# =============================================================================


class TestJoin:
    @pytest.mark.asyncio
    async def test_join_connects_to_author_channel(self, cog, ctx, mock_container):
        mock_container.session_registry.join.return_value = JoinResult(
            session=MagicMock(), created=True
        )

        await cog.join.callback(cog, ctx)

        mock_container.session_registry.join.assert_awaited_once_with(
            GUILD_ID, VOICE_CHANNEL_ID, TEXT_CHANNEL_ID
        )
        assert _sent(ctx) == DiscordUIMessages.JOINED_CHANNEL.format(channel="Music")

    @pytest.mark.asyncio
    async def test_join_when_already_connected(self, cog, ctx, mock_container):
        mock_container.session_registry.join.return_value = JoinResult(
            session=MagicMock(), created=False
        )

        await cog.join.callback(cog, ctx)

        assert _sent(ctx) == DiscordUIMessages.ALREADY_JOINED

    @pytest.mark.asyncio
    async def test_join_requires_author_in_voice(self, cog, ctx, mock_container):
        ctx.author.voice = None

        await cog.join.callback(cog, ctx)

        mock_container.session_registry.join.assert_not_awaited()
        assert _sent(ctx) == DiscordUIMessages.ERROR_USER_NOT_IN_VOICE

    @pytest.mark.asyncio
    async def test_join_transport_failure(self, cog, ctx, mock_container):
        mock_container.session_registry.join.side_effect = TransportError("connect", "timeout")

        await cog.join.callback(cog, ctx)

        assert "Voice connection problem" in _sent(ctx)
        assert ctx.send.call_args[1]["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_leave(self, cog, ctx, mock_container):
        await cog.leave.callback(cog, ctx)

        mock_container.session_registry.leave.assert_awaited_once_with(GUILD_ID)
        assert _sent(ctx) == DiscordUIMessages.LEFT_CHANNEL

    @pytest.mark.asyncio
    async def test_leave_when_not_connected(self, cog, ctx, mock_container):
        mock_container.session_registry.leave.side_effect = NotConnectedError(GUILD_ID)

        await cog.leave.callback(cog, ctx)

        assert _sent(ctx) == DiscordUIMessages.ERROR_NOT_CONNECTED


# =============================================================================
# Play
# =============================================================================


class TestPlay:
    @pytest.mark.asyncio
    async def test_play_starts_track(self, cog, ctx, mock_container, entries):
        mock_container.playback_service.play.return_value = PlayResult(
            entry=entries[0], position=1, started=True
        )

        await cog.play.callback(cog, ctx, query="https://a.example/first")

        ctx.defer.assert_awaited_once_with(ephemeral=False)
        guild_id, query, requester = mock_container.playback_service.play.call_args[0]
        assert guild_id == GUILD_ID
        assert query == "https://a.example/first"
        assert requester == Requester(user_id=333333333, display_name="TestUser")
        assert _sent(ctx) == DiscordUIMessages.NOW_PLAYING.format(title="first")

    @pytest.mark.asyncio
    async def test_play_queues_track(self, cog, ctx, mock_container, entries):
        mock_container.playback_service.play.return_value = PlayResult(
            entry=entries[1], position=2, started=False
        )

        await cog.play.callback(cog, ctx, query="second")

        assert _sent(ctx) == DiscordUIMessages.ADDED_TO_QUEUE.format(position=2, title="second")

    @pytest.mark.asyncio
    async def test_play_resolve_failure(self, cog, ctx, mock_container):
        mock_container.playback_service.play.side_effect = ResolveError(
            ResolveStage.ROBUST, "HTTP Error 404"
        )

        await cog.play.callback(cog, ctx, query="https://soundcloud.com/a/b")

        assert _sent(ctx) == DiscordUIMessages.ERROR_RESOLVE_FAILED.format(
            query="https://soundcloud.com/a/b", stage="robust"
        )
        assert ctx.send.call_args[1]["ephemeral"] is False

    @pytest.mark.asyncio
    async def test_play_without_session(self, cog, ctx, mock_container):
        mock_container.playback_service.play.side_effect = NotConnectedError(GUILD_ID)

        await cog.play.callback(cog, ctx, query="song")

        assert _sent(ctx) == DiscordUIMessages.ERROR_NOT_CONNECTED

    @pytest.mark.asyncio
    async def test_play_blank_query_rejected_before_defer(self, cog, ctx, mock_container):
        await cog.play.callback(cog, ctx, query="   ")

        ctx.defer.assert_not_awaited()
        mock_container.playback_service.play.assert_not_awaited()
        assert _sent(ctx) == DiscordUIMessages.ERROR_EMPTY_QUERY
        assert ctx.send.call_args[1]["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_play_invalid_query_after_defer(self, cog, ctx, mock_container):
        mock_container.playback_service.play.side_effect = ValueError("too long")

        await cog.play.callback(cog, ctx, query="x")

        assert _sent(ctx) == DiscordUIMessages.ERROR_EMPTY_QUERY
        assert "ephemeral" not in ctx.send.call_args[1]


# =============================================================================
# Skip / Stop / Queue
# =============================================================================


class TestSkip:
    @pytest.mark.asyncio
    async def test_skip_with_next(self, cog, ctx, mock_container, entries):
        mock_container.playback_service.skip.return_value = SkipResult(
            skipped=entries[0], now_playing=entries[1]
        )

        await cog.skip.callback(cog, ctx)

        assert _sent(ctx) == DiscordUIMessages.SKIPPED_NOW_PLAYING.format(
            title="first", next_title="second"
        )

    @pytest.mark.asyncio
    async def test_skip_last(self, cog, ctx, mock_container, entries):
        mock_container.playback_service.skip.return_value = SkipResult(
            skipped=entries[0], now_playing=None
        )

        await cog.skip.callback(cog, ctx)

        assert _sent(ctx) == DiscordUIMessages.SKIPPED.format(title="first")

    @pytest.mark.asyncio
    async def test_skip_nothing_playing(self, cog, ctx, mock_container):
        mock_container.playback_service.skip.side_effect = QueueEmptyError(GUILD_ID)

        await cog.skip.callback(cog, ctx)

        assert _sent(ctx) == DiscordUIMessages.ERROR_QUEUE_EMPTY


class TestStop:
    @pytest.mark.asyncio
    async def test_stop_reports_count(self, cog, ctx, mock_container):
        mock_container.playback_service.stop.return_value = 3

        await cog.stop.callback(cog, ctx)

        assert _sent(ctx) == DiscordUIMessages.STOPPED.format(count=3)

    @pytest.mark.asyncio
    async def test_stop_nothing(self, cog, ctx, mock_container):
        mock_container.playback_service.stop.return_value = 0

        await cog.stop.callback(cog, ctx)

        assert _sent(ctx) == DiscordUIMessages.STOPPED_NOTHING


class TestQueue:
    @pytest.mark.asyncio
    async def test_queue_renders_status(self, cog, ctx, mock_container):
        mock_container.playback_service.status.return_value = QueueStatus(
            guild_id=GUILD_ID, length=0
        )

        await cog.queue.callback(cog, ctx)

        mock_container.playback_service.status.assert_awaited_once_with(
            GUILD_ID, limit=LimitConstants.QUEUE_DISPLAY_LIMIT
        )
        assert _sent(ctx) == DiscordUIMessages.QUEUE_EMPTY


class TestErrorText:
    def test_invalid_operation_falls_back(self):
        error = InvalidOperationError("start", "playing")
        assert error_text(error) == DiscordUIMessages.ERROR_INVALID_OPERATION

    def test_long_query_truncated(self):
        text = error_text(ResolveError(ResolveStage.SEARCH, "no results"), "q" * 300)
        assert "q" * 80 not in text


class TestSetup:
    @pytest.mark.asyncio
    async def test_setup_adds_cog(self):
        bot = MagicMock()
        bot.add_cog = AsyncMock()

        await setup(bot)

        cog = bot.add_cog.call_args[0][0]
        assert isinstance(cog, PlaybackCog)
        assert cog.container is bot.container

    @pytest.mark.asyncio
    async def test_setup_without_container_raises(self):
        bot = MagicMock(spec=["add_cog"])

        with pytest.raises(RuntimeError):
            await setup(bot)
