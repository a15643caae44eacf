"""Hybrid-command cog for playback: join, leave, play, skip, stop, queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord import app_commands
from discord.ext import commands

from discord_jukebox.domain.music.value_objects import Requester
from discord_jukebox.domain.shared.constants import LimitConstants
from discord_jukebox.domain.shared.exceptions import (
    DomainError,
    NotConnectedError,
    QueueEmptyError,
    ResolveError,
    TransportError,
)
from discord_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from discord_jukebox.utils.reply import format_queue_status, truncate

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def error_text(error: DomainError, query: str | None = None) -> str:
    """User-facing text for a domain error."""
    match error:
        case NotConnectedError():
            return DiscordUIMessages.ERROR_NOT_CONNECTED
        case QueueEmptyError():
            return DiscordUIMessages.ERROR_QUEUE_EMPTY
        case ResolveError():
            return DiscordUIMessages.ERROR_RESOLVE_FAILED.format(
                query=truncate(query or "?"), stage=error.stage.value
            )
        case TransportError():
            return DiscordUIMessages.ERROR_TRANSPORT.format(detail=error.message)
        case _:
            return DiscordUIMessages.ERROR_INVALID_OPERATION


class PlaybackCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def _reply_error(
        self,
        ctx: commands.Context,
        error: DomainError,
        query: str | None = None,
        *,
        ephemeral: bool = True,
    ) -> None:
        logger.info(
            LogTemplates.COMMAND_FAILED,
            ctx.command.name if ctx.command else "?",
            ctx.guild.id if ctx.guild else None,
            error.message,
        )
        await ctx.send(error_text(error, query), ephemeral=ephemeral)

    # ─────────────────────────────────────────────────────────────────
    # Session
    # ─────────────────────────────────────────────────────────────────

    @commands.hybrid_command(name="join", description="Join your current voice channel.")
    @commands.guild_only()
    async def join(self, ctx: commands.Context) -> None:
        voice = getattr(ctx.author, "voice", None)
        if voice is None or voice.channel is None:
            await ctx.send(DiscordUIMessages.ERROR_USER_NOT_IN_VOICE, ephemeral=True)
            return

        try:
            result = await self.container.session_registry.join(
                ctx.guild.id, voice.channel.id, ctx.channel.id
            )
        except DomainError as exc:
            await self._reply_error(ctx, exc)
            return

        if result.created:
            await ctx.send(DiscordUIMessages.JOINED_CHANNEL.format(channel=voice.channel.name))
        else:
            await ctx.send(DiscordUIMessages.ALREADY_JOINED)

    @commands.hybrid_command(name="leave", description="Stop playback and leave voice.")
    @commands.guild_only()
    async def leave(self, ctx: commands.Context) -> None:
        try:
            await self.container.session_registry.leave(ctx.guild.id)
        except DomainError as exc:
            await self._reply_error(ctx, exc)
            return
        await ctx.send(DiscordUIMessages.LEFT_CHANNEL)

    # ─────────────────────────────────────────────────────────────────
    # Queue
    # ─────────────────────────────────────────────────────────────────

    @commands.hybrid_command(name="play", description="Play a song by URL or search query.")
    @app_commands.describe(query="URL or search terms")
    @commands.guild_only()
    async def play(self, ctx: commands.Context, *, query: str) -> None:
        if not query.strip():
            await ctx.send(DiscordUIMessages.ERROR_EMPTY_QUERY, ephemeral=True)
            return

        # Resolution can outlast the interaction acknowledgement window. Follow-ups
        # to a public defer are public, errors included.
        await ctx.defer(ephemeral=False)

        requester = Requester(user_id=ctx.author.id, display_name=ctx.author.display_name)
        try:
            result = await self.container.playback_service.play(ctx.guild.id, query, requester)
        except DomainError as exc:
            await self._reply_error(ctx, exc, query, ephemeral=False)
            return
        except ValueError:
            await ctx.send(DiscordUIMessages.ERROR_EMPTY_QUERY)
            return

        title = truncate(result.entry.track.display_title)
        if result.started:
            await ctx.send(DiscordUIMessages.NOW_PLAYING.format(title=title))
        else:
            await ctx.send(
                DiscordUIMessages.ADDED_TO_QUEUE.format(position=result.position, title=title)
            )

    @commands.hybrid_command(name="skip", description="Skip the current track.")
    @commands.guild_only()
    async def skip(self, ctx: commands.Context) -> None:
        try:
            result = await self.container.playback_service.skip(ctx.guild.id)
        except DomainError as exc:
            await self._reply_error(ctx, exc)
            return

        skipped = truncate(result.skipped.title)
        if result.now_playing is not None:
            await ctx.send(
                DiscordUIMessages.SKIPPED_NOW_PLAYING.format(
                    title=skipped, next_title=truncate(result.now_playing.title)
                )
            )
        else:
            await ctx.send(DiscordUIMessages.SKIPPED.format(title=skipped))

    @commands.hybrid_command(name="stop", description="Stop playback and clear the queue.")
    @commands.guild_only()
    async def stop(self, ctx: commands.Context) -> None:
        try:
            count = await self.container.playback_service.stop(ctx.guild.id)
        except DomainError as exc:
            await self._reply_error(ctx, exc)
            return

        if count:
            await ctx.send(DiscordUIMessages.STOPPED.format(count=count))
        else:
            await ctx.send(DiscordUIMessages.STOPPED_NOTHING)

    @commands.hybrid_command(name="queue", description="Show what is playing and what's next.")
    @commands.guild_only()
    async def queue(self, ctx: commands.Context) -> None:
        try:
            status = await self.container.playback_service.status(
                ctx.guild.id, limit=LimitConstants.QUEUE_DISPLAY_LIMIT
            )
        except DomainError as exc:
            await self._reply_error(ctx, exc)
            return
        await ctx.send(format_queue_status(status))


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaybackCog(bot, container))
