"""Main Discord bot class integrating the DI container and cog lifecycle."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COG_MODULES = (
    "discord_jukebox.infrastructure.discord.cogs.playback_cog",
    "discord_jukebox.infrastructure.discord.cogs.voice_events_cog",
)


class JukeboxBot(commands.Bot):
    def __init__(
        self,
        container: Container,
        settings: Settings,
        **kwargs,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.voice_states = True
        intents.guilds = True

        super().__init__(
            command_prefix=settings.discord.command_prefix,
            intents=intents,
            owner_ids=set(settings.discord.owner_ids),
            **kwargs,
        )

        self.container = container
        self.settings = settings
        container.set_bot(self)

    async def setup_hook(self) -> None:
        await self.container.initialize()
        logger.info(LogTemplates.CONTAINER_INITIALIZED)

        await self._load_cogs()

        if self.settings.discord.sync_on_startup:
            await self._sync_commands()

    async def _load_cogs(self) -> None:
        for cog in COG_MODULES:
            try:
                await self.load_extension(cog)
                logger.info(LogTemplates.COG_LOADED, cog)
            except commands.ExtensionError as e:
                logger.exception(LogTemplates.COG_LOAD_FAILED, cog, e)

    async def _sync_commands(self) -> None:
        for guild_id in self.settings.discord.test_guild_ids:
            guild = discord.Object(id=guild_id)
            try:
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.info(LogTemplates.COMMANDS_SYNCED_GUILD, len(synced), guild_id)
            except discord.HTTPException as e:
                logger.warning(LogTemplates.COMMANDS_SYNC_FAILED, e)

        try:
            synced = await self.tree.sync()
            logger.info(LogTemplates.COMMANDS_SYNCED_GLOBAL, len(synced))
        except discord.HTTPException as e:
            logger.warning(LogTemplates.COMMANDS_SYNC_FAILED, e)

    async def on_command_error(
        self, ctx: commands.Context, error: commands.CommandError
    ) -> None:
        """Global prefix/hybrid command error handler; the process never crashes on a command."""
        if isinstance(error, commands.CommandNotFound):
            return
        if isinstance(error, commands.NoPrivateMessage):
            text = DiscordUIMessages.ERROR_GUILD_ONLY
        elif isinstance(error, commands.MissingRequiredArgument):
            text = DiscordUIMessages.ERROR_MISSING_ARGUMENT.format(param=error.param.name)
        else:
            original = getattr(error, "original", error)
            logger.error(
                LogTemplates.UNHANDLED_COMMAND_ERROR,
                ctx.command.qualified_name if ctx.command else "<unknown>",
                exc_info=original,
            )
            text = DiscordUIMessages.ERROR_UNEXPECTED

        try:
            await ctx.send(text, ephemeral=True)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.STATUS_SEND_FAILED, ctx.channel.id, e)

    async def on_ready(self) -> None:
        logger.info(
            LogTemplates.BOT_READY,
            self.user,  # type: ignore
            self.user.id,  # type: ignore
        )
        logger.info(LogTemplates.BOT_GUILDS, len(self.guilds))

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)
        await self.container.shutdown()
        await super().close()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        async def runner():
            async with self:
                loop = asyncio.get_running_loop()

                async def _graceful_close(sig: signal.Signals) -> None:
                    logger.info(LogTemplates.SIGNAL_RECEIVED, sig.name)
                    try:
                        await asyncio.wait_for(self.close(), timeout=shutdown_timeout)
                    except TimeoutError:
                        logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, shutdown_timeout)

                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(
                        sig, lambda s=sig: asyncio.create_task(_graceful_close(s))
                    )
                await self.start(token)

        asyncio.run(runner())


def create_bot(container: Container, settings: Settings) -> JukeboxBot:
    return JukeboxBot(container=container, settings=settings)
