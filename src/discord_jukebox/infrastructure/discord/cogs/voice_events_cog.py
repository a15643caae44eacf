"""Discord event listeners that keep guild sessions in step with the gateway."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class VoiceEventsCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    def _is_self(self, member: discord.abc.User) -> bool:
        return self.bot.user is not None and member.id == self.bot.user.id

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        if not self._is_self(member):
            return

        guild_id = member.guild.id
        if before.channel is not None and after.channel is None:
            # Kicked, channel deleted or connection lost; a deliberate leave
            # has already removed the session by the time this arrives.
            dropped = await self.container.session_registry.handle_transport_disconnect(guild_id)
            if dropped:
                logger.warning(LogTemplates.VOICE_LOST, guild_id)
        elif (
            before.channel is not None
            and after.channel is not None
            and before.channel.id != after.channel.id
        ):
            logger.info(LogTemplates.VOICE_MOVED, after.channel.id, guild_id)

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.BOT_GUILD_JOINED, guild.name, guild.id)

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.BOT_GUILD_REMOVED, guild.name, guild.id)
        await self.container.session_registry.handle_transport_disconnect(guild.id)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(VoiceEventsCog(bot, container))
