"""ChannelMessenger backed by the bot's channel cache."""

from __future__ import annotations

import logging

import discord

from discord_jukebox.application.interfaces.channel_messenger import ChannelMessenger
from discord_jukebox.domain.shared.constants import LimitConstants

logger = logging.getLogger(__name__)


class DiscordChannelMessenger(ChannelMessenger):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    async def send(self, channel_id: int, text: str) -> None:
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            channel = await self._bot.fetch_channel(channel_id)

        if not isinstance(channel, discord.abc.Messageable):
            logger.warning("Channel %s cannot receive messages", channel_id)
            return

        await channel.send(
            text[: LimitConstants.MAX_MESSAGE_LENGTH],
            allowed_mentions=discord.AllowedMentions.none(),
        )
