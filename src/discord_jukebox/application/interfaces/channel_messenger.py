"""Port interface for posting status text to a chat channel."""

from __future__ import annotations

from abc import ABC, abstractmethod

from discord_jukebox.domain.shared.types import ChannelIdField, NonEmptyStr


class ChannelMessenger(ABC):

    @abstractmethod
    async def send(self, channel_id: ChannelIdField, text: NonEmptyStr) -> None:
        """Post ``text`` to a text channel."""
        ...
