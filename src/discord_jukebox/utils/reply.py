"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from discord_jukebox.domain.shared.constants import LimitConstants
from discord_jukebox.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from discord_jukebox.domain.music.entities import QueueStatus


def truncate(text: str, max_length: int = LimitConstants.MAX_TITLE_DISPLAY_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def format_queue_status(status: QueueStatus) -> str:
    """Render a queue snapshot as a short multi-line chat message."""
    if status.length == 0:
        return DiscordUIMessages.QUEUE_EMPTY

    lines = [DiscordUIMessages.QUEUE_HEADER.format(length=status.length)]
    if status.current is not None:
        lines.append(
            DiscordUIMessages.QUEUE_CURRENT.format(
                title=truncate(status.current.title),
                duration=status.current.duration_formatted,
            )
        )

    for item in status.upcoming:
        lines.append(
            DiscordUIMessages.QUEUE_ITEM.format(
                position=item.position,
                title=truncate(item.title),
                duration=item.duration_formatted,
            )
        )

    shown = len(status.upcoming) + (1 if status.current is not None else 0)
    if status.length > shown:
        lines.append(DiscordUIMessages.QUEUE_MORE.format(count=status.length - shown))

    return "\n".join(lines)
