"""
Shared Domain Kernel

Contains the error taxonomy and message constants used across the bot.
"""

from discord_jukebox.domain.shared.exceptions import (
    AlreadyConnectedError,
    DomainError,
    InvalidOperationError,
    MediaToolError,
    NotConnectedError,
    QueueEmptyError,
    ResolveError,
    TransportError,
)

__all__ = [
    "DomainError",
    "InvalidOperationError",
    "NotConnectedError",
    "AlreadyConnectedError",
    "QueueEmptyError",
    "ResolveError",
    "TransportError",
    "MediaToolError",
]
