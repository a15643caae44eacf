"""Domain-level error taxonomy shared by the resolver, registry and queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from discord_jukebox.domain.music.value_objects import ResolveStage


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class NotConnectedError(DomainError):
    """Raised when a guild has no active voice session."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or f"No voice session for guild {guild_id}"
        super().__init__(msg, code="NOT_CONNECTED")
        self.guild_id = guild_id


class AlreadyConnectedError(DomainError):
    """Raised by the transport when a voice connection already exists.

    Never shown to users: the registry treats it as a stale connection and
    reconnects.
    """

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or f"Already connected to voice in guild {guild_id}"
        super().__init__(msg, code="ALREADY_CONNECTED")
        self.guild_id = guild_id


class QueueEmptyError(DomainError):
    """Raised when an operation needs a playing entry and there is none."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or f"Nothing is playing in guild {guild_id}"
        super().__init__(msg, code="QUEUE_EMPTY")
        self.guild_id = guild_id


class ResolveError(DomainError):
    """Raised when a request could not be turned into a playable stream."""

    def __init__(self, stage: ResolveStage, underlying_message: str) -> None:
        super().__init__(
            f"{stage.value} resolution failed: {underlying_message}", code="RESOLVE_ERROR"
        )
        self.stage = stage
        self.underlying_message = underlying_message


class TransportError(DomainError):
    """Raised when the voice transport fails to connect or play."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"Voice transport {operation} failed: {message}", code="TRANSPORT_ERROR")
        self.operation = operation


class MediaToolError(DomainError):
    """Raised when the external media tool exits non-zero or prints nothing."""

    def __init__(self, returncode: int | None, stderr: str = "") -> None:
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(f"media tool exited with {returncode}: {detail}", code="MEDIA_TOOL_ERROR")
        self.returncode = returncode
        self.stderr = stderr
