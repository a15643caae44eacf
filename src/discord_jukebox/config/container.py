"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the resolver, voice transport, session registry
and playback services. Components are created on first access and cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.channel_messenger import ChannelMessenger
    from ..application.interfaces.media_tool import MediaTool
    from ..application.interfaces.voice_transport import VoiceTransport
    from ..application.services.event_notifier import EventNotifier
    from ..application.services.playback_service import PlaybackApplicationService
    from ..application.services.session_registry import SessionRegistry
    from ..application.services.source_resolver import SourceResolver
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    The Discord-backed adapters need the bot, so ``set_bot`` must run before
    ``voice_transport`` or ``channel_messenger`` is first accessed. Tests can
    pre-populate the private slots with fakes.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _media_tool: MediaTool | None = None
    _voice_transport: VoiceTransport | None = None
    _channel_messenger: ChannelMessenger | None = None

    # Application services
    _source_resolver: SourceResolver | None = None
    _session_registry: SessionRegistry | None = None
    _event_notifier: EventNotifier | None = None
    _playback_service: PlaybackApplicationService | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Adapters ===

    @property
    def media_tool(self) -> MediaTool:
        if self._media_tool is None:
            from ..infrastructure.audio.ytdlp_tool import YtDlpTool

            self._media_tool = YtDlpTool(self.settings.resolver)
        return self._media_tool

    @property
    def voice_transport(self) -> VoiceTransport:
        if self._voice_transport is None:
            from ..infrastructure.discord.adapters.voice_transport import (
                DiscordVoiceTransport,
            )

            self._voice_transport = DiscordVoiceTransport(self.bot, self.settings.audio)
        return self._voice_transport

    @property
    def channel_messenger(self) -> ChannelMessenger:
        if self._channel_messenger is None:
            from ..infrastructure.discord.adapters.channel_messenger import (
                DiscordChannelMessenger,
            )

            self._channel_messenger = DiscordChannelMessenger(self.bot)
        return self._channel_messenger

    # === Application Services ===

    @property
    def source_resolver(self) -> SourceResolver:
        """Get the source resolver."""
        if self._source_resolver is None:
            from ..application.services.source_resolver import SourceResolver

            self._source_resolver = SourceResolver(self.media_tool, self.settings.resolver)
        return self._source_resolver

    @property
    def session_registry(self) -> SessionRegistry:
        """Get the guild session registry."""
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry(self.voice_transport)
        return self._session_registry

    @property
    def event_notifier(self) -> EventNotifier:
        """Get the track event notifier."""
        if self._event_notifier is None:
            from ..application.services.event_notifier import EventNotifier

            self._event_notifier = EventNotifier(self.channel_messenger)
        return self._event_notifier

    @property
    def playback_service(self) -> PlaybackApplicationService:
        """Get the playback application service."""
        if self._playback_service is None:
            from ..application.services.playback_service import (
                PlaybackApplicationService,
            )

            self._playback_service = PlaybackApplicationService(
                registry=self.session_registry,
                resolver=self.source_resolver,
                transport=self.voice_transport,
                notifier=self.event_notifier,
            )
        return self._playback_service

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Build the service graph so the notifier is wired before any command runs."""
        _ = self.playback_service

    async def shutdown(self) -> None:
        """Leave every voice session."""
        if self._session_registry is not None:
            await self._session_registry.shutdown()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
