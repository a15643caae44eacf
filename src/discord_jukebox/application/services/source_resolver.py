"""Source Resolver - turns a track request into a playable stream descriptor.

Each provider maps to an ordered tuple of resolution strategies. Strategies are
tried in order, each exactly once; the first success wins and the last failure
is raised. The alternate provider gets a fast path (forced API variant) backed
by a robust path (extended retries, relaxed certificate checks).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...config.settings import ResolverSettings
from ...domain.music.entities import ResolvedTrack, TrackRequest
from ...domain.music.value_objects import Provider, Requester, ResolverArgs, ResolveStage
from ...domain.shared.exceptions import MediaToolError, ResolveError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DurationSeconds

if TYPE_CHECKING:
    from ..interfaces.media_tool import MediaInfo, MediaTool

logger = logging.getLogger(__name__)

_MAX_TITLE_LENGTH = 500
_MAX_DURATION_SECONDS = 86_400


@dataclass(frozen=True)
class ResolutionStrategy:
    """One attempt at resolving a request: a stage label plus its tool arguments."""

    stage: ResolveStage
    args: ResolverArgs

    def request_string(self, request: TrackRequest) -> str:
        if self.args.search_prefix:
            return f"{self.args.search_prefix}{request.query}"
        return request.query


StrategyChains = Mapping[Provider, tuple[ResolutionStrategy, ...]]


def build_strategy_chains(settings: ResolverSettings) -> StrategyChains:
    """Build the per-provider fallback policy from settings."""
    base = ResolverArgs(no_playlist=True, format_filter=settings.format_filter)

    direct = ResolutionStrategy(
        ResolveStage.DIRECT,
        base.with_overrides(
            retries=settings.direct_retries,
            socket_timeout=settings.direct_socket_timeout,
        ),
    )
    fast = ResolutionStrategy(
        ResolveStage.FAST,
        base.with_overrides(
            extractor_variant=settings.fast_extractor_variant,
            socket_timeout=settings.fast_socket_timeout,
        ),
    )
    robust = ResolutionStrategy(
        ResolveStage.ROBUST,
        base.with_overrides(
            retries=settings.robust_retries,
            fragment_retries=settings.robust_fragment_retries,
            abort_on_unavailable_fragment=True,
            skip_cert_check=True,
            socket_timeout=settings.robust_socket_timeout,
        ),
    )
    search = ResolutionStrategy(
        ResolveStage.SEARCH,
        base.with_overrides(
            retries=settings.search_retries,
            socket_timeout=settings.search_socket_timeout,
            search_prefix=settings.search_prefix,
        ),
    )

    return {
        Provider.YOUTUBE: (direct,),
        Provider.GENERIC_URL: (direct,),
        Provider.SOUNDCLOUD: (fast, robust),
        Provider.SEARCH: (search,),
    }


class SourceResolver:
    """Resolves track requests through the media tool using per-provider chains."""

    def __init__(
        self,
        media_tool: MediaTool,
        settings: ResolverSettings | None = None,
        *,
        chains: StrategyChains | None = None,
    ) -> None:
        self._tool = media_tool
        self._settings = settings or ResolverSettings()
        self._chains = chains or build_strategy_chains(self._settings)

    def parse_request(self, query: str, requester: Requester | None = None) -> TrackRequest:
        """Classify raw user input using the configured provider hosts."""
        return TrackRequest.parse(
            query,
            requester,
            primary_hosts=self._settings.primary_hosts,
            alternate_hosts=self._settings.alternate_hosts,
        )

    def strategies_for(self, provider: Provider) -> tuple[ResolutionStrategy, ...]:
        return self._chains[provider]

    async def resolve(self, request: TrackRequest) -> ResolvedTrack:
        """Resolve ``request``; raises ResolveError from the last attempted stage."""
        last_error: ResolveError | None = None
        for strategy in self.strategies_for(request.provider):
            try:
                return await self.attempt(strategy, request)
            except ResolveError as exc:
                logger.warning(
                    LogTemplates.RESOLVE_STAGE_FAILED,
                    strategy.stage.value,
                    request.query,
                    exc.underlying_message,
                )
                last_error = exc

        if last_error is None:
            raise ResolveError(ResolveStage.DIRECT, f"no strategy for {request.provider.value}")
        raise last_error

    async def attempt(self, strategy: ResolutionStrategy, request: TrackRequest) -> ResolvedTrack:
        """Run a single strategy once."""
        logger.debug(LogTemplates.RESOLVE_ATTEMPT, request.query, strategy.stage.value)
        try:
            info = await self._tool.describe(strategy.request_string(request), strategy.args)
        except MediaToolError as exc:
            raise ResolveError(strategy.stage, exc.message) from exc

        track = self._to_track(info, strategy)
        logger.info(
            LogTemplates.RESOLVE_SUCCEEDED, request.query, strategy.stage.value, track.title
        )
        return track

    @staticmethod
    def _to_track(info: MediaInfo, strategy: ResolutionStrategy) -> ResolvedTrack:
        duration: DurationSeconds | None = info.duration_seconds
        if duration is not None and not 0 <= duration <= _MAX_DURATION_SECONDS:
            duration = None

        return ResolvedTrack(
            stream_url=info.stream_url,
            title=info.title[:_MAX_TITLE_LENGTH],
            webpage_url=info.webpage_url or None,
            duration_seconds=duration,
            uploader=info.uploader or None,
            provenance=strategy.stage,
            args=strategy.args,
        )
