"""Port interface for the external media-resolution tool."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from discord_jukebox.domain.shared.types import NonEmptyStr

if TYPE_CHECKING:
    from ...domain.music.value_objects import ResolverArgs


class MediaInfo(BaseModel):
    """Tool-neutral description of one playable stream."""

    model_config = ConfigDict(frozen=True)

    stream_url: NonEmptyStr
    title: NonEmptyStr
    webpage_url: str | None = None
    duration_seconds: int | None = None
    uploader: str | None = None


class MediaTool(ABC):
    """Black-box tool that maps a request string to a stream descriptor."""

    @abstractmethod
    async def run(self, request: NonEmptyStr, args: ResolverArgs) -> str:
        """Invoke the tool once and return its raw output.

        Raises MediaToolError on a non-zero exit or empty output.
        """
        ...

    @abstractmethod
    def parse(self, output: str) -> MediaInfo:
        """Turn raw tool output into a MediaInfo; raises MediaToolError if unusable."""
        ...

    async def describe(self, request: NonEmptyStr, args: ResolverArgs) -> MediaInfo:
        """Run the tool and parse its output in one step."""
        return self.parse(await self.run(request, args))
