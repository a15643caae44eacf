"""Pydantic models for parsing yt-dlp JSON output.

These are infrastructure-specific models for the ``--dump-single-json`` document
yt-dlp prints. Extra fields are ignored and before-validators coerce garbage
from the external tool into ``None`` rather than failing the whole parse.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_jukebox.domain.shared.types import NonEmptyStr, NonNegativeInt

UNKNOWN_TITLE = "Unknown Title"


class AudioFormatInfo(BaseModel):
    """A single format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None
    abr: float | None = None

    @field_validator("abr", mode="before")
    @classmethod
    def _coerce_bitrate(cls, v: Any) -> float | None:
        if isinstance(v, bool) or not isinstance(v, int | float):
            return None
        return float(v)

    @property
    def has_audio(self) -> bool:
        return bool(self.url) and self.acodec != "none"


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result.

    A search (``ytsearch1:``) yields a playlist document whose first entry is
    the actual track; ``first_playable`` unwraps it.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    webpage_url: NonEmptyStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = UNKNOWN_TITLE
    duration: NonNegativeInt | None = None
    uploader: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)
    entries: list[YtDlpTrackInfo] = Field(default_factory=list)

    @field_validator("webpage_url", "url", "uploader", "channel", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return UNKNOWN_TITLE
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """Coerce to non-negative int; return None for garbage values."""
        if v is None:
            return None
        try:
            val = int(v)
            return val if val >= 0 else None
        except (TypeError, ValueError):
            return None

    @field_validator("formats", "entries", mode="before")
    @classmethod
    def _drop_null_items(cls, v: Any) -> list[Any]:
        # yt-dlp emits null for entries it could not extract
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]

    @property
    def stream_url(self) -> str | None:
        """Selected format URL, or the last audio-bearing format as a fallback."""
        if self.url:
            return self.url
        audio_formats = [f for f in self.formats if f.has_audio]
        if audio_formats:
            return audio_formats[-1].url
        return None

    def first_playable(self) -> YtDlpTrackInfo | None:
        if self.entries:
            return self.entries[0]
        if self.stream_url:
            return self
        return None


YtDlpTrackInfo.model_rebuild()
