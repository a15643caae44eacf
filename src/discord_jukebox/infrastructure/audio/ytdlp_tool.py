"""MediaTool implementation that shells out to the yt-dlp executable."""

from __future__ import annotations

import asyncio
import json
import logging
import shlex

from pydantic import ValidationError

from discord_jukebox.application.interfaces.media_tool import MediaInfo, MediaTool
from discord_jukebox.config.settings import ResolverSettings
from discord_jukebox.domain.music.value_objects import ResolverArgs
from discord_jukebox.domain.shared.exceptions import MediaToolError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.models import YtDlpTrackInfo

logger = logging.getLogger(__name__)

LOG_REQUEST_TRUNCATE = 80

# Always ask for a single JSON document and keep stderr to real errors.
_BASE_FLAGS = ("--dump-single-json", "--no-warnings", "--quiet", "--no-progress")


def build_command(executable: str, request: str, args: ResolverArgs) -> list[str]:
    """Translate a ResolverArgs set into a yt-dlp argv."""
    command = [executable, *_BASE_FLAGS]

    if args.no_playlist:
        command.append("--no-playlist")
    if args.format_filter:
        command += ["--format", args.format_filter]
    if args.retries is not None:
        command += ["--retries", str(args.retries)]
    if args.fragment_retries is not None:
        command += ["--fragment-retries", str(args.fragment_retries)]
    if args.abort_on_unavailable_fragment:
        command.append("--abort-on-unavailable-fragments")
    if args.socket_timeout is not None:
        command += ["--socket-timeout", str(args.socket_timeout)]
    if args.extractor_variant:
        command += ["--extractor-args", args.extractor_variant]
    if args.skip_cert_check:
        command.append("--no-check-certificates")

    command += ["--", request]
    return command


class YtDlpTool(MediaTool):
    """Runs ``yt-dlp --dump-single-json`` once per call."""

    def __init__(self, settings: ResolverSettings | None = None) -> None:
        self._settings = settings or ResolverSettings()
        self._executable = self._settings.executable

    async def run(self, request: str, args: ResolverArgs) -> str:
        command = build_command(self._executable, request, args)
        logger.debug(LogTemplates.TOOL_INVOKED, shlex.join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise MediaToolError(
                None, ErrorMessages.TOOL_NOT_FOUND.format(executable=self._executable)
            ) from exc

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise
        output = stdout.decode("utf-8", errors="replace").strip()

        if process.returncode != 0:
            logger.warning(
                LogTemplates.TOOL_FAILED, process.returncode, request[:LOG_REQUEST_TRUNCATE]
            )
            raise MediaToolError(process.returncode, stderr.decode("utf-8", errors="replace"))
        if not output:
            raise MediaToolError(process.returncode, ErrorMessages.EMPTY_TOOL_OUTPUT)
        return output

    def parse(self, output: str) -> MediaInfo:
        try:
            data = json.loads(output)
            info = YtDlpTrackInfo.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as exc:
            raise MediaToolError(
                0, ErrorMessages.UNPARSEABLE_TOOL_OUTPUT.format(error=exc)
            ) from exc

        if "entries" in data and not info.entries:
            raise MediaToolError(0, ErrorMessages.NO_SEARCH_RESULTS)

        track = info.first_playable()
        if track is None or not track.stream_url:
            raise MediaToolError(0, ErrorMessages.NO_PLAYABLE_STREAM)

        return MediaInfo(
            stream_url=track.stream_url,
            title=track.title,
            webpage_url=track.webpage_url,
            duration_seconds=track.duration,
            uploader=track.uploader or track.channel,
        )
