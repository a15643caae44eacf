"""Centralized message constants for error messages, log lines, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Request Validation Errors
    EMPTY_QUERY = "Track request cannot be empty"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"

    # Media Tool Errors
    EMPTY_TOOL_OUTPUT = "Media tool produced no output"
    UNPARSEABLE_TOOL_OUTPUT = "Media tool output is not valid JSON: {error}"
    NO_SEARCH_RESULTS = "No results for search query"
    NO_PLAYABLE_STREAM = "No playable stream in media tool output"
    TOOL_NOT_FOUND = "Media tool executable not found: {executable}"

    # Transport Errors
    NO_VOICE_CHANNEL = "Voice channel {channel_id} not found"
    CONNECT_TIMEOUT = "Timed out connecting to voice channel {channel_id}"
    NOT_VOICE_CONNECTED = "Not connected to voice in guild {guild_id}"
    TRACK_INFO_UNAVAILABLE = "No diagnostic information for this track"

    # Lifecycle Errors
    CONTAINER_NOT_FOUND = "Container not found on bot instance"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Session Lifecycle
    SESSION_CREATED = "Created voice session for guild %s in channel %s"
    SESSION_REUSED = "Reusing voice session for guild %s"
    SESSION_DESTROYED = "Destroyed voice session for guild %s"
    SESSION_ORPHANED = "Dropping orphaned voice session for guild %s after disconnect"
    STALE_CONNECTION = "Stale voice connection in guild %s; reconnecting"
    REGISTRY_SHUTDOWN = "Leaving %d voice session(s) on shutdown"

    # Resolver
    RESOLVE_ATTEMPT = "Resolving %r via %s stage"
    RESOLVE_SUCCEEDED = "Resolved %r via %s stage: %s"
    RESOLVE_STAGE_FAILED = "%s stage failed for %r: %s"
    TOOL_INVOKED = "Invoking media tool: %s"
    TOOL_FAILED = "Media tool exited with %s for %r"

    # Queue
    TRACK_ENQUEUED = "Enqueued %r in guild %s at position %d"
    TRACK_STARTED = "Started %r in guild %s"
    TRACK_PLAY_FAILED = "Transport failed to play %r in guild %s: %s"
    TRACK_SKIPPED = "Skipped %r in guild %s"
    QUEUE_STOPPED = "Stopped playback in guild %s (%d entries cleared)"
    QUEUE_IDLE = "Queue idle in guild %s"

    # Events
    TRACK_EVENT = "Track event %s for %r in guild %s"
    STALE_TRACK_EVENT = "Ignoring stale %s event for %r in guild %s"
    TRACK_INFO_FAILED = "Could not fetch diagnostic info for %r: %s"
    STATUS_SEND_FAILED = "Failed to post status to channel %s: %s"
    PLAYER_ERROR = "Player error in guild %s: %s"

    # Voice
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_LOST = "Lost voice connection in guild %s"
    VOICE_MOVED = "Bot moved to voice channel %s in guild %s"

    # Bot Lifecycle
    BOT_STARTING = "Starting bot (environment=%s)..."
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Interrupted by user"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %.0fs"
    BOT_READY = "Bot ready as %s (ID: %s)"
    BOT_GUILDS = "Connected to %d guilds"
    BOT_SHUTTING_DOWN = "Shutting down..."
    BOT_SHUTDOWN_COMPLETE = "Shutdown complete"
    BOT_GUILD_JOINED = "Joined guild: %s (ID: %s)"
    BOT_GUILD_REMOVED = "Removed from guild: %s (ID: %s)"
    CONTAINER_INITIALIZED = "Container initialized"
    COG_LOADED = "Loaded cog: %s"
    COG_LOAD_FAILED = "Failed to load cog %s: %s"
    COMMANDS_SYNCED_GUILD = "Synced %d commands to guild %s"
    COMMANDS_SYNCED_GLOBAL = "Synced %d commands globally"
    COMMANDS_SYNC_FAILED = "Failed to sync commands: %s"
    SIGNAL_RECEIVED = "Received signal %s, initiating shutdown..."

    # Commands
    COMMAND_FAILED = "Command %s failed in guild %s: %s"
    UNHANDLED_COMMAND_ERROR = "Unhandled error in command %s"


class DiscordUIMessages:
    """User-facing Discord reply and status text."""

    # Context Errors
    ERROR_GUILD_ONLY = "This command can only be used in a server."
    ERROR_USER_NOT_IN_VOICE = "You must be in a voice channel to use this command."

    # Session Errors
    ERROR_NOT_CONNECTED = "I'm not in a voice channel. Use `join` first."
    ERROR_QUEUE_EMPTY = "Nothing is playing right now."
    ERROR_RESOLVE_FAILED = "Couldn't find anything playable for **{query}** ({stage})."
    ERROR_TRANSPORT = "Voice connection problem: {detail}"
    ERROR_INVALID_OPERATION = "That can't be done right now."
    ERROR_UNEXPECTED = "Something went wrong while running that command."
    ERROR_MISSING_ARGUMENT = "Missing argument: `{param}`."
    ERROR_EMPTY_QUERY = "Give me a URL or something to search for."

    # Command Replies
    JOINED_CHANNEL = "Joined **{channel}**."
    ALREADY_JOINED = "Already connected in this server."
    LEFT_CHANNEL = "Left the voice channel."
    NOW_PLAYING = "Now playing: **{title}**"
    ADDED_TO_QUEUE = "Added to queue (#{position}): **{title}**"
    SKIPPED = "Skipped **{title}**."
    SKIPPED_NOW_PLAYING = "Skipped **{title}**. Now playing: **{next_title}**"
    STOPPED = "Stopped playback and cleared {count} track(s)."
    STOPPED_NOTHING = "Nothing to stop."

    # Queue Display
    QUEUE_EMPTY = "The queue is empty."
    QUEUE_HEADER = "**Queue** ({length} track(s))"
    QUEUE_CURRENT = "▶️ {title} [{duration}]"
    QUEUE_ITEM = "{position}. {title} [{duration}]"
    QUEUE_MORE = "...and {count} more"

    # Track Lifecycle Status
    STATUS_TRACK_FINISHED = "Track finished: **{title}**"
    STATUS_TRACK_ERRORED = "Error playing **{title}**: {detail}"
