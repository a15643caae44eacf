"""Shared Pydantic validators for domain models and settings.

Discord snowflake IDs arrive from several places (settings, command context),
so the range check lives here once.
"""

from discord_jukebox.domain.shared.messages import ErrorMessages


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Args:
        value: The snowflake ID to validate.

    Returns:
        The validated snowflake ID.

    Raises:
        ValueError: If the snowflake ID is out of range.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def validate_snowflake_list(values: list[int]) -> list[int]:
    """Validate every ID in a list of snowflakes."""
    return [validate_discord_snowflake(v) for v in values]
