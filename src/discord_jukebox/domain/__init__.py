"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Error taxonomy, constrained types and message constants
- music/: Track requests, resolved tracks and the playback queue
"""

from discord_jukebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
