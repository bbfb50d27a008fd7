"""Type definitions and exceptions for the standings board.

Example:
    >>> from nba_standings.types import TeamJoinError
    >>> raise TeamJoinError("no team stats for 'boston-celtics'")
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Type Aliases
# =============================================================================

TeamKey = str
DatasetName = str
Payload = dict[str, Any]
MetricsMap = dict[str, float]


# =============================================================================
# Exceptions
# =============================================================================


class StandingsError(Exception):
    """Base exception for standings board errors."""


class CacheError(StandingsError):
    """Cached snapshot is missing or malformed."""


class FetchError(StandingsError):
    """Remote dataset could not be fetched."""


class TeamJoinError(StandingsError):
    """A standings entry has no matching team-stats entry."""


class RenderError(StandingsError):
    """Standings board could not be rendered."""
