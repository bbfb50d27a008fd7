"""NBA standings color board.

Merges league standings with team statistics, derives possession-based
efficiency metrics, and colors every metric by where the team sits within
the league.

Example:
    >>> from nba_standings.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.data_dir)
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "NBA Standings Team"

# Public API exports
from nba_standings.config import Settings, get_settings

__all__ = [
    "Settings",
    "__author__",
    "__version__",
    "get_settings",
]
