"""Color mapping and board rendering.

Submodules:
    gradient: value -> RGB color against league ranges
    board: HTML/JSON rendering of the colored board
"""

from __future__ import annotations

from nba_standings.output.board import DEFAULT_COLUMNS, BoardColumn, StandingsBoard
from nba_standings.output.gradient import (
    COLOR_HI,
    COLOR_LOW,
    COLOR_MID,
    Color,
    Polarity,
    blend,
    from_percent,
    from_range,
    from_spread,
)

__all__ = [
    "COLOR_HI",
    "COLOR_LOW",
    "COLOR_MID",
    "DEFAULT_COLUMNS",
    "BoardColumn",
    "Color",
    "Polarity",
    "StandingsBoard",
    "blend",
    "from_percent",
    "from_range",
    "from_spread",
]
