"""Data layer for the standings board.

Submodules:
    models: pydantic ingestion models for both feeds
    api: HTTPS client for the remote feeds
    cache: time-based snapshot cache
    pipelines: ordered feed resolution and board build

Example:
    >>> from nba_standings.data.pipelines import StandingsPipeline
    >>> result = StandingsPipeline().run()
"""
from __future__ import annotations

from nba_standings.data.api import RemoteFetcher, XmlStatsClient
from nba_standings.data.cache import (
    LAST_CHECKED_FIELD,
    STANDINGS,
    TEAM_STATS,
    CacheSnapshot,
    Dataset,
    TimeBasedCache,
)
from nba_standings.data.models import (
    RawTeamStat,
    StandingRecord,
    Streak,
    StreakType,
    TeamStatsEntry,
)

__all__ = [
    "LAST_CHECKED_FIELD",
    "STANDINGS",
    "TEAM_STATS",
    "CacheSnapshot",
    "Dataset",
    "RawTeamStat",
    "RemoteFetcher",
    "StandingRecord",
    "Streak",
    "StreakType",
    "TeamStatsEntry",
    "TimeBasedCache",
    "XmlStatsClient",
]
