"""Board build pipeline.

Resolves both cached feeds in a fixed order and hands them to the
enricher:

    1. team-stats: load, refresh if stale, persist (fully completes first)
    2. standings: load, refresh if stale, persist
    3. enrich: join, derive, rank, color

Data moves between the steps only through return values.

Example:
    >>> from nba_standings.data.pipelines import StandingsPipeline
    >>> result = StandingsPipeline().run()
    >>> result.board["title"]
    'Standings'
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from nba_standings.config import get_settings
from nba_standings.data.api import XmlStatsClient
from nba_standings.data.cache import STANDINGS, TEAM_STATS, CacheSnapshot, TimeBasedCache
from nba_standings.features.enrichment import StandingsEnricher

if TYPE_CHECKING:
    from nba_standings.config import Settings
    from nba_standings.data.api import RemoteFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetStatus:
    """Freshness of one dataset after resolution."""

    name: str
    last_checked_at: datetime | None
    refreshed: bool

    @classmethod
    def from_snapshot(cls, snapshot: CacheSnapshot) -> DatasetStatus:
        return cls(
            name=snapshot.dataset.name,
            last_checked_at=snapshot.last_checked_at,
            refreshed=snapshot.refreshed,
        )


@dataclass
class PipelineResult:
    """Board hand-off object plus dataset freshness."""

    board: dict[str, Any]
    datasets: list[DatasetStatus] = field(default_factory=list)


class StandingsPipeline:
    """Resolves the feeds and builds the colored board.

    Attributes:
        cache: Snapshot cache for both feeds.
        fetcher: Remote fetcher used when a snapshot is stale.
        enricher: Board builder.
    """

    def __init__(
        self,
        cache: TimeBasedCache | None = None,
        fetcher: RemoteFetcher | None = None,
        enricher: StandingsEnricher | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.cache = cache or TimeBasedCache(self.settings.data_dir_obj)
        self.fetcher = fetcher or XmlStatsClient()
        self.enricher = enricher or StandingsEnricher()

    def resolve_team_stats(self) -> CacheSnapshot:
        return self.cache.resolve(
            TEAM_STATS, self.fetcher, self.settings.team_stats_max_cache_hours
        )

    def resolve_standings(self) -> CacheSnapshot:
        return self.cache.resolve(
            STANDINGS, self.fetcher, self.settings.standings_max_cache_hours
        )

    def run(self) -> PipelineResult:
        """Resolve team-stats, then standings, then build the board.

        Raises:
            CacheError: If a cache file is missing or malformed.
            TeamJoinError: If a standings row has no team-stats entry.
        """
        logger.info("Processing team stats...")
        team_stats = self.resolve_team_stats()

        logger.info("Processing standings...")
        standings = self.resolve_standings()

        board = self.enricher.enrich(standings.payload, team_stats.payload)

        return PipelineResult(
            board=board,
            datasets=[
                DatasetStatus.from_snapshot(team_stats),
                DatasetStatus.from_snapshot(standings),
            ],
        )
