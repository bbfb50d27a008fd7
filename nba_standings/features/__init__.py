"""Metric derivation and league ranking.

Submodules:
    metrics: possession-based efficiency metrics per team
    population: league {min, median, max} per metric
    enrichment: join, derive, rank and color the standings

Example:
    >>> from nba_standings.features import StandingsEnricher
    >>> board = StandingsEnricher().enrich(standings_payload, team_stats_payload)
"""

from __future__ import annotations

from nba_standings.features.enrichment import (
    OPPONENT_COLORED_METRICS,
    TEAM_COLORED_METRICS,
    ColoredMetric,
    EnrichedTeamRecord,
    LeagueAggregates,
    StandingsEnricher,
)
from nba_standings.features.metrics import DerivedMetrics, derive_metrics, estimate_possessions
from nba_standings.features.population import (
    PopulationRange,
    compute_range,
    compute_ranges,
    median,
)

__all__ = [
    "OPPONENT_COLORED_METRICS",
    "TEAM_COLORED_METRICS",
    "ColoredMetric",
    "DerivedMetrics",
    "EnrichedTeamRecord",
    "LeagueAggregates",
    "PopulationRange",
    "StandingsEnricher",
    "compute_range",
    "compute_ranges",
    "derive_metrics",
    "estimate_possessions",
    "median",
]
