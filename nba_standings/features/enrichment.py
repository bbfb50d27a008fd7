"""Standings enrichment: join, derive, rank and color.

Joins every standings row to its team-stats entry, derives possession-based
metrics, computes league-wide {min, median, max} once per colored metric and
maps each team's value to a color. The result is the hand-off object for
the board renderer::

    {"title": "Standings",
     "stats": {"standings_date": ..., "standing": [team, ...]}}

Each team dict carries ``team_stats`` and ``opponent_stats`` (raw plus
derived metrics), ``possessions``, ``opponent_possessions``, ``first_west``
and a ``colors`` map of ``"r,g,b"`` strings with an ``opp`` sub-map for
opponent-side metrics.

Example:
    >>> from nba_standings.features.enrichment import StandingsEnricher
    >>> board = StandingsEnricher().enrich(standings_payload, team_stats_payload)
    >>> board["stats"]["standing"][0]["colors"]["efg_pct"]
    '67,147,195'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

import pandas as pd
from pydantic import ValidationError

from nba_standings.data.models import (
    RawTeamStat,
    StandingRecord,
    StreakType,
    TeamStatsEntry,
    parse_record,
)
from nba_standings.features.metrics import DerivedMetrics, derive_metrics
from nba_standings.features.population import PopulationRange, compute_ranges
from nba_standings.logging import get_logger
from nba_standings.output.gradient import (
    Color,
    Polarity,
    from_percent,
    from_range,
    from_spread,
)
from nba_standings.types import Payload, StandingsError, TeamJoinError, TeamKey

logger = get_logger(__name__)

BOARD_TITLE = "Standings"
WEST = "WEST"


class ColoredMetric(NamedTuple):
    """A metric colored against its league range."""

    key: str
    metric: str
    polarity: Polarity = Polarity.HIGH_GOOD


LOW = Polarity.LOW_GOOD

TEAM_COLORED_METRICS: tuple[ColoredMetric, ...] = (
    ColoredMetric("assist_to_turnover_ratio", "assist_to_turnover_ratio"),
    ColoredMetric("assists_per_fg", "assists_per_fg"),
    ColoredMetric("assists_per_game", "assists_per_game"),
    ColoredMetric("assists_per_pos", "assists_per_pos"),
    ColoredMetric("blocks_per_game", "blocks_per_game"),
    ColoredMetric("blocks_per_opp_possession", "blocks_per_opp_possession"),
    ColoredMetric("defensive_rebound_percentage", "defensive_rebound_percentage"),
    ColoredMetric("defensive_rebounds_per_game", "defensive_rebounds_per_game"),
    ColoredMetric("efg_pct", "effective_field_goal_percentage"),
    ColoredMetric("fg2_pct", "two_point_field_goal_percentage"),
    ColoredMetric("fg3_pct", "three_point_field_goal_percentage"),
    ColoredMetric("fg3a_per_game", "three_point_field_goals_attempted_per_game"),
    ColoredMetric("fg3m_per_game", "three_point_field_goals_made_per_game"),
    ColoredMetric("fg_pct", "field_goal_percentage"),
    ColoredMetric("fga_per_game", "field_goals_attempted_per_game"),
    ColoredMetric("fga_per_pos", "field_goals_attempted_per_pos"),
    ColoredMetric("fgm_per_game", "field_goals_made_per_game"),
    ColoredMetric("ft_pct", "free_throw_percentage"),
    ColoredMetric("fta_per_game", "free_throws_attempted_per_game"),
    ColoredMetric("fta_per_pos", "free_throws_attempted_per_pos"),
    ColoredMetric("ftm_per_game", "free_throws_made_per_game"),
    ColoredMetric("ftm_per_pos", "free_throws_made_per_pos"),
    ColoredMetric("offensive_rebound_percentage", "offensive_rebound_percentage"),
    ColoredMetric("offensive_rebounds_per_game", "offensive_rebounds_per_game"),
    ColoredMetric("personal_foul_percentage", "personal_foul_percentage", LOW),
    ColoredMetric("personal_fouls_per_game", "personal_fouls_per_game", LOW),
    ColoredMetric("points_per_game", "points_per_game"),
    ColoredMetric("points_per_pos", "points_per_pos"),
    ColoredMetric("possessions_per_game", "possessions_per_game"),
    ColoredMetric("rebound_percentage", "rebound_percentage"),
    ColoredMetric("rebounds_per_game", "rebounds_per_game"),
    ColoredMetric("steals_per_game", "steals_per_game"),
    ColoredMetric("steals_per_opp_possession", "steals_per_opp_possession"),
    ColoredMetric("ts_pct", "true_shooting_percentage"),
    ColoredMetric("turnovers_per_game", "turnovers_per_game", LOW),
    ColoredMetric("turnovers_per_pos", "turnovers_per_pos", LOW),
)

OPPONENT_COLORED_METRICS: tuple[ColoredMetric, ...] = (
    ColoredMetric("fg_pct", "field_goal_percentage", LOW),
    ColoredMetric("fg_pp", "field_goals_attempted_per_pos", LOW),
    ColoredMetric("personal_foul_percentage", "personal_foul_percentage"),
    ColoredMetric("personal_fouls_per_game", "personal_fouls_per_game"),
    ColoredMetric("points_per_pos", "points_per_pos", LOW),
    ColoredMetric("possessions_per_game", "possessions_per_game"),
    ColoredMetric("turnovers_per_game", "turnovers_per_game"),
    ColoredMetric("turnovers_per_pos", "turnovers_per_pos"),
)


@dataclass
class EnrichedTeamRecord:
    """A standings row joined to its stats, metrics and colors."""

    standing: StandingRecord
    team_stats: RawTeamStat
    opponent_stats: RawTeamStat
    metrics: DerivedMetrics
    first_west: bool = False
    colors: dict[str, Any] = field(default_factory=dict)

    @property
    def team_id(self) -> TeamKey:
        return self.standing.team_id

    @property
    def team_metrics(self) -> dict[str, float]:
        """Raw and derived team-side metrics in one map."""
        return {**self.team_stats.metrics(), **self.metrics.team}

    @property
    def opponent_metrics(self) -> dict[str, float]:
        """Raw and derived opponent-side metrics in one map."""
        return {**self.opponent_stats.metrics(), **self.metrics.opponent}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the renderer, colors as ``"r,g,b"`` strings."""
        data = self.standing.to_dict()
        data.update(
            team_stats=self.team_metrics,
            opponent_stats=self.opponent_metrics,
            possessions=self.metrics.possessions,
            opponent_possessions=self.metrics.opponent_possessions,
            first_west=self.first_west,
            colors=_stringify(self.colors),
        )
        return data


@dataclass(frozen=True)
class LeagueAggregates:
    """Cross-league extremes used to normalize spread metrics.

    ``streak_min`` is the longest losing streak stored as a negative number.
    """

    point_diff_max: float
    point_diff_min: float
    streak_max: int
    streak_min: int


def _stringify(colors: dict[str, Any]) -> dict[str, Any]:
    return {
        key: _stringify(value) if isinstance(value, dict) else str(value)
        for key, value in colors.items()
    }


def win_pct(won: int, lost: int) -> float:
    """Won / (won + lost); NaN when no games were played."""
    total = won + lost
    return won / total if total else float("nan")


def record_pct(record: str) -> float:
    """Win ratio of a ``"W-L"`` record string."""
    return win_pct(*parse_record(record))


def spread_ratio(value: float, league_max: float, league_min: float) -> float:
    """Normalize a signed value against the league's extreme on its side."""
    if value > 0:
        return value / league_max
    if value < 0:
        return value / league_min
    return 0.0


class StandingsEnricher:
    """Builds the colored standings board from the two feeds.

    Example:
        >>> enricher = StandingsEnricher()
        >>> board = enricher.enrich(standings_payload, team_stats_payload)
    """

    def __init__(self, title: str = BOARD_TITLE) -> None:
        self.title = title

    # -------------------------------------------------------------------------
    # Ingestion
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_standings(payload: Payload) -> list[StandingRecord]:
        """Validate the standings feed's ``standing`` list.

        Raises:
            StandingsError: If the payload does not match the feed shape.
        """
        try:
            return [StandingRecord.model_validate(row) for row in payload["standing"]]
        except (KeyError, TypeError, ValidationError) as e:
            raise StandingsError(f"Malformed standings payload: {e}") from e

    @staticmethod
    def parse_team_stats(payload: Payload) -> dict[TeamKey, TeamStatsEntry]:
        """Validate the team-stats feed and index it by team key.

        Raises:
            StandingsError: If the payload does not match the feed shape.
        """
        try:
            entries = [TeamStatsEntry.model_validate(row) for row in payload["team_stats"]]
        except (KeyError, TypeError, ValidationError) as e:
            raise StandingsError(f"Malformed team-stats payload: {e}") from e
        return {entry.team_id: entry for entry in entries}

    # -------------------------------------------------------------------------
    # Pipeline steps
    # -------------------------------------------------------------------------

    def join(
        self,
        standings: list[StandingRecord],
        team_stats: dict[TeamKey, TeamStatsEntry],
    ) -> list[EnrichedTeamRecord]:
        """Attach stats and derived metrics to every standings row.

        Raises:
            TeamJoinError: If a standings row has no team-stats entry.
        """
        records: list[EnrichedTeamRecord] = []
        seen_west = False

        for standing in standings:
            entry = team_stats.get(standing.team_id)
            if entry is None:
                raise TeamJoinError(f"No team stats for '{standing.team_id}'")

            first_west = standing.conference == WEST and not seen_west
            seen_west = seen_west or first_west

            records.append(
                EnrichedTeamRecord(
                    standing=standing,
                    team_stats=entry.stats,
                    opponent_stats=entry.stats_opponent,
                    metrics=derive_metrics(
                        entry.stats,
                        entry.stats_opponent,
                        standing.games_played,
                        standing.points_for,
                        standing.points_against,
                    ),
                    first_west=first_west,
                )
            )

        return records

    @staticmethod
    def league_ranges(
        records: list[EnrichedTeamRecord],
    ) -> tuple[dict[str, PopulationRange], dict[str, PopulationRange]]:
        """League ranges for every colored team and opponent metric."""
        team_frame = pd.DataFrame([r.team_metrics for r in records])
        opponent_frame = pd.DataFrame([r.opponent_metrics for r in records])

        team_ranges = compute_ranges(
            team_frame, sorted({m.metric for m in TEAM_COLORED_METRICS})
        )
        opponent_ranges = compute_ranges(
            opponent_frame, sorted({m.metric for m in OPPONENT_COLORED_METRICS})
        )
        return team_ranges, opponent_ranges

    @staticmethod
    def league_aggregates(records: list[EnrichedTeamRecord]) -> LeagueAggregates:
        """Point-differential and streak extremes across the league."""
        diffs = [r.standing.point_differential_per_game for r in records]
        win_streaks = [
            r.standing.streak_total
            for r in records
            if r.standing.streak_type is StreakType.WIN
        ]
        loss_streaks = [
            r.standing.streak_total
            for r in records
            if r.standing.streak_type is StreakType.LOSS
        ]
        return LeagueAggregates(
            point_diff_max=max(diffs, default=0.0),
            point_diff_min=min(diffs, default=0.0),
            streak_max=max(win_streaks, default=0),
            streak_min=-max(loss_streaks, default=0),
        )

    @staticmethod
    def color_team(
        record: EnrichedTeamRecord,
        team_ranges: dict[str, PopulationRange],
        opponent_ranges: dict[str, PopulationRange],
        aggregates: LeagueAggregates,
    ) -> dict[str, Any]:
        """Build one team's colors map."""
        standing = record.standing
        team_values = record.team_metrics
        opponent_values = record.opponent_metrics

        colors: dict[str, Color | dict[str, Color]] = {
            m.key: from_range(team_values[m.metric], team_ranges[m.metric], m.polarity)
            for m in TEAM_COLORED_METRICS
        }

        point_diff = standing.point_differential_per_game
        streak = standing.streak.signed

        colors.update(
            away_win_percentage=from_percent(win_pct(standing.away_won, standing.away_lost)),
            conf_win_percentage=from_percent(
                win_pct(standing.conference_won, standing.conference_lost)
            ),
            home_win_percentage=from_percent(win_pct(standing.home_won, standing.home_lost)),
            last_five=from_percent(record_pct(standing.last_five)),
            last_ten=from_percent(record_pct(standing.last_ten)),
            point_diff=from_spread(
                point_diff,
                spread_ratio(point_diff, aggregates.point_diff_max, aggregates.point_diff_min),
            ),
            streak_total=from_spread(
                streak,
                spread_ratio(streak, aggregates.streak_max, aggregates.streak_min),
            ),
            win_percentage=from_percent(standing.win_percentage),
        )

        colors["opp"] = {
            m.key: from_range(
                opponent_values[m.metric], opponent_ranges[m.metric], m.polarity
            )
            for m in OPPONENT_COLORED_METRICS
        }
        return colors

    def enrich(self, standings_payload: Payload, team_stats_payload: Payload) -> dict[str, Any]:
        """Build the board hand-off object from the two feed payloads.

        Args:
            standings_payload: Standings feed payload.
            team_stats_payload: Team-stats feed payload.

        Returns:
            ``{"title", "stats": {"standings_date", "standing": [...]}}``.

        Raises:
            TeamJoinError: If a standings row has no team-stats entry.
            StandingsError: If either payload is malformed.
        """
        records = self.enrich_records(standings_payload, team_stats_payload)
        return {
            "title": self.title,
            "stats": {
                "standings_date": standings_payload.get("standings_date"),
                "standing": [r.to_dict() for r in records],
            },
        }

    def enrich_records(
        self,
        standings_payload: Payload,
        team_stats_payload: Payload,
    ) -> list[EnrichedTeamRecord]:
        """Same as enrich() but returns the typed records."""
        standings = self.parse_standings(standings_payload)
        team_stats = self.parse_team_stats(team_stats_payload)

        records = self.join(standings, team_stats)
        if not records:
            logger.warning("Standings feed has no teams")
            return records

        team_ranges, opponent_ranges = self.league_ranges(records)
        aggregates = self.league_aggregates(records)

        for record in records:
            record.colors = self.color_team(record, team_ranges, opponent_ranges, aggregates)

        logger.info(
            "Enriched {} teams against {} league ranges",
            len(records),
            len(team_ranges) + len(opponent_ranges),
        )
        return records
