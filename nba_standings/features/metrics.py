"""Possession-based efficiency metrics.

Derives per-team efficiency metrics from season counting stats and the
counting stats of the team's opponents. Possessions are estimated; the
estimate is not an exact science but is the denominator for every
efficiency-normalized stat.

Formulas:
    possessions = (FGA + TOV - OREB) + 0.44 * FTA
    eFG% = (FGM + 0.5 * 3PM) / FGA
    TS% = PTS / (2 * (FGA + 0.44 * FTA))

Division follows IEEE semantics: a zero denominator yields inf or NaN,
which is carried through to the color mapping rather than clamped.

Example:
    >>> from nba_standings.features.metrics import derive_metrics
    >>> metrics = derive_metrics(team, opponent, 82, 9020.0, 8610.0)
    >>> metrics.team["effective_field_goal_percentage"]
    0.5294117647058824
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from nba_standings.types import MetricsMap

if TYPE_CHECKING:
    from nba_standings.data.models import RawTeamStat

FREE_THROW_POSSESSION_FACTOR = 0.44


@dataclass(frozen=True)
class DerivedMetrics:
    """Derived metrics for one team.

    Attributes:
        possessions: Estimated season possessions for the team.
        opponent_possessions: Estimated season possessions for its opponents.
        team: Team-side metrics by name.
        opponent: Opponent-side metrics by name.
    """

    possessions: float
    opponent_possessions: float
    team: MetricsMap = field(default_factory=dict)
    opponent: MetricsMap = field(default_factory=dict)


def _div(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics (x/0 -> +-inf, 0/0 -> nan)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


def estimate_possessions(stats: RawTeamStat) -> float:
    """Estimate possessions from one side's counting stats."""
    return (
        stats.field_goals_attempted + stats.turnovers - stats.offensive_rebounds
    ) + stats.free_throws_attempted * FREE_THROW_POSSESSION_FACTOR


def derive_metrics(
    team: RawTeamStat,
    opponent: RawTeamStat,
    games_played: int,
    points_for: float,
    points_against: float,
) -> DerivedMetrics:
    """Compute every derived metric for one team.

    Args:
        team: Team's season counting stats.
        opponent: Season counting stats of the team's opponents.
        games_played: Games played by the team.
        points_for: Points scored (offensive efficiency numerator).
        points_against: Points allowed (defensive efficiency numerator).

    Returns:
        DerivedMetrics with team- and opponent-side maps.
    """
    pos = estimate_possessions(team)
    opp_pos = estimate_possessions(opponent)

    team_metrics: MetricsMap = {
        "possessions_per_game": _div(pos, games_played),
        "assist_to_turnover_ratio": _div(team.assists, team.turnovers),
        "effective_field_goal_percentage": _div(
            team.field_goals_made + 0.5 * team.three_point_field_goals_made,
            team.field_goals_attempted,
        ),
        "two_point_field_goal_percentage": _div(
            team.field_goals_made - team.three_point_field_goals_made,
            team.field_goals_attempted - team.three_point_field_goals_attempted,
        ),
        "true_shooting_percentage": _div(
            team.points,
            2 * (team.field_goals_attempted
                 + team.free_throws_attempted * FREE_THROW_POSSESSION_FACTOR),
        ),
        "free_throws_attempted_per_pos": _div(team.free_throws_attempted, pos),
        "free_throws_made_per_pos": _div(team.free_throws_made, pos),
        "points_per_pos": _div(points_for, pos),  # offensive efficiency
        "assists_per_pos": _div(team.assists, pos),
        "field_goals_attempted_per_pos": _div(team.field_goals_attempted, pos),
        "turnovers_per_pos": _div(team.turnovers, pos),
        "assists_per_fg": _div(team.assists, team.field_goals_made),
        "rebound_percentage": _div(
            team.rebounds, team.rebounds + opponent.rebounds
        ),
        "defensive_rebound_percentage": _div(
            team.defensive_rebounds,
            team.defensive_rebounds + opponent.offensive_rebounds,
        ),
        "offensive_rebound_percentage": _div(
            team.offensive_rebounds,
            team.offensive_rebounds + opponent.defensive_rebounds,
        ),
        "blocks_per_opp_possession": _div(team.blocks, opp_pos),
        "steals_per_opp_possession": _div(team.steals, opp_pos),
        "personal_foul_percentage": _div(team.personal_fouls, opp_pos),
    }

    opponent_metrics: MetricsMap = {
        "possessions_per_game": _div(opp_pos, games_played),
        "turnovers_per_pos": _div(opponent.turnovers, opp_pos),
        "points_per_pos": _div(points_against, opp_pos),  # defensive efficiency
        "personal_foul_percentage": _div(opponent.personal_fouls, pos),
        "field_goals_attempted_per_pos": _div(opponent.field_goals_attempted, opp_pos),
    }

    return DerivedMetrics(
        possessions=pos,
        opponent_possessions=opp_pos,
        team=team_metrics,
        opponent=opponent_metrics,
    )
