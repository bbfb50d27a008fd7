"""Ingestion models for the standings and team-stats feeds.

The upstream feeds mix true numbers with string-encoded ones (per-game
averages and shooting percentages arrive as ``"12.3"`` under a
``*_string`` key). These models parse and normalize both at ingestion so
everything downstream sees plain floats under suffix-free names
(``points_per_game_string`` becomes ``points_per_game``).

Example:
    >>> from nba_standings.data.models import StandingRecord
    >>> record = StandingRecord.model_validate(payload["standing"][0])
    >>> record.streak.total
    3
"""
from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nba_standings.types import TeamKey

# Upstream per-game/percentage fields and their normalized names
PER_GAME_FIELDS: dict[str, str] = {
    "points_per_game_string": "points_per_game",
    "assists_per_game_string": "assists_per_game",
    "rebounds_per_game_string": "rebounds_per_game",
    "offensive_rebounds_per_game_string": "offensive_rebounds_per_game",
    "defensive_rebounds_per_game_string": "defensive_rebounds_per_game",
    "blocks_per_game_string": "blocks_per_game",
    "steals_per_game_string": "steals_per_game",
    "turnovers_per_game_string": "turnovers_per_game",
    "personal_fouls_per_game_string": "personal_fouls_per_game",
    "field_goals_attempted_per_game_string": "field_goals_attempted_per_game",
    "field_goals_made_per_game_string": "field_goals_made_per_game",
    "field_goal_percentage_string": "field_goal_percentage",
    "three_point_field_goals_attempted_per_game_string": "three_point_field_goals_attempted_per_game",
    "three_point_field_goals_made_per_game_string": "three_point_field_goals_made_per_game",
    "three_point_field_goal_percentage_string": "three_point_field_goal_percentage",
    "free_throws_attempted_per_game_string": "free_throws_attempted_per_game",
    "free_throws_made_per_game_string": "free_throws_made_per_game",
    "free_throw_percentage_string": "free_throw_percentage",
}


class StreakType(Enum):
    """Direction of a team's current streak."""

    WIN = "win"
    LOSS = "loss"


class Streak(NamedTuple):
    """Current streak, e.g. W3 is ``Streak(StreakType.WIN, 3)``."""

    type: StreakType
    total: int

    @property
    def signed(self) -> int:
        """Streak length, negative while losing."""
        return self.total if self.type is StreakType.WIN else -self.total


class RawTeamStat(BaseModel):
    """Season counting stats for one side of the floor.

    Used both for a team and for its opponents (``stats_opponent``).
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    # Counting stats
    field_goals_made: float
    field_goals_attempted: float
    three_point_field_goals_made: float
    three_point_field_goals_attempted: float
    free_throws_made: float
    free_throws_attempted: float
    offensive_rebounds: float
    defensive_rebounds: float
    rebounds: float
    assists: float
    turnovers: float
    steals: float
    blocks: float
    personal_fouls: float
    points: float

    # Per-game and percentage fields, string-encoded upstream
    points_per_game: float = Field(alias="points_per_game_string")
    assists_per_game: float = Field(alias="assists_per_game_string")
    rebounds_per_game: float = Field(alias="rebounds_per_game_string")
    offensive_rebounds_per_game: float = Field(alias="offensive_rebounds_per_game_string")
    defensive_rebounds_per_game: float = Field(alias="defensive_rebounds_per_game_string")
    blocks_per_game: float = Field(alias="blocks_per_game_string")
    steals_per_game: float = Field(alias="steals_per_game_string")
    turnovers_per_game: float = Field(alias="turnovers_per_game_string")
    personal_fouls_per_game: float = Field(alias="personal_fouls_per_game_string")
    field_goals_attempted_per_game: float = Field(alias="field_goals_attempted_per_game_string")
    field_goals_made_per_game: float = Field(alias="field_goals_made_per_game_string")
    field_goal_percentage: float = Field(alias="field_goal_percentage_string")
    three_point_field_goals_attempted_per_game: float = Field(
        alias="three_point_field_goals_attempted_per_game_string"
    )
    three_point_field_goals_made_per_game: float = Field(
        alias="three_point_field_goals_made_per_game_string"
    )
    three_point_field_goal_percentage: float = Field(
        alias="three_point_field_goal_percentage_string"
    )
    free_throws_attempted_per_game: float = Field(alias="free_throws_attempted_per_game_string")
    free_throws_made_per_game: float = Field(alias="free_throws_made_per_game_string")
    free_throw_percentage: float = Field(alias="free_throw_percentage_string")

    def metrics(self) -> dict[str, float]:
        """Return every stat as a flat name -> float mapping."""
        return self.model_dump(by_alias=False)


class TeamRef(BaseModel):
    """Team identity block of a team-stats entry."""

    model_config = ConfigDict(frozen=True, extra="allow")

    team_id: TeamKey


class TeamStatsEntry(BaseModel):
    """One element of the team-stats feed's ``team_stats`` list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    team: TeamRef
    stats: RawTeamStat
    stats_opponent: RawTeamStat

    @property
    def team_id(self) -> TeamKey:
        return self.team.team_id


class StandingRecord(BaseModel):
    """One team's row in the standings feed.

    Fields the board does not compute with (names, rank, ...) are kept as
    extras so renderers can still show them.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    team_id: TeamKey
    conference: str
    games_played: int
    won: int
    lost: int
    points_for: float
    points_against: float
    win_percentage: float
    home_won: int
    home_lost: int
    away_won: int
    away_lost: int
    conference_won: int
    conference_lost: int
    last_five: str
    last_ten: str
    streak_type: StreakType
    streak_total: int = Field(ge=0)
    point_differential_per_game: float

    @field_validator("last_five", "last_ten")
    @classmethod
    def validate_record(cls, v: str) -> str:
        """Require a ``"W-L"`` record string."""
        parts = v.split("-")
        if len(parts) != 2 or not all(p.strip().isdigit() for p in parts):
            raise ValueError(f"Expected a 'W-L' record, got {v!r}")
        return v

    @property
    def streak(self) -> Streak:
        return Streak(self.streak_type, self.streak_total)

    def to_dict(self) -> dict[str, Any]:
        """Dump the record (extras included) with plain JSON values."""
        return self.model_dump(mode="json")


def parse_record(record: str) -> tuple[int, int]:
    """Split a ``"W-L"`` string into (wins, losses)."""
    wins, losses = record.split("-")
    return int(wins), int(losses)
