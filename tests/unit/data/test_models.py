"""Tests for feed ingestion models."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from pydantic import ValidationError

from nba_standings.data.models import (
    PER_GAME_FIELDS,
    RawTeamStat,
    StandingRecord,
    Streak,
    StreakType,
    TeamStatsEntry,
    parse_record,
)


class TestRawTeamStat:
    """Tests for RawTeamStat parsing."""

    def test_string_fields_parsed_to_floats(
        self, side_stats_factory: Callable[..., dict[str, Any]]
    ) -> None:
        data = side_stats_factory()
        data["points_per_game_string"] = "107.1"
        data["free_throw_percentage_string"] = "77.0"

        stats = RawTeamStat.model_validate(data)

        assert stats.points_per_game == 107.1
        assert stats.free_throw_percentage == 77.0

    def test_metrics_use_normalized_names(
        self, side_stats_factory: Callable[..., dict[str, Any]]
    ) -> None:
        stats = RawTeamStat.model_validate(side_stats_factory())
        metrics = stats.metrics()

        for upstream, name in PER_GAME_FIELDS.items():
            assert name in metrics
            assert upstream not in metrics
        assert metrics["field_goals_attempted"] == 6970

    def test_missing_field_rejected(
        self, side_stats_factory: Callable[..., dict[str, Any]]
    ) -> None:
        data = side_stats_factory()
        del data["turnovers"]

        with pytest.raises(ValidationError):
            RawTeamStat.model_validate(data)

    def test_non_numeric_string_rejected(
        self, side_stats_factory: Callable[..., dict[str, Any]]
    ) -> None:
        data = side_stats_factory()
        data["steals_per_game_string"] = "n/a"

        with pytest.raises(ValidationError):
            RawTeamStat.model_validate(data)

    def test_is_frozen(self, side_stats_factory: Callable[..., dict[str, Any]]) -> None:
        stats = RawTeamStat.model_validate(side_stats_factory())

        with pytest.raises(ValidationError):
            stats.points = 0  # type: ignore[misc]


class TestTeamStatsEntry:
    """Tests for TeamStatsEntry."""

    def test_team_id(self, team_stats_factory: Callable[..., dict[str, Any]]) -> None:
        entry = TeamStatsEntry.model_validate(team_stats_factory("boston-celtics"))

        assert entry.team_id == "boston-celtics"
        assert isinstance(entry.stats_opponent, RawTeamStat)


class TestStandingRecord:
    """Tests for StandingRecord."""

    def test_parses_string_numbers(
        self, standing_factory: Callable[..., dict[str, Any]]
    ) -> None:
        record = StandingRecord.model_validate(
            standing_factory("boston-celtics", point_differential_per_game="-3.4")
        )

        assert record.point_differential_per_game == -3.4
        assert record.win_percentage == 0.5

    def test_streak(self, standing_factory: Callable[..., dict[str, Any]]) -> None:
        record = StandingRecord.model_validate(
            standing_factory("boston-celtics", streak_type="loss", streak_total=3)
        )

        assert record.streak == Streak(StreakType.LOSS, 3)
        assert record.streak.signed == -3

    def test_unknown_streak_type_rejected(
        self, standing_factory: Callable[..., dict[str, Any]]
    ) -> None:
        with pytest.raises(ValidationError):
            StandingRecord.model_validate(
                standing_factory("boston-celtics", streak_type="tie")
            )

    def test_negative_streak_rejected(
        self, standing_factory: Callable[..., dict[str, Any]]
    ) -> None:
        with pytest.raises(ValidationError):
            StandingRecord.model_validate(
                standing_factory("boston-celtics", streak_total=-1)
            )

    @pytest.mark.parametrize("record", ["3", "3-2-1", "W-L", ""])
    def test_bad_record_string_rejected(
        self, standing_factory: Callable[..., dict[str, Any]], record: str
    ) -> None:
        with pytest.raises(ValidationError, match="W-L"):
            StandingRecord.model_validate(
                standing_factory("boston-celtics", last_five=record)
            )

    def test_extras_kept(self, standing_factory: Callable[..., dict[str, Any]]) -> None:
        record = StandingRecord.model_validate(
            standing_factory("boston-celtics", rank=1)
        )
        data = record.to_dict()

        assert data["rank"] == 1
        assert data["first_name"] == "Boston"
        assert data["streak_type"] == "win"


class TestParseRecord:
    """Tests for parse_record()."""

    def test_splits(self) -> None:
        assert parse_record("7-3") == (7, 3)
