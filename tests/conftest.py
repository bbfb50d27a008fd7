"""Shared pytest fixtures for standings board tests.

This module contains fixtures used across multiple test modules:
- Configuration fixtures (test settings with temp directories)
- Feed payload factories (standings rows, team-stats entries)
- Cache fixtures (seeded cache directory)
- Time fixtures (frozen clock)
"""
from __future__ import annotations

import json
import os
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

import pytest

from nba_standings.config import Settings, reset_settings
from nba_standings.data.models import PER_GAME_FIELDS

# =============================================================================
# Paths
# =============================================================================


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Create and return temporary cache directory."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def test_settings(tmp_path: Path, tmp_data_dir: Path) -> Generator[Settings, None, None]:
    """Provide test settings with temporary directories.

    Automatically resets settings singleton after test.
    """
    os.environ["NBA_DATA_DIR"] = str(tmp_data_dir)
    os.environ["LOG_DIR"] = str(tmp_path / "logs")
    os.environ["LOG_LEVEL"] = "DEBUG"
    os.environ["NBA_API_TOKEN"] = "test-token"

    reset_settings()
    from nba_standings.config import get_settings

    settings = get_settings()
    settings.ensure_directories()

    yield settings

    reset_settings()
    for key in ["NBA_DATA_DIR", "LOG_DIR", "LOG_LEVEL", "NBA_API_TOKEN"]:
        os.environ.pop(key, None)


# =============================================================================
# Feed Payloads
# =============================================================================

COUNTING_STATS: dict[str, float] = {
    "field_goals_made": 3280,
    "field_goals_attempted": 6970,
    "three_point_field_goals_made": 820,
    "three_point_field_goals_attempted": 2300,
    "free_throws_made": 1400,
    "free_throws_attempted": 1800,
    "offensive_rebounds": 820,
    "defensive_rebounds": 2700,
    "rebounds": 3520,
    "assists": 1980,
    "turnovers": 1150,
    "steals": 610,
    "blocks": 400,
    "personal_fouls": 1560,
    "points": 8780,
}


def _pct(made: float, attempted: float) -> float:
    return 100 * made / attempted if attempted else 0.0


def make_side_stats(scale: float = 1.0, **overrides: float) -> dict[str, Any]:
    """Build a stats block with every counting stat multiplied by ``scale``.

    Per-game and percentage fields are emitted string-encoded, as the
    upstream feed does.
    """
    stats: dict[str, Any] = {k: v * scale for k, v in COUNTING_STATS.items()}
    stats.update(overrides)
    games = 82
    per_game = {
        "points_per_game": stats["points"] / games,
        "assists_per_game": stats["assists"] / games,
        "rebounds_per_game": stats["rebounds"] / games,
        "offensive_rebounds_per_game": stats["offensive_rebounds"] / games,
        "defensive_rebounds_per_game": stats["defensive_rebounds"] / games,
        "blocks_per_game": stats["blocks"] / games,
        "steals_per_game": stats["steals"] / games,
        "turnovers_per_game": stats["turnovers"] / games,
        "personal_fouls_per_game": stats["personal_fouls"] / games,
        "field_goals_attempted_per_game": stats["field_goals_attempted"] / games,
        "field_goals_made_per_game": stats["field_goals_made"] / games,
        "field_goal_percentage": _pct(
            stats["field_goals_made"], stats["field_goals_attempted"]
        ),
        "three_point_field_goals_attempted_per_game": stats["three_point_field_goals_attempted"] / games,
        "three_point_field_goals_made_per_game": stats["three_point_field_goals_made"] / games,
        "three_point_field_goal_percentage": _pct(
            stats["three_point_field_goals_made"], stats["three_point_field_goals_attempted"]
        ),
        "free_throws_attempted_per_game": stats["free_throws_attempted"] / games,
        "free_throws_made_per_game": stats["free_throws_made"] / games,
        "free_throw_percentage": _pct(stats["free_throws_made"], stats["free_throws_attempted"]),
    }
    for upstream, name in PER_GAME_FIELDS.items():
        stats[upstream] = f"{per_game[name]:.1f}"
    return stats


def make_team_stats_entry(
    team_id: str,
    scale: float = 1.0,
    opponent_scale: float = 1.0,
    stats: dict[str, float] | None = None,
    opponent: dict[str, float] | None = None,
) -> dict[str, Any]:
    """Build one element of the team-stats feed.

    ``stats`` and ``opponent`` override counting stats on each side.
    """
    return {
        "team": {"team_id": team_id, "abbreviation": team_id[:3].upper()},
        "stats": make_side_stats(scale, **(stats or {})),
        "stats_opponent": make_side_stats(opponent_scale, **(opponent or {})),
    }


def make_standing(team_id: str, **overrides: Any) -> dict[str, Any]:
    """Build one row of the standings feed."""
    row: dict[str, Any] = {
        "team_id": team_id,
        "first_name": team_id.split("-")[0].title(),
        "last_name": team_id.split("-")[-1].title(),
        "conference": "EAST",
        "games_played": 82,
        "won": 41,
        "lost": 41,
        "points_for": 8780,
        "points_against": 8780,
        "win_percentage": ".500",
        "home_won": 21,
        "home_lost": 20,
        "away_won": 20,
        "away_lost": 21,
        "conference_won": 26,
        "conference_lost": 26,
        "last_five": "3-2",
        "last_ten": "5-5",
        "streak_type": "win",
        "streak_total": 1,
        "point_differential_per_game": "0.0",
    }
    row.update(overrides)
    return row


@pytest.fixture
def side_stats_factory() -> Callable[..., dict[str, Any]]:
    return make_side_stats


@pytest.fixture
def standing_factory() -> Callable[..., dict[str, Any]]:
    return make_standing


@pytest.fixture
def team_stats_factory() -> Callable[..., dict[str, Any]]:
    return make_team_stats_entry


# Alpha has the larger value of every counting stat and of every ratio built
# from them, on both sides, so it holds the league max of each metric.
ALPHA_STATS: dict[str, float] = {
    "field_goals_made": 3600,
    "field_goals_attempted": 7700,
    "three_point_field_goals_made": 1000,
    "three_point_field_goals_attempted": 2500,
    "free_throws_made": 1400,
    "free_throws_attempted": 1760,
    "offensive_rebounds": 1100,
    "defensive_rebounds": 2900,
    "rebounds": 4000,
    "assists": 2200,
    "turnovers": 1210,
    "steals": 660,
    "blocks": 420,
    "personal_fouls": 1800,
    "points": 9600,
}

ALPHA_OPPONENT_STATS: dict[str, float] = {
    "field_goals_made": 3400,
    "field_goals_attempted": 7700,
    "three_point_field_goals_made": 900,
    "three_point_field_goals_attempted": 2300,
    "free_throws_made": 900,
    "free_throws_attempted": 1200,
    "offensive_rebounds": 880,
    "defensive_rebounds": 2600,
    "rebounds": 3480,
    "assists": 2000,
    "turnovers": 1210,
    "steals": 600,
    "blocks": 380,
    "personal_fouls": 1800,
    "points": 8900,
}

BETA_STATS: dict[str, float] = {
    "field_goals_made": 3000,
    "field_goals_attempted": 7000,
    "three_point_field_goals_made": 800,
    "three_point_field_goals_attempted": 2400,
    "free_throws_made": 1200,
    "free_throws_attempted": 1600,
    "offensive_rebounds": 800,
    "defensive_rebounds": 2600,
    "rebounds": 3400,
    "assists": 1800,
    "turnovers": 1100,
    "steals": 550,
    "blocks": 350,
    "personal_fouls": 1500,
    "points": 7400,
}

BETA_OPPONENT_STATS: dict[str, float] = {**BETA_STATS, "points": 8100}


@pytest.fixture
def two_team_payloads() -> tuple[dict[str, Any], dict[str, Any]]:
    """League where 'alpha' holds the max and 'beta' the min of every metric.

    Alpha also allows more points per possession, so the opponent-side
    efficiency is ordered like every other metric.

    Returns:
        (standings_payload, team_stats_payload)
    """
    standings = {
        "standings_date": "2024-01-15T08:00:00-05:00",
        "standing": [
            make_standing(
                "alpha-aces",
                won=60,
                lost=22,
                points_for=9600,
                points_against=8900,
                win_percentage=".732",
                point_differential_per_game="8.5",
                streak_type="win",
                streak_total=5,
                last_five="5-0",
                last_ten="8-2",
            ),
            make_standing(
                "beta-bees",
                conference="WEST",
                won=22,
                lost=60,
                points_for=7400,
                points_against=8100,
                win_percentage=".268",
                point_differential_per_game="-8.5",
                streak_type="loss",
                streak_total=4,
                last_five="0-5",
                last_ten="2-8",
            ),
        ],
    }
    team_stats = {
        "team_stats_date": "2024-01-15",
        "team_stats": [
            make_team_stats_entry(
                "alpha-aces", stats=ALPHA_STATS, opponent=ALPHA_OPPONENT_STATS
            ),
            make_team_stats_entry(
                "beta-bees", stats=BETA_STATS, opponent=BETA_OPPONENT_STATS
            ),
        ],
    }
    return standings, team_stats


@pytest.fixture
def league_payloads() -> tuple[dict[str, Any], dict[str, Any]]:
    """Five-team league with varied stats and mixed streaks."""
    ids = ["alpha-aces", "beta-bees", "gamma-gulls", "delta-dogs", "omega-owls"]
    scales = [1.08, 1.04, 1.0, 0.96, 0.92]
    diffs = ["6.0", "2.0", "0.0", "-3.0", "-6.0"]
    streaks = [("win", 6), ("win", 2), ("loss", 1), ("loss", 3), ("loss", 0)]
    conferences = ["EAST", "EAST", "WEST", "WEST", "WEST"]

    standings = {
        "standings_date": "2024-01-15",
        "standing": [
            make_standing(
                team_id,
                conference=conf,
                point_differential_per_game=diff,
                streak_type=streak[0],
                streak_total=streak[1],
            )
            for team_id, diff, streak, conf in zip(ids, diffs, streaks, conferences)
        ],
    }
    team_stats = {
        "team_stats_date": "2024-01-15",
        "team_stats": [
            make_team_stats_entry(team_id, scale=scale, opponent_scale=2 - scale)
            for team_id, scale in zip(ids, scales)
        ],
    }
    return standings, team_stats


# =============================================================================
# Cache
# =============================================================================


def write_cache(directory: Path, name: str, payload: dict[str, Any]) -> Path:
    """Write a cache file the way the cache persists it."""
    path = directory / f"{name}.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def seeded_cache_dir(
    tmp_data_dir: Path,
    two_team_payloads: tuple[dict[str, Any], dict[str, Any]],
    frozen_now: datetime,
) -> Path:
    """Cache directory holding fresh snapshots of both feeds."""
    standings, team_stats = two_team_payloads
    stamp = frozen_now.isoformat()
    write_cache(tmp_data_dir, "standings", {**standings, "lastCheckedAt": stamp})
    write_cache(tmp_data_dir, "team-stats", {**team_stats, "lastCheckedAt": stamp})
    return tmp_data_dir


# =============================================================================
# Time Fixtures
# =============================================================================


@pytest.fixture
def frozen_now() -> datetime:
    """Return a fixed aware datetime for deterministic tests."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Marker Helpers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
