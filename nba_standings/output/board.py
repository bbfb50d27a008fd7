"""Standings board rendering.

Renders the enricher's hand-off object to a static HTML page (Jinja2) or a
JSON document. Cells are shaded with the team's ``colors`` entry for the
column, so the page is a heat map of the league.

Example:
    >>> from nba_standings.output.board import StandingsBoard
    >>> board = StandingsBoard()
    >>> board.write_html(result.board, "docs/index.html")
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError

from nba_standings.logging import get_logger
from nba_standings.types import RenderError

logger = get_logger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
DEFAULT_TEMPLATE = "standings.html"


def _lookup(data: dict[str, Any], path: str) -> Any:
    value: Any = data
    for part in path.split("."):
        value = value[part]
    return value


@dataclass(frozen=True)
class BoardColumn:
    """One board column: a value and the colors entry that shades it.

    Attributes:
        label: Column header.
        value_path: Dotted path of the value in a team dict.
        color_key: Dotted path of the color in the team's ``colors`` map.
        fmt: Format spec applied to numeric values.
    """

    label: str
    value_path: str
    color_key: str
    fmt: str = ".1f"

    def value(self, team: dict[str, Any]) -> Any:
        return _lookup(team, self.value_path)

    def color(self, team: dict[str, Any]) -> str:
        return _lookup(team["colors"], self.color_key)

    def text(self, team: dict[str, Any]) -> str:
        value = self.value(team)
        if isinstance(value, float):
            return format(value, self.fmt) if math.isfinite(value) else "-"
        return str(value)


DEFAULT_COLUMNS: tuple[BoardColumn, ...] = (
    BoardColumn("W%", "win_percentage", "win_percentage", ".3f"),
    BoardColumn("Home", "home_won", "home_win_percentage", "d"),
    BoardColumn("Away", "away_won", "away_win_percentage", "d"),
    BoardColumn("Conf", "conference_won", "conf_win_percentage", "d"),
    BoardColumn("L5", "last_five", "last_five"),
    BoardColumn("L10", "last_ten", "last_ten"),
    BoardColumn("Strk", "streak_total", "streak_total", "d"),
    BoardColumn("Diff", "point_differential_per_game", "point_diff"),
    BoardColumn("Pace", "team_stats.possessions_per_game", "possessions_per_game"),
    BoardColumn("ORtg", "team_stats.points_per_pos", "points_per_pos", ".3f"),
    BoardColumn("DRtg", "opponent_stats.points_per_pos", "opp.points_per_pos", ".3f"),
    BoardColumn("eFG%", "team_stats.effective_field_goal_percentage", "efg_pct", ".3f"),
    BoardColumn("TS%", "team_stats.true_shooting_percentage", "ts_pct", ".3f"),
    BoardColumn("3P%", "team_stats.three_point_field_goal_percentage", "fg3_pct"),
    BoardColumn("Opp FG%", "opponent_stats.field_goal_percentage", "opp.fg_pct"),
    BoardColumn("REB%", "team_stats.rebound_percentage", "rebound_percentage", ".3f"),
    BoardColumn("AST/TO", "team_stats.assist_to_turnover_ratio", "assist_to_turnover_ratio", ".2f"),
    BoardColumn("TOV/Pos", "team_stats.turnovers_per_pos", "turnovers_per_pos", ".3f"),
)


class StandingsBoard:
    """Render the standings hand-off object.

    Attributes:
        template_dir: Directory containing Jinja2 templates.
        columns: Columns shown on the board.
    """

    def __init__(
        self,
        template_dir: str | Path = DEFAULT_TEMPLATE_DIR,
        columns: tuple[BoardColumn, ...] = DEFAULT_COLUMNS,
    ) -> None:
        self.template_dir = Path(template_dir)
        self.columns = columns
        self._jinja_env: Environment | None = None

    @property
    def jinja_env(self) -> Environment:
        """Jinja2 environment, created on first use.

        Raises:
            RenderError: If the template directory does not exist.
        """
        if self._jinja_env is None:
            if not self.template_dir.exists():
                raise RenderError(f"Template directory '{self.template_dir}' not found")
            self._jinja_env = Environment(
                loader=FileSystemLoader(str(self.template_dir)),
                autoescape=True,
            )
        return self._jinja_env

    def render_html(self, board: dict[str, Any], template: str = DEFAULT_TEMPLATE) -> str:
        """Render the board to an HTML string.

        Raises:
            RenderError: If the template is missing or fails to render.
        """
        try:
            return self.jinja_env.get_template(template).render(
                columns=self.columns, **board
            )
        except (TemplateError, KeyError) as e:
            raise RenderError(f"Failed to render {template}: {e}") from e

    def write_html(self, board: dict[str, Any], path: str | Path) -> Path:
        """Render the board and write it to ``path``."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(self.render_html(board), encoding="utf-8")
        logger.info("Wrote standings board to {}", out)
        return out

    @staticmethod
    def write_json(board: dict[str, Any], path: str | Path) -> Path:
        """Write the board as JSON, non-finite numbers as null."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w", encoding="utf-8") as f:
            json.dump(_finite_or_none(board), f, indent=2)
        logger.info("Wrote standings JSON to {}", out)
        return out


def _finite_or_none(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite_or_none(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_finite_or_none(v) for v in value]
    return value
