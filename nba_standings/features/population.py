"""League-wide reference ranges for a metric.

A PopulationRange is the {min, median, max} of one metric across every
team in the league. It is computed fresh for each board build and is the
reference the color gradient blends against.

Non-finite values (a team whose metric divided by zero) are left out of the
range; the color gradient assigns those teams the "bad" color directly.

Example:
    >>> from nba_standings.features.population import compute_range
    >>> compute_range([1.0, 2.0, 3.0, 4.0])
    PopulationRange(min=1.0, max=4.0, median=2.5)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from nba_standings.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PopulationRange:
    """League {min, max, median} for one metric."""

    min: float
    max: float
    median: float


EMPTY_RANGE = PopulationRange(min=np.nan, max=np.nan, median=np.nan)


def median(values: Sequence[float]) -> float:
    """Median by the standard even/odd rule.

    Even counts average the two central values; odd counts take the
    central value.

    Raises:
        ValueError: If values is empty.
    """
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        raise ValueError("median of an empty population")
    if n % 2 == 0:
        return (ordered[n // 2 - 1] + ordered[n // 2]) / 2
    return ordered[(n - 1) // 2]


def compute_range(values: Iterable[float]) -> PopulationRange:
    """Compute the {min, max, median} of the finite values.

    Args:
        values: Metric values, one per team. Numeric strings are accepted.

    Returns:
        PopulationRange, or an all-NaN range if no value is finite.
    """
    array = np.asarray([float(v) for v in values], dtype=float)
    finite = array[np.isfinite(array)]

    if finite.size == 0:
        return EMPTY_RANGE

    return PopulationRange(
        min=float(finite.min()),
        max=float(finite.max()),
        median=float(median(finite.tolist())),
    )


def compute_ranges(
    frame: pd.DataFrame,
    columns: Iterable[str] | None = None,
) -> dict[str, PopulationRange]:
    """Compute a PopulationRange for several metric columns.

    Args:
        frame: One row per team, one column per metric.
        columns: Columns to summarize. Defaults to every column.

    Returns:
        Dict mapping column name to its PopulationRange.

    Raises:
        KeyError: If a requested column is not in the frame.
    """
    selected = list(frame.columns) if columns is None else list(columns)
    missing = [c for c in selected if c not in frame.columns]
    if missing:
        raise KeyError(f"Metrics not found in population: {missing}")

    ranges = {column: compute_range(frame[column]) for column in selected}

    dropped = {
        column: int((~np.isfinite(frame[column].to_numpy(dtype=float))).sum())
        for column in selected
    }
    for column, count in dropped.items():
        if count:
            logger.warning(
                "{} team(s) have a non-finite '{}', excluded from its range",
                count,
                column,
            )

    logger.debug("Computed {} population ranges over {} teams", len(ranges), len(frame))
    return ranges
