"""League-relative color gradients.

Maps a metric value to an RGB color by blending three reference colors
(inspired by colorbrewer2.org): blue for the league's best, yellow for the
median, red for the league's worst.

Three mappings are provided:
    from_range: position of a value within a population {min, median, max}
    from_percent: a 0-1 ratio where 0.5 is neutral
    from_spread: a signed value with a pre-computed 0-1 ratio

Non-finite values (a division by zero upstream) always map to COLOR_LOW,
the "bad" end of the scale, regardless of polarity.

Example:
    >>> from nba_standings.output.gradient import from_percent
    >>> str(from_percent(0.5))
    '255,255,205'
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from nba_standings.features.population import PopulationRange


class Color(NamedTuple):
    """RGB triple with integer channels in [0, 255]."""

    r: int
    g: int
    b: int

    def __str__(self) -> str:
        return f"{self.r},{self.g},{self.b}"


class Polarity(Enum):
    """Whether a larger metric value is better."""

    HIGH_GOOD = "high"
    LOW_GOOD = "low"


COLOR_HI = Color(67, 147, 195)  # blue
COLOR_MID = Color(255, 255, 205)  # yellow
COLOR_LOW = Color(214, 96, 77)  # red


def _good_bad(polarity: Polarity) -> tuple[Color, Color]:
    if polarity is Polarity.HIGH_GOOD:
        return COLOR_HI, COLOR_LOW
    return COLOR_LOW, COLOR_HI


def blend(color_a: Color, color_b: Color, fraction_of_a: float) -> Color:
    """Linearly interpolate two colors, flooring each channel.

    The fraction is scaled to a 0-100 percentage before mixing so results
    match the published board exactly. Channels equal in both colors are
    passed through untouched.

    Args:
        color_a: Color weighted by ``fraction_of_a``.
        color_b: Color weighted by ``1 - fraction_of_a``.
        fraction_of_a: Share of ``color_a`` in [0, 1].

    Returns:
        Blended color.
    """
    pct_a = fraction_of_a * 100
    pct_b = 100 - pct_a
    return Color(
        *(
            a if a == b else math.floor((a * pct_a + b * pct_b) / 100)
            for a, b in zip(color_a, color_b)
        )
    )


def from_range(
    value: float,
    population: PopulationRange,
    polarity: Polarity = Polarity.HIGH_GOOD,
) -> Color:
    """Color a value by its position within a league population.

    Extremes are matched by exact value equality, so every team tied at the
    max (or min, or median) gets the same reference color.

    Args:
        value: Team's metric value.
        population: League {min, median, max} for the metric.
        polarity: Whether high values are good (blue) or bad (red).

    Returns:
        Color for the value.
    """
    if not math.isfinite(value):
        return COLOR_LOW

    good, bad = _good_bad(polarity)

    if value == population.max:
        return good
    if value == population.min:
        return bad
    if value == population.median:
        return COLOR_MID
    if value > population.median:
        spectrum = population.max - population.median
        place = population.max - value
        return blend(good, COLOR_MID, 1 - place / spectrum)

    spectrum = population.median - population.min
    place = population.median - value
    return blend(COLOR_MID, bad, 1 - place / spectrum)


def from_percent(value: float) -> Color:
    """Color a 0-1 ratio (e.g. win percentage) with 0.5 as neutral."""
    if not math.isfinite(value):
        return COLOR_LOW
    if value > 0.5:
        return blend(COLOR_HI, COLOR_MID, (value - 0.5) * 2)
    if value == 0.5:
        return COLOR_MID
    return blend(COLOR_MID, COLOR_LOW, value * 2)


def from_spread(signed_value: float, ratio: float) -> Color:
    """Color a signed metric such as point differential or streak.

    Args:
        signed_value: The metric itself; only its sign is used.
        ratio: Magnitude relative to the league's largest value on the same
            side of zero, in [0, 1].

    Returns:
        Blue shades for positive values, red shades for negative ones.
    """
    if not (math.isfinite(signed_value) and math.isfinite(ratio)):
        return COLOR_LOW
    if signed_value > 0:
        return blend(COLOR_HI, COLOR_MID, ratio)
    if signed_value == 0:
        return COLOR_MID
    return blend(COLOR_LOW, COLOR_MID, ratio)
