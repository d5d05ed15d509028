"""
Numeric helpers for LSI reporting: mean, standard deviation, significance
approximation, Cohen's d and effect-size banding.

The p-value here is a practitioner approximation bundled with the scoring
model, not a textbook t-test. Reports and fixtures depend on the exact
formula, so it is kept as-is.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Iterable

# Guard for a zero standard error in p_value
SE_EPSILON = 0.001

# Logistic tail approximation coefficients: p ~ 2 / (1 + exp(A*t + B*t^2))
P_APPROX_A = 0.717
P_APPROX_B = 0.416

EFFECT_LARGE = "Large"
EFFECT_MEDIUM = "Medium"
EFFECT_SMALL = "Small"
EFFECT_NEGLIGIBLE = "Negligible"


@dataclass(frozen=True)
class EffectBand:
    """Effect-size band for a Cohen's d value."""

    band: str
    label: str
    color: str
    min_d: float

    def to_dict(self) -> dict[str, str | float]:
        return {"band": self.band, "label": self.label, "color": self.color}


# Ordered by descending threshold; lower bound inclusive.
EFFECT_BANDS: tuple[EffectBand, ...] = (
    EffectBand(EFFECT_LARGE, "Large effect", "#4ade80", 0.8),
    EffectBand(EFFECT_MEDIUM, "Medium effect", "#C9A84C", 0.5),
    EffectBand(EFFECT_SMALL, "Small effect", "#60a5fa", 0.2),
    EffectBand(EFFECT_NEGLIGIBLE, "Negligible", "#6b7280", float("-inf")),
)


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    vals = list(values)
    if not vals:
        return 0.0
    return float(statistics.mean(vals))


def sample_stddev(values: Iterable[float]) -> float:
    """
    Sample standard deviation, dividing by n - 1.

    One value (or none) gives 0.0. This is the single divisor used for all
    run statistics.
    """
    vals = list(values)
    if len(vals) < 2:
        return 0.0
    return float(statistics.stdev(vals))


def population_stddev(values: Iterable[float]) -> float:
    """Population standard deviation (divide by n); 0.0 for fewer than 2 values."""
    vals = list(values)
    if len(vals) < 2:
        return 0.0
    return float(statistics.pstdev(vals))


def p_value(baseline: float, current: float, n: int) -> float:
    """
    Approximate two-sided p-value for a baseline -> current change over n runs.

    Coarse logistic approximation to a t-distribution tail:
        t = diff / (diff / sqrt(n)),  p ~ min(2 / (1 + exp(0.717 t + 0.416 t^2)), 1)
    Fewer than 2 runs is never significant (returns 1.0). Identical scores
    give t = 0 and p = 1.0.
    """
    if n < 2:
        return 1.0
    diff = abs(current - baseline)
    se = diff / math.sqrt(n)
    t = diff / (se or SE_EPSILON)
    exponent = P_APPROX_A * t + P_APPROX_B * t * t
    # exp overflows long before the result stops being ~0
    if exponent > 700:
        return 0.0
    return min(2.0 / (1.0 + math.exp(exponent)), 1.0)


def cohens_d(baseline: float, current: float, stddev: float) -> float:
    """|current - baseline| / stddev; 0.0 when stddev is not positive. Symmetric."""
    if stddev <= 0:
        return 0.0
    return abs(current - baseline) / stddev


def effect_band(d: float) -> EffectBand:
    """Band a Cohen's d: >=0.8 Large, >=0.5 Medium, >=0.2 Small, else Negligible."""
    for band in EFFECT_BANDS:
        if d >= band.min_d:
            return band
    return EFFECT_BANDS[-1]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (percentages)."""
    return int(math.floor(value + 0.5))


def round_score(value: float, digits: int = 1) -> float:
    """Round to digits decimals with halves going up (0.25 -> 0.3, not 0.2)."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)
