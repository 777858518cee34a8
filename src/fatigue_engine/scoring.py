"""Fatigue score aggregation."""

from __future__ import annotations

from .models import FatigueMarkers, MarkerName, TrainingGoal, TrainingLevel
from .tables import level_multiplier
from .weights import marker_weights

NORMALIZATION_DIVISOR = 10.0
# resting_heart_rate spans tens of BPM, so it is scaled down before weighting.
RESTING_HEART_RATE_SCALE = 10.0
SCALE_MAX = 10.0

# Markers where a high value means the athlete feels good.
INVERTED_MARKERS: frozenset[MarkerName] = frozenset(
    {"sleep_quality", "motivation", "mood_score", "technical_proficiency"}
)


def marker_contribution(name: MarkerName, value: float, weight: float) -> float:
    """Contribution of one marker to the raw (pre-normalization) fatigue sum."""
    if name in INVERTED_MARKERS:
        return (SCALE_MAX - value) * weight
    if name == "resting_heart_rate":
        return value * weight / RESTING_HEART_RATE_SCALE
    if name == "appetite_changes":
        return abs(value) * weight
    return value * weight


def raw_fatigue_sum(markers: FatigueMarkers, goal: str) -> float:
    weights = marker_weights(goal)
    total = 0.0
    for name, weight in weights.items():
        total += marker_contribution(name, getattr(markers, name), weight)
    return total


def calculate_fatigue_score(
    markers: FatigueMarkers,
    level: TrainingLevel,
    goal: TrainingGoal,
    individual_tolerance: float = 1.0,
) -> float:
    """Aggregate the ten markers into a single fatigue score.

    The result is unclamped; in practice it lands between 0 and ~15 and is
    read against the level/goal threshold table.
    """
    normalized = raw_fatigue_sum(markers, goal) / NORMALIZATION_DIVISOR
    return normalized * level_multiplier(level) * individual_tolerance
