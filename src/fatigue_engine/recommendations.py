"""Tiered training-action recommendations from a fatigue score.

The score is placed in one of six bands scaled from the level/goal
threshold. Bands are checked lowest first and the first match wins, so the
sweep from 0 upward is contiguous with no gaps or overlaps.
"""

from __future__ import annotations

import logging

from .deload import generate_personalized_deload
from .models import (
    RECOMMENDED_ACTIONS,
    FatigueBand,
    FatigueManagementRecommendation,
    RecommendedAction,
    TrainingGoal,
    TrainingLevel,
)
from .tables import base_deload_strategy, fatigue_threshold

logger = logging.getLogger(__name__)

# Upper bound (exclusive) of bands 1-5 as a fraction of the threshold.
# Anything at or above the last bound falls in band 6.
BAND_UPPER_BOUNDS: tuple[float, ...] = (0.6, 0.8, 1.0, 1.2, 1.4)

GUIDANCE_BY_ACTION: dict[RecommendedAction, tuple[str, ...]] = {
    "proceed": (
        "Continue with your normal training.",
        "Your fatigue is low; you can train at full intensity.",
    ),
    "reduce_volume": (
        "Reduce training volume by 20-30%.",
        "Keep the intensity but do fewer total sets.",
        "Prioritize compound movements and cut back on isolation work.",
    ),
    "reduce_intensity": (
        "Reduce training intensity by 10-15%.",
        "Use lighter loads and keep a higher RIR (reps in reserve).",
        "Consider more repetitions with less weight.",
    ),
    "active_recovery": (
        "Do active recovery sessions.",
        "Focus on mobility, stretching and very low intensity work.",
        "Consider swimming, walking or yoga.",
    ),
    "rest": (
        "Take 1-2 full rest days.",
        "Prioritize sleep and nutrition to recover.",
        "Consider recovery techniques such as sauna, contrast baths or massage.",
    ),
    "deload": (
        "Schedule a deload week.",
        "Significantly reduce volume and/or intensity for 5-7 days.",
        "Focus on full recovery before returning to normal training.",
    ),
}


def categorize_fatigue(fatigue_score: float, threshold: float) -> FatigueBand:
    """Return the 1-based fatigue band for ``fatigue_score``."""
    for band, bound in enumerate(BAND_UPPER_BOUNDS, start=1):
        if fatigue_score < threshold * bound:
            return band
    return len(BAND_UPPER_BOUNDS) + 1


def action_for_band(band: FatigueBand) -> RecommendedAction:
    if not 1 <= band <= len(RECOMMENDED_ACTIONS):
        raise ValueError(f"band must be between 1 and {len(RECOMMENDED_ACTIONS)}, got {band}")
    return RECOMMENDED_ACTIONS[band - 1]


def recommend_action(
    fatigue_score: float, level: TrainingLevel, goal: TrainingGoal
) -> RecommendedAction:
    threshold = fatigue_threshold(level, goal)
    return action_for_band(categorize_fatigue(fatigue_score, threshold))


def generate_fatigue_management_recommendations(
    fatigue_score: float,
    recovery_score: float,
    level: TrainingLevel,
    goal: TrainingGoal,
) -> FatigueManagementRecommendation:
    """Build the full recommendation; a deload prescription is attached only for band 6."""
    threshold = fatigue_threshold(level, goal)
    band = categorize_fatigue(fatigue_score, threshold)
    action = action_for_band(band)
    logger.debug(
        "Fatigue %.3f vs threshold %.2f (%s/%s) -> band %d (%s)",
        fatigue_score,
        threshold,
        level,
        goal,
        band,
        action,
    )

    deload = None
    if action == "deload":
        deload = generate_personalized_deload(
            fatigue_score,
            recovery_score,
            level,
            goal,
            base_deload_strategy(level, goal),
        )

    return FatigueManagementRecommendation(
        current_fatigue=fatigue_score,
        recovery_capacity=recovery_score,
        # Derived directly from recovery until dedicated inputs exist.
        sleep_quality=recovery_score,
        stress_level=10 - recovery_score,
        performance_decrement=min(100.0, fatigue_score * 10),
        readiness_to_train=max(1.0, 10 - fatigue_score),
        recommended_action=action,
        specific_recommendations=GUIDANCE_BY_ACTION[action],
        deload_recommendation=deload,
    )
