"""Per-goal importance of each fatigue marker.

Weights are relative, not normalized to sum to 1. Goals without a bespoke
row (and unrecognized goal strings) get a uniform 1.0 for every marker.
"""

from __future__ import annotations

import logging

from .models import MARKER_NAMES, MarkerName

logger = logging.getLogger(__name__)

DEFAULT_MARKER_WEIGHTS: dict[MarkerName, float] = {name: 1.0 for name in MARKER_NAMES}

MARKER_WEIGHTS_BY_GOAL: dict[str, dict[MarkerName, float]] = {
    "strength": {
        "rpe_increase": 1.5,
        "strength_decrease": 2.0,
        "soreness": 0.8,
        "sleep_quality": 1.0,
        "motivation": 1.0,
        "resting_heart_rate": 0.7,
        "mood_score": 0.8,
        "stress_score": 1.0,
        "appetite_changes": 0.6,
        "technical_proficiency": 1.5,
    },
    "hypertrophy": {
        "rpe_increase": 1.0,
        "strength_decrease": 1.0,
        "soreness": 1.2,
        "sleep_quality": 1.2,
        "motivation": 1.0,
        "resting_heart_rate": 0.8,
        "mood_score": 0.8,
        "stress_score": 1.0,
        "appetite_changes": 1.0,
        "technical_proficiency": 0.8,
    },
    "power": {
        "rpe_increase": 1.5,
        "strength_decrease": 1.8,
        "soreness": 0.7,
        "sleep_quality": 1.2,
        "motivation": 1.2,
        "resting_heart_rate": 0.8,
        "mood_score": 0.8,
        "stress_score": 1.0,
        "appetite_changes": 0.6,
        "technical_proficiency": 1.8,
    },
    "endurance": {
        "rpe_increase": 1.0,
        "strength_decrease": 0.7,
        "soreness": 0.8,
        "sleep_quality": 1.0,
        "motivation": 1.0,
        "resting_heart_rate": 1.5,
        "mood_score": 0.8,
        "stress_score": 1.0,
        "appetite_changes": 0.8,
        "technical_proficiency": 0.7,
    },
}


def marker_weights(goal: str) -> dict[MarkerName, float]:
    """Return a fresh weight mapping for ``goal``."""
    weights = MARKER_WEIGHTS_BY_GOAL.get(goal)
    if weights is None:
        logger.debug("No bespoke marker weights for goal %r; using uniform weights", goal)
        weights = DEFAULT_MARKER_WEIGHTS
    return dict(weights)
