"""One-call pipeline: markers -> fatigue score -> recommendation."""

from __future__ import annotations

from .models import (
    FatigueAlgorithmConfig,
    FatigueManagementRecommendation,
    FatigueMarkers,
    TrainingGoal,
    TrainingLevel,
)
from .recommendations import generate_fatigue_management_recommendations
from .scoring import calculate_fatigue_score


def assess(
    markers: FatigueMarkers,
    level: TrainingLevel,
    goal: TrainingGoal,
    recovery_score: float,
    config: FatigueAlgorithmConfig | None = None,
) -> FatigueManagementRecommendation:
    tolerance = config.individual_tolerance if config is not None else 1.0
    score = calculate_fatigue_score(markers, level, goal, tolerance)
    return generate_fatigue_management_recommendations(score, recovery_score, level, goal)
