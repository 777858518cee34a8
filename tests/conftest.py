from __future__ import annotations

import pytest

from fatigue_engine.models import FatigueMarkers


@pytest.fixture
def worked_markers() -> FatigueMarkers:
    """Reference snapshot whose hypertrophy/intermediate score is 5.104."""
    return FatigueMarkers(
        rpe_increase=5,
        strength_decrease=10,
        soreness=6,
        sleep_quality=4,
        motivation=5,
        resting_heart_rate=8,
        mood_score=5,
        stress_score=6,
        appetite_changes=2,
        technical_proficiency=5,
    )
