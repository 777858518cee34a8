"""Core value types for fatigue assessment and deload prescription.

Athlete-supplied observations (markers, training response) are clamped into
their documented ranges; operator-supplied tuning (FatigueAlgorithmConfig) is
validated strictly and rejected when out of range.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TrainingLevel = Literal["beginner", "intermediate", "advanced", "elite"]
TrainingGoal = Literal[
    "strength",
    "hypertrophy",
    "endurance",
    "power",
    "weight_loss",
    "body_recomposition",
    "general_fitness",
    "sport_specific",
]
DeloadType = Literal["volume", "intensity", "frequency", "combined"]
DeloadTiming = Literal["planned", "autoregulated"]
RecommendedAction = Literal[
    "proceed",
    "reduce_volume",
    "reduce_intensity",
    "active_recovery",
    "rest",
    "deload",
]
# 1-based position in RECOMMENDED_ACTIONS; higher is more fatigued.
FatigueBand = Literal[1, 2, 3, 4, 5, 6]
MarkerName = Literal[
    "rpe_increase",
    "strength_decrease",
    "soreness",
    "sleep_quality",
    "motivation",
    "resting_heart_rate",
    "mood_score",
    "stress_score",
    "appetite_changes",
    "technical_proficiency",
]

# Ordered by fatigue tolerance, least tolerant first.
TRAINING_LEVELS: tuple[TrainingLevel, ...] = ("beginner", "intermediate", "advanced", "elite")
TRAINING_GOALS: tuple[TrainingGoal, ...] = (
    "strength",
    "hypertrophy",
    "endurance",
    "power",
    "weight_loss",
    "body_recomposition",
    "general_fitness",
    "sport_specific",
)
# Ordered from least to most conservative.
RECOMMENDED_ACTIONS: tuple[RecommendedAction, ...] = (
    "proceed",
    "reduce_volume",
    "reduce_intensity",
    "active_recovery",
    "rest",
    "deload",
)
MARKER_NAMES: tuple[MarkerName, ...] = (
    "rpe_increase",
    "strength_decrease",
    "soreness",
    "sleep_quality",
    "motivation",
    "resting_heart_rate",
    "mood_score",
    "stress_score",
    "appetite_changes",
    "technical_proficiency",
)

MARKER_RANGES: dict[MarkerName, tuple[float, float]] = {
    "rpe_increase": (0.0, 10.0),
    "strength_decrease": (0.0, 100.0),
    "soreness": (1.0, 10.0),
    "sleep_quality": (1.0, 10.0),
    "motivation": (1.0, 10.0),
    # BPM elevation over the athlete's own baseline
    "resting_heart_rate": (0.0, 60.0),
    "mood_score": (1.0, 10.0),
    "stress_score": (1.0, 10.0),
    "appetite_changes": (-5.0, 5.0),
    "technical_proficiency": (1.0, 10.0),
}

TRAINING_RESPONSE_RANGE: tuple[float, float] = (1.0, 10.0)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class FatigueMarkers(BaseModel):
    """Snapshot of the ten fatigue markers captured for one athlete/day.

    Out-of-range values are clamped rather than rejected. NaN and infinity
    carry no position on a scale and fail validation.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    rpe_increase: float
    strength_decrease: float
    soreness: float
    sleep_quality: float
    motivation: float
    resting_heart_rate: float
    mood_score: float
    stress_score: float
    appetite_changes: float
    technical_proficiency: float

    @field_validator(*MARKER_NAMES)
    @classmethod
    def clamp_to_range(cls, value: float, info: Any) -> float:
        low, high = MARKER_RANGES[info.field_name]
        return _clamp(value, low, high)


class TrainingResponse(BaseModel):
    """How well the athlete is adapting (all fields on a 1-10 scale)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    strength_gain: float
    muscle_growth: float
    motivation: float
    technical_improvement: float
    recovery_speed: float

    @field_validator(
        "strength_gain",
        "muscle_growth",
        "motivation",
        "technical_improvement",
        "recovery_speed",
    )
    @classmethod
    def clamp_to_scale(cls, value: float) -> float:
        return _clamp(value, *TRAINING_RESPONSE_RANGE)


class FatigueAlgorithmConfig(BaseModel):
    """Per-athlete tuning for the deload-need detector."""

    model_config = ConfigDict(frozen=True)

    fatigue_threshold: float = Field(ge=0.0, le=10.0)
    recovery_weight: float = Field(default=0.3, ge=0.0, le=1.0)
    training_response_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    individual_tolerance: float = Field(default=1.0, ge=0.5, le=1.5)
    autoregulation_enabled: bool = True

    @classmethod
    def for_athlete(
        cls,
        level: TrainingLevel,
        goal: TrainingGoal,
        **overrides: Any,
    ) -> FatigueAlgorithmConfig:
        """Build a config whose threshold defaults to the level/goal table cell."""
        from fatigue_engine.tables import fatigue_threshold

        values: dict[str, Any] = {"fatigue_threshold": fatigue_threshold(level, goal)}
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class DeloadRecommendation:
    """A deload prescription. Reductions are >= 0 and duration >= 3 days."""

    type: DeloadType
    volume_reduction: float  # percent
    intensity_reduction: float  # percent
    frequency_reduction: int  # sessions per week
    duration: int  # days
    timing: DeloadTiming
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FatigueManagementRecommendation:
    current_fatigue: float
    recovery_capacity: float
    sleep_quality: float
    stress_level: float
    performance_decrement: float  # percent, 0-100
    readiness_to_train: float  # 1-10
    recommended_action: RecommendedAction
    specific_recommendations: tuple[str, ...]
    deload_recommendation: DeloadRecommendation | None = None
    muscle_soreness: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["specific_recommendations"] = list(self.specific_recommendations)
        return result


@dataclass(frozen=True)
class DeloadWeekInput:
    """A deload prescription placed on the calendar; ``end_date`` is inclusive."""

    user_id: str
    start_date: date
    end_date: date
    type: DeloadType
    volume_reduction: float
    intensity_reduction: float
    frequency_reduction: int
    timing: DeloadTiming
    plan_id: str | None = None
    cycle_id: str | None = None
    reason: str | None = None
    notes: str | None = None
