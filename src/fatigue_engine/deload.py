"""Deload-need detection and deload personalization.

needs_deload() is an independent signal from the banded recommendation: the
two may disagree (e.g. band says "rest" while the detector says no deload)
and neither overrides the other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta

from .models import (
    DeloadRecommendation,
    DeloadWeekInput,
    FatigueAlgorithmConfig,
    TrainingGoal,
    TrainingLevel,
    TrainingResponse,
)
from .tables import fatigue_threshold

logger = logging.getLogger(__name__)

PERSISTENT_FATIGUE_DAYS = 3
OVERTRAINING_MOTIVATION_CEILING = 5.0
OVERTRAINING_STRENGTH_GAIN_CEILING = 3.0
OVERTRAINING_THRESHOLD_FRACTION = 0.8

AGGRESSIVE_FATIGUE_FRACTION = 1.2
MILD_FATIGUE_FRACTION = 0.8
POOR_RECOVERY_CEILING = 4.0
GOOD_RECOVERY_FLOOR = 7.0
MIN_DELOAD_DAYS = 3

NOTE_AGGRESSIVE = "Very high fatigue: aggressive deload recommended"
NOTE_MILD = "Moderate fatigue: mild deload recommended"
NOTE_POOR_RECOVERY = "Low recovery capacity: deload extended"
NOTE_GOOD_RECOVERY = "Good recovery capacity: shorter deload"


def needs_deload(
    fatigue_score: float,
    recovery_score: float,
    training_response: TrainingResponse,
    config: FatigueAlgorithmConfig,
    consecutive_high_fatigue_days: int,
) -> bool:
    """Return True when any deload trigger fires.

    Triggers: the recovery/response-adjusted score exceeds the configured
    threshold, fatigue has been high for PERSISTENT_FATIGUE_DAYS or more, or
    the overtraining heuristic (low motivation, stalled strength, near-threshold
    fatigue) matches.
    """
    adaptation = (training_response.strength_gain + training_response.muscle_growth) / 2
    combined = (
        fatigue_score
        - recovery_score * config.recovery_weight
        - adaptation * config.training_response_weight
    )

    exceeds_threshold = combined > config.fatigue_threshold
    persistent_fatigue = consecutive_high_fatigue_days >= PERSISTENT_FATIGUE_DAYS
    overtraining_risk = (
        training_response.motivation < OVERTRAINING_MOTIVATION_CEILING
        and training_response.strength_gain < OVERTRAINING_STRENGTH_GAIN_CEILING
        and fatigue_score > config.fatigue_threshold * OVERTRAINING_THRESHOLD_FRACTION
    )

    result = exceeds_threshold or persistent_fatigue or overtraining_risk
    logger.debug(
        "needs_deload=%s (combined=%.3f threshold=%.2f persistent=%s overtraining=%s)",
        result,
        combined,
        config.fatigue_threshold,
        persistent_fatigue,
        overtraining_risk,
    )
    return result


@dataclass(frozen=True)
class DeloadAdjustment:
    """Deltas accumulated against a base strategy before being applied once."""

    volume: float = 0.0
    intensity: float = 0.0
    frequency: int = 0
    duration: int = 0
    min_duration: int = MIN_DELOAD_DAYS
    notes: tuple[str, ...] = ()

    def plus(
        self,
        *,
        volume: float = 0.0,
        intensity: float = 0.0,
        frequency: int = 0,
        duration: int = 0,
        note: str | None = None,
    ) -> DeloadAdjustment:
        return replace(
            self,
            volume=self.volume + volume,
            intensity=self.intensity + intensity,
            frequency=self.frequency + frequency,
            duration=self.duration + duration,
            notes=self.notes + ((note,) if note else ()),
        )

    def apply(self, base: DeloadRecommendation) -> DeloadRecommendation:
        notes = [base.notes] if base.notes else []
        notes.extend(self.notes)
        return replace(
            base,
            volume_reduction=max(0.0, base.volume_reduction + self.volume),
            intensity_reduction=max(0.0, base.intensity_reduction + self.intensity),
            frequency_reduction=max(0, base.frequency_reduction + self.frequency),
            duration=max(self.min_duration, base.duration + self.duration),
            notes="; ".join(notes) if notes else None,
        )


def deload_adjustment(
    fatigue_score: float,
    recovery_score: float,
    threshold: float,
) -> DeloadAdjustment:
    adjustment = DeloadAdjustment()

    if fatigue_score > threshold * AGGRESSIVE_FATIGUE_FRACTION:
        adjustment = adjustment.plus(
            volume=10, intensity=5, frequency=1, duration=2, note=NOTE_AGGRESSIVE
        )
    elif fatigue_score < threshold * MILD_FATIGUE_FRACTION:
        adjustment = adjustment.plus(volume=-10, intensity=-5, duration=-2, note=NOTE_MILD)

    if recovery_score < POOR_RECOVERY_CEILING:
        adjustment = adjustment.plus(duration=2, volume=5, note=NOTE_POOR_RECOVERY)
    elif recovery_score > GOOD_RECOVERY_FLOOR:
        adjustment = adjustment.plus(duration=-2, note=NOTE_GOOD_RECOVERY)

    return adjustment


def generate_personalized_deload(
    fatigue_score: float,
    recovery_score: float,
    level: TrainingLevel,
    goal: TrainingGoal,
    base_strategy: DeloadRecommendation,
) -> DeloadRecommendation:
    """Tailor ``base_strategy`` to how far fatigue exceeds threshold and how well the athlete recovers.

    ``base_strategy`` is never modified. Reductions are clamped at 0 and the
    duration never drops below MIN_DELOAD_DAYS.
    """
    threshold = fatigue_threshold(level, goal)
    adjustment = deload_adjustment(fatigue_score, recovery_score, threshold)
    return adjustment.apply(base_strategy)


def schedule_deload_week(
    recommendation: DeloadRecommendation,
    *,
    user_id: str,
    start_date: date,
    plan_id: str | None = None,
    cycle_id: str | None = None,
    reason: str | None = None,
) -> DeloadWeekInput:
    """Place a deload prescription on the calendar, ready to persist."""
    end_date = start_date + timedelta(days=recommendation.duration - 1)
    return DeloadWeekInput(
        user_id=user_id,
        plan_id=plan_id,
        cycle_id=cycle_id,
        start_date=start_date,
        end_date=end_date,
        type=recommendation.type,
        volume_reduction=recommendation.volume_reduction,
        intensity_reduction=recommendation.intensity_reduction,
        frequency_reduction=recommendation.frequency_reduction,
        timing=recommendation.timing,
        reason=reason,
        notes=recommendation.notes,
    )
