"""Static domain tables keyed by (training level, training goal).

Every level x goal cell must be present in both tables. validate_tables()
runs at import so an incomplete deployment fails before any request is served.
"""

from __future__ import annotations

from .errors import ConfigurationError
from .models import (
    TRAINING_GOALS,
    TRAINING_LEVELS,
    DeloadRecommendation,
    DeloadTiming,
    DeloadType,
    TrainingGoal,
    TrainingLevel,
)

BASE_DELOAD_DURATION_DAYS = 7

# Beginners feel the same objective load harder than elite lifters.
LEVEL_MULTIPLIERS: dict[TrainingLevel, float] = {
    "beginner": 1.2,
    "intermediate": 1.0,
    "advanced": 0.8,
    "elite": 0.7,
}

FATIGUE_THRESHOLDS: dict[TrainingLevel, dict[TrainingGoal, float]] = {
    "beginner": {
        "strength": 7.0,
        "hypertrophy": 6.0,
        "endurance": 5.0,
        "power": 7.0,
        "weight_loss": 5.0,
        "body_recomposition": 6.0,
        "general_fitness": 5.0,
        "sport_specific": 6.0,
    },
    "intermediate": {
        "strength": 8.0,
        "hypertrophy": 7.0,
        "endurance": 6.0,
        "power": 8.0,
        "weight_loss": 6.0,
        "body_recomposition": 7.0,
        "general_fitness": 6.0,
        "sport_specific": 7.0,
    },
    "advanced": {
        "strength": 9.0,
        "hypertrophy": 8.0,
        "endurance": 7.0,
        "power": 9.0,
        "weight_loss": 7.0,
        "body_recomposition": 8.0,
        "general_fitness": 7.0,
        "sport_specific": 8.0,
    },
    "elite": {
        "strength": 9.5,
        "hypertrophy": 9.0,
        "endurance": 8.0,
        "power": 9.5,
        "weight_loss": 8.0,
        "body_recomposition": 9.0,
        "general_fitness": 8.0,
        "sport_specific": 9.0,
    },
}


def _strategy(
    deload_type: DeloadType,
    volume: float,
    intensity: float,
    frequency: int,
    timing: DeloadTiming,
) -> DeloadRecommendation:
    return DeloadRecommendation(
        type=deload_type,
        volume_reduction=volume,
        intensity_reduction=intensity,
        frequency_reduction=frequency,
        duration=BASE_DELOAD_DURATION_DAYS,
        timing=timing,
    )


# Entries are frozen dataclasses, so handing them out never exposes mutable state.
DEFAULT_DELOAD_STRATEGIES: dict[TrainingLevel, dict[TrainingGoal, DeloadRecommendation]] = {
    "beginner": {
        "strength": _strategy("volume", 40, 0, 0, "planned"),
        "hypertrophy": _strategy("volume", 50, 0, 0, "planned"),
        "endurance": _strategy("intensity", 0, 30, 0, "planned"),
        "power": _strategy("combined", 30, 20, 0, "planned"),
        "weight_loss": _strategy("volume", 30, 0, 0, "planned"),
        "body_recomposition": _strategy("volume", 40, 0, 0, "planned"),
        "general_fitness": _strategy("frequency", 0, 0, 1, "planned"),
        "sport_specific": _strategy("combined", 30, 20, 0, "planned"),
    },
    "intermediate": {
        "strength": _strategy("combined", 40, 20, 0, "planned"),
        "hypertrophy": _strategy("volume", 60, 0, 0, "planned"),
        "endurance": _strategy("intensity", 0, 40, 0, "planned"),
        "power": _strategy("combined", 40, 30, 0, "planned"),
        "weight_loss": _strategy("volume", 40, 0, 0, "planned"),
        "body_recomposition": _strategy("volume", 50, 0, 0, "planned"),
        "general_fitness": _strategy("frequency", 0, 0, 1, "planned"),
        "sport_specific": _strategy("combined", 40, 30, 0, "planned"),
    },
    "advanced": {
        "strength": _strategy("combined", 50, 30, 0, "autoregulated"),
        "hypertrophy": _strategy("volume", 70, 0, 0, "autoregulated"),
        "endurance": _strategy("intensity", 0, 50, 0, "autoregulated"),
        "power": _strategy("combined", 50, 40, 0, "autoregulated"),
        "weight_loss": _strategy("volume", 50, 0, 0, "autoregulated"),
        "body_recomposition": _strategy("volume", 60, 0, 0, "autoregulated"),
        "general_fitness": _strategy("frequency", 0, 0, 2, "autoregulated"),
        "sport_specific": _strategy("combined", 50, 40, 0, "autoregulated"),
    },
    "elite": {
        "strength": _strategy("combined", 60, 40, 0, "autoregulated"),
        "hypertrophy": _strategy("volume", 80, 0, 0, "autoregulated"),
        "endurance": _strategy("intensity", 0, 60, 0, "autoregulated"),
        "power": _strategy("combined", 60, 50, 0, "autoregulated"),
        "weight_loss": _strategy("volume", 60, 0, 0, "autoregulated"),
        "body_recomposition": _strategy("volume", 70, 0, 0, "autoregulated"),
        "general_fitness": _strategy("frequency", 0, 0, 2, "autoregulated"),
        "sport_specific": _strategy("combined", 60, 50, 0, "autoregulated"),
    },
}


def missing_table_cells(table: dict[str, dict[str, object]]) -> list[tuple[str, str]]:
    """Return every (level, goal) pair absent from a level x goal table."""
    missing: list[tuple[str, str]] = []
    for level in TRAINING_LEVELS:
        row = table.get(level, {})
        for goal in TRAINING_GOALS:
            if goal not in row:
                missing.append((level, goal))
    return missing


def validate_tables() -> None:
    """Fail fast when any domain table lacks a level/goal cell."""
    problems: list[str] = []
    for name, table in (
        ("FATIGUE_THRESHOLDS", FATIGUE_THRESHOLDS),
        ("DEFAULT_DELOAD_STRATEGIES", DEFAULT_DELOAD_STRATEGIES),
    ):
        for level, goal in missing_table_cells(table):
            problems.append(f"{name}[{level}][{goal}]")
    for level in TRAINING_LEVELS:
        if level not in LEVEL_MULTIPLIERS:
            problems.append(f"LEVEL_MULTIPLIERS[{level}]")
    if problems:
        raise ConfigurationError("Missing domain table cells: " + ", ".join(problems))


def fatigue_threshold(level: TrainingLevel, goal: TrainingGoal) -> float:
    try:
        return FATIGUE_THRESHOLDS[level][goal]
    except KeyError:
        raise ConfigurationError(
            f"No fatigue threshold for level={level!r} goal={goal!r}"
        ) from None


def base_deload_strategy(level: TrainingLevel, goal: TrainingGoal) -> DeloadRecommendation:
    try:
        return DEFAULT_DELOAD_STRATEGIES[level][goal]
    except KeyError:
        raise ConfigurationError(
            f"No deload strategy for level={level!r} goal={goal!r}"
        ) from None


def level_multiplier(level: TrainingLevel) -> float:
    try:
        return LEVEL_MULTIPLIERS[level]
    except KeyError:
        raise ConfigurationError(f"No level multiplier for level={level!r}") from None


validate_tables()
