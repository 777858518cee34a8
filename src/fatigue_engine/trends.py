"""Trend helpers over stored fatigue history."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Protocol


class _DailyFatigue(Protocol):
    @property
    def date(self) -> date: ...

    @property
    def overall_fatigue(self) -> float: ...


def daily_peak_fatigue(records: Iterable[_DailyFatigue]) -> dict[date, float]:
    """Collapse records to one score per day, keeping that day's highest."""
    per_day: dict[date, float] = {}
    for record in records:
        current = per_day.get(record.date)
        if current is None or record.overall_fatigue > current:
            per_day[record.date] = record.overall_fatigue
    return per_day


def consecutive_high_fatigue_days(
    records: Iterable[_DailyFatigue],
    threshold: float,
) -> int:
    """Length of the high-fatigue streak ending at the newest recorded day.

    A day counts when its peak score is >= ``threshold``. A missing calendar
    day or a day below threshold ends the streak.
    """
    per_day = daily_peak_fatigue(records)
    if not per_day:
        return 0

    streak = 0
    expected = max(per_day)
    for day in sorted(per_day, reverse=True):
        if day != expected or per_day[day] < threshold:
            break
        streak += 1
        expected = day - timedelta(days=1)
    return streak
