"""Storage boundary for fatigue tracking and deload week records.

The scoring core never calls into this module; callers persist results after
the core has returned. Failures surface as RepositoryError and are never
retried here.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Protocol

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Json

from .errors import RepositoryError
from .models import MARKER_NAMES, DeloadWeekInput, FatigueMarkers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FatigueRecordInput:
    user_id: str
    date: date
    markers: FatigueMarkers
    overall_fatigue: float
    muscle_group_fatigue: dict[str, float] = field(default_factory=dict)
    notes: str | None = None


@dataclass(frozen=True)
class StoredFatigueRecord:
    id: str
    user_id: str
    date: date
    markers: FatigueMarkers
    overall_fatigue: float
    muscle_group_fatigue: dict[str, float]
    notes: str | None
    created_at: datetime


@dataclass(frozen=True)
class StoredDeloadWeek:
    id: str
    record: DeloadWeekInput
    created_at: datetime
    updated_at: datetime


class FatigueRepository(Protocol):
    """Persistence contract expected by callers wiring the engine together."""

    async def save_fatigue_record(self, record: FatigueRecordInput) -> StoredFatigueRecord: ...

    async def get_latest_fatigue_record(self, user_id: str) -> StoredFatigueRecord | None: ...

    async def list_recent_fatigue_records(
        self, user_id: str, limit: int = 14
    ) -> list[StoredFatigueRecord]: ...

    async def save_deload_week(self, record: DeloadWeekInput) -> StoredDeloadWeek: ...


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


class InMemoryFatigueRepository:
    """Process-local repository for tests and single-process tooling."""

    def __init__(self) -> None:
        self._fatigue: list[StoredFatigueRecord] = []
        self._deload_weeks: list[StoredDeloadWeek] = []

    async def save_fatigue_record(self, record: FatigueRecordInput) -> StoredFatigueRecord:
        stored = StoredFatigueRecord(
            id=str(uuid.uuid4()),
            user_id=record.user_id,
            date=record.date,
            markers=record.markers,
            overall_fatigue=record.overall_fatigue,
            muscle_group_fatigue=dict(record.muscle_group_fatigue),
            notes=record.notes,
            created_at=_now(),
        )
        self._fatigue.append(stored)
        return stored

    async def list_recent_fatigue_records(
        self, user_id: str, limit: int = 14
    ) -> list[StoredFatigueRecord]:
        rows = [r for r in self._fatigue if r.user_id == user_id]
        # Newest first; among same-day records the later insert comes first.
        ordered = sorted(
            enumerate(rows), key=lambda pair: (pair[1].date, pair[0]), reverse=True
        )
        return [r for _idx, r in ordered[:limit]]

    async def get_latest_fatigue_record(self, user_id: str) -> StoredFatigueRecord | None:
        recent = await self.list_recent_fatigue_records(user_id, limit=1)
        return recent[0] if recent else None

    async def save_deload_week(self, record: DeloadWeekInput) -> StoredDeloadWeek:
        now = _now()
        stored = StoredDeloadWeek(id=str(uuid.uuid4()), record=record, created_at=now, updated_at=now)
        self._deload_weeks.append(stored)
        return stored

    def deload_weeks_for(self, user_id: str) -> list[StoredDeloadWeek]:
        return [w for w in self._deload_weeks if w.record.user_id == user_id]


FATIGUE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS fatigue_tracking (
    id UUID PRIMARY KEY,
    user_id TEXT NOT NULL,
    date DATE NOT NULL,
    overall_fatigue DOUBLE PRECISION NOT NULL,
    muscle_group_fatigue JSONB NOT NULL DEFAULT '{}'::jsonb,
    rpe_increase DOUBLE PRECISION NOT NULL,
    strength_decrease DOUBLE PRECISION NOT NULL,
    soreness DOUBLE PRECISION NOT NULL,
    sleep_quality DOUBLE PRECISION NOT NULL,
    motivation DOUBLE PRECISION NOT NULL,
    resting_heart_rate DOUBLE PRECISION NOT NULL,
    mood_score DOUBLE PRECISION NOT NULL,
    stress_score DOUBLE PRECISION NOT NULL,
    appetite_changes DOUBLE PRECISION NOT NULL,
    technical_proficiency DOUBLE PRECISION NOT NULL,
    notes TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS fatigue_tracking_user_date_idx
    ON fatigue_tracking (user_id, date DESC, created_at DESC);

CREATE TABLE IF NOT EXISTS deload_weeks (
    id UUID PRIMARY KEY,
    user_id TEXT NOT NULL,
    plan_id TEXT,
    cycle_id TEXT,
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    type TEXT NOT NULL,
    volume_reduction DOUBLE PRECISION NOT NULL,
    intensity_reduction DOUBLE PRECISION NOT NULL,
    frequency_reduction INTEGER NOT NULL,
    timing TEXT NOT NULL,
    reason TEXT,
    notes TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

_FATIGUE_COLUMNS = (
    "id, user_id, date, overall_fatigue, muscle_group_fatigue, "
    + ", ".join(MARKER_NAMES)
    + ", notes, created_at"
)


def _row_to_fatigue_record(row: dict[str, Any]) -> StoredFatigueRecord:
    markers = FatigueMarkers(**{name: row[name] for name in MARKER_NAMES})
    return StoredFatigueRecord(
        id=str(row["id"]),
        user_id=row["user_id"],
        date=row["date"],
        markers=markers,
        overall_fatigue=float(row["overall_fatigue"]),
        muscle_group_fatigue=dict(row.get("muscle_group_fatigue") or {}),
        notes=row.get("notes"),
        created_at=row["created_at"],
    )


def _row_to_deload_week(row: dict[str, Any]) -> StoredDeloadWeek:
    record = DeloadWeekInput(
        user_id=row["user_id"],
        plan_id=row.get("plan_id"),
        cycle_id=row.get("cycle_id"),
        start_date=row["start_date"],
        end_date=row["end_date"],
        type=row["type"],
        volume_reduction=float(row["volume_reduction"]),
        intensity_reduction=float(row["intensity_reduction"]),
        frequency_reduction=int(row["frequency_reduction"]),
        timing=row["timing"],
        reason=row.get("reason"),
        notes=row.get("notes"),
    )
    return StoredDeloadWeek(
        id=str(row["id"]),
        record=record,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


async def ensure_schema(conn: psycopg.AsyncConnection[Any]) -> None:
    async with conn.cursor() as cur:
        await cur.execute(FATIGUE_SCHEMA_SQL)


class PostgresFatigueRepository:
    """psycopg-backed repository. The caller owns the connection and its transaction."""

    def __init__(self, conn: psycopg.AsyncConnection[Any]) -> None:
        self._conn = conn

    async def save_fatigue_record(self, record: FatigueRecordInput) -> StoredFatigueRecord:
        marker_values = [getattr(record.markers, name) for name in MARKER_NAMES]
        placeholders = ", ".join(["%s"] * (5 + len(MARKER_NAMES) + 1))
        try:
            async with self._conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    INSERT INTO fatigue_tracking (
                        id, user_id, date, overall_fatigue, muscle_group_fatigue,
                        {", ".join(MARKER_NAMES)}, notes
                    )
                    VALUES ({placeholders})
                    RETURNING {_FATIGUE_COLUMNS}
                    """,
                    (
                        str(uuid.uuid4()),
                        record.user_id,
                        record.date,
                        record.overall_fatigue,
                        Json(record.muscle_group_fatigue),
                        *marker_values,
                        record.notes,
                    ),
                )
                row = await cur.fetchone()
        except psycopg.Error as exc:
            logger.exception(
                "Failed to save fatigue record",
                extra={"fatigue_user_id": record.user_id},
            )
            raise RepositoryError("save_fatigue_record", str(exc)) from exc

        if row is None:
            raise RepositoryError("save_fatigue_record", "INSERT returned no row")
        logger.info(
            "Saved fatigue record for %s",
            record.date.isoformat(),
            extra={"fatigue_user_id": record.user_id, "fatigue_score": record.overall_fatigue},
        )
        return _row_to_fatigue_record(row)

    async def list_recent_fatigue_records(
        self, user_id: str, limit: int = 14
    ) -> list[StoredFatigueRecord]:
        try:
            async with self._conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    SELECT {_FATIGUE_COLUMNS}
                    FROM fatigue_tracking
                    WHERE user_id = %s
                    ORDER BY date DESC, created_at DESC
                    LIMIT %s
                    """,
                    (user_id, limit),
                )
                rows = await cur.fetchall()
        except psycopg.Error as exc:
            logger.exception(
                "Failed to load fatigue records",
                extra={"fatigue_user_id": user_id},
            )
            raise RepositoryError("list_recent_fatigue_records", str(exc)) from exc
        return [_row_to_fatigue_record(row) for row in rows]

    async def get_latest_fatigue_record(self, user_id: str) -> StoredFatigueRecord | None:
        rows = await self.list_recent_fatigue_records(user_id, limit=1)
        return rows[0] if rows else None

    async def save_deload_week(self, record: DeloadWeekInput) -> StoredDeloadWeek:
        try:
            async with self._conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    INSERT INTO deload_weeks (
                        id, user_id, plan_id, cycle_id, start_date, end_date, type,
                        volume_reduction, intensity_reduction, frequency_reduction,
                        timing, reason, notes
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING *
                    """,
                    (
                        str(uuid.uuid4()),
                        record.user_id,
                        record.plan_id,
                        record.cycle_id,
                        record.start_date,
                        record.end_date,
                        record.type,
                        record.volume_reduction,
                        record.intensity_reduction,
                        record.frequency_reduction,
                        record.timing,
                        record.reason,
                        record.notes,
                    ),
                )
                row = await cur.fetchone()
        except psycopg.Error as exc:
            logger.exception(
                "Failed to save deload week",
                extra={"fatigue_user_id": record.user_id},
            )
            raise RepositoryError("save_deload_week", str(exc)) from exc

        if row is None:
            raise RepositoryError("save_deload_week", "INSERT returned no row")
        logger.info(
            "Saved deload week %s..%s",
            record.start_date.isoformat(),
            record.end_date.isoformat(),
            extra={"fatigue_user_id": record.user_id},
        )
        return _row_to_deload_week(row)
