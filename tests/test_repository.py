"""Repository tests: in-memory behaviour and psycopg wiring with a fake cursor."""

from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import psycopg
import pytest

from fatigue_engine.deload import generate_personalized_deload, schedule_deload_week
from fatigue_engine.errors import RepositoryError
from fatigue_engine.repository import (
    FatigueRecordInput,
    InMemoryFatigueRepository,
    PostgresFatigueRepository,
)
from fatigue_engine.tables import base_deload_strategy
from fatigue_engine.trends import consecutive_high_fatigue_days


def _record(worked_markers, day: str, score: float, user_id: str = "user-1") -> FatigueRecordInput:
    return FatigueRecordInput(
        user_id=user_id,
        date=date.fromisoformat(day),
        markers=worked_markers,
        overall_fatigue=score,
    )


class TestInMemoryRepository:
    @pytest.mark.asyncio
    async def test_save_assigns_identity(self, worked_markers):
        repo = InMemoryFatigueRepository()
        stored = await repo.save_fatigue_record(_record(worked_markers, "2026-02-01", 5.1))
        assert stored.id
        assert stored.user_id == "user-1"
        assert stored.overall_fatigue == 5.1
        assert stored.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_latest_is_newest_date(self, worked_markers):
        repo = InMemoryFatigueRepository()
        await repo.save_fatigue_record(_record(worked_markers, "2026-02-03", 8.0))
        await repo.save_fatigue_record(_record(worked_markers, "2026-02-01", 4.0))
        await repo.save_fatigue_record(_record(worked_markers, "2026-02-02", 6.0))
        await repo.save_fatigue_record(_record(worked_markers, "2026-02-09", 1.0, user_id="other"))

        latest = await repo.get_latest_fatigue_record("user-1")
        assert latest is not None
        assert latest.date == date(2026, 2, 3)
        assert latest.overall_fatigue == 8.0

    @pytest.mark.asyncio
    async def test_latest_for_unknown_user_is_none(self):
        repo = InMemoryFatigueRepository()
        assert await repo.get_latest_fatigue_record("nobody") is None

    @pytest.mark.asyncio
    async def test_recent_records_feed_streak(self, worked_markers):
        repo = InMemoryFatigueRepository()
        for day, score in (("2026-02-01", 8.5), ("2026-02-02", 9.0), ("2026-02-03", 8.1)):
            await repo.save_fatigue_record(_record(worked_markers, day, score))
        records = await repo.list_recent_fatigue_records("user-1", limit=7)
        assert [r.date.day for r in records] == [3, 2, 1]
        assert consecutive_high_fatigue_days(records, 8.0) == 3

    @pytest.mark.asyncio
    async def test_save_deload_week(self):
        repo = InMemoryFatigueRepository()
        deload = generate_personalized_deload(
            10, 5, "intermediate", "hypertrophy", base_deload_strategy("intermediate", "hypertrophy")
        )
        week = schedule_deload_week(deload, user_id="user-1", start_date=date(2026, 3, 2))
        stored = await repo.save_deload_week(week)
        assert stored.record == week
        assert stored.created_at == stored.updated_at
        assert repo.deload_weeks_for("user-1") == [stored]


class _FakeCursor:
    """Mimics psycopg's async cursor context manager."""

    def __init__(self, rows=None, error: Exception | None = None):
        self.execute = AsyncMock(side_effect=error)
        self.fetchone = AsyncMock(return_value=rows[0] if rows else None)
        self.fetchall = AsyncMock(return_value=rows or [])

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


def _mock_conn(cursor: _FakeCursor):
    conn = AsyncMock()
    conn.cursor = MagicMock(return_value=cursor)
    return conn


def _db_row(worked_markers, **overrides):
    row = {
        "id": "7d8c5b0e-1111-4a1a-9a35-0d6f2d0a0001",
        "user_id": "user-1",
        "date": date(2026, 2, 3),
        "overall_fatigue": 5.104,
        "muscle_group_fatigue": {"quads": 6.0},
        "notes": None,
        "created_at": datetime(2026, 2, 3, 7, 30, tzinfo=timezone.utc),
        **worked_markers.model_dump(),
    }
    row.update(overrides)
    return row


class TestPostgresRepository:
    @pytest.mark.asyncio
    async def test_save_fatigue_record_inserts_markers(self, worked_markers):
        cursor = _FakeCursor(rows=[_db_row(worked_markers)])
        repo = PostgresFatigueRepository(_mock_conn(cursor))

        stored = await repo.save_fatigue_record(
            FatigueRecordInput(
                user_id="user-1",
                date=date(2026, 2, 3),
                markers=worked_markers,
                overall_fatigue=5.104,
                muscle_group_fatigue={"quads": 6.0},
            )
        )

        sql, params = cursor.execute.call_args.args
        assert "INSERT INTO fatigue_tracking" in sql
        assert sql.count("%s") == len(params) == 16
        assert params[1] == "user-1"
        assert params[5] == worked_markers.rpe_increase
        assert stored.markers == worked_markers
        assert stored.muscle_group_fatigue == {"quads": 6.0}

    @pytest.mark.asyncio
    async def test_latest_maps_row(self, worked_markers):
        cursor = _FakeCursor(rows=[_db_row(worked_markers, notes="rough week")])
        repo = PostgresFatigueRepository(_mock_conn(cursor))

        latest = await repo.get_latest_fatigue_record("user-1")

        sql, params = cursor.execute.call_args.args
        assert "ORDER BY date DESC" in sql
        assert params == ("user-1", 1)
        assert latest is not None
        assert latest.notes == "rough week"
        assert latest.date == date(2026, 2, 3)

    @pytest.mark.asyncio
    async def test_latest_none_when_no_rows(self):
        repo = PostgresFatigueRepository(_mock_conn(_FakeCursor(rows=[])))
        assert await repo.get_latest_fatigue_record("user-1") is None

    @pytest.mark.asyncio
    async def test_database_error_wrapped_not_swallowed(self, worked_markers):
        cursor = _FakeCursor(error=psycopg.OperationalError("connection lost"))
        repo = PostgresFatigueRepository(_mock_conn(cursor))

        with pytest.raises(RepositoryError, match="save_fatigue_record: connection lost") as excinfo:
            await repo.save_fatigue_record(
                FatigueRecordInput(
                    user_id="user-1",
                    date=date(2026, 2, 3),
                    markers=worked_markers,
                    overall_fatigue=5.1,
                )
            )
        assert isinstance(excinfo.value.__cause__, psycopg.OperationalError)
        assert cursor.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_save_deload_week(self):
        week = schedule_deload_week(
            base_deload_strategy("elite", "power"),
            user_id="user-1",
            start_date=date(2026, 4, 6),
            cycle_id="meso-3",
        )
        row = {
            "id": "7d8c5b0e-1111-4a1a-9a35-0d6f2d0a0002",
            "user_id": "user-1",
            "plan_id": None,
            "cycle_id": "meso-3",
            "start_date": week.start_date,
            "end_date": week.end_date,
            "type": "combined",
            "volume_reduction": 60.0,
            "intensity_reduction": 50.0,
            "frequency_reduction": 0,
            "timing": "autoregulated",
            "reason": None,
            "notes": None,
            "created_at": datetime(2026, 4, 1, tzinfo=timezone.utc),
            "updated_at": datetime(2026, 4, 1, tzinfo=timezone.utc),
        }
        cursor = _FakeCursor(rows=[row])
        repo = PostgresFatigueRepository(_mock_conn(cursor))

        stored = await repo.save_deload_week(week)

        sql, params = cursor.execute.call_args.args
        assert "INSERT INTO deload_weeks" in sql
        assert len(params) == 13
        assert stored.record == week
        assert stored.id.endswith("0002")

    @pytest.mark.asyncio
    async def test_deload_week_error_wrapped(self):
        week = schedule_deload_week(
            base_deload_strategy("elite", "power"), user_id="user-1", start_date=date(2026, 4, 6)
        )
        cursor = _FakeCursor(error=psycopg.errors.UndefinedTable("deload_weeks"))
        repo = PostgresFatigueRepository(_mock_conn(cursor))
        with pytest.raises(RepositoryError, match="save_deload_week"):
            await repo.save_deload_week(week)
