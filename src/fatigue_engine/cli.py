"""CLI for ad-hoc fatigue assessments and history checks."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click
import psycopg
from pydantic import ValidationError

from fatigue_engine.assessment import assess
from fatigue_engine.config import Config
from fatigue_engine.errors import RepositoryError
from fatigue_engine.logging import setup_logging
from fatigue_engine.models import (
    TRAINING_GOALS,
    TRAINING_LEVELS,
    FatigueAlgorithmConfig,
    FatigueMarkers,
)
from fatigue_engine.repository import PostgresFatigueRepository
from fatigue_engine.scoring import calculate_fatigue_score
from fatigue_engine.tables import FATIGUE_THRESHOLDS, fatigue_threshold
from fatigue_engine.trends import consecutive_high_fatigue_days


@click.group()
def main():
    """Training fatigue assessment and deload prescription."""
    config = Config.from_env()
    setup_logging(config.log_format, config.log_level)


@main.command("assess")
@click.option(
    "--markers", "markers_file",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="JSON file with the ten fatigue markers.",
)
@click.option("--level", type=click.Choice(TRAINING_LEVELS), required=True)
@click.option("--goal", type=click.Choice(TRAINING_GOALS), required=True)
@click.option("--recovery", type=click.FloatRange(1, 10), default=5.0, show_default=True, help="Recovery capacity (1-10).")
@click.option("--tolerance", type=float, default=1.0, show_default=True, help="Individual tolerance (0.5-1.5).")
def assess_command(
    markers_file: Path,
    level: str,
    goal: str,
    recovery: float,
    tolerance: float,
):
    """Score a marker snapshot and print the recommendation as JSON."""
    try:
        with markers_file.open() as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        click.echo(f"Error: {markers_file} is not valid JSON: {exc}", err=True)
        sys.exit(1)

    try:
        markers = FatigueMarkers.model_validate(data)
        config = FatigueAlgorithmConfig.for_athlete(level, goal, individual_tolerance=tolerance)
    except ValidationError as exc:
        click.echo(f"Error: invalid input:\n{exc}", err=True)
        sys.exit(1)

    recommendation = assess(markers, level, goal, recovery, config)
    output: dict[str, Any] = {
        "fatigue_score": round(recommendation.current_fatigue, 3),
        "threshold": fatigue_threshold(level, goal),
        **recommendation.to_dict(),
    }
    click.echo(json.dumps(output, indent=2))


@main.command("thresholds")
def thresholds_command():
    """List fatigue thresholds per training level and goal."""
    for level, row in FATIGUE_THRESHOLDS.items():
        click.echo(f"{level}:")
        for goal, threshold in row.items():
            click.echo(f"  {goal}: {threshold}")


@main.command("history")
@click.option("--user-id", required=True)
@click.option("--level", type=click.Choice(TRAINING_LEVELS), required=True)
@click.option("--goal", type=click.Choice(TRAINING_GOALS), required=True)
@click.option("--days", type=int, default=14, show_default=True, help="Records to inspect.")
def history_command(user_id: str, level: str, goal: str, days: int):
    """Show the latest stored snapshot and the current high-fatigue streak."""
    config = Config.from_env()
    try:
        database_url = config.require_database_url()
    except RuntimeError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    try:
        summary = asyncio.run(_load_history(database_url, user_id, level, goal, days))
    except (RepositoryError, psycopg.Error) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(json.dumps(summary, indent=2, default=str))


async def _load_history(
    database_url: str, user_id: str, level: str, goal: str, days: int
) -> dict[str, Any]:
    async with await psycopg.AsyncConnection.connect(database_url) as conn:
        repo = PostgresFatigueRepository(conn)
        records = await repo.list_recent_fatigue_records(user_id, limit=days)

    threshold = fatigue_threshold(level, goal)
    latest = records[0] if records else None
    return {
        "user_id": user_id,
        "records": len(records),
        "threshold": threshold,
        "latest": None if latest is None else {
            "date": latest.date,
            "overall_fatigue": latest.overall_fatigue,
            "rescored": round(calculate_fatigue_score(latest.markers, level, goal), 3),
        },
        "consecutive_high_fatigue_days": consecutive_high_fatigue_days(records, threshold),
    }
