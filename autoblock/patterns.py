"""Productivity pattern mining for AutoBlock.

Aggregates completed history blocks by hour of day and day of week, then
derives peak hours, best days and the average session length.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable

from autoblock.models import CommittedBlock, HourlyStat, ProductivityPattern
from autoblock.tables import DEFAULT_DURATION


logger = logging.getLogger(__name__)

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
PEAK_HOUR_COUNT = 3
BEST_DAY_COUNT = 2


def _top_keys(buckets: dict, n: int) -> list:
    # sorted() is stable, so ties keep first-encountered order
    ranked = sorted(buckets.items(), key=lambda kv: kv[1].average, reverse=True)
    return [k for k, _ in ranked[:n]]


def day_name(iso_date: str) -> str | None:
    """Short weekday name for an ISO date string, or None if unparseable."""
    try:
        return DAY_NAMES[date.fromisoformat(iso_date[:10]).weekday()]
    except ValueError:
        return None


def analyze_patterns(history: Iterable[CommittedBlock]) -> ProductivityPattern:
    """Analyze block history into a ProductivityPattern.

    Only completed blocks with a recorded start time feed the hourly and
    weekday buckets. The session average covers every completed block.
    """
    hourly: dict[int, HourlyStat] = defaultdict(HourlyStat)
    daily: dict[str, HourlyStat] = defaultdict(HourlyStat)
    session_total = 0.0
    completed = 0

    for block in history:
        if not block.completed:
            continue
        duration = block.duration or DEFAULT_DURATION
        session_total += duration
        completed += 1

        if not block.has_start:
            continue
        hourly[block.hour].add(duration)
        name = day_name(block.date)
        if name is not None:
            daily[name].add(duration)

    pattern = ProductivityPattern(
        hourly_productivity=dict(hourly),
        day_of_week_productivity=dict(daily),
        peak_hours=_top_keys(hourly, PEAK_HOUR_COUNT),
        best_days=_top_keys(daily, BEST_DAY_COUNT),
        avg_session_length=session_total / completed if completed else DEFAULT_DURATION,
        completed_count=completed,
    )
    logger.debug(
        "Analyzed %d completed blocks: peak hours %s, best days %s",
        completed, pattern.peak_hours, pattern.best_days,
    )
    return pattern
