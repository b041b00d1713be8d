"""Slot scoring heuristics.

A slot starts at 50 and gains or loses points for category preference,
historical peak hours, energy match, duration fit, high-priority mornings
and lunch-hour work. The result is clamped to 0-100.
"""

from __future__ import annotations

from autoblock.models import FreeSlot, ProductivityPattern, ScheduleTask
from autoblock.tables import preferences_for, required_energy


BASE_SCORE = 50
PREFERRED_HOUR_BONUS = 20
PEAK_HOUR_BONUS = 25
ENERGY_MATCH_BONUS = 15
DURATION_FIT_BONUS = 10
DURATION_FIT_SLACK = 30
TOO_SHORT_PENALTY = 20
HIGH_PRIORITY_MORNING_BONUS = 15
LUNCH_WORK_PENALTY = 10

MORNING_HOURS = frozenset({9, 10, 11})
LUNCH_HOURS = frozenset({12, 13})


def _peak_hours(pattern: ProductivityPattern | None) -> list[int]:
    return pattern.peak_hours if pattern is not None else []


def score_slot(slot: FreeSlot, task: ScheduleTask, pattern: ProductivityPattern | None) -> int:
    score = BASE_SCORE
    prefs = preferences_for(task.category)

    if prefs and slot.hour in prefs.preferred_hours:
        score += PREFERRED_HOUR_BONUS

    if slot.hour in _peak_hours(pattern):
        score += PEAK_HOUR_BONUS

    if slot.energy_level in required_energy(task.category):
        score += ENERGY_MATCH_BONUS

    ideal = task.effective_duration
    if ideal <= slot.duration <= ideal + DURATION_FIT_SLACK:
        score += DURATION_FIT_BONUS
    elif slot.duration < ideal:
        score -= TOO_SHORT_PENALTY

    if task.priority == "high" and slot.hour in MORNING_HOURS:
        score += HIGH_PRIORITY_MORNING_BONUS

    if task.category == "work" and slot.hour in LUNCH_HOURS:
        score -= LUNCH_WORK_PENALTY

    return max(0, min(100, score))


def explain_slot(slot: FreeSlot, task: ScheduleTask, pattern: ProductivityPattern | None) -> str:
    """Human-readable reason for placing *task* in *slot*."""
    reasons = []
    if slot.hour in _peak_hours(pattern):
        reasons.append("your peak productivity hour")
    prefs = preferences_for(task.category)
    if prefs and slot.hour in prefs.preferred_hours:
        reasons.append(f"optimal time for {task.category}")
    if slot.energy_level in ("peak", "high"):
        reasons.append("high energy period")
    if not reasons:
        reasons.append("best available slot")
    return f"Scheduled based on {' and '.join(reasons)}"
