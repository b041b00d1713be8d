"""Single-item time suggestions.

Simplified, unscored paths for "when should I do this one thing?" flows.
They keep the scorer's bias: peak hour plus preference beats preference
alone, which beats mere availability.
"""

from __future__ import annotations

from autoblock.models import (
    CategorySuggestion,
    CommittedBlock,
    FreeSlot,
    ProductivityPattern,
    ScheduleTask,
    TimeSuggestion,
    format_hhmm,
)
from autoblock.slots import DEFAULT_END_HOUR, DEFAULT_START_HOUR, MIN_SLOT_MINUTES, find_free_slots
from autoblock.tables import CATEGORY_PREFERENCES, DEFAULT_CATEGORY, preferences_for


FALLBACK_START_HOUR = 8
FALLBACK_END_HOUR = 20
DEFAULT_SUGGESTED_TIME = "09:00"


def _start_within_hour(slots: list[FreeSlot], hour: int, needed: int) -> int | None:
    """Earliest minute-of-day inside *hour* where *needed* free minutes begin.

    A slot qualifies when it covers any minute of *hour*, not only when it
    starts in it, so a free run from 09:30 to 12:00 also serves hours 10 and 11.
    """
    hour_start, hour_end = hour * 60, (hour + 1) * 60
    for slot in slots:
        start = max(slot.start_minutes, hour_start)
        if start < hour_end and slot.end_minutes - start >= needed:
            return start
    return None


def suggest_time_for_category(
    category: str,
    committed_blocks: list[CommittedBlock],
    pattern: ProductivityPattern | None,
    target_date: str,
    start_hour: int = DEFAULT_START_HOUR,
    end_hour: int = DEFAULT_END_HOUR,
) -> CategorySuggestion | None:
    """Pick a start time for a new block of *category*.

    Confidence 0.9 for a preferred peak hour with room for the default
    duration, 0.7 for any preferred hour with a usable slot, 0.5 for the
    first free slot. None when the day is full.
    """
    prefs = preferences_for(category) or CATEGORY_PREFERENCES[DEFAULT_CATEGORY]
    slots = find_free_slots(committed_blocks, target_date, start_hour, end_hour)
    peak_hours = pattern.peak_hours if pattern is not None else []
    duration = prefs.default_duration

    for hour in prefs.preferred_hours:
        if hour not in peak_hours:
            continue
        start = _start_within_hour(slots, hour, duration)
        if start is not None:
            return CategorySuggestion(hour=hour, minute=start % 60, duration=duration, confidence=0.9)

    for hour in prefs.preferred_hours:
        start = _start_within_hour(slots, hour, MIN_SLOT_MINUTES)
        if start is not None:
            return CategorySuggestion(hour=hour, minute=start % 60, duration=duration, confidence=0.7)

    if slots:
        return CategorySuggestion(hour=slots[0].hour, minute=slots[0].minute, duration=duration, confidence=0.5)

    return None


def fallback_suggestion(
    task: ScheduleTask,
    committed_blocks: list[CommittedBlock],
    pattern: ProductivityPattern | None,
    target_date: str,
) -> TimeSuggestion:
    """Suggest a start time without any external planner.

    Prefers a fitting slot that starts in a peak hour, then the first
    fitting slot, then a default morning time.
    """
    slots = find_free_slots(committed_blocks, target_date, FALLBACK_START_HOUR, FALLBACK_END_HOUR)
    duration = task.effective_duration
    peak_hours = pattern.peak_hours if pattern is not None else []

    fitting = [s for s in slots if s.duration >= duration]
    best = next((s for s in fitting if s.hour in peak_hours), None)
    if best is None and fitting:
        best = fitting[0]

    if best is None:
        return TimeSuggestion(
            suggested_time=DEFAULT_SUGGESTED_TIME,
            reason="No available slots found. Default morning time suggested.",
        )

    if best.hour in peak_hours:
        reason = "This is one of your peak productivity hours based on past patterns."
    else:
        reason = f"First available slot that fits your {duration} minute task."
    return TimeSuggestion(suggested_time=format_hhmm(best.hour, best.minute), reason=reason)
