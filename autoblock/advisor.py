"""Day templates and rule-based schedule advice."""

from __future__ import annotations

from autoblock.config import EngineConfig
from autoblock.models import (
    CommittedBlock,
    DayTemplate,
    ProductivityPattern,
    ScheduleAdvice,
    TemplateEntry,
    format_hhmm,
)
from autoblock.patterns import analyze_patterns
from autoblock.slots import find_free_slots


MIN_PATTERN_SAMPLES = 10
DEEP_WORK_MINUTES = 120
BACK_TO_BACK_LIMIT = 3


# ── Day template ──────────────────────────────────────────────


def generate_day_template(pattern: ProductivityPattern | None, target_date: str) -> DayTemplate:
    """Build a default skeleton day.

    The deep-work blocks are only included when the matching hours are
    among the user's peak hours.
    """
    peak = set(pattern.peak_hours) if pattern is not None else set()
    entries: list[TemplateEntry] = []

    if peak & {9, 10}:
        entries.append(TemplateEntry("Deep Work Block", "work", 9, 0, 90, "Your peak productivity time"))

    entries.append(TemplateEntry("Morning Break", "break", 10, 30, 15, "Recharge before next block"))
    entries.append(TemplateEntry("Focus Session", "work", 11, 0, 50, "Continue momentum"))
    entries.append(TemplateEntry("Lunch Break", "break", 12, 0, 60, "Rest and refuel"))
    entries.append(TemplateEntry("Collaboration Time", "meeting", 14, 0, 60, "Good time for meetings"))

    if peak & {15, 16}:
        entries.append(TemplateEntry("Afternoon Focus", "work", 15, 0, 90, "Second productivity peak"))

    entries.append(TemplateEntry("Wrap Up & Planning", "personal", 17, 0, 30, "Review progress and plan tomorrow"))

    for entry in entries:
        entry.date = target_date

    return DayTemplate(
        date=target_date,
        entries=entries,
        based_on_patterns=pattern is not None and pattern.completed_count >= MIN_PATTERN_SAMPLES,
    )


# ── Schedule advice ───────────────────────────────────────────


def optimize_schedule(
    history: list[CommittedBlock],
    target_date: str,
    config: EngineConfig | None = None,
) -> ScheduleAdvice:
    """Inspect a day against the user's patterns and suggest improvements.

    Rules:
    - No block in a peak hour while a peak hour is still free -> use peak hours
    - A free stretch over two hours -> deep work opportunity
    - Three or more back-to-back sessions -> take breaks
    """
    if config is None:
        config = EngineConfig()
    pattern = analyze_patterns(history)
    free_slots = find_free_slots(
        history, target_date, config.day_start_hour, config.day_end_hour, config.min_slot_minutes
    )
    today = sorted(
        (b for b in history if b.date == target_date and b.has_start),
        key=lambda b: b.start_minutes,
    )
    suggestions: list[dict[str, str]] = []

    peak = pattern.peak_hours
    in_peak = [b for b in today if b.hour in peak]
    peak_free = any(
        s.start_minutes <= h * 60 < s.end_minutes for s in free_slots for h in peak
    )
    if not in_peak and peak_free:
        suggestions.append({
            "type": "peak-hours",
            "message": (
                f"Your peak productivity hours are {', '.join(f'{h}:00' for h in peak)}. "
                "Consider scheduling important tasks then."
            ),
            "priority": "high",
        })

    long_slot = next((s for s in free_slots if s.duration > DEEP_WORK_MINUTES), None)
    if long_slot is not None:
        suggestions.append({
            "type": "deep-work",
            "message": (
                f"You have {long_slot.duration} minutes free starting at "
                f"{format_hhmm(long_slot.hour, long_slot.minute)}. Great for deep work!"
            ),
            "priority": "medium",
        })

    back_to_back = sum(
        1 for prev, cur in zip(today, today[1:]) if abs(cur.hour - prev.hour) <= 1
    )
    if back_to_back >= BACK_TO_BACK_LIMIT:
        suggestions.append({
            "type": "break-needed",
            "message": "You have several back-to-back sessions. Remember to take breaks for better focus!",
            "priority": "medium",
        })

    return ScheduleAdvice(pattern=pattern, free_slots=free_slots, suggestions=suggestions)
