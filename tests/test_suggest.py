"""Tests for autoblock/suggest.py — single-item suggestions."""

from autoblock.models import ProductivityPattern, ScheduleTask
from autoblock.suggest import fallback_suggestion, suggest_time_for_category
from conftest import DAY, block


def _full_day(start_hour=8, end_hour=20):
    return [block(f"{h:02d}:00", 60) for h in range(start_hour, end_hour)]


# ── Category suggestions ──────────────────────────────────────


def test_category_peak_and_preferred():
    pattern = ProductivityPattern(peak_hours=[14, 10])
    s = suggest_time_for_category("work", [], pattern, DAY)
    # work prefers 9 first, but 10 is the first preferred hour that is also peak
    assert (s.hour, s.minute, s.duration, s.confidence) == (10, 0, 50, 0.9)


def test_category_peak_hour_without_room_falls_to_preferred():
    pattern = ProductivityPattern(peak_hours=[9])
    blocks = [block("09:20", 220)]  # 09:00-09:20 free, too short for 50 minutes
    s = suggest_time_for_category("work", blocks, pattern, DAY)
    assert (s.hour, s.minute, s.confidence) == (9, 0, 0.7)


def test_category_preferred_hour_mid_slot():
    blocks = [block("06:00", 8 * 60 + 40)]  # busy until 14:40
    s = suggest_time_for_category("meeting", blocks, ProductivityPattern(), DAY)
    assert (s.hour, s.minute, s.duration, s.confidence) == (14, 40, 30, 0.7)


def test_category_first_available_slot():
    blocks = [block("06:00", 14 * 60)]  # only 20:00-21:00 left
    s = suggest_time_for_category("exercise", blocks, None, DAY)
    assert (s.hour, s.minute, s.duration, s.confidence) == (20, 0, 45, 0.5)


def test_category_unknown_uses_work_preferences():
    s = suggest_time_for_category("gardening", [], None, DAY)
    assert (s.hour, s.duration, s.confidence) == (9, 50, 0.7)


def test_category_full_day():
    assert suggest_time_for_category("work", _full_day(6, 21), None, DAY) is None


# ── Fallback suggestion ───────────────────────────────────────


def test_fallback_full_day():
    task = ScheduleTask(title="Test", duration=30)
    s = fallback_suggestion(task, _full_day(), ProductivityPattern(), DAY)
    assert s.suggested_time == "09:00"
    assert "No available slots" in s.reason


def test_fallback_prefers_peak_slot():
    task = ScheduleTask(title="Test", duration=30)
    blocks = [block("09:00", 60)]
    s = fallback_suggestion(task, blocks, ProductivityPattern(peak_hours=[10, 11, 14]), DAY)
    assert s.suggested_time == "10:00"
    assert "peak productivity" in s.reason


def test_fallback_first_fitting_slot():
    task = ScheduleTask(title="Test", duration=45)
    blocks = [block("08:30", 30)]  # 08:00-08:30 is too short
    s = fallback_suggestion(task, blocks, ProductivityPattern(), DAY)
    assert s.suggested_time == "09:00"
    assert s.reason == "First available slot that fits your 45 minute task."


def test_fallback_ignores_other_days():
    task = ScheduleTask(title="Test", duration=30)
    s = fallback_suggestion(task, _full_day(), ProductivityPattern(), "2024-01-16")
    assert s.suggested_time == "08:00"
