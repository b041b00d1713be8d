"""Tests for autoblock/advisor.py — day templates and schedule advice."""

from autoblock.advisor import generate_day_template, optimize_schedule
from autoblock.models import ProductivityPattern
from autoblock.patterns import analyze_patterns
from conftest import DAY, block


def _titles(template):
    return [e.title for e in template.entries]


# ── Day template ──────────────────────────────────────────────


def test_template_without_patterns():
    t = generate_day_template(None, DAY)
    assert _titles(t) == [
        "Morning Break",
        "Focus Session",
        "Lunch Break",
        "Collaboration Time",
        "Wrap Up & Planning",
    ]
    assert t.based_on_patterns is False
    assert all(e.date == DAY for e in t.entries)


def test_template_with_morning_and_afternoon_peaks():
    t = generate_day_template(ProductivityPattern(peak_hours=[10, 16, 20]), DAY)
    assert _titles(t)[0] == "Deep Work Block"
    assert "Afternoon Focus" in _titles(t)
    deep = t.entries[0]
    assert (deep.category, deep.hour, deep.minute, deep.duration) == ("work", 9, 0, 90)
    assert deep.reason == "Your peak productivity time"


def test_template_only_afternoon_peak():
    t = generate_day_template(ProductivityPattern(peak_hours=[15]), DAY)
    assert "Deep Work Block" not in _titles(t)
    focus = next(e for e in t.entries if e.title == "Afternoon Focus")
    assert (focus.hour, focus.duration) == (15, 90)


def test_template_based_on_patterns_needs_enough_history(history):
    assert generate_day_template(analyze_patterns(history), DAY).based_on_patterns is False
    many = history + [block("09:00", 60, day="2024-01-13", completed=True) for _ in range(3)]
    assert generate_day_template(analyze_patterns(many), DAY).based_on_patterns is True


# ── Schedule advice ───────────────────────────────────────────


def test_optimize_suggests_peak_hours_and_deep_work():
    history = [
        block("10:00", 60, day="2024-01-10", completed=True),
        block("10:00", 60, day="2024-01-11", completed=True),
    ]
    advice = optimize_schedule(history, DAY)
    types = [s["type"] for s in advice.suggestions]
    assert types == ["peak-hours", "deep-work"]
    assert advice.suggestions[0]["message"].startswith("Your peak productivity hours are 10:00.")
    assert "900 minutes free starting at 06:00" in advice.suggestions[1]["message"]
    assert advice.pattern.peak_hours == [10]


def test_optimize_no_peak_advice_when_peak_used():
    history = [
        block("10:00", 60, day="2024-01-10", completed=True),
        block("10:00", 30, day=DAY),
    ]
    types = [s["type"] for s in optimize_schedule(history, DAY).suggestions]
    assert "peak-hours" not in types


def test_optimize_back_to_back_sessions():
    today = [block(f"{h:02d}:00", 55, day=DAY) for h in (9, 10, 11, 12)]
    advice = optimize_schedule(today, DAY)
    assert [s["type"] for s in advice.suggestions][-1] == "break-needed"
    assert len(advice.free_slots) == 2
