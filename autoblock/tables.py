"""Static lookup tables: hourly energy, category preferences, category rules."""

from __future__ import annotations

import re
from dataclasses import dataclass


DEFAULT_DURATION = 25
DEFAULT_CATEGORY = "work"


# ── Energy model ──────────────────────────────────────────────

ENERGY_LEVELS: dict[int, str] = {
    6: "low", 7: "rising", 8: "medium", 9: "high", 10: "peak", 11: "peak",
    12: "medium", 13: "low", 14: "rising", 15: "high", 16: "high",
    17: "medium", 18: "medium", 19: "low", 20: "low",
}


def energy_level(hour: int) -> str:
    """Qualitative energy for an hour of day; unlisted hours are medium."""
    return ENERGY_LEVELS.get(hour, "medium")


# ── Category preferences ──────────────────────────────────────


@dataclass(frozen=True)
class CategoryPreference:
    preferred_hours: tuple[int, ...]
    default_duration: int


CATEGORY_PREFERENCES: dict[str, CategoryPreference] = {
    "work": CategoryPreference((9, 10, 11, 14, 15, 16), 50),
    "meeting": CategoryPreference((10, 11, 14, 15, 16), 30),
    "break": CategoryPreference((12, 15, 17), 15),
    "personal": CategoryPreference((8, 12, 17, 18), 30),
    "learning": CategoryPreference((9, 14, 19, 20), 45),
    "exercise": CategoryPreference((7, 8, 17, 18, 19), 45),
}

REQUIRED_ENERGY: dict[str, frozenset[str]] = {
    "work": frozenset({"high", "peak"}),
    "learning": frozenset({"high", "peak"}),
    "meeting": frozenset({"medium", "high"}),
    "break": frozenset({"low", "medium"}),
    "personal": frozenset({"low", "medium"}),
    "exercise": frozenset({"medium", "rising"}),
}


def preferences_for(category: str) -> CategoryPreference | None:
    return CATEGORY_PREFERENCES.get(category)


def required_energy(category: str) -> frozenset[str]:
    return REQUIRED_ENERGY.get(category, frozenset())


# ── Category rules ────────────────────────────────────────────
# Evaluated top to bottom; first match wins. Meeting is checked before work so
# "project sync" lands on meeting, exercise before break so "lunch run" is exercise.

CATEGORY_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\b(meeting|meet|call|sync|standup|stand-up|interview|demo|1:1|one-on-one|webinar)\b"), "meeting"),
    (re.compile(r"\b(workout|gym|exercise|run|running|yoga|swim|bike|cycling|fitness)\b"), "exercise"),
    (re.compile(r"\b(learn|learning|study|course|tutorial|reading|lesson|class|training)\b"), "learning"),
    (re.compile(r"\b(lunch|break|coffee|snack|rest|nap|stretch)\b"), "break"),
    (re.compile(r"\b(personal|errand|doctor|dentist|bank|shopping|family|appointment)\b"), "personal"),
    (re.compile(r"\b(work|code|coding|debug|review|report|write|design|build|fix)\b"), "work"),
]


def infer_category(title: str) -> str:
    """Guess a block category from its free-text title."""
    text = (title or "").lower()
    for pattern, category in CATEGORY_RULES:
        if pattern.search(text):
            return category
    return DEFAULT_CATEGORY
