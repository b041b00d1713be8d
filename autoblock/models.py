"""Typed dataclasses for the AutoBlock data model.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Any

from autoblock.tables import DEFAULT_DURATION, infer_category, preferences_for


PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


# ── Primitives ────────────────────────────────────────────────


def minutes_to_time(total: int) -> time:
    """Convert minute-of-day to a time object, clamping at 23:59.

    A window ending at midnight (minute 1440) reads as 23:59 wherever a
    clock value is shown; durations stay exact.
    """
    total = max(0, min(total, 23 * 60 + 59))
    return time(total // 60, total % 60)


def format_hhmm(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def parse_hhmm(s: str) -> tuple[int, int]:
    """Parse '09:00' or '9:05' into (hour, minute)."""
    parts = s.strip().split(":")
    if len(parts) < 2 or not parts[0].isdigit() or not parts[1][:2].isdigit():
        raise ValueError(f"Invalid start time: {s!r}")
    hour, minute = int(parts[0]), int(parts[1][:2])
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid start time: {s!r}")
    return hour, minute


def _first_present(d: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if d.get(key) is not None:
            return d[key]
    return None


# ── Committed blocks ──────────────────────────────────────────


@dataclass
class CommittedBlock:
    """A block already on the calendar, read from the storage collaborator."""

    id: str = ""
    title: str = ""
    category: str = ""
    date: str = ""  # ISO date, compared by string equality
    hour: int | None = None  # None means no recorded start time
    minute: int = 0
    duration: int = DEFAULT_DURATION
    completed: bool = False

    @property
    def has_start(self) -> bool:
        return self.hour is not None

    @property
    def start_minutes(self) -> int:
        return (self.hour or 0) * 60 + self.minute

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CommittedBlock:
        if not d or not isinstance(d, dict):
            return cls()
        hour = d.get("hour")
        minute = _first_present(d, "minute", "startMinute", "start_minute") or 0
        start_time = _first_present(d, "startTime", "start_time")
        if hour is None and start_time:
            hour, minute = parse_hhmm(str(start_time))
        duration = _first_present(
            d, "duration", "durationMinutes", "duration_minutes", "timerDuration", "timer_duration"
        )
        title = str(d.get("title", ""))
        return cls(
            id=str(d.get("id", "")),
            title=title,
            category=str(d.get("category") or infer_category(title)),
            date=str(d.get("date", ""))[:10],
            hour=int(hour) if hour is not None else None,
            minute=int(minute),
            duration=int(duration) if duration else DEFAULT_DURATION,
            completed=bool(d.get("completed", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "date": self.date,
            "hour": self.hour,
            "minute": self.minute,
            "duration": self.duration,
            "completed": self.completed,
        }


# ── Patterns ──────────────────────────────────────────────────


@dataclass
class HourlyStat:
    total: float = 0.0
    count: int = 0

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0

    def add(self, duration: float) -> None:
        self.total += duration
        self.count += 1

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "count": self.count}


@dataclass
class ProductivityPattern:
    hourly_productivity: dict[int, HourlyStat] = field(default_factory=dict)
    day_of_week_productivity: dict[str, HourlyStat] = field(default_factory=dict)
    peak_hours: list[int] = field(default_factory=list)
    best_days: list[str] = field(default_factory=list)
    avg_session_length: float = 25
    completed_count: int = 0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ProductivityPattern:
        """Build a pattern from a caller-supplied summary (peak hours only is fine)."""
        if not d or not isinstance(d, dict):
            return cls()
        hourly = {
            int(h): HourlyStat(total=float(v.get("total", 0)), count=int(v.get("count", 0)))
            for h, v in (d.get("hourlyProductivity") or {}).items()
        }
        daily = {
            str(k): HourlyStat(total=float(v.get("total", 0)), count=int(v.get("count", 0)))
            for k, v in (d.get("dayOfWeekProductivity") or {}).items()
        }
        return cls(
            hourly_productivity=hourly,
            day_of_week_productivity=daily,
            peak_hours=[int(h) for h in (d.get("peakHours") or [])],
            best_days=[str(x) for x in (d.get("bestDays") or [])],
            avg_session_length=float(d.get("avgSessionLength", 25)),
            completed_count=int(d.get("completedCount", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hourlyProductivity": {str(h): s.to_dict() for h, s in self.hourly_productivity.items()},
            "dayOfWeekProductivity": {k: s.to_dict() for k, s in self.day_of_week_productivity.items()},
            "peakHours": self.peak_hours,
            "bestDays": self.best_days,
            "avgSessionLength": round(self.avg_session_length, 2),
            "completedCount": self.completed_count,
        }


# ── Free slots ────────────────────────────────────────────────


@dataclass
class FreeSlot:
    hour: int
    minute: int
    duration: int
    energy_level: str = "medium"

    @property
    def start_minutes(self) -> int:
        return self.hour * 60 + self.minute

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration

    @property
    def start(self) -> time:
        return minutes_to_time(self.start_minutes)

    @property
    def end(self) -> time:
        return minutes_to_time(self.end_minutes)

    def consume(self, minutes: int) -> None:
        """Advance the leading edge by *minutes* and shrink the remaining duration."""
        new_start = self.start_minutes + minutes
        self.hour, self.minute = divmod(new_start, 60)
        self.duration -= minutes

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "minute": self.minute,
            "start": format_hhmm(self.hour, self.minute),
            "end": self.end.strftime("%H:%M"),
            "duration": self.duration,
            "energyLevel": self.energy_level,
        }


# ── Tasks & assignments ───────────────────────────────────────


@dataclass
class ScheduleTask:
    title: str = ""
    category: str = "work"
    duration: int | None = None
    priority: str = "medium"  # high, medium, low

    @property
    def effective_duration(self) -> int:
        if self.duration:
            return self.duration
        prefs = preferences_for(self.category)
        return prefs.default_duration if prefs else DEFAULT_DURATION

    @property
    def priority_rank(self) -> int:
        return PRIORITY_ORDER.get(self.priority, PRIORITY_ORDER["medium"])

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ScheduleTask:
        if not d or not isinstance(d, dict):
            return cls()
        title = str(d.get("title", ""))
        duration = d.get("duration")
        return cls(
            title=title,
            category=str(d.get("category") or infer_category(title)),
            duration=int(duration) if duration else None,
            priority=str(d.get("priority") or "medium").lower(),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "title": self.title,
            "category": self.category,
            "priority": self.priority,
        }
        if self.duration is not None:
            d["duration"] = self.duration
        return d


@dataclass
class ScheduledAssignment:
    task: ScheduleTask
    date: str
    hour: int
    minute: int
    duration: int
    score: int | None = None
    reason: str = ""

    @property
    def start_minutes(self) -> int:
        return self.hour * 60 + self.minute

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration

    def to_dict(self) -> dict[str, Any]:
        d = self.task.to_dict()
        d.update({
            "date": self.date,
            "hour": self.hour,
            "minute": self.minute,
            "startTime": format_hhmm(self.hour, self.minute),
            "duration": self.duration,
            "score": self.score,
            "reason": self.reason,
        })
        return d


@dataclass
class ScheduleResult:
    date: str = ""
    scheduled: list[ScheduledAssignment] = field(default_factory=list)
    unscheduled: list[ScheduleTask] = field(default_factory=list)
    source: str = "greedy"  # greedy, planner

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "scheduled": [a.to_dict() for a in self.scheduled],
            "unscheduled": [t.to_dict() for t in self.unscheduled],
            "source": self.source,
        }


@dataclass
class TaskPlacement:
    suggestion: ScheduledAssignment
    alternatives: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "suggestion": self.suggestion.to_dict(),
            "alternatives": self.alternatives,
        }


# ── Suggestions ───────────────────────────────────────────────


@dataclass
class CategorySuggestion:
    hour: int
    minute: int
    duration: int
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "minute": self.minute,
            "duration": self.duration,
            "confidence": self.confidence,
        }


@dataclass
class TimeSuggestion:
    suggested_time: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"suggestedTime": self.suggested_time, "reason": self.reason}


@dataclass
class TemplateEntry:
    title: str
    category: str
    hour: int
    minute: int
    duration: int
    reason: str
    date: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "category": self.category,
            "hour": self.hour,
            "minute": self.minute,
            "duration": self.duration,
            "reason": self.reason,
            "date": self.date,
        }


@dataclass
class DayTemplate:
    date: str = ""
    entries: list[TemplateEntry] = field(default_factory=list)
    based_on_patterns: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "template": [e.to_dict() for e in self.entries],
            "basedOnPatterns": self.based_on_patterns,
        }


@dataclass
class ScheduleAdvice:
    pattern: ProductivityPattern
    free_slots: list[FreeSlot] = field(default_factory=list)
    suggestions: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "patterns": self.pattern.to_dict(),
            "freeSlots": [s.to_dict() for s in self.free_slots],
            "suggestions": self.suggestions,
        }
