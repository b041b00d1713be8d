"""External planner delegate.

A planner proposes a whole-day assignment in one call. Any failure raises a
PlannerError and the caller falls back to the greedy scheduler; results are
never partially merged.
"""

from __future__ import annotations

import json
import logging
import math
from abc import ABC, abstractmethod
from typing import Any

import requests

from autoblock.models import (
    FreeSlot,
    ProductivityPattern,
    ScheduledAssignment,
    ScheduleResult,
    ScheduleTask,
    format_hhmm,
)


logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:generateContent"
DEFAULT_REASON = "AI optimized"


# ── Errors ────────────────────────────────────────────────────


class PlannerError(Exception):
    """The planner could not produce a usable day plan."""


class PlannerUnavailable(PlannerError):
    """Transport failure, timeout or non-success response."""


class MalformedPlannerResponse(PlannerError):
    """The reply had no usable JSON array or referenced unknown tasks."""


# ── Prompt & parsing ──────────────────────────────────────────


def build_prompt(
    tasks: list[ScheduleTask],
    slots: list[FreeSlot],
    pattern: ProductivityPattern | None,
    target_date: str,
) -> str:
    task_lines = []
    for i, t in enumerate(tasks):
        line = f'{i + 1}. "{t.title}" - {t.category} - {t.effective_duration}min'
        if t.priority:
            line += f" - Priority: {t.priority}"
        task_lines.append(line)

    slot_lines = [
        f"- {format_hhmm(s.hour, s.minute)} ({s.duration}min available, {s.energy_level} energy)"
        for s in slots
    ]

    peak = ""
    if pattern is not None and pattern.peak_hours:
        peak = f"User's peak productivity hours: {', '.join(str(h) for h in pattern.peak_hours)}\n\n"

    return (
        "You are a productivity scheduling assistant. Schedule these tasks optimally.\n\n"
        "Tasks to schedule:\n"
        + "\n".join(task_lines)
        + f"\n\nAvailable time slots on {target_date}:\n"
        + "\n".join(slot_lines)
        + "\n\n"
        + peak
        + "Return ONLY a JSON array mapping tasks to time slots (taskIndex is 0-based):\n"
        '[{"taskIndex": 0, "hour": 9, "minute": 0, "reason": "why this time"}]\n\n'
        "Rules:\n"
        "- High priority tasks should go in peak hours\n"
        "- Don't overlap tasks\n"
        "- Leave buffer time between tasks when possible\n"
        "- Match task type to energy levels (deep work = high energy, meetings = medium, breaks = low)"
    )


def extract_json_array(text: str) -> list[Any]:
    """Return the first complete JSON array embedded in *text*.

    Surrounding prose and code fences are ignored.
    """
    decoder = json.JSONDecoder()
    idx = text.find("[")
    while idx != -1:
        try:
            value, _end = decoder.raw_decode(text, idx)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list):
            return value
        idx = text.find("[", idx + 1)
    raise MalformedPlannerResponse("No JSON array found in planner reply")


def _as_int(entry: dict[str, Any], key: str, default: int | None = None) -> int:
    value = entry.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedPlannerResponse(f"Invalid {key}: {value!r}")
    # json accepts NaN, Infinity and 1e999
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        raise MalformedPlannerResponse(f"Invalid {key}: {value!r}")
    return int(value)


def parse_plan(
    text: str,
    tasks: list[ScheduleTask],
    target_date: str,
) -> ScheduleResult:
    """Validate a planner reply and map it onto the task list.

    Every entry must be valid or the whole reply is rejected. Tasks whose
    index does not appear are reported as unscheduled.
    """
    entries = extract_json_array(text)

    scheduled: list[ScheduledAssignment] = []
    seen: set[int] = set()
    for entry in entries:
        if not isinstance(entry, dict):
            raise MalformedPlannerResponse(f"Plan entry is not an object: {entry!r}")
        index = _as_int(entry, "taskIndex")
        if not 0 <= index < len(tasks):
            raise MalformedPlannerResponse(f"taskIndex out of range: {index}")
        if index in seen:
            raise MalformedPlannerResponse(f"Duplicate taskIndex: {index}")
        hour = _as_int(entry, "hour")
        minute = _as_int(entry, "minute", 0)
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise MalformedPlannerResponse(f"Invalid time {hour}:{minute} for task {index}")
        seen.add(index)

        task = tasks[index]
        scheduled.append(ScheduledAssignment(
            task=task,
            date=target_date,
            hour=hour,
            minute=minute,
            duration=task.effective_duration,
            reason=str(entry.get("reason") or DEFAULT_REASON),
        ))

    unscheduled = [t for i, t in enumerate(tasks) if i not in seen]
    return ScheduleResult(date=target_date, scheduled=scheduled, unscheduled=unscheduled, source="planner")


# ── Planners ──────────────────────────────────────────────────


class Planner(ABC):
    """Capability interface shared by all planner delegates."""

    @abstractmethod
    def plan(
        self,
        tasks: list[ScheduleTask],
        slots: list[FreeSlot],
        pattern: ProductivityPattern | None,
        target_date: str,
    ) -> ScheduleResult:
        """Return a whole-day assignment or raise PlannerError."""


class TextCompletionPlanner(Planner):
    """Planner backed by a prompt-in, text-out completion endpoint."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send *prompt* and return the raw reply text."""

    def plan(self, tasks, slots, pattern, target_date):
        prompt = build_prompt(tasks, slots, pattern, target_date)
        text = self.complete(prompt)
        if not isinstance(text, str):
            raise MalformedPlannerResponse(f"Planner reply is not text: {type(text).__name__}")
        if not text.strip():
            raise PlannerUnavailable("Planner returned an empty reply")
        return parse_plan(text, tasks, target_date)


class GeminiPlanner(TextCompletionPlanner):
    """Calls a Gemini-style generateContent endpoint over HTTP.

    The request is bounded by *timeout* seconds and never retried.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10.0,
        temperature: float = 0.3,
        max_output_tokens: int = 500,
    ) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    def complete(self, prompt: str) -> str:
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }
        try:
            res = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            res.raise_for_status()
            data = res.json()
        except requests.Timeout as e:
            raise PlannerUnavailable(f"Planner timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise PlannerUnavailable(f"Planner request failed: {e}") from e
        except ValueError as e:
            raise PlannerUnavailable("Planner returned a non-JSON body") from e

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedPlannerResponse("Planner reply had no text candidate") from e
