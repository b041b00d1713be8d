"""Shared test fixtures for AutoBlock tests."""

from __future__ import annotations

import pytest

from autoblock.models import CommittedBlock, ScheduleTask
from autoblock.planner import PlannerUnavailable, TextCompletionPlanner


DAY = "2024-01-15"  # a Monday


def block(start: str, duration: int = 60, day: str = DAY, completed: bool = False, **kw) -> CommittedBlock:
    """Build a committed block from an 'HH:MM' start."""
    return CommittedBlock.from_dict({
        "date": day,
        "startTime": start,
        "duration": duration,
        "completed": completed,
        **kw,
    })


class CannedPlanner(TextCompletionPlanner):
    """Planner that replies with fixed text and records the prompt."""

    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class BrokenPlanner(TextCompletionPlanner):
    """Planner whose transport always fails."""

    def __init__(self) -> None:
        self.calls = 0

    def complete(self, prompt: str) -> str:
        self.calls += 1
        raise PlannerUnavailable("connection refused")


@pytest.fixture
def history() -> list[CommittedBlock]:
    """Two weeks of completed sessions clustered around 9-10am and 3pm."""
    return [
        block("09:00", 90, day="2024-01-08", completed=True, title="Write report"),
        block("10:00", 60, day="2024-01-08", completed=True, title="Code review"),
        block("15:00", 45, day="2024-01-09", completed=True, title="Design doc"),
        block("09:00", 90, day="2024-01-10", completed=True, title="Write report"),
        block("13:00", 20, day="2024-01-10", completed=True, title="Lunch"),
        block("10:00", 60, day="2024-01-11", completed=True, title="Code review"),
        block("17:00", 30, day="2024-01-11", completed=False, title="Gym"),
        block("15:00", 45, day="2024-01-12", completed=True, title="Design doc"),
    ]


@pytest.fixture
def tasks() -> list[ScheduleTask]:
    return [
        ScheduleTask(title="Standup sync", category="meeting", duration=30, priority="medium"),
        ScheduleTask(title="Quarterly report", category="work", duration=90, priority="high"),
        ScheduleTask(title="Read chapter", category="learning", priority="low"),
        ScheduleTask(title="Coffee", category="break", priority="low"),
    ]


@pytest.fixture
def busy_day() -> list[CommittedBlock]:
    return [
        block("09:00", 60, title="Team meeting"),
        block("14:00", 60, title="Client call"),
    ]
