"""Auto-scheduling engine for AutoBlock.

Places tasks into a day's free slots, either with the deterministic greedy
algorithm or through an optional planner delegate that falls back to greedy.
"""

from __future__ import annotations

import copy
import logging

from autoblock.config import EngineConfig
from autoblock.models import (
    CommittedBlock,
    FreeSlot,
    ProductivityPattern,
    ScheduledAssignment,
    ScheduleResult,
    ScheduleTask,
    TaskPlacement,
)
from autoblock.patterns import analyze_patterns
from autoblock.planner import Planner, PlannerError
from autoblock.scoring import explain_slot, score_slot
from autoblock.slots import find_free_slots


logger = logging.getLogger(__name__)

ALTERNATIVE_COUNT = 3


def _day_slots(blocks: list[CommittedBlock], target_date: str, config: EngineConfig) -> list[FreeSlot]:
    return find_free_slots(
        blocks,
        target_date,
        start_hour=config.day_start_hour,
        end_hour=config.day_end_hour,
        min_slot_minutes=config.min_slot_minutes,
    )


# ── Greedy ────────────────────────────────────────────────────


def schedule_greedy(
    tasks: list[ScheduleTask],
    slots: list[FreeSlot],
    pattern: ProductivityPattern | None,
    target_date: str,
) -> ScheduleResult:
    """Assign tasks to slots greedily by priority.

    - Stable-sort tasks high, medium, low
    - Each task takes the highest-scoring slot that still fits it
      (first slot wins ties)
    - The task starts at the slot's leading edge; the slot then shrinks
    - Tasks with no fitting slot are returned as unscheduled
    """
    working = copy.deepcopy(slots)
    ordered = sorted(tasks, key=lambda t: t.priority_rank)

    scheduled: list[ScheduledAssignment] = []
    unscheduled: list[ScheduleTask] = []

    for task in ordered:
        needed = task.effective_duration
        best: FreeSlot | None = None
        best_score = -1

        for slot in working:
            if slot.duration < needed:
                continue
            score = score_slot(slot, task, pattern)
            if score > best_score:
                best, best_score = slot, score

        if best is None:
            unscheduled.append(task)
            continue

        scheduled.append(ScheduledAssignment(
            task=task,
            date=target_date,
            hour=best.hour,
            minute=best.minute,
            duration=needed,
            score=best_score,
            reason=explain_slot(best, task, pattern),
        ))
        best.consume(needed)

    logger.debug("Greedy pass on %s: %d scheduled, %d unscheduled",
                 target_date, len(scheduled), len(unscheduled))
    return ScheduleResult(date=target_date, scheduled=scheduled, unscheduled=unscheduled, source="greedy")


# ── High-level API ────────────────────────────────────────────


def auto_schedule_day(
    tasks: list[ScheduleTask],
    committed_blocks: list[CommittedBlock],
    history: list[CommittedBlock],
    target_date: str,
    planner: Planner | None = None,
    config: EngineConfig | None = None,
) -> ScheduleResult:
    """Schedule a list of tasks into *target_date*.

    The planner is only consulted for multi-task requests. Any planner error
    discards its output entirely and the greedy result is returned instead.
    """
    if config is None:
        config = EngineConfig()
    if not tasks:
        return ScheduleResult(date=target_date)

    pattern = analyze_patterns(history)
    slots = _day_slots(committed_blocks, target_date, config)

    if planner is not None and len(tasks) > 1:
        try:
            result = planner.plan(list(tasks), copy.deepcopy(slots), pattern, target_date)
            logger.info("Planner scheduled %d of %d tasks for %s",
                        len(result.scheduled), len(tasks), target_date)
            return result
        except PlannerError as e:
            logger.warning("Planner failed, falling back to greedy: %s", e)

    result = schedule_greedy(tasks, slots, pattern, target_date)
    logger.info("Greedy scheduled %d of %d tasks for %s",
                len(result.scheduled), len(tasks), target_date)
    return result


def auto_schedule_task(
    task: ScheduleTask,
    committed_blocks: list[CommittedBlock],
    history: list[CommittedBlock],
    target_date: str,
    config: EngineConfig | None = None,
) -> TaskPlacement | None:
    """Suggest the best slot for one task, with up to three alternatives.

    Returns None when the day has no free slots at all.
    """
    if config is None:
        config = EngineConfig()
    pattern = analyze_patterns(history)
    slots = _day_slots(committed_blocks, target_date, config)
    if not slots:
        return None

    scored = sorted(
        ((score_slot(s, task, pattern), s) for s in slots),
        key=lambda x: x[0],
        reverse=True,
    )
    best_score, best = scored[0]
    wanted = task.effective_duration

    suggestion = ScheduledAssignment(
        task=task,
        date=target_date,
        hour=best.hour,
        minute=best.minute,
        duration=min(wanted, best.duration),
        score=best_score,
        reason=explain_slot(best, task, pattern),
    )
    alternatives = [
        {
            "hour": s.hour,
            "minute": s.minute,
            "duration": min(wanted, s.duration),
            "score": score,
        }
        for score, s in scored[1:1 + ALTERNATIVE_COUNT]
    ]
    return TaskPlacement(suggestion=suggestion, alternatives=alternatives)
