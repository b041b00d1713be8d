"""Free-slot computation over a day's committed blocks."""

from __future__ import annotations

from typing import Iterable

from autoblock.models import CommittedBlock, FreeSlot
from autoblock.tables import energy_level


# ── Constants ─────────────────────────────────────────────────

BUCKET_MINUTES = 5
DEFAULT_START_HOUR = 6
DEFAULT_END_HOUR = 21
MIN_SLOT_MINUTES = 15


def _occupied_buckets(blocks: Iterable[CommittedBlock], target_date: str) -> set[int]:
    """Minute-of-day bucket starts covered by any block on *target_date*."""
    occupied: set[int] = set()
    for block in blocks:
        if block.date != target_date or not block.has_start:
            continue
        bucket = block.start_minutes - block.start_minutes % BUCKET_MINUTES
        while bucket < block.end_minutes:
            occupied.add(bucket)
            bucket += BUCKET_MINUTES
    return occupied


def _make_slot(start: int, end: int) -> FreeSlot:
    hour, minute = divmod(start, 60)
    return FreeSlot(hour=hour, minute=minute, duration=end - start, energy_level=energy_level(hour))


def find_free_slots(
    blocks: Iterable[CommittedBlock],
    target_date: str,
    start_hour: int = DEFAULT_START_HOUR,
    end_hour: int = DEFAULT_END_HOUR,
    min_slot_minutes: int = MIN_SLOT_MINUTES,
) -> list[FreeSlot]:
    """Compute free slots for *target_date* inside the working-hours window.

    Blocks are matched to the day by exact date string. Each maximal run of
    unoccupied 5-minute buckets becomes a slot; runs shorter than
    *min_slot_minutes* are dropped. Energy level is taken at the slot's
    starting hour.
    """
    occupied = _occupied_buckets(blocks, target_date)
    window_end = end_hour * 60

    slots: list[FreeSlot] = []
    run_start: int | None = None
    for bucket in range(start_hour * 60, window_end, BUCKET_MINUTES):
        if bucket not in occupied:
            if run_start is None:
                run_start = bucket
        elif run_start is not None:
            if bucket - run_start >= min_slot_minutes:
                slots.append(_make_slot(run_start, bucket))
            run_start = None

    if run_start is not None and window_end - run_start >= min_slot_minutes:
        slots.append(_make_slot(run_start, window_end))

    return slots


def occupied_minutes(blocks: Iterable[CommittedBlock], target_date: str,
                     start_hour: int = DEFAULT_START_HOUR, end_hour: int = DEFAULT_END_HOUR) -> int:
    """Minutes of the window covered by committed blocks on *target_date*."""
    occupied = _occupied_buckets(blocks, target_date)
    return sum(BUCKET_MINUTES for b in occupied if start_hour * 60 <= b < end_hour * 60)
