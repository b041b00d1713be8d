from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Body, FastAPI, HTTPException

from autoblock import (
    CommittedBlock,
    ProductivityPattern,
    ScheduleTask,
    analyze_patterns,
    auto_schedule_day,
    auto_schedule_task,
    build_planner,
    fallback_suggestion,
    find_free_slots,
    generate_day_template,
    load_config,
    optimize_schedule,
    setup_logger,
    suggest_time_for_category,
)


config = load_config()
setup_logger(level=config.log_level, log_file=config.log_file)
logger = logging.getLogger("autoblock.web")

app = FastAPI(title="AutoBlock", version="0.1.0")


# ── Payload helpers ───────────────────────────────────────────


def _date(payload: dict[str, Any]) -> str:
    date_str = payload.get("date") or date.today().isoformat()
    try:
        return date.fromisoformat(str(date_str)[:10]).isoformat()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {date_str}")


def _blocks(payload: dict[str, Any], key: str) -> list[CommittedBlock]:
    raw = payload.get(key) or []
    if not isinstance(raw, list):
        raise HTTPException(status_code=400, detail=f"{key} must be a list")
    try:
        return [CommittedBlock.from_dict(b) for b in raw]
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))


def _tasks(payload: dict[str, Any]) -> list[ScheduleTask]:
    raw = payload.get("tasks") or []
    if not isinstance(raw, list):
        raise HTTPException(status_code=400, detail="tasks must be a list")
    try:
        return [ScheduleTask.from_dict(t) for t in raw]
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))


def _task(payload: dict[str, Any]) -> ScheduleTask:
    try:
        return ScheduleTask.from_dict(payload.get("task") or {})
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))


def _pattern(payload: dict[str, Any]) -> ProductivityPattern:
    """Use an explicit pattern if given, else mine it from history."""
    if isinstance(payload.get("pattern"), dict):
        try:
            return ProductivityPattern.from_dict(payload["pattern"])
        except (AttributeError, TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=f"Invalid pattern: {e}")
    return analyze_patterns(_blocks(payload, "history"))


# ── Endpoints ─────────────────────────────────────────────────


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.post("/api/patterns")
def api_patterns(payload: dict[str, Any] = Body(default={})) -> dict[str, Any]:
    """Productivity patterns mined from block history."""
    return analyze_patterns(_blocks(payload, "history")).to_dict()


@app.post("/api/slots")
def api_free_slots(payload: dict[str, Any] = Body(default={})) -> dict[str, Any]:
    target_date = _date(payload)
    slots = find_free_slots(
        _blocks(payload, "blocks"),
        target_date,
        start_hour=int(payload.get("startHour", config.day_start_hour)),
        end_hour=int(payload.get("endHour", config.day_end_hour)),
        min_slot_minutes=config.min_slot_minutes,
    )
    return {"date": target_date, "freeSlots": [s.to_dict() for s in slots]}


@app.post("/api/schedule/day")
def api_schedule_day(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Schedule a task list, through the planner when one is configured."""
    result = auto_schedule_day(
        _tasks(payload),
        _blocks(payload, "blocks"),
        _blocks(payload, "history"),
        _date(payload),
        planner=build_planner(config),
        config=config,
    )
    return result.to_dict()


@app.post("/api/schedule/task")
def api_schedule_task(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    task = _task(payload)
    placement = auto_schedule_task(
        task, _blocks(payload, "blocks"), _blocks(payload, "history"), _date(payload), config=config
    )
    if placement is None:
        return {"success": False, "error": "No available time slots"}
    return {"success": True, **placement.to_dict()}


@app.post("/api/suggest/category")
def api_suggest_category(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    suggestion = suggest_time_for_category(
        str(payload.get("category", "work")), _blocks(payload, "blocks"), _pattern(payload), _date(payload)
    )
    return {"suggestion": suggestion.to_dict() if suggestion else None}


@app.post("/api/suggest/fallback")
def api_suggest_fallback(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    task = _task(payload)
    return fallback_suggestion(task, _blocks(payload, "blocks"), _pattern(payload), _date(payload)).to_dict()


@app.post("/api/template")
def api_day_template(payload: dict[str, Any] = Body(default={})) -> dict[str, Any]:
    return generate_day_template(_pattern(payload), _date(payload)).to_dict()


@app.post("/api/optimize")
def api_optimize(payload: dict[str, Any] = Body(default={})) -> dict[str, Any]:
    """Rule-based advice for the day."""
    return optimize_schedule(_blocks(payload, "history"), _date(payload), config=config).to_dict()
