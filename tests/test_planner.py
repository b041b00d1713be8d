"""Tests for autoblock/planner.py — prompt, reply parsing and the HTTP planner."""

import pytest
import requests

from autoblock.models import FreeSlot, ProductivityPattern, ScheduleTask
from autoblock.planner import (
    GeminiPlanner,
    MalformedPlannerResponse,
    PlannerUnavailable,
    build_prompt,
    extract_json_array,
    parse_plan,
)
from conftest import DAY


TASKS = [
    ScheduleTask(title="Report", category="work", duration=60, priority="high"),
    ScheduleTask(title="Sync", category="meeting"),
]
SLOTS = [FreeSlot(hour=9, minute=0, duration=120, energy_level="high")]


# ── Extraction ────────────────────────────────────────────────


def test_extract_plain_array():
    assert extract_json_array('[{"taskIndex": 0}]') == [{"taskIndex": 0}]


def test_extract_skips_prose_and_fences():
    text = 'Plan below [draft]:\n```json\n[{"taskIndex": 1, "reason": "a [b] c"}]\n```'
    assert extract_json_array(text) == [{"taskIndex": 1, "reason": "a [b] c"}]


def test_extract_first_complete_array_wins():
    assert extract_json_array("x [1, 2] y [3]") == [1, 2]


def test_extract_nothing():
    with pytest.raises(MalformedPlannerResponse):
        extract_json_array("I could not schedule these tasks.")
    with pytest.raises(MalformedPlannerResponse):
        extract_json_array('[{"taskIndex": 0,')


# ── Parsing ───────────────────────────────────────────────────


def test_parse_plan_maps_entries():
    result = parse_plan('[{"taskIndex": 1, "hour": 9, "minute": 30, "reason": "after focus"}]', TASKS, DAY)
    assert result.source == "planner"
    a = result.scheduled[0]
    assert (a.task.title, a.hour, a.minute, a.duration, a.score) == ("Sync", 9, 30, 30, None)
    assert a.reason == "after focus"
    assert result.unscheduled == [TASKS[0]]


def test_parse_plan_minute_defaults_to_zero():
    result = parse_plan('[{"taskIndex": 0, "hour": 14}]', TASKS, DAY)
    assert result.scheduled[0].minute == 0


@pytest.mark.parametrize("reply", [
    '[{"taskIndex": 2, "hour": 9, "minute": 0}]',
    '[{"taskIndex": -1, "hour": 9, "minute": 0}]',
    '[{"taskIndex": "0", "hour": 9, "minute": 0}]',
    '[{"taskIndex": 0, "hour": 9, "minute": 0}, {"taskIndex": 0, "hour": 10, "minute": 0}]',
    '[{"taskIndex": 0, "hour": 25, "minute": 0}]',
    '[{"taskIndex": 0}]',
    '["9:00"]',
    '[{"taskIndex": NaN, "hour": 9}]',
    '[{"taskIndex": Infinity, "hour": 9}]',
    '[{"taskIndex": 0, "hour": 1e999}]',
    '[{"taskIndex": 0, "hour": 9.5}]',
])
def test_parse_plan_rejects_bad_entries(reply):
    with pytest.raises(MalformedPlannerResponse):
        parse_plan(reply, TASKS, DAY)


# ── Prompt ────────────────────────────────────────────────────


def test_build_prompt_contents():
    prompt = build_prompt(TASKS, SLOTS, ProductivityPattern(peak_hours=[9, 14]), DAY)
    assert '1. "Report" - work - 60min - Priority: high' in prompt
    assert '2. "Sync" - meeting - 30min - Priority: medium' in prompt
    assert "- 09:00 (120min available, high energy)" in prompt
    assert "peak productivity hours: 9, 14" in prompt
    assert DAY in prompt


def test_build_prompt_without_peak_hours():
    prompt = build_prompt(TASKS, SLOTS, ProductivityPattern(), DAY)
    assert "peak productivity hours" not in prompt


# ── HTTP planner ──────────────────────────────────────────────


class _FakeResponse:
    def __init__(self, body, status=200):
        self.body = body
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.body


def _gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_gemini_planner_success(monkeypatch):
    captured = {}

    def fake_post(url, params=None, json=None, timeout=None):
        captured.update(url=url, params=params, json=json, timeout=timeout)
        return _FakeResponse(_gemini_body('[{"taskIndex": 0, "hour": 9, "minute": 0}]'))

    monkeypatch.setattr(requests, "post", fake_post)
    planner = GeminiPlanner(api_key="k", endpoint="https://example.test/gen", timeout=3)
    result = planner.plan(TASKS, SLOTS, None, DAY)

    assert [a.task.title for a in result.scheduled] == ["Report"]
    assert captured["url"] == "https://example.test/gen"
    assert captured["params"] == {"key": "k"}
    assert captured["timeout"] == 3
    assert captured["json"]["generationConfig"]["maxOutputTokens"] == 500


def test_gemini_planner_timeout(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(requests, "post", fake_post)
    with pytest.raises(PlannerUnavailable, match="timed out"):
        GeminiPlanner(api_key="k").plan(TASKS, SLOTS, None, DAY)


def test_gemini_planner_http_error(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: _FakeResponse({}, status=503))
    with pytest.raises(PlannerUnavailable):
        GeminiPlanner(api_key="k").plan(TASKS, SLOTS, None, DAY)


def test_gemini_planner_missing_candidate(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: _FakeResponse({"candidates": []}))
    with pytest.raises(MalformedPlannerResponse):
        GeminiPlanner(api_key="k").plan(TASKS, SLOTS, None, DAY)


def test_gemini_planner_empty_text(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: _FakeResponse(_gemini_body("  ")))
    with pytest.raises(PlannerUnavailable):
        GeminiPlanner(api_key="k").plan(TASKS, SLOTS, None, DAY)


def test_gemini_planner_non_text_candidate(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: _FakeResponse(_gemini_body(42)))
    with pytest.raises(MalformedPlannerResponse):
        GeminiPlanner(api_key="k").plan(TASKS, SLOTS, None, DAY)
