"""Engine configuration: config file location, YAML loading, planner wiring."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from autoblock.planner import DEFAULT_ENDPOINT, GeminiPlanner


ENV_CONFIG_PATH = "AUTOBLOCK_CONFIG"
ENV_API_KEYS = ("AUTOBLOCK_PLANNER_API_KEY", "GEMINI_API_KEY")


def config_path() -> Path:
    """Location of config.yaml, overridable via AUTOBLOCK_CONFIG."""
    return Path(
        os.environ.get(ENV_CONFIG_PATH, str(Path.home() / ".autoblock" / "config.yaml"))
    ).expanduser().resolve()


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML file, returning empty dict if missing or empty."""
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    result = yaml.safe_load(text)
    return result if isinstance(result, dict) else {}


@dataclass
class PlannerConfig:
    enabled: bool = False
    endpoint: str = DEFAULT_ENDPOINT
    api_key: str = ""
    timeout_seconds: float = 10.0
    temperature: float = 0.3
    max_output_tokens: int = 500

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PlannerConfig:
        if not d or not isinstance(d, dict):
            return cls()
        default = cls()
        return cls(
            enabled=bool(d.get("enabled", False)),
            endpoint=str(d.get("endpoint") or default.endpoint),
            api_key=str(d.get("api_key", "")),
            timeout_seconds=float(d.get("timeout_seconds", default.timeout_seconds)),
            temperature=float(d.get("temperature", default.temperature)),
            max_output_tokens=int(d.get("max_output_tokens", default.max_output_tokens)),
        )

    def to_dict(self) -> dict[str, Any]:
        # api_key is never serialized
        return {
            "enabled": self.enabled,
            "endpoint": self.endpoint,
            "timeout_seconds": self.timeout_seconds,
            "temperature": self.temperature,
            "max_output_tokens": self.max_output_tokens,
        }


@dataclass
class EngineConfig:
    day_start_hour: int = 6
    day_end_hour: int = 21
    min_slot_minutes: int = 15
    log_level: str = "INFO"
    log_file: str | None = None
    planner: PlannerConfig = field(default_factory=PlannerConfig)

    def __post_init__(self) -> None:
        if not 0 <= self.day_start_hour < self.day_end_hour <= 24:
            raise ValueError(
                f"Invalid working window: {self.day_start_hour}-{self.day_end_hour}"
            )
        if self.min_slot_minutes < 5:
            raise ValueError("min_slot_minutes must be at least 5")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EngineConfig:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            day_start_hour=int(d.get("day_start_hour", 6)),
            day_end_hour=int(d.get("day_end_hour", 21)),
            min_slot_minutes=int(d.get("min_slot_minutes", 15)),
            log_level=str(d.get("log_level", "INFO")).upper(),
            log_file=d.get("log_file"),
            planner=PlannerConfig.from_dict(d.get("planner") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "day_start_hour": self.day_start_hour,
            "day_end_hour": self.day_end_hour,
            "min_slot_minutes": self.min_slot_minutes,
            "log_level": self.log_level,
            "planner": self.planner.to_dict(),
        }
        if self.log_file:
            d["log_file"] = self.log_file
        return d


def load_config(path: Path | None = None) -> EngineConfig:
    """Load config.yaml and apply environment overrides.

    A planner API key from the environment wins over the file and enables
    the planner.
    """
    if path is None:
        path = config_path()
    config = EngineConfig.from_dict(read_yaml(path))

    for var in ENV_API_KEYS:
        key = os.environ.get(var, "").strip()
        if key:
            config.planner.api_key = key
            config.planner.enabled = True
            break
    return config


def build_planner(config: EngineConfig) -> GeminiPlanner | None:
    """Return a GeminiPlanner when the planner is enabled and keyed, else None."""
    pc = config.planner
    if not pc.enabled or not pc.api_key:
        return None
    return GeminiPlanner(
        api_key=pc.api_key,
        endpoint=pc.endpoint,
        timeout=pc.timeout_seconds,
        temperature=pc.temperature,
        max_output_tokens=pc.max_output_tokens,
    )
