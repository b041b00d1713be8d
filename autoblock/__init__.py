"""AutoBlock — auto-scheduling engine for time-blocked days.

Public API re-exports for convenient imports:
    from autoblock import analyze_patterns, find_free_slots, auto_schedule_day, ...
"""

# Tables
from autoblock.tables import (
    CATEGORY_PREFERENCES,
    CATEGORY_RULES,
    ENERGY_LEVELS,
    REQUIRED_ENERGY,
    energy_level,
    infer_category,
    preferences_for,
    required_energy,
)

# Models
from autoblock.models import (
    CommittedBlock,
    HourlyStat,
    ProductivityPattern,
    FreeSlot,
    ScheduleTask,
    ScheduledAssignment,
    ScheduleResult,
    TaskPlacement,
    CategorySuggestion,
    TimeSuggestion,
    TemplateEntry,
    DayTemplate,
    ScheduleAdvice,
)

# Engines
from autoblock.slots import find_free_slots, occupied_minutes
from autoblock.patterns import analyze_patterns
from autoblock.scoring import score_slot, explain_slot
from autoblock.scheduler import schedule_greedy, auto_schedule_day, auto_schedule_task
from autoblock.suggest import suggest_time_for_category, fallback_suggestion
from autoblock.advisor import generate_day_template, optimize_schedule

# Planner
from autoblock.planner import (
    Planner,
    TextCompletionPlanner,
    GeminiPlanner,
    PlannerError,
    PlannerUnavailable,
    MalformedPlannerResponse,
)

# Config & logging
from autoblock.config import EngineConfig, PlannerConfig, load_config, build_planner
from autoblock.logger import setup_logger
