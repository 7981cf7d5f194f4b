"""Functional core - pure business logic with no I/O."""

from .tasks import (
    Difficulty,
    InvalidTaskError,
    Mood,
    ScheduleType,
    Task,
    filter_tasks,
    sort_for_schedule,
    validate_new_task,
)
from .schedule import Schedule, ScheduleBlock, pack, study_efficiency, suggest_study_times
from .progress import TaskStats, UserProgress, apply_completion, compute_task_stats

__all__ = [
    # Tasks
    "Difficulty",
    "InvalidTaskError",
    "Mood",
    "ScheduleType",
    "Task",
    "filter_tasks",
    "sort_for_schedule",
    "validate_new_task",
    # Schedule
    "Schedule",
    "ScheduleBlock",
    "pack",
    "study_efficiency",
    "suggest_study_times",
    # Progress
    "TaskStats",
    "UserProgress",
    "apply_completion",
    "compute_task_stats",
]
