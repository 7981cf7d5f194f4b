"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskNotFoundError, TaskRepository
from .progress_store import ConcurrentUpdateError, ProgressStore
from .schedule_store import ScheduleStore
from .schedule_generator import GenerationError, ScheduleGenerator

__all__ = [
    "TaskRepository",
    "TaskNotFoundError",
    "ProgressStore",
    "ConcurrentUpdateError",
    "ScheduleStore",
    "ScheduleGenerator",
    "GenerationError",
]
