"""Shared workflow layer between the CLI and any other front end.

Each function loads what it needs from the stores, runs the pure core logic,
and writes the result back.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from .adapters.huggingface import HuggingFaceGenerator
from .adapters.json_store import JsonProgressStore, JsonScheduleStore, JsonTaskStore
from .config import DATA_DIR, Config
from .core.progress import TaskStats, UserProgress, apply_completion, compute_task_stats
from .core.schedule import Schedule, pack
from .core.tasks import (
    DEFAULT_CATEGORY,
    Task,
    parse_datetime,
    parse_difficulty,
    parse_mood,
    parse_schedule_type,
    validate_new_task,
)
from .ports.progress_store import ConcurrentUpdateError, ProgressStore
from .ports.schedule_generator import GenerationError, ScheduleGenerator
from .ports.schedule_store import ScheduleStore
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)

MAX_SAVE_ATTEMPTS = 3


class NoPendingTasksError(Exception):
    """Raised when a schedule is requested but every task is done."""

    pass


@dataclass
class Stores:
    """The three stores a workflow may touch."""

    tasks: TaskRepository
    progress: ProgressStore
    schedules: ScheduleStore


def get_data_dir(config: Config) -> Path:
    """Resolve data directory from config."""
    if config.data_dir:
        return Path(config.data_dir).expanduser()
    return DATA_DIR


def get_stores(config: Config) -> Stores:
    data_dir = get_data_dir(config)
    return Stores(
        tasks=JsonTaskStore(data_dir),
        progress=JsonProgressStore(data_dir),
        schedules=JsonScheduleStore(data_dir),
    )


def get_generator(config: Config) -> ScheduleGenerator:
    return HuggingFaceGenerator(
        api_key=config.hf_api_key,
        model=config.hf_model,
        timeout=config.hf_timeout,
    )


def add_task(
    config: Config,
    stores: Stores,
    title: str,
    estimated_time: int,
    due_date: datetime | date | str,
    difficulty: str = "Medium",
    mood: str = "Neutral",
    schedule_type: str = "Daily",
    description: str | None = None,
    category: str | None = None,
) -> Task:
    """Validate a submission and store it as a new task. Raises InvalidTaskError."""
    validate_new_task(title, description, estimated_time, config.blocked_words)
    task = Task(
        id="",
        title=title.strip(),
        estimated_time=estimated_time,
        due_date=parse_datetime(due_date, "due date"),
        difficulty=parse_difficulty(difficulty),
        mood=parse_mood(mood),
        schedule_type=parse_schedule_type(schedule_type),
        description=description or None,
        category=category or DEFAULT_CATEGORY,
    )
    created = stores.tasks.create(task)
    logger.info(f"Added task {created.id}: {created.title}")
    return created


def record_completion(store: ProgressStore, task: Task, now: datetime) -> UserProgress:
    """Apply one completion with a compare-and-swap write, retrying on conflict."""
    for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
        current = store.load()
        updated = apply_completion(current, task, now)
        try:
            return store.save(updated, expected_version=current.version)
        except ConcurrentUpdateError:
            logger.debug(f"Progress write conflict (attempt {attempt}/{MAX_SAVE_ATTEMPTS})")
    raise ConcurrentUpdateError(f"Could not record completion of task {task.id} after {MAX_SAVE_ATTEMPTS} attempts")


def set_completed(
    stores: Stores,
    task_id: str,
    completed: bool,
    now: datetime | None = None,
) -> tuple[Task, UserProgress]:
    """
    Mark a task done or not done.

    Progress changes only on a not-done -> done transition. Marking a task
    not done again leaves XP, streak and counters as they are.
    """
    now = now or datetime.now()
    task, changed = stores.tasks.mark_completed(task_id, completed)

    if completed and changed:
        progress = record_completion(stores.progress, task, now)
        logger.info(f"Completed task {task.id}: {task.title} (xp={progress.xp}, streak={progress.streak})")
    else:
        progress = stores.progress.load()

    return task, progress


def generate_schedule(
    stores: Stores,
    generator: ScheduleGenerator | None = None,
    now: datetime | None = None,
) -> Schedule:
    """
    Build and store today's schedule from pending tasks.

    Tries the external generator first. On GenerationError, falls back to
    the deterministic packer. The new schedule becomes the only active one.
    """
    now = now or datetime.now()
    pending = stores.tasks.fetch(completed=False)
    if not pending:
        raise NoPendingTasksError("No tasks available for scheduling")

    label = now.date().isoformat()
    blocks = None
    if generator is not None:
        try:
            blocks = generator.generate(pending)
            title = f"AI Schedule - {label}"
        except GenerationError as e:
            logger.warning(f"Schedule generation failed, using fallback: {e}")

    if blocks is None:
        blocks = pack(pending)
        title = f"Fallback Schedule - {label}"

    schedule = stores.schedules.create(title, blocks)
    logger.info(f"Created schedule {schedule.id} ({len(blocks)} blocks)")
    return schedule


def task_stats(stores: Stores, today: date | None = None) -> TaskStats:
    today = today or date.today()
    return compute_task_stats(stores.tasks.fetch(), stores.progress.load(), today)
