"""StudyBuddy CLI - study tasks, daily schedules and progress."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import date

import click

from .adapters.json_store import StorageError
from .config import load_config
from .core.progress import BADGE_DESCRIPTIONS, xp_to_next_level
from .core.schedule import Schedule, study_efficiency, suggest_study_times
from .core.tasks import Difficulty, InvalidTaskError, Mood, ScheduleType
from .ports.progress_store import ConcurrentUpdateError
from .ports.task_repo import TaskNotFoundError
from .workflows import (
    NoPendingTasksError,
    add_task,
    generate_schedule,
    get_generator,
    get_stores,
    set_completed,
    task_stats,
)

DIFFICULTIES = [d.value for d in Difficulty]
MOODS = [m.value for m in Mood]
SCHEDULE_TYPES = [s.value for s in ScheduleType]


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


class StudyBuddyGroup(click.Group):
    """Top-level group that reports unreadable data files as errors."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except StorageError as e:
            _fail(e)


@click.group(cls=StudyBuddyGroup)
@click.version_option(package_name="studybuddy")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """StudyBuddy - study task tracker CLI."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.argument("title")
@click.option("--time", "-t", "estimated_time", type=int, required=True, help="Estimated minutes")
@click.option("--due", default=None, help="Due date (YYYY-MM-DD), defaults to today")
@click.option("--difficulty", type=click.Choice(DIFFICULTIES), default="Medium", show_default=True)
@click.option("--mood", type=click.Choice(MOODS), default="Neutral", show_default=True)
@click.option("--type", "schedule_type", type=click.Choice(SCHEDULE_TYPES), default="Daily", show_default=True)
@click.option("--description", "-m", default=None, help="Optional description")
@click.option("--category", "-c", default=None, help="Category (default: General)")
def add(title, estimated_time, due, difficulty, mood, schedule_type, description, category):
    """Add a study task."""
    config = load_config()
    stores = get_stores(config)
    try:
        task = add_task(
            config,
            stores,
            title=title,
            estimated_time=estimated_time,
            due_date=due or date.today(),
            difficulty=difficulty,
            mood=mood,
            schedule_type=schedule_type,
            description=description,
            category=category,
        )
    except InvalidTaskError as e:
        _fail(e)
    click.echo(f"Added task {task.id}: {task.title}")


@main.command()
@click.option("--pending/--done", "pending", default=None, help="Only pending or only done tasks")
@click.option("--category", "-c", default=None, help="Only tasks in this category")
@click.option("--due", default=None, help="Only tasks due on this date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tasks(pending: bool | None, category: str | None, due: str | None, as_json: bool):
    """List tasks, earliest due first."""
    stores = get_stores(load_config())
    completed = None if pending is None else not pending
    try:
        due_on = date.fromisoformat(due) if due else None
    except ValueError:
        _fail(ValueError(f"Invalid date: {due}"))
    task_list = stores.tasks.fetch(completed=completed, category=category, due_on=due_on)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in task_list], indent=2))
        return

    if not task_list:
        click.echo("No tasks.")
        return

    for t in task_list:
        mark = "x" if t.completed else " "
        click.echo(
            f"[{mark}] {t.id:>3} {t.title} ({t.difficulty.value}, {t.estimated_time} min, "
            f"due {t.due_date.date()}, {t.category})"
        )


def _set_completed(task_id: str, completed: bool) -> None:
    stores = get_stores(load_config())
    try:
        task, progress = set_completed(stores, task_id, completed)
    except (TaskNotFoundError, ConcurrentUpdateError) as e:
        _fail(e)
    state = "done" if task.completed else "not done"
    click.echo(f"Task {task.id} marked {state}. Level {progress.level}, {progress.xp} XP, streak {progress.streak}")


@main.command()
@click.argument("task_id")
def done(task_id: str):
    """Mark a task as done."""
    _set_completed(task_id, True)


@main.command()
@click.argument("task_id")
def undo(task_id: str):
    """Mark a task as not done (progress is kept)."""
    _set_completed(task_id, False)


@main.command()
@click.argument("task_id")
def delete(task_id: str):
    """Delete a task."""
    stores = get_stores(load_config())
    if not stores.tasks.delete(task_id):
        _fail(TaskNotFoundError(f"Task {task_id} not found"))
    click.echo(f"Deleted task {task_id}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def progress(as_json: bool):
    """Show XP, level, streak and badges."""
    p = get_stores(load_config()).progress.load()

    if as_json:
        click.echo(json.dumps(p.to_dict(), indent=2))
        return

    click.echo(f"Level {p.level} - {p.xp} XP ({xp_to_next_level(p.xp)} XP to level {p.level + 1})")
    click.echo(f"Streak: {p.streak} days")
    click.echo(f"Completed tasks: {p.completed_tasks}")
    click.echo(f"Study time: {p.total_study_time / 60:.1f} h")
    click.echo("Badges:")
    if not p.badges:
        click.echo("  None yet. Complete tasks to earn your first badge!")
    for badge in p.badges:
        click.echo(f"  {badge} - {BADGE_DESCRIPTIONS.get(badge, '')}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Show task statistics."""
    s = task_stats(get_stores(load_config()))
    if as_json:
        click.echo(json.dumps(asdict(s), indent=2))
        return
    click.echo(f"Tasks: {s.completed_tasks}/{s.total_tasks} done")
    click.echo(f"Streak: {s.streak} days")
    click.echo(f"Studied today: {s.study_time_today} h")


def _show_schedule(schedule: Schedule | None, as_json: bool) -> None:
    if schedule is None:
        click.echo("No active schedule. Run 'studybuddy schedule generate'.")
        return

    if as_json:
        click.echo(json.dumps(schedule.to_dict(), indent=2))
        return

    click.echo(f"{schedule.title}\n")
    for block in schedule.blocks:
        click.echo(f"  {block.time_block}  {block.title}")
        if block.description and not block.is_break:
            click.echo(f"               {block.description}")


@main.group(invoke_without_command=True)
@click.pass_context
def schedule(ctx):
    """Show or generate the daily schedule."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(schedule_show)


@schedule.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def schedule_show(as_json: bool = False):
    """Show the active schedule."""
    _show_schedule(get_stores(load_config()).schedules.active(), as_json)


@schedule.command("generate")
@click.option("--offline", is_flag=True, help="Skip the model and pack tasks directly")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def schedule_generate(offline: bool, as_json: bool):
    """Generate a new schedule from pending tasks."""
    config = load_config()
    generator = None if offline else get_generator(config)
    try:
        new = generate_schedule(get_stores(config), generator)
    except NoPendingTasksError as e:
        _fail(e)
    _show_schedule(new, as_json)


@schedule.command("list")
def schedule_list():
    """List all schedules, newest first."""
    schedules = get_stores(load_config()).schedules.fetch_all()
    if not schedules:
        click.echo("No schedules.")
        return
    for s in schedules:
        marker = "*" if s.is_active else " "
        click.echo(f"{marker} {s.id:>3} {s.title} ({len(s.blocks)} blocks)")


@main.command()
def suggest():
    """Study tips and expected efficiency for pending tasks."""
    stores = get_stores(load_config())
    pending = stores.tasks.fetch(completed=False)
    p = stores.progress.load()

    for tip in suggest_study_times(pending):
        click.echo(f"- {tip}")
    if pending:
        click.echo(f"\nExpected efficiency: {study_efficiency(pending, p.level, p.streak):.0%}")


if __name__ == "__main__":
    main()
