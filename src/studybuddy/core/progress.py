"""Pure progress scoring logic - no I/O dependencies.

XP, level, streak and badges are updated once per task completion. The
aggregate only grows: un-completing a task never takes anything back.
"""

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum

from .tasks import Task

BASE_XP = 10
XP_PER_LEVEL = 500

LEVEL_UP = "Level Up"
FIRST_WEEK = "First Week"
TIME_MASTER = "Time Master"

FIRST_WEEK_STREAK = 7
TIME_MASTER_MINUTES = 1500  # 25 hours

BADGE_DESCRIPTIONS = {
    FIRST_WEEK: "Study for 7 days in a row",
    LEVEL_UP: "Reach a new experience level",
    TIME_MASTER: "Study for 25 hours in total",
}


@dataclass
class UserProgress:
    """The single progress aggregate."""

    xp: int = 0
    level: int = 1
    streak: int = 0
    total_study_time: int = 0  # minutes
    completed_tasks: int = 0
    badges: list[str] = field(default_factory=list)
    last_activity_date: datetime | None = None
    version: int = 0

    def to_dict(self) -> dict:
        return {
            "xp": self.xp,
            "level": self.level,
            "streak": self.streak,
            "totalStudyTime": self.total_study_time,
            "completedTasks": self.completed_tasks,
            "badges": list(self.badges),
            "lastActivityDate": self.last_activity_date.isoformat() if self.last_activity_date else None,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProgress":
        last = data.get("lastActivityDate")
        return cls(
            xp=data.get("xp", 0),
            level=data.get("level", 1),
            streak=data.get("streak", 0),
            total_study_time=data.get("totalStudyTime", 0),
            completed_tasks=data.get("completedTasks", 0),
            badges=list(data.get("badges") or []),
            last_activity_date=datetime.fromisoformat(last) if last else None,
            version=data.get("version", 0),
        )


@dataclass
class TaskStats:
    """Dashboard summary of tasks and progress."""

    total_tasks: int
    completed_tasks: int
    streak: int
    study_time_today: float  # hours, one decimal


class StreakRule(Enum):
    """How a completion changes the streak, keyed by the day gap."""

    START = "start"  # no previous activity
    CONTINUE = "continue"  # previous activity yesterday
    RESET = "reset"  # gap of more than one day
    KEEP = "keep"  # same day


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def xp_for(task: Task) -> int:
    """XP granted for completing a task, rounded half-up."""
    return _round_half_up(BASE_XP * task.difficulty.xp_multiplier * task.mood.xp_multiplier)


def level_for(xp: int) -> int:
    return xp // XP_PER_LEVEL + 1


def xp_to_next_level(xp: int) -> int:
    return XP_PER_LEVEL - xp % XP_PER_LEVEL


def day_gap(last: date, now: date) -> int:
    """Whole calendar days between two moments."""
    if isinstance(last, datetime):
        last = last.date()
    if isinstance(now, datetime):
        now = now.date()
    return (now - last).days


def streak_rule(last: datetime | None, now: datetime) -> StreakRule:
    if last is None:
        return StreakRule.START
    gap = day_gap(last, now)
    if gap == 1:
        return StreakRule.CONTINUE
    if gap > 1:
        return StreakRule.RESET
    return StreakRule.KEEP


def next_streak(streak: int, rule: StreakRule) -> int:
    match rule:
        case StreakRule.START | StreakRule.RESET:
            return 1
        case StreakRule.CONTINUE:
            return streak + 1
        case StreakRule.KEEP:
            return streak


def _award(badges: list[str], badge: str) -> None:
    if badge not in badges:
        badges.append(badge)


def apply_completion(progress: UserProgress, task: Task, now: datetime) -> UserProgress:
    """
    Apply one task completion to the progress aggregate.

    Pure function - no I/O. Returns a new UserProgress; the input is left
    untouched. Call only on a false->true completion transition.

    Badges are appended in award order and never duplicated. "Level Up" is
    appended once even if a single completion crosses several levels.
    """
    badges = list(progress.badges)

    xp = progress.xp + xp_for(task)
    completed_tasks = progress.completed_tasks + 1
    total_study_time = progress.total_study_time + task.estimated_time

    level = progress.level
    new_level = level_for(xp)
    if new_level > level:
        level = new_level
        _award(badges, LEVEL_UP)

    streak = next_streak(progress.streak, streak_rule(progress.last_activity_date, now))

    if streak >= FIRST_WEEK_STREAK:
        _award(badges, FIRST_WEEK)
    if total_study_time >= TIME_MASTER_MINUTES:
        _award(badges, TIME_MASTER)

    return replace(
        progress,
        xp=xp,
        level=level,
        streak=streak,
        total_study_time=total_study_time,
        completed_tasks=completed_tasks,
        badges=badges,
        last_activity_date=now,
    )


def compute_task_stats(tasks: list[Task], progress: UserProgress, today: date) -> TaskStats:
    """Summarize task counts and today's completed study time."""
    done_today = [t for t in tasks if t.completed and t.is_due_on(today)]
    minutes = sum(t.estimated_time for t in done_today)
    return TaskStats(
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.completed),
        streak=progress.streak,
        study_time_today=round(minutes / 60, 1),
    )
