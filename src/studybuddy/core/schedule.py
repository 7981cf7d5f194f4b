"""Pure schedule packing logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime

from .tasks import Difficulty, Mood, Task, parse_difficulty, sort_for_schedule

# Working window in minutes from midnight: [09:00, 17:00)
DAY_START = 9 * 60
DAY_END = 17 * 60
SESSION_CAP = 120
BREAK_MINUTES = 15

BREAK_TITLE = "Break"
BREAK_DESCRIPTION = "Rest and recharge"


@dataclass(frozen=True)
class ScheduleBlock:
    """One interval of a schedule: a task session or a rest break."""

    time_block: str
    title: str
    difficulty: Difficulty
    priority: int
    description: str | None = None
    task_id: str | None = None

    @property
    def is_break(self) -> bool:
        return self.task_id is None and self.priority == 0

    @property
    def start(self) -> str:
        return self.time_block.split("-")[0]

    @property
    def end(self) -> str:
        return self.time_block.split("-")[1]

    def to_dict(self) -> dict:
        data = {
            "timeBlock": self.time_block,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "priority": self.priority,
        }
        if self.task_id is not None:
            data["taskId"] = self.task_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleBlock":
        """Build a block from its JSON shape. Raises ValueError if malformed."""
        if not isinstance(data, dict):
            raise ValueError(f"Schedule block must be an object, got {type(data).__name__}")
        time_block = data.get("timeBlock")
        if not isinstance(time_block, str) or not _is_time_block(time_block):
            raise ValueError(f"Invalid time block: {time_block!r}")
        title = data.get("title")
        if not isinstance(title, str) or not title:
            raise ValueError("Schedule block title is required")
        priority = data.get("priority", 1)
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise ValueError(f"Invalid priority: {priority!r}")
        task_id = data.get("taskId")
        return cls(
            time_block=time_block,
            title=title,
            difficulty=parse_difficulty(data.get("difficulty", Difficulty.MEDIUM.value)),
            priority=priority,
            description=data.get("description"),
            task_id=str(task_id) if task_id is not None else None,
        )


@dataclass
class Schedule:
    """A day's ordered time blocks. At most one schedule is active."""

    id: str
    title: str
    blocks: list[ScheduleBlock]
    created_at: datetime = field(default_factory=datetime.now)
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "scheduleData": [b.to_dict() for b in self.blocks],
            "createdAt": self.created_at.isoformat(),
            "isActive": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Schedule":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            blocks=[ScheduleBlock.from_dict(b) for b in data.get("scheduleData", [])],
            created_at=datetime.fromisoformat(data["createdAt"]),
            is_active=bool(data.get("isActive", False)),
        )


def _is_time_block(value: str) -> bool:
    parts = value.split("-")
    if len(parts) != 2:
        return False
    for part in parts:
        hh, sep, mm = part.partition(":")
        if not sep or len(hh) != 2 or len(mm) != 2 or not (hh + mm).isdigit():
            return False
    return True


def format_time(minutes: int) -> str:
    """Minutes from midnight as zero-padded 24h HH:MM."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time_block(start: int, end: int) -> str:
    return f"{format_time(start)}-{format_time(end)}"


def _task_block(task: Task, start: int, end: int) -> ScheduleBlock:
    return ScheduleBlock(
        time_block=format_time_block(start, end),
        title=task.title,
        difficulty=task.difficulty,
        priority=task.difficulty.weight,
        description=task.description or f"{task.difficulty.value} level task",
        task_id=task.id,
    )


def _break_block(start: int) -> ScheduleBlock:
    return ScheduleBlock(
        time_block=format_time_block(start, start + BREAK_MINUTES),
        title=BREAK_TITLE,
        difficulty=Difficulty.EASY,
        priority=0,
        description=BREAK_DESCRIPTION,
    )


def pack(tasks: list[Task]) -> list[ScheduleBlock]:
    """
    Pack pending tasks into a single working day, hardest first.

    Pure function - no I/O.

    Each task gets one session of at most SESSION_CAP minutes. A task that
    doesn't fit in what remains of the window is dropped, not deferred.
    A break follows every placed session except the one for the last task in
    the ordered list, and only while the break ends before DAY_END.
    """
    ordered = sort_for_schedule(tasks)
    blocks: list[ScheduleBlock] = []
    cursor = DAY_START

    for index, task in enumerate(ordered):
        if cursor >= DAY_END:
            break

        session = min(task.estimated_time, SESSION_CAP)
        end = cursor + session
        if end > DAY_END:
            continue

        blocks.append(_task_block(task, cursor, end))
        cursor = end

        is_last = index == len(ordered) - 1
        if not is_last and cursor + BREAK_MINUTES < DAY_END:
            blocks.append(_break_block(cursor))
            cursor += BREAK_MINUTES

    return blocks


def study_efficiency(tasks: list[Task], level: int, streak: int) -> float:
    """
    Average expected study efficiency across tasks (0.1 to 2.0 each).

    Hard tasks get a bonus once the user reaches level 3, mood shifts
    the baseline, and a week-long streak adds a small bonus.
    """
    if not tasks:
        return 0.0

    total = 0.0
    for task in tasks:
        efficiency = 1.0
        if task.difficulty is Difficulty.HARD and level >= 3:
            efficiency += 0.2
        if task.mood is Mood.EXCITED:
            efficiency += 0.3
        elif task.mood is Mood.STRESSED:
            efficiency -= 0.2
        if streak >= 7:
            efficiency += 0.1
        total += max(0.1, min(2.0, efficiency))

    return total / len(tasks)


def suggest_study_times(tasks: list[Task]) -> list[str]:
    """Plain-language study advice based on the pending task mix."""
    suggestions = []

    if any(t.difficulty is Difficulty.HARD for t in tasks):
        suggestions.append("Schedule challenging tasks in the morning when focus is highest")
    if len(tasks) > 3:
        suggestions.append("Take 15-minute breaks between study sessions")
    if any(t.mood is Mood.STRESSED for t in tasks):
        suggestions.append("Consider shorter study sessions for stressful topics")

    suggestions.append("Stay hydrated and maintain good posture while studying")
    return suggestions
