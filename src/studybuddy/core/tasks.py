"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

DEFAULT_CATEGORY = "General"
DEFAULT_BLOCKED_WORDS = ("spam", "fake", "scam")


class InvalidTaskError(ValueError):
    """Raised when task data is malformed."""

    pass


class Difficulty(Enum):
    """How demanding a task is."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @property
    def weight(self) -> int:
        """Ordering weight, also used as schedule block priority."""
        match self:
            case Difficulty.EASY:
                return 1
            case Difficulty.MEDIUM:
                return 2
            case Difficulty.HARD:
                return 3

    @property
    def xp_multiplier(self) -> float:
        match self:
            case Difficulty.EASY:
                return 1
            case Difficulty.MEDIUM:
                return 1.5
            case Difficulty.HARD:
                return 2


class Mood(Enum):
    """How the user feels about a task."""

    EXCITED = "Excited"
    NEUTRAL = "Neutral"
    STRESSED = "Stressed"

    @property
    def xp_multiplier(self) -> float:
        match self:
            case Mood.EXCITED:
                return 1.2
            case Mood.NEUTRAL:
                return 1
            case Mood.STRESSED:
                return 0.8


class ScheduleType(Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


def _parse_enum(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidTaskError(f"Invalid {label} {value!r} (expected one of: {allowed})")


def parse_difficulty(value: str | Difficulty) -> Difficulty:
    return _parse_enum(Difficulty, value, "difficulty")


def parse_mood(value: str | Mood) -> Mood:
    return _parse_enum(Mood, value, "mood")


def parse_schedule_type(value: str | ScheduleType) -> ScheduleType:
    return _parse_enum(ScheduleType, value, "schedule type")


def parse_datetime(value, label: str) -> datetime:
    """Parse a datetime, date or ISO string into a naive local datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    else:
        try:
            parsed = datetime.fromisoformat(value)
        except (TypeError, ValueError):
            raise InvalidTaskError(f"Invalid {label}: {value!r}")
    # Offsets are converted to local time so stored dates always compare
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


@dataclass
class Task:
    """A unit of study work."""

    id: str
    title: str
    estimated_time: int  # minutes
    due_date: datetime
    difficulty: Difficulty = Difficulty.MEDIUM
    mood: Mood = Mood.NEUTRAL
    schedule_type: ScheduleType = ScheduleType.DAILY
    description: str | None = None
    completed: bool = False
    category: str = DEFAULT_CATEGORY
    created_at: datetime = field(default_factory=datetime.now)

    def is_due_on(self, day: date) -> bool:
        return self.due_date.date() == day

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its stored JSON shape. Raises InvalidTaskError."""
        try:
            task_id = str(data["id"])
            title = data["title"]
            estimated_time = data["estimatedTime"]
            due_raw = data["dueDate"]
        except KeyError as e:
            raise InvalidTaskError(f"Missing task field: {e.args[0]}")

        created_raw = data.get("createdAt")
        return cls(
            id=task_id,
            title=title,
            estimated_time=check_estimated_time(estimated_time),
            due_date=parse_datetime(due_raw, "due date"),
            difficulty=parse_difficulty(data.get("difficulty", Difficulty.MEDIUM.value)),
            mood=parse_mood(data.get("mood", Mood.NEUTRAL.value)),
            schedule_type=parse_schedule_type(data.get("scheduleType", ScheduleType.DAILY.value)),
            description=data.get("description") or None,
            completed=bool(data.get("completed", False)),
            category=data.get("category") or DEFAULT_CATEGORY,
            created_at=parse_datetime(created_raw, "creation date") if created_raw else datetime.now(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "estimatedTime": self.estimated_time,
            "difficulty": self.difficulty.value,
            "mood": self.mood.value,
            "scheduleType": self.schedule_type.value,
            "completed": self.completed,
            "dueDate": self.due_date.isoformat(),
            "category": self.category,
            "createdAt": self.created_at.isoformat(),
        }


def check_estimated_time(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidTaskError(f"Estimated time must be a positive number of minutes, got {value!r}")
    return value


def validate_new_task(
    title: str,
    description: str | None,
    estimated_time: int,
    blocked_words: list[str] | tuple[str, ...] = DEFAULT_BLOCKED_WORDS,
) -> None:
    """
    Reject a task submission before it reaches the store.

    Checks for a non-empty title, a positive estimated time, and blocked words
    in the title or description (case-insensitive).
    """
    if not title or not title.strip():
        raise InvalidTaskError("Task title is required")
    check_estimated_time(estimated_time)

    text = f"{title} {description or ''}".lower()
    for word in blocked_words:
        if word and word.lower() in text:
            raise InvalidTaskError("Task contains inappropriate content")


def filter_tasks(
    tasks: list[Task],
    completed: bool | None = None,
    category: str | None = None,
    due_on: date | None = None,
) -> list[Task]:
    """
    Filter tasks by completion, category and due day, sorted by due date.

    Pure function - no I/O.
    """
    result = tasks
    if completed is not None:
        result = [t for t in result if t.completed == completed]
    if category:
        result = [t for t in result if t.category == category]
    if due_on:
        result = [t for t in result if t.is_due_on(due_on)]
    return sorted(result, key=lambda t: t.due_date)


def sort_for_schedule(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks by difficulty (hardest first) then due date (earliest first).

    Stable: tasks equal on both keys keep their input order.
    """
    return sorted(tasks, key=lambda t: (-t.difficulty.weight, t.due_date))
