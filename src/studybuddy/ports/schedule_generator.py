"""Schedule generator interface."""

from typing import Protocol

from studybuddy.core.schedule import ScheduleBlock
from studybuddy.core.tasks import Task


class GenerationError(Exception):
    """Raised when an external generator can't produce a schedule."""

    pass


class ScheduleGenerator(Protocol):
    """Interface for external (e.g. model-backed) schedule generation."""

    def generate(self, tasks: list[Task]) -> list[ScheduleBlock]:
        """Generate schedule blocks. Raises GenerationError on any failure."""
        ...
