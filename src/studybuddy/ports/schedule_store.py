"""Schedule store interface."""

from typing import Protocol

from studybuddy.core.schedule import Schedule, ScheduleBlock


class ScheduleStore(Protocol):
    """Interface for storing generated schedules."""

    def fetch_all(self) -> list[Schedule]:
        """All schedules, newest first."""
        ...

    def active(self) -> Schedule | None:
        """The active schedule, if any."""
        ...

    def create(self, title: str, blocks: list[ScheduleBlock]) -> Schedule:
        """Store a new active schedule, deactivating all others in the same write."""
        ...
