"""Progress store interface."""

from typing import Protocol

from studybuddy.core.progress import UserProgress


class ConcurrentUpdateError(Exception):
    """Raised when the stored progress changed since it was loaded."""

    pass


class ProgressStore(Protocol):
    """Interface for the single progress aggregate."""

    def load(self) -> UserProgress:
        """Load progress, creating the default aggregate if none exists."""
        ...

    def save(self, progress: UserProgress, expected_version: int) -> UserProgress:
        """
        Compare-and-swap write.

        Stores progress only if the stored version still equals
        expected_version, and returns it with the bumped version.
        Raises ConcurrentUpdateError otherwise.
        """
        ...
