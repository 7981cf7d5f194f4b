"""StudyBuddy - study task tracker with daily schedules and XP."""

__version__ = "0.1.0"
