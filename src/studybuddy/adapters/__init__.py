"""Adapters - I/O implementations of ports."""

from .json_store import JsonProgressStore, JsonScheduleStore, JsonTaskStore, StorageError
from .huggingface import HuggingFaceGenerator

__all__ = [
    "JsonTaskStore",
    "JsonProgressStore",
    "JsonScheduleStore",
    "StorageError",
    "HuggingFaceGenerator",
]
