"""Hugging Face inference adapter - model-backed schedule generation."""

import json
import logging
import re

import requests

from studybuddy.core.schedule import ScheduleBlock
from studybuddy.core.tasks import Task
from studybuddy.ports.schedule_generator import GenerationError

logger = logging.getLogger(__name__)

API_BASE = "https://api-inference.huggingface.co/models"

_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


def build_prompt(tasks: list[Task]) -> str:
    """Prompt asking the model for a JSON array of schedule blocks."""
    task_summary = "\n".join(
        f"Task: {t.title}, Time: {t.estimated_time}min, "
        f"Difficulty: {t.difficulty.value}, Mood: {t.mood.value}"
        for t in tasks
    )
    return f"""Create a study schedule for these tasks. Return only a JSON array of schedule blocks.
Tasks to schedule:
{task_summary}

Format each block as: {{"timeBlock": "HH:MM-HH:MM", "title": "Task Name", "description": "Brief description", "difficulty": "Easy|Medium|Hard", "priority": 1-5}}

Include 15-minute breaks between study sessions. Start at 09:00."""


def parse_blocks(generated_text: str) -> list[ScheduleBlock]:
    """Extract and validate the first JSON array in model output."""
    match = _JSON_ARRAY.search(generated_text)
    if not match:
        raise GenerationError("No valid JSON found in generated response")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise GenerationError(f"Malformed JSON in generated response: {e}")
    if not isinstance(data, list) or not data:
        raise GenerationError("Generated schedule is empty")
    try:
        return [ScheduleBlock.from_dict(item) for item in data]
    except ValueError as e:
        raise GenerationError(f"Invalid schedule block: {e}")


class HuggingFaceGenerator:
    """
    Hugging Face text-generation adapter.

    Implements ScheduleGenerator protocol. Every failure surfaces as
    GenerationError so the caller can fall back to the packer.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "distilgpt2",
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._session = session or requests.Session()

    def generate(self, tasks: list[Task]) -> list[ScheduleBlock]:
        """Generate schedule blocks for tasks. Raises GenerationError."""
        if not self.api_key:
            raise GenerationError("Hugging Face API key not found")

        payload = {
            "inputs": build_prompt(tasks),
            "parameters": {
                "max_length": 500,
                "temperature": 0.7,
                "do_sample": True,
            },
        }
        try:
            resp = self._session.post(
                f"{API_BASE}/{self.model}",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Hugging Face request failed: {e}")
            raise GenerationError(f"Hugging Face request failed: {e}")

        if not resp.ok:
            raise GenerationError(f"Hugging Face API error: {resp.status_code} {resp.reason}")

        try:
            result = resp.json()
        except ValueError:
            raise GenerationError("Hugging Face API returned non-JSON response")

        generated_text = ""
        if isinstance(result, list) and result and isinstance(result[0], dict):
            generated_text = result[0].get("generated_text", "")

        blocks = parse_blocks(generated_text)
        logger.debug(f"Model produced {len(blocks)} schedule blocks")
        return blocks
