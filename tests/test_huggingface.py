"""Tests for the Hugging Face schedule generator adapter."""

import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from studybuddy.adapters.huggingface import HuggingFaceGenerator, build_prompt, parse_blocks
from studybuddy.core.tasks import Difficulty, Mood, Task
from studybuddy.ports.schedule_generator import GenerationError


@pytest.fixture
def tasks():
    return [
        Task(id="1", title="Essay", estimated_time=90, due_date=datetime(2025, 1, 15),
             difficulty=Difficulty.HARD, mood=Mood.STRESSED),
        Task(id="2", title="Flashcards", estimated_time=20, due_date=datetime(2025, 1, 15),
             difficulty=Difficulty.EASY, mood=Mood.EXCITED),
    ]


def model_output(blocks) -> str:
    return "Here is your schedule:\n" + json.dumps(blocks) + "\nGood luck!"


def mock_session(status=200, payload=None, exc=None):
    session = MagicMock()
    if exc is not None:
        session.post.side_effect = exc
        return session
    resp = MagicMock()
    resp.ok = 200 <= status < 300
    resp.status_code = status
    resp.reason = "Service Unavailable" if status == 503 else "OK"
    resp.json.return_value = payload
    session.post.return_value = resp
    return session


class TestBuildPrompt:
    def test_lists_every_task(self, tasks):
        prompt = build_prompt(tasks)
        assert "Task: Essay, Time: 90min, Difficulty: Hard, Mood: Stressed" in prompt
        assert "Task: Flashcards, Time: 20min, Difficulty: Easy, Mood: Excited" in prompt
        assert "Start at 09:00." in prompt


class TestParseBlocks:
    def test_extracts_array(self):
        blocks = parse_blocks(
            model_output([
                {"timeBlock": "09:00-10:30", "title": "Essay", "difficulty": "Hard", "priority": 3},
                {"timeBlock": "10:30-10:45", "title": "Break", "difficulty": "Easy", "priority": 0},
            ])
        )
        assert [b.time_block for b in blocks] == ["09:00-10:30", "10:30-10:45"]
        assert blocks[0].difficulty is Difficulty.HARD

    def test_no_json(self):
        with pytest.raises(GenerationError, match="No valid JSON"):
            parse_blocks("I would start with the essay.")

    def test_broken_json(self):
        with pytest.raises(GenerationError, match="Malformed"):
            parse_blocks('[{"timeBlock": "09:00-10:00",]')

    def test_empty_array(self):
        with pytest.raises(GenerationError, match="empty"):
            parse_blocks("[]")

    def test_invalid_block(self):
        with pytest.raises(GenerationError, match="Invalid schedule block"):
            parse_blocks(model_output([{"timeBlock": "morning", "title": "Essay"}]))


class TestHuggingFaceGenerator:
    def test_missing_api_key(self, tasks):
        session = mock_session()
        generator = HuggingFaceGenerator(api_key="", session=session)
        with pytest.raises(GenerationError, match="API key"):
            generator.generate(tasks)
        session.post.assert_not_called()

    def test_posts_prompt_with_auth(self, tasks):
        payload = [{"generated_text": model_output([
            {"timeBlock": "09:00-10:30", "title": "Essay", "difficulty": "Hard", "priority": 3},
        ])}]
        session = mock_session(payload=payload)
        generator = HuggingFaceGenerator(api_key="hf_test", model="my-model", timeout=5, session=session)

        blocks = generator.generate(tasks)

        assert len(blocks) == 1
        args, kwargs = session.post.call_args
        assert args[0].endswith("/models/my-model")
        assert kwargs["headers"]["Authorization"] == "Bearer hf_test"
        assert kwargs["timeout"] == 5
        assert "Essay" in kwargs["json"]["inputs"]

    def test_http_error(self, tasks):
        generator = HuggingFaceGenerator(api_key="hf_test", session=mock_session(status=503))
        with pytest.raises(GenerationError, match="503"):
            generator.generate(tasks)

    def test_timeout(self, tasks):
        session = mock_session(exc=requests.Timeout("read timed out"))
        generator = HuggingFaceGenerator(api_key="hf_test", session=session)
        with pytest.raises(GenerationError, match="timed out"):
            generator.generate(tasks)

    def test_non_json_body(self, tasks):
        session = mock_session()
        session.post.return_value.json.side_effect = ValueError("no json")
        generator = HuggingFaceGenerator(api_key="hf_test", session=session)
        with pytest.raises(GenerationError, match="non-JSON"):
            generator.generate(tasks)

    def test_unexpected_payload_shape(self, tasks):
        generator = HuggingFaceGenerator(api_key="hf_test", session=mock_session(payload={"error": "loading"}))
        with pytest.raises(GenerationError):
            generator.generate(tasks)
