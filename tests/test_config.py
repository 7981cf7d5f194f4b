"""Tests for configuration loading."""

import pytest

from studybuddy.config import Config, load_config


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.delenv("HUGGING_FACE_API_KEY", raising=False)
    monkeypatch.delenv("HF_API_KEY", raising=False)


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "missing.conf")
    assert config == Config()
    assert config.blocked_words == ["spam", "fake", "scam"]


def test_parses_values(tmp_path):
    conf = tmp_path / "studybuddy.conf"
    conf.write_text(
        """
# StudyBuddy settings
DATA_DIR="~/study data"  # quoted, with comment
HF_API_KEY=hf_abc123
HF_MODEL='gpt2'
HF_TIMEOUT=12
BLOCKED_WORDS=spam, lottery ,
not a setting
"""
    )

    config = load_config(conf)

    assert config.data_dir == "~/study data"
    assert config.hf_api_key == "hf_abc123"
    assert config.hf_model == "gpt2"
    assert config.hf_timeout == 12
    assert config.blocked_words == ["spam", "lottery"]


def test_unquoted_inline_comment(tmp_path):
    conf = tmp_path / "studybuddy.conf"
    conf.write_text("HF_MODEL=distilgpt2 # small model\n")
    assert load_config(conf).hf_model == "distilgpt2"


def test_invalid_timeout_keeps_default(tmp_path):
    conf = tmp_path / "studybuddy.conf"
    conf.write_text("HF_TIMEOUT=soon\n")
    assert load_config(conf).hf_timeout == 30


def test_api_key_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("HF_API_KEY", "hf_env")
    assert load_config(tmp_path / "missing.conf").hf_api_key == "hf_env"


def test_preferred_environment_variable(tmp_path, monkeypatch):
    monkeypatch.setenv("HF_API_KEY", "hf_env")
    monkeypatch.setenv("HUGGING_FACE_API_KEY", "hf_preferred")
    assert load_config(tmp_path / "missing.conf").hf_api_key == "hf_preferred"


def test_file_key_wins_over_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("HF_API_KEY", "hf_env")
    conf = tmp_path / "studybuddy.conf"
    conf.write_text("HF_API_KEY=hf_file\n")
    assert load_config(conf).hf_api_key == "hf_file"
