"""Configuration management for StudyBuddy."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.tasks import DEFAULT_BLOCKED_WORDS

logger = logging.getLogger(__name__)

STUDYBUDDY_HOME = Path(os.environ.get("STUDYBUDDY_HOME", Path.home() / "studybuddy"))
CONFIG_FILE = STUDYBUDDY_HOME / "config" / "studybuddy.conf"
DATA_DIR = STUDYBUDDY_HOME / "data"


@dataclass
class Config:
    """StudyBuddy configuration."""

    data_dir: str = ""
    # Hugging Face schedule generation; empty key means always use the packer
    hf_api_key: str = ""
    hf_model: str = "distilgpt2"
    hf_timeout: int = 30
    blocked_words: list[str] = field(default_factory=lambda: list(DEFAULT_BLOCKED_WORDS))


def _unquote(value: str) -> str:
    """Strip quotes from a value, or an inline comment from an unquoted one."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from studybuddy.conf, then fill the API key from the environment."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "data_dir":
                    config.data_dir = value
                case "hf_api_key":
                    config.hf_api_key = value
                case "hf_model":
                    config.hf_model = value
                case "hf_timeout":
                    try:
                        config.hf_timeout = int(value)
                    except ValueError:
                        logger.warning(f"Ignoring invalid HF_TIMEOUT: {value!r}")
                case "blocked_words":
                    config.blocked_words = [w.strip() for w in value.split(",") if w.strip()]
                case _:
                    logger.debug(f"Unknown config key: {key}")

    if not config.hf_api_key:
        config.hf_api_key = os.environ.get("HUGGING_FACE_API_KEY") or os.environ.get("HF_API_KEY", "")

    return config
