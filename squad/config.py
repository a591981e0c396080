"""Squad configuration: agent models, loop limits and export path.

API keys come from the project's .env. Settings come from config.yaml, or
from the YAML file named by SQUAD_CONFIG; keys a file leaves out keep the
defaults below. Loaded once at import time.
"""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

DEFAULTS = {
    "researcher_model": "gemini-2.5-pro",
    "judge_model": "claude-sonnet-4-5",
    "writer_model": "gemini-2.5-pro",
    "max_iterations": 3,
    "pacing_seconds": 0.0,
    "output_path": "./output/course.md",
}


def load_config(path: str | Path | None = None) -> dict:
    """Read a YAML settings file on top of DEFAULTS."""
    path = Path(path or os.environ.get("SQUAD_CONFIG") or DEFAULT_CONFIG_PATH)
    loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(loaded).__name__}.")
    return {**DEFAULTS, **loaded}


_config = load_config()


def get_config() -> dict:
    return _config
