"""Helpers for locating the inlet advisory service credentials."""

from __future__ import annotations

import os
from pathlib import Path

KEY_FILENAME = "ADVISORY_API_KEY.txt"
KEY_ENV_VARS: tuple[str, ...] = ("INLET_ADVISORY_API_KEY", "GEMINI_API_KEY")
MODEL_ENV_VAR = "INLET_ADVISORY_MODEL"
DEFAULT_MODEL = "gemini-2.0-flash"
API_ROOT = "https://generativelanguage.googleapis.com/v1beta/models"


def api_key_file() -> Path:
    """
    Return the path to the file that stores the advisory API key.

    This file is expected to be at the root of the project, two levels up
    from this source file.
    """
    return Path(__file__).resolve().parents[2] / KEY_FILENAME


def read_api_key_file() -> str | None:
    """
    Read and return the key stored in ADVISORY_API_KEY.txt.

    Returns:
        The key if the file exists and is not empty, otherwise None.
    """
    path_file: Path = api_key_file()
    if not path_file.exists():
        return None
    text: str = path_file.read_text(encoding="utf-8").strip().strip('"')
    return text or None


def save_api_key(key: str) -> Path:
    """
    Persist an advisory API key to ADVISORY_API_KEY.txt.

    Returns:
        The path to the file that was written.
    """
    destination: Path = api_key_file()
    destination.write_text(key.strip(), encoding="utf-8")
    return destination


def resolve_api_key() -> str | None:
    """
    Resolve the advisory API key from various sources in order of precedence.

    The resolution order is:
    1. `INLET_ADVISORY_API_KEY` or `GEMINI_API_KEY` environment variables.
    2. The key stored in the `ADVISORY_API_KEY.txt` file.

    Returns:
        The key, or None when no source provides one.
    """
    for name in KEY_ENV_VARS:
        value: str | None = os.environ.get(name)
        if value and value.strip():
            return value.strip()
    return read_api_key_file()


def resolve_model() -> str:
    """Return the model name, honouring the `INLET_ADVISORY_MODEL` override."""

    return os.environ.get(MODEL_ENV_VAR, "").strip() or DEFAULT_MODEL


def endpoint_url(model: str) -> str:
    return f"{API_ROOT}/{model}:generateContent"


__all__: list[str] = [
    "DEFAULT_MODEL",
    "KEY_ENV_VARS",
    "KEY_FILENAME",
    "MODEL_ENV_VAR",
    "api_key_file",
    "endpoint_url",
    "read_api_key_file",
    "resolve_api_key",
    "resolve_model",
    "save_api_key",
]
