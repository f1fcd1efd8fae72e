"""REPL settings loaded from JSON and deep-merged over defaults.

Resolution order, later wins:
    defaults < settings file < explicit overrides (CLI)

The settings file is ``~/.pi/repl.json`` unless ``PI_REPL_SETTINGS`` or an
explicit path says otherwise. A missing file is not an error; an unreadable
or malformed one is logged and ignored.
"""

from __future__ import annotations

import json
import logging
import os
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pi.repl.keybindings import ReplKeybindingsConfig
from pi.repl.theme import ReplTheme

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
SETTINGS_FILE_NAME = "repl.json"
SETTINGS_ENV_VAR = "PI_REPL_SETTINGS"


def _settings_defaults() -> dict[str, Any]:
    return {
        "inputPrompt": "In: ",
        "continuationPrompt": "..: ",
        "highlight": True,
        "lexer": "python",
        "historySize": 1000,
        "colors": {
            "evaluation": "white",
            "ok": "blue",
            "warning": "cyan",
            "rawOutput": "red",
            "shellOutput": "yellow",
            "error": "red",
            "customDefault": "white",
            "inputPrompt": "yellow",
            "continuationPrompt": "yellow",
            "diagnostic": "bright_red",
        },
        "keybindings": {},
    }


def deep_merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into *base*.

    Nested dicts merge key by key; any other value replaces the base value.
    ``None`` overrides are skipped.
    """
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value)
        else:
            result[key] = value
    return result


def _camel_to_snake(name: str) -> str:
    return "".join("_" + c.lower() if c.isupper() else c for c in name)


@dataclass
class ReplSettings:
    input_prompt: str = "In: "
    continuation_prompt: str = "..: "
    highlight: bool = True
    lexer: str = "python"
    history_size: int = 1000
    theme: ReplTheme = field(default_factory=ReplTheme)
    keybindings: ReplKeybindingsConfig = field(default_factory=dict)
    source: str | None = None

    @property
    def input_start_col(self) -> int:
        """Column where input text begins, right after the prompt marker."""
        return len(self.input_prompt)

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, source: str | None = None) -> ReplSettings:
        merged = deep_merge_settings(_settings_defaults(), data)
        colors = {_camel_to_snake(k): v for k, v in merged["colors"].items()}
        continuation = merged["continuationPrompt"]
        prompt = merged["inputPrompt"]
        if len(continuation) != len(prompt):
            # Wrapped rows must line up with the first input row.
            continuation = continuation[: len(prompt)].ljust(len(prompt))
        return cls(
            input_prompt=prompt,
            continuation_prompt=continuation,
            highlight=bool(merged["highlight"]),
            lexer=merged["lexer"],
            history_size=int(merged["historySize"]),
            theme=ReplTheme.from_dict(colors),
            keybindings=deepcopy(merged["keybindings"]),
            source=source,
        )

    @classmethod
    def load(
        cls,
        path: str | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> ReplSettings:
        """Load settings from *path* (or the default location) plus *overrides*."""
        settings_path = path or os.environ.get(SETTINGS_ENV_VAR) or default_settings_path()
        data, error = _load_from_file(settings_path)
        if error is not None:
            logger.warning("Ignoring settings file %s: %s", settings_path, error)
        data = deep_merge_settings(data, overrides or {})
        try:
            return cls.from_dict(data, source=settings_path)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Invalid settings in %s: %s; using defaults", settings_path, exc)
            return cls.from_dict(overrides or {}, source=None)


def default_settings_dir() -> str:
    """Default settings directory (~/.pi)."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def default_settings_path() -> str:
    return os.path.join(default_settings_dir(), SETTINGS_FILE_NAME)


def _load_from_file(path: str) -> tuple[dict[str, Any], Exception | None]:
    """Load settings from a JSON file. Returns (settings, error)."""
    if not os.path.exists(path):
        return {}, None
    try:
        content = Path(path).read_text(encoding="utf-8")
        settings = json.loads(content)
    except (OSError, json.JSONDecodeError) as e:
        return {}, e
    if not isinstance(settings, dict):
        return {}, ValueError("top-level JSON value must be an object")
    return settings, None
