# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from coreason_playground.models import EditorSettings

THEMES = ("dark", "light", "monokai")


def next_theme(theme: str) -> str:
    """Return the theme after the given one, cycling through THEMES."""
    try:
        index = THEMES.index(theme)
    except ValueError:
        return THEMES[0]
    return THEMES[(index + 1) % len(THEMES)]


class SettingsStore:
    """Namespaced key-value persistence for editor settings.

    The backing file holds a JSON object; settings live as a flat camelCase
    record under a single key so other namespaces can share the file.
    """

    def __init__(self, path: Path, key: str = "pyeditor-settings"):
        """Initializes the SettingsStore.

        Args:
            path: JSON file backing the store.
            key: Namespace key the settings record is stored under.
        """
        self.path = path
        self.key = key

    def _read_all(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Cannot read settings file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed settings file {self.path}")
            return {}
        return data

    def load(self) -> EditorSettings:
        """Load settings, merging stored values over the defaults.

        An absent key or unreadable file yields the defaults.
        """
        stored = self._read_all().get(self.key)
        if not isinstance(stored, dict):
            return EditorSettings()

        merged = EditorSettings().model_dump(by_alias=True)
        merged.update(stored)
        try:
            return EditorSettings.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Invalid stored settings under {self.key}, using defaults: {e}")
            return EditorSettings()

    def save(self, settings: EditorSettings) -> None:
        """Write settings under the namespace key, keeping other keys intact."""
        data = self._read_all()
        data[self.key] = settings.model_dump(by_alias=True)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
