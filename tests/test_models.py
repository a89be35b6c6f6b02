from datetime import datetime

import pytest
from pydantic import ValidationError

from coreason_playground.models import (
    Channel,
    EditorSettings,
    ExecutionResult,
    File,
    GatewayResult,
    OutputEntry,
    RunState,
    Severity,
)


def test_file_modified_tracking() -> None:
    file = File(name="main.py")
    assert file.is_modified is False

    file.content = "x = 1"
    assert file.is_modified is True


def test_results_are_frozen() -> None:
    result = ExecutionResult(success=True, stdout="", stderr="", duration_ms=0.0)
    with pytest.raises(ValidationError):
        result.success = False  # type: ignore[misc]

    with pytest.raises(ValidationError):
        GatewayResult(success=True).stdout = "x"  # type: ignore[misc]


def test_output_entry_channel_from_string() -> None:
    entry = OutputEntry(timestamp=datetime(2025, 1, 1), channel="terminal", severity="warning", text="t")

    assert entry.channel is Channel.TERMINAL
    assert entry.severity is Severity.WARNING


def test_run_state_values() -> None:
    assert [s.value for s in RunState] == ["idle", "running", "succeeded", "failed", "stopped"]


def test_editor_settings_aliases() -> None:
    settings = EditorSettings.model_validate({"fontSize": 20, "autoSave": False})

    assert settings.font_size == 20
    assert settings.auto_save is False
    assert EditorSettings(font_family="Mono").model_dump(by_alias=True)["fontFamily"] == "Mono"


def test_editor_settings_rejects_unknown_theme() -> None:
    with pytest.raises(ValidationError):
        EditorSettings(theme="solarized")  # type: ignore[arg-type]
