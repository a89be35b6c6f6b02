import json
from pathlib import Path

from coreason_playground.models import EditorSettings
from coreason_playground.settings import THEMES, SettingsStore, next_theme


def test_load_missing_file_returns_defaults(settings_path: Path) -> None:
    assert SettingsStore(settings_path).load() == EditorSettings()


def test_save_writes_camel_case_under_key(settings_path: Path) -> None:
    store = SettingsStore(settings_path)
    store.save(EditorSettings(theme="light", font_size=16))

    data = json.loads(settings_path.read_text())
    assert data["pyeditor-settings"]["theme"] == "light"
    assert data["pyeditor-settings"]["fontSize"] == 16
    assert "font_size" not in data["pyeditor-settings"]


def test_save_keeps_other_namespaces(settings_path: Path) -> None:
    settings_path.write_text(json.dumps({"other-app": {"x": 1}}))

    SettingsStore(settings_path).save(EditorSettings())

    data = json.loads(settings_path.read_text())
    assert data["other-app"] == {"x": 1}
    assert "pyeditor-settings" in data


def test_save_creates_parent_directories(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "settings.json"
    SettingsStore(path).save(EditorSettings())
    assert path.exists()


def test_load_merges_partial_record_over_defaults(settings_path: Path) -> None:
    settings_path.write_text(json.dumps({"pyeditor-settings": {"wordWrap": True}}))

    settings = SettingsStore(settings_path).load()

    assert settings.word_wrap is True
    assert settings.theme == "dark"
    assert settings.font_size == 14


def test_round_trip_with_custom_key(settings_path: Path) -> None:
    store = SettingsStore(settings_path, key="custom")
    store.save(EditorSettings(minimap=True, font_family="Fira Code"))

    loaded = store.load()

    assert loaded.minimap is True
    assert loaded.font_family == "Fira Code"
    assert SettingsStore(settings_path).load() == EditorSettings()


def test_load_corrupt_file_returns_defaults(settings_path: Path) -> None:
    settings_path.write_text("{not json")
    assert SettingsStore(settings_path).load() == EditorSettings()


def test_load_non_object_file_returns_defaults(settings_path: Path) -> None:
    settings_path.write_text("[1, 2, 3]")
    assert SettingsStore(settings_path).load() == EditorSettings()


def test_load_invalid_values_returns_defaults(settings_path: Path) -> None:
    settings_path.write_text(json.dumps({"pyeditor-settings": {"theme": "solarized"}}))
    assert SettingsStore(settings_path).load() == EditorSettings()


def test_next_theme_cycles() -> None:
    assert next_theme("dark") == "light"
    assert next_theme("light") == "monokai"
    assert next_theme("monokai") == "dark"


def test_next_theme_unknown_starts_over() -> None:
    assert next_theme("solarized") == THEMES[0]
