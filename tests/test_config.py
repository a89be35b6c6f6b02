from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from coreason_playground.config import PlaygroundConfig
from coreason_playground.models import GatewayConfig


def test_defaults() -> None:
    with patch.dict("os.environ", {}, clear=True):
        config = PlaygroundConfig()

    assert config.runtime == "local"
    assert config.initial_file == "main.py"
    assert config.default_extension == ".py"
    assert config.allowed_packages == set()
    assert config.execution_timeout is None
    assert config.settings_key == "pyeditor-settings"


def test_environment_overrides() -> None:
    env = {
        "COREASON_PLAYGROUND_RUNTIME": "docker",
        "COREASON_PLAYGROUND_EXECUTION_TIMEOUT": "2.5",
        "COREASON_PLAYGROUND_EAGER_PACKAGES": '["numpy", "pandas"]',
        "COREASON_PLAYGROUND_SETTINGS_PATH": "/tmp/playground.json",
    }
    with patch.dict("os.environ", env, clear=True):
        config = PlaygroundConfig()

    assert config.runtime == "docker"
    assert config.execution_timeout == 2.5
    assert config.eager_packages == ["numpy", "pandas"]
    assert config.settings_path == Path("/tmp/playground.json")


def test_invalid_runtime_rejected() -> None:
    with pytest.raises(ValidationError):
        PlaygroundConfig(runtime="e2b")  # type: ignore[arg-type]


def test_gateway_config_copies_packages() -> None:
    config = PlaygroundConfig(package_index_url="https://mirror.example/simple", eager_packages=["numpy"])

    gateway_config = config.gateway_config()

    assert gateway_config == GatewayConfig(package_index_url="https://mirror.example/simple", eager_packages=["numpy"])
    gateway_config.eager_packages.append("pandas")
    assert config.eager_packages == ["numpy"]
