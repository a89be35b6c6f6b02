# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from coreason_playground.models import GatewayConfig


class PlaygroundConfig(BaseSettings):
    """
    Configuration for the playground host and its runtime gateway.
    """

    runtime: Literal["local", "docker"] = "local"

    # Gateway initialization
    package_index_url: str | None = None
    eager_packages: list[str] = []
    allowed_packages: set[str] = set()  # Empty means no allowlist
    docker_image: str = "python:3.12-slim"
    execution_timeout: float | None = None  # Enforced by the docker gateway only

    # File store
    initial_file: str = "main.py"
    default_extension: str = ".py"

    # Settings persistence
    settings_path: Path = Path.home() / ".config" / "coreason-playground" / "settings.json"
    settings_key: str = "pyeditor-settings"

    model_config = SettingsConfigDict(
        env_prefix="COREASON_PLAYGROUND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def gateway_config(self) -> GatewayConfig:
        """Build the parameters passed to RuntimeGateway.initialize."""
        return GatewayConfig(
            package_index_url=self.package_index_url,
            eager_packages=list(self.eager_packages),
        )
