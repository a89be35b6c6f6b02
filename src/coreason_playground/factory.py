# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

from coreason_playground.config import PlaygroundConfig
from coreason_playground.gateway import RuntimeGateway
from coreason_playground.gateways.docker import DockerGateway
from coreason_playground.gateways.local import LocalGateway


class GatewayFactory:
    """
    Factory to create RuntimeGateway instances based on configuration.
    """

    @staticmethod
    def get_gateway(config: PlaygroundConfig) -> RuntimeGateway:
        """
        Returns an instance of the configured RuntimeGateway.
        """
        if config.runtime == "local":
            return LocalGateway(allowed_packages=config.allowed_packages)
        elif config.runtime == "docker":
            return DockerGateway(
                image=config.docker_image,
                allowed_packages=config.allowed_packages,
                timeout=config.execution_timeout,
            )
        else:
            # This should be unreachable due to Pydantic validation, but for safety:
            raise ValueError(f"Unknown runtime: {config.runtime}")  # pragma: no cover
