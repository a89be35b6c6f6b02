from unittest.mock import patch

from coreason_playground.config import PlaygroundConfig
from coreason_playground.factory import GatewayFactory
from coreason_playground.gateway import RuntimeGateway
from coreason_playground.gateways.docker import DockerGateway
from coreason_playground.gateways.local import LocalGateway


def test_factory_returns_local_gateway() -> None:
    config = PlaygroundConfig(runtime="local", allowed_packages={"numpy"})
    gateway = GatewayFactory.get_gateway(config)

    assert isinstance(gateway, LocalGateway)
    assert isinstance(gateway, RuntimeGateway)
    assert gateway.allowed_packages == {"numpy"}


def test_factory_returns_docker_gateway() -> None:
    config = PlaygroundConfig(runtime="docker", docker_image="python:3.13-slim", execution_timeout=5.0)
    with patch("coreason_playground.gateways.docker.docker.from_env") as from_env:
        gateway = GatewayFactory.get_gateway(config)

    assert isinstance(gateway, DockerGateway)
    assert gateway.image == "python:3.13-slim"
    assert gateway.timeout == 5.0
    # The docker client is created lazily on initialize
    from_env.assert_not_called()
