import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from coreason_playground.config import PlaygroundConfig
from coreason_playground.editor import EditorState
from coreason_playground.gateway import RuntimeGateway
from coreason_playground.models import GatewayConfig, GatewayResult
from coreason_playground.output import OutputSink
from coreason_playground.session import ExecutionSession
from coreason_playground.settings import SettingsStore


class StubGateway(RuntimeGateway):
    """Gateway double whose results are scripted per code string.

    When an event is registered for a code string, `run` blocks on it, which
    lets a test control the order in which runs resolve.
    """

    def __init__(self) -> None:
        self.ready = False
        self.init_error: Exception | None = None
        self.results: dict[str, GatewayResult] = {}
        self.errors: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.package_error: Exception | None = None
        self.calls: list[str] = []
        self.packages: list[str] = []
        self.init_calls = 0
        self.shutdown_calls = 0

    @property
    def is_ready(self) -> bool:
        return self.ready

    async def initialize(self, config: GatewayConfig) -> None:
        self.init_calls += 1
        if self.init_error is not None:
            raise self.init_error
        self.ready = True

    async def run(self, code: str) -> GatewayResult:
        self.calls.append(code)
        gate = self.gates.get(code)
        if gate is not None:
            await gate.wait()
        if code in self.errors:
            raise self.errors[code]
        return self.results.get(code, GatewayResult(success=True, stdout="", stderr=""))

    async def load_package(self, name: str) -> None:
        if self.package_error is not None:
            raise self.package_error
        self.packages.append(name)

    async def shutdown(self) -> None:
        self.shutdown_calls += 1
        self.ready = False


@pytest.fixture
def fixed_clock() -> Any:
    return lambda: datetime(2025, 1, 1, 12, 30, 45)


@pytest.fixture
def sink(fixed_clock: Any) -> OutputSink:
    return OutputSink(clock=fixed_clock)


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def ready_gateway(gateway: StubGateway) -> StubGateway:
    gateway.ready = True
    return gateway


@pytest.fixture
def session(ready_gateway: StubGateway, sink: OutputSink) -> ExecutionSession:
    return ExecutionSession(ready_gateway, sink)


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.json"


@pytest.fixture
def editor(gateway: StubGateway, sink: OutputSink, settings_path: Path) -> EditorState:
    config = PlaygroundConfig(settings_path=settings_path)
    return EditorState(
        config=config,
        gateway=gateway,
        settings_store=SettingsStore(settings_path),
        sink=sink,
    )
