# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

import ast
import asyncio
import time
from collections.abc import Callable

from loguru import logger

from coreason_playground.exceptions import (
    AlreadyRunningError,
    EmptyInputError,
    InitError,
    RuntimeNotReadyError,
)
from coreason_playground.gateway import RuntimeGateway
from coreason_playground.models import (
    Channel,
    ExecutionResult,
    GatewayConfig,
    RunOutcome,
    RunState,
    Severity,
)
from coreason_playground.output import OutputSink

_REPL_VALUE = "__repl_value__"


def as_repl_source(command: str) -> str:
    """Wrap a bare expression so its value is echoed like an interactive prompt.

    The expression sits on its own line so a trailing comment cannot swallow
    the closing paren, and its value is bound to a private name that is
    deleted afterwards. Statements are returned unchanged.
    """
    try:
        ast.parse(command, mode="eval")
    except SyntaxError:
        return command
    return (
        f"{_REPL_VALUE} = (\n{command}\n)\n"
        "try:\n"
        f"    if {_REPL_VALUE} is not None:\n"
        f"        print(repr({_REPL_VALUE}))\n"
        "finally:\n"
        f"    del {_REPL_VALUE}\n"
    )


class ExecutionSession:
    """Runs submitted code against a RuntimeGateway, one run at a time.

    States move from IDLE to RUNNING on the first accepted submit and from
    RUNNING to SUCCEEDED, FAILED or STOPPED. Terminal states accept the next
    submit directly. Every submit gets a new generation id; a result that
    arrives for any generation other than the active one is discarded.
    """

    def __init__(
        self,
        gateway: RuntimeGateway,
        sink: OutputSink,
        timer: Callable[[], float] = time.perf_counter,
    ):
        """Initializes the ExecutionSession.

        Args:
            gateway: The interpreter to execute against.
            sink: Where run output is recorded.
            timer: Monotonic clock in seconds used to measure run duration.
        """
        self.gateway = gateway
        self.sink = sink
        self._timer = timer
        self._state = RunState.IDLE
        self._generation = 0
        self._active_generation: int | None = None
        self._init_failed = False
        self._init_lock = asyncio.Lock()
        self.last_result: ExecutionResult | None = None
        self.installed_packages: list[str] = []

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_ready(self) -> bool:
        return self.gateway.is_ready and not self._init_failed

    @property
    def status_message(self) -> str:
        if self._state is RunState.RUNNING:
            return "Running code..."
        if self._state is RunState.SUCCEEDED and self.last_result is not None:
            return f"Execution completed in {self.last_result.duration_ms:.0f}ms"
        if self._state is RunState.FAILED:
            return "Execution failed"
        if self._state is RunState.STOPPED:
            return "Execution stopped"
        return "Ready" if self.is_ready else "Loading"

    async def initialize(self, config: GatewayConfig) -> None:
        """Bring up the gateway.

        Idempotent once ready. A failure leaves the session refusing every
        submit until initialize is called again and succeeds.

        Raises:
            InitError: If the gateway fails to initialize.
        """
        async with self._init_lock:
            if self.is_ready:
                return
            try:
                await self.gateway.initialize(config)
            except Exception as e:
                self._init_failed = True
                logger.error(f"Runtime initialization failed: {e}")
                self.sink.append(
                    Channel.CONSOLE,
                    Severity.ERROR,
                    f"Failed to load Python environment: {e}\n\nReload to try again.",
                )
                if isinstance(e, InitError):
                    raise
                raise InitError(str(e)) from e

            self._init_failed = False
            logger.info("Runtime ready")
            self.sink.append(
                Channel.CONSOLE,
                Severity.SUCCESS,
                "Python environment loaded successfully!\nReady to run Python code",
            )

    async def submit(self, code: str, file_name: str | None = None) -> RunOutcome:
        """Run code and record the outcome.

        Args:
            code: The source to execute.
            file_name: Optional name of the file the code came from, for logging.

        Returns:
            RunOutcome: The generation, resulting state and recorded result.

        Raises:
            RuntimeNotReadyError: If the gateway is not initialized.
            AlreadyRunningError: If another run is in flight. Nothing is recorded.
            EmptyInputError: If the code is blank.
        """
        if not self.is_ready:
            self.sink.append(Channel.CONSOLE, Severity.ERROR, "Python environment not loaded yet. Please wait...")
            raise RuntimeNotReadyError("Runtime is not initialized")
        if self._state is RunState.RUNNING:
            logger.warning(f"Submit rejected, generation {self._generation} still running")
            raise AlreadyRunningError("A run is already in progress")
        if not code.strip():
            self.sink.append(Channel.CONSOLE, Severity.WARNING, "No code to run")
            raise EmptyInputError("No code to run")

        self._generation += 1
        generation = self._generation
        self._active_generation = generation
        self._state = RunState.RUNNING
        logger.info(f"Executing generation {generation}" + (f" from {file_name}" if file_name else ""))
        self.sink.append(Channel.CONSOLE, Severity.INFO, "Executing code...")

        start = self._timer()
        try:
            gateway_result = await self.gateway.run(code)
        except asyncio.CancelledError:
            # The awaiting task was cancelled; leave the session able to accept the next submit
            if generation == self._active_generation:
                logger.info(f"Generation {generation} cancelled while awaiting the gateway")
                self._active_generation = None
                self._state = RunState.STOPPED
                self.sink.append(Channel.CONSOLE, Severity.WARNING, "Execution stopped by user")
            raise
        except Exception as e:
            if generation != self._active_generation:
                logger.info(f"Discarding failure of superseded generation {generation}: {e}")
                return RunOutcome(generation=generation, state=self._state, discarded=True)
            logger.error(f"Gateway failed during generation {generation}: {e}")
            self._active_generation = None
            self._state = RunState.FAILED
            self.sink.append(Channel.CONSOLE, Severity.ERROR, f"Runtime Error: {e}")
            return RunOutcome(generation=generation, state=self._state)

        if generation != self._active_generation:
            logger.info(f"Discarding result of superseded generation {generation}")
            return RunOutcome(generation=generation, state=self._state, discarded=True)

        result = ExecutionResult(
            success=gateway_result.success,
            stdout=gateway_result.stdout,
            stderr=gateway_result.stderr,
            duration_ms=(self._timer() - start) * 1000,
        )
        self._active_generation = None
        self.last_result = result

        if result.success:
            self._state = RunState.SUCCEEDED
            if result.stdout:
                self.sink.append(Channel.CONSOLE, Severity.SUCCESS, result.stdout, result)
            if result.stderr:
                # Diagnostic text on a successful run is not a failure
                self.sink.append(Channel.CONSOLE, Severity.WARNING, result.stderr, result)
            if not result.stdout and not result.stderr:
                self.sink.append(Channel.CONSOLE, Severity.SUCCESS, "Code executed successfully (no output)", result)
        else:
            self._state = RunState.FAILED
            if result.stdout:
                self.sink.append(Channel.CONSOLE, Severity.INFO, result.stdout, result)
            self.sink.append(Channel.CONSOLE, Severity.ERROR, f"Error:\n{result.stderr}", result)

        logger.info(f"Generation {generation} finished as {self._state.value} in {result.duration_ms:.1f}ms")
        return RunOutcome(generation=generation, state=self._state, result=result)

    def cancel(self) -> bool:
        """Stop waiting for the current run.

        Advisory only: code already executing inside the gateway keeps running,
        but its result is ignored when it arrives.

        Returns:
            bool: False if no run was in progress.
        """
        if self._state is not RunState.RUNNING:
            logger.debug("Cancel ignored, nothing is running")
            return False

        logger.info(f"Cancelling generation {self._active_generation}")
        self._active_generation = None
        self._state = RunState.STOPPED
        self.sink.append(Channel.CONSOLE, Severity.WARNING, "Execution stopped by user")
        return True

    async def load_package(self, name: str) -> bool:
        """Load a package into the gateway. Best-effort: RunState is never touched.

        Returns:
            bool: True if the package was loaded.

        Raises:
            RuntimeNotReadyError: If the gateway is not initialized.
        """
        name = name.strip()
        if not name:
            return False
        if not self.is_ready:
            self.sink.append(Channel.CONSOLE, Severity.ERROR, "Python environment not loaded yet")
            raise RuntimeNotReadyError("Runtime is not initialized")

        self.sink.append(Channel.CONSOLE, Severity.INFO, f"Installing {name}...")
        try:
            await self.gateway.load_package(name)
        except Exception as e:
            logger.warning(f"Package {name} failed to load: {e}")
            self.sink.append(Channel.CONSOLE, Severity.ERROR, f"Package installation error: {e}")
            return False

        if name not in self.installed_packages:
            self.installed_packages.append(name)
        self.sink.append(Channel.CONSOLE, Severity.SUCCESS, f"{name} installed successfully")
        return True

    async def run_terminal(self, command: str) -> bool:
        """Evaluate one interactive command and echo it to the terminal channel.

        Returns:
            bool: True if the command ran without error.
        """
        if not self.is_ready:
            self.sink.append(Channel.TERMINAL, Severity.ERROR, "Python environment not loaded")
            return False
        if not command.strip():
            return False

        self.sink.append(Channel.TERMINAL, Severity.INFO, f">>> {command}")
        try:
            result = await self.gateway.run(as_repl_source(command))
        except Exception as e:
            logger.error(f"Terminal command failed in gateway: {e}")
            self.sink.append(Channel.TERMINAL, Severity.ERROR, str(e))
            return False

        if result.stdout:
            self.sink.append(Channel.TERMINAL, Severity.SUCCESS, result.stdout.rstrip("\n"))
        if not result.success:
            self.sink.append(Channel.TERMINAL, Severity.ERROR, result.stderr.rstrip("\n"))
        elif result.stderr:
            self.sink.append(Channel.TERMINAL, Severity.WARNING, result.stderr.rstrip("\n"))
        return result.success
