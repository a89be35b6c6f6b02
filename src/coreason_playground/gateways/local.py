# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

import contextlib
import importlib
import io
import sys
import traceback
from typing import Any

import anyio
from loguru import logger

from coreason_playground.exceptions import InitError, PackageInstallError, RuntimeNotReadyError
from coreason_playground.gateway import RuntimeGateway, check_requirement
from coreason_playground.models import GatewayConfig, GatewayResult

_BOOTSTRAP = "import sys\nimport io\nimport traceback\n"


class LocalGateway(RuntimeGateway):
    """
    In-process implementation of the RuntimeGateway.

    Code runs with `exec` in a single `__main__` namespace that persists across
    runs, on a worker thread so the event loop is not blocked. Runs are
    serialized; a cancelled run keeps its worker thread until the code returns.
    """

    def __init__(
        self,
        allowed_packages: set[str] | None = None,
        python_executable: str | None = None,
    ):
        self.allowed_packages = allowed_packages or set()
        self.python_executable = python_executable or sys.executable
        self.package_index_url: str | None = None
        self._namespace: dict[str, Any] | None = None
        self._lock = anyio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._namespace is not None

    async def initialize(self, config: GatewayConfig) -> None:
        """
        Boot the interpreter namespace and load eager packages.
        """
        if self._namespace is not None:
            return

        logger.info("Initializing local Python runtime")
        namespace: dict[str, Any] = {"__name__": "__main__"}
        try:
            await anyio.to_thread.run_sync(exec, _BOOTSTRAP, namespace)
        except Exception as e:
            logger.error(f"Failed to initialize local runtime: {e}")
            raise InitError(f"Failed to initialize local runtime: {e}") from e

        self.package_index_url = config.package_index_url
        self._namespace = namespace

        for package in config.eager_packages:
            try:
                await self.load_package(package)
            except PackageInstallError as e:
                # Eager packages are best-effort
                logger.warning(f"Eager package {package} failed to load: {e}")

        logger.info("Local Python runtime ready")

    async def run(self, code: str) -> GatewayResult:
        """
        Run code in the shared namespace and capture its output.
        """
        namespace = self._namespace
        if namespace is None:
            raise RuntimeNotReadyError("Local runtime not initialized")

        async with self._lock:
            return await anyio.to_thread.run_sync(self._run_sync, code, namespace)

    def _run_sync(self, code: str, namespace: dict[str, Any]) -> GatewayResult:
        stdout = io.StringIO()
        stderr = io.StringIO()
        success = True

        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            try:
                exec(compile(code, "<editor>", "exec"), namespace)
            except (Exception, SystemExit) as exc:
                success = False
                # Drop this frame so the trace starts at the user's code
                tb = exc.__traceback__.tb_next if exc.__traceback__ else None
                stderr.write("".join(traceback.format_exception(type(exc), exc, tb)))

        return GatewayResult(success=success, stdout=stdout.getvalue(), stderr=stderr.getvalue())

    async def load_package(self, name: str) -> None:
        """
        Install a package into the host interpreter with pip.
        """
        if self._namespace is None:
            raise RuntimeNotReadyError("Local runtime not initialized")

        requirement = check_requirement(name, self.allowed_packages)

        cmd = [self.python_executable, "-m", "pip", "install", "--quiet", str(requirement)]
        if self.package_index_url:
            cmd.extend(["--index-url", self.package_index_url])

        logger.info(f"Installing package {requirement} into local runtime")
        async with self._lock:
            try:
                result = await anyio.run_process(cmd, check=False)
            except OSError as e:
                raise PackageInstallError(f"Failed to launch pip for {name}: {e}") from e

        if result.returncode != 0:
            msg = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error(f"Failed to install {name}: {msg}")
            raise PackageInstallError(f"Failed to install package {name}: {msg}")

        importlib.invalidate_caches()

    async def shutdown(self) -> None:
        """
        Drop the interpreter namespace.
        """
        self._namespace = None
        logger.info("Local Python runtime shut down")
