# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

import asyncio
import io
import platform
import subprocess
import sys
import tarfile
import tempfile
from pathlib import Path

import docker
from docker.errors import DockerException
from docker.models.containers import Container
from loguru import logger

from coreason_playground.exceptions import InitError, PackageInstallError, RuntimeNotReadyError
from coreason_playground.gateway import RuntimeGateway, check_requirement
from coreason_playground.models import GatewayConfig, GatewayResult


class DockerGateway(RuntimeGateway):
    """
    Docker-based implementation of the RuntimeGateway.

    Every run is a fresh `python -c` process in a long-lived container without
    network access, so globals do not persist between runs. Packages are
    downloaded on the host and installed offline in the container.
    """

    def __init__(
        self,
        image: str = "python:3.12-slim",
        cpu_limit: float = 1.0,
        mem_limit: str = "512m",
        allowed_packages: set[str] | None = None,
        timeout: float | None = None,
    ):
        self.image = image
        self.cpu_limit = cpu_limit
        self.mem_limit = mem_limit
        self.allowed_packages = allowed_packages or set()
        self.timeout = timeout
        self.package_index_url: str | None = None
        self.client: docker.DockerClient | None = None
        self.container: Container | None = None
        self.work_dir = "/home/user"

    @property
    def is_ready(self) -> bool:
        return self.container is not None

    async def initialize(self, config: GatewayConfig) -> None:
        """
        Boot the container and load eager packages.
        """
        if self.container is not None:
            return

        logger.info(f"Starting Docker runtime with image {self.image}")
        try:
            if self.client is None:
                self.client = docker.from_env()
            self.container = self.client.containers.run(
                self.image,
                command="tail -f /dev/null",
                detach=True,
                network_mode="none",
                mem_limit=self.mem_limit,
                nano_cpus=int(self.cpu_limit * 1e9),
                remove=True,
                working_dir=self.work_dir,
            )
            # Ensure working directory exists
            self.container.exec_run(f"mkdir -p {self.work_dir}")
        except DockerException as e:
            logger.error(f"Failed to start Docker runtime: {e}")
            raise InitError(f"Failed to start Docker runtime: {e}") from e

        self.package_index_url = config.package_index_url
        logger.info(f"Docker runtime started: {self.container.short_id}")

        for package in config.eager_packages:
            try:
                await self.load_package(package)
            except PackageInstallError as e:
                logger.warning(f"Eager package {package} failed to load: {e}")

    async def run(self, code: str) -> GatewayResult:
        """
        Run code in the container and capture output.
        """
        container = self.container
        if container is None:
            raise RuntimeNotReadyError("Docker runtime not started")

        logger.info(f"Executing code in container {container.short_id}")
        cmd = ["python", "-c", code]

        try:
            call = asyncio.to_thread(container.exec_run, cmd, demux=True, workdir=self.work_dir)
            if self.timeout is None:
                exit_code, output = await call
            else:
                try:
                    exit_code, output = await asyncio.wait_for(call, timeout=self.timeout)
                except asyncio.TimeoutError as e:
                    logger.warning(
                        f"Execution timed out ({self.timeout}s). "
                        f"Restarting container {container.short_id} to cleanup process."
                    )
                    await asyncio.to_thread(container.restart)
                    raise TimeoutError(f"Execution exceeded {self.timeout} seconds limit.") from e
        except DockerException as e:
            logger.error(f"Execution failed: {e}")
            raise

        stdout_bytes, stderr_bytes = output if output else (None, None)
        return GatewayResult(
            success=exit_code == 0,
            stdout=stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else "",
            stderr=stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else "",
        )

    def _download_and_package(self, requirement: str) -> bytes:
        """
        Download package wheels and package them into a tar stream.
        Runs synchronously (CPU/IO bound).
        """
        with tempfile.TemporaryDirectory() as temp_dir_str:
            temp_dir = Path(temp_dir_str)
            cmd = [
                sys.executable,
                "-m",
                "pip",
                "download",
                requirement,
                "--dest",
                str(temp_dir),
                "--only-binary=:all:",
            ]
            if self.package_index_url:
                cmd.extend(["--index-url", self.package_index_url])

            # Container is manylinux; force Linux wheels from other hosts
            if platform.system().lower() != "linux":
                machine = platform.machine().lower()
                if "arm" in machine or "aarch64" in machine:
                    plat = "manylinux2014_aarch64"
                else:
                    plat = "manylinux2014_x86_64"

                cmd.extend(
                    [
                        "--platform",
                        plat,
                        "--python-version",
                        "3.12",
                        "--implementation",
                        "cp",
                        "--abi",
                        "cp312",
                    ]
                )

            try:
                subprocess.run(cmd, check=True, capture_output=True, text=True)
            except subprocess.CalledProcessError as e:
                logger.error(f"Failed to download package {requirement} on host: {e.stderr}")
                raise PackageInstallError(f"Failed to download package {requirement}: {e.stderr}") from e

            tar_stream = io.BytesIO()
            with tarfile.open(fileobj=tar_stream, mode="w") as tar:
                tar.add(temp_dir, arcname=".")
            tar_stream.seek(0)
            return tar_stream.getvalue()

    async def load_package(self, name: str) -> None:
        """
        Install a package via the host proxy (pip only).
        """
        container = self.container
        if container is None:
            raise RuntimeNotReadyError("Docker runtime not started")

        parsed = check_requirement(name, self.allowed_packages)
        requirement = str(parsed)
        logger.info(f"Installing package {requirement} via host proxy")

        tar_bytes = await asyncio.to_thread(self._download_and_package, requirement)

        remote_pkg_dir = f"/tmp/packages/{parsed.name}"
        try:
            container.exec_run(f"mkdir -p {remote_pkg_dir}")
            container.put_archive(path=remote_pkg_dir, data=tar_bytes)
            exit_code, output = container.exec_run(
                ["pip", "install", "--no-index", "--find-links", remote_pkg_dir, requirement]
            )
        except DockerException as e:
            raise PackageInstallError(f"Failed to install package {name}: {e}") from e

        if exit_code != 0:
            msg = output.decode("utf-8") if output else "Unknown error"
            logger.error(f"Failed to install {name} in container: {msg}")
            raise PackageInstallError(f"Failed to install package {name}: {msg}")

    async def shutdown(self) -> None:
        """
        Kill and cleanup the container.
        """
        if self.container:
            logger.info(f"Terminating Docker runtime: {self.container.short_id}")
            try:
                self.container.kill()
            except DockerException as e:
                logger.warning(f"Error terminating Docker runtime: {e}")
            finally:
                self.container = None
        else:
            logger.warning("Attempted to terminate non-existent Docker runtime")
