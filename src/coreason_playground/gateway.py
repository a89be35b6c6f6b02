# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

from abc import ABC, abstractmethod

from packaging.requirements import InvalidRequirement, Requirement

from coreason_playground.exceptions import PackageInstallError
from coreason_playground.models import GatewayConfig, GatewayResult


class RuntimeGateway(ABC):
    """
    Abstract base class for the embedded interpreter the session executes against.
    Follows the Strategy Pattern.
    """

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """Whether initialize has completed successfully."""
        pass  # pragma: no cover

    @abstractmethod
    async def initialize(self, config: GatewayConfig) -> None:
        """Boot the interpreter.

        Idempotent: calling it again once ready is a no-op.

        Args:
            config: Package index location and packages to load eagerly.

        Raises:
            InitError: If the interpreter cannot be brought up.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def run(self, code: str) -> GatewayResult:
        """Run code and capture its output.

        Exceptions raised by the code itself are not propagated; they are
        reported as `success=False` with a formatted traceback in stderr.

        Args:
            code: The source code to execute.

        Returns:
            GatewayResult: Success flag plus captured stdout and stderr.

        Raises:
            RuntimeNotReadyError: If initialize has not completed.
            Exception: Only for transport-level failures of the gateway itself.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def load_package(self, name: str) -> None:
        """Make a package importable inside the interpreter.

        Args:
            name: A package requirement, e.g. `numpy` or `requests>=2`.

        Raises:
            RuntimeNotReadyError: If initialize has not completed.
            PackageInstallError: If the package is rejected or fails to install.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def shutdown(self) -> None:
        """Release the interpreter and any resources it holds."""
        pass  # pragma: no cover


def check_requirement(name: str, allowed_packages: set[str]) -> Requirement:
    """Parse a package requirement and enforce an optional allowlist.

    Args:
        name: The requested requirement string.
        allowed_packages: Allowed base package names; empty allows everything.

    Returns:
        Requirement: The parsed requirement.

    Raises:
        PackageInstallError: If the requirement is malformed or not allowed.
    """
    try:
        requirement = Requirement(name)
    except InvalidRequirement as e:
        raise PackageInstallError(f"Invalid package requirement: {name}") from e

    allowed_lower = {p.lower() for p in allowed_packages}
    if allowed_lower and requirement.name.lower() not in allowed_lower:
        raise PackageInstallError(f"Package {name} (base: {requirement.name}) is not in the allowed list.")
    return requirement
