# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

"""Exception hierarchy for coreason-playground.

Execution-path errors are caught by the ExecutionSession and turned into
output entries; the guard errors and the file store errors are raised to
the caller of the rejected operation.
"""


class PlaygroundError(Exception):
    """Base class for all coreason-playground errors."""


class RuntimeNotReadyError(PlaygroundError, RuntimeError):
    """The runtime gateway has not been initialized (or failed to initialize)."""


class InitError(PlaygroundError, RuntimeError):
    """The runtime gateway failed to initialize."""


class EmptyInputError(PlaygroundError, ValueError):
    """A submit carried no code."""


class AlreadyRunningError(PlaygroundError, RuntimeError):
    """A submit arrived while another run is in flight."""


class PackageInstallError(PlaygroundError, RuntimeError):
    """A package could not be loaded into the runtime."""


class FileStoreError(PlaygroundError):
    """Base class for file store precondition violations."""


class DuplicateNameError(FileStoreError, ValueError):
    """A file with the requested name already exists."""


class NotFoundError(FileStoreError, LookupError):
    """No file with the requested name exists."""


class LastFileError(FileStoreError):
    """The only remaining file cannot be closed."""


class InvalidNameError(FileStoreError, ValueError):
    """The requested file name is blank."""
