# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RunState(str, Enum):
    """Lifecycle of the execution session."""

    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    STOPPED = "stopped"


class Channel(str, Enum):
    """Output panels an entry can be written to."""

    CONSOLE = "console"
    TERMINAL = "terminal"
    DEBUG = "debug"


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class File(BaseModel):
    """A named text buffer held by the FileStore.

    Attributes:
        name: Unique key of the file, also used as its tab label.
        content: Current buffer content.
        saved_content: Content at the last save/export, used to detect unsaved edits.
    """

    name: str
    content: str = ""
    saved_content: str = ""

    @property
    def is_modified(self) -> bool:
        return self.content != self.saved_content


class GatewayResult(BaseModel):
    """Raw outcome of running code in a runtime gateway.

    Attributes:
        success: False when the code raised inside the interpreter.
        stdout: Captured standard output.
        stderr: Captured standard error, including a formatted traceback on failure.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    stdout: str = ""
    stderr: str = ""


class ExecutionResult(BaseModel):
    """Represents a resolved run as recorded by the execution session.

    Attributes:
        success: Whether the gateway reported success.
        stdout: Standard output captured from the execution.
        stderr: Standard error captured from the execution.
        duration_ms: Wall-clock duration of the run in milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    stdout: str
    stderr: str
    duration_ms: float


class OutputEntry(BaseModel):
    """A single line of output. Never mutated after it is appended."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    channel: Channel
    severity: Severity
    text: str
    result: ExecutionResult | None = None


class RunOutcome(BaseModel):
    """What a submit resolved to.

    Attributes:
        generation: Generation id assigned to the submit.
        state: Session state after the submit resolved.
        result: The recorded result, None when the gateway crashed or the result was discarded.
        discarded: True when the run was cancelled or superseded before it resolved.
    """

    model_config = ConfigDict(frozen=True)

    generation: int
    state: RunState
    result: ExecutionResult | None = None
    discarded: bool = False


class GatewayConfig(BaseModel):
    """Parameters handed to RuntimeGateway.initialize."""

    package_index_url: str | None = None
    eager_packages: list[str] = Field(default_factory=list)


class EditorSettings(BaseModel):
    """Editor preferences, persisted as a flat camelCase record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    theme: Literal["dark", "light", "monokai"] = "dark"
    font_size: int = 14
    font_family: str = "Consolas"
    auto_save: bool = True
    word_wrap: bool = False
    minimap: bool = False


class ExportDocument(BaseModel):
    """A document produced by one of the export functions."""

    model_config = ConfigDict(frozen=True)

    filename: str
    media_type: str
    content: str
