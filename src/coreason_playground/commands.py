# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

"""Intents a UI sends to EditorState.dispatch, and the reply it gets back."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from coreason_playground.models import Channel


class Command(BaseModel):
    model_config = ConfigDict(frozen=True)


class Submit(Command):
    code: str
    file_name: str | None = None


class Cancel(Command):
    pass


class NewFile(Command):
    name: str
    buffer: str | None = None


class SwitchFile(Command):
    name: str
    buffer: str | None = None


class SaveBuffer(Command):
    content: str


class CloseFile(Command):
    name: str


class RenameFile(Command):
    old_name: str
    new_name: str


class ImportFile(Command):
    name: str
    content: str
    buffer: str | None = None


class LoadPackage(Command):
    name: str


class TerminalCommand(Command):
    command: str


class ClearOutput(Command):
    channel: Channel = Channel.CONSOLE


class Debug(Command):
    pass


class ExportFile(Command):
    format: Literal["raw", "html"] = "raw"
    name: str | None = None
    buffer: str | None = None


class ExportConsole(Command):
    pass


class FormatBuffer(Command):
    content: str


class FindNext(Command):
    content: str
    term: str
    position: int = -1


class ReplaceAll(Command):
    content: str
    term: str
    replacement: str


class UpdateSettings(Command):
    changes: dict[str, Any]


class ToggleTheme(Command):
    pass


class Reply(BaseModel):
    """Result of a dispatched command.

    Attributes:
        ok: False when the command was rejected.
        error: Exception class name of the rejection, if any.
        message: Human readable status line.
        payload: Command-specific data (file content, outcome, exported document...).
    """

    ok: bool = True
    error: str | None = None
    message: str = ""
    payload: Any = None
