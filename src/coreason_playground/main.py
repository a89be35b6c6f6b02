# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

from typing import Literal

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent

from coreason_playground import commands as cmd
from coreason_playground.editor import EditorState
from coreason_playground.exceptions import InitError
from coreason_playground.models import Channel, RunOutcome
from coreason_playground.utils.logger import logger

# Initialize Editor Core
editor = EditorState()

# Initialize MCP Server
mcp = FastMCP("coreason-playground")


async def _ensure_ready() -> None:
    if not editor.session.is_ready:
        await editor.start()


def _reply_text(reply: cmd.Reply) -> str:
    if reply.ok:
        return reply.message or "OK"
    return f"Error: {reply.message}" if reply.error else reply.message


@mcp.tool()  # type: ignore[misc]
async def run_code(code: str, file_name: str | None = None) -> list[TextContent]:
    """
    Run Python code in the editor runtime.
    Returns the run status followed by the console entries it produced.
    """
    try:
        await _ensure_ready()
    except InitError as e:
        return [TextContent(type="text", text=f"Error initializing runtime: {e!s}")]

    before = editor.output.count(Channel.CONSOLE)
    reply = await editor.dispatch(cmd.Submit(code=code, file_name=file_name))
    if not reply.ok:
        return [TextContent(type="text", text=_reply_text(reply))]

    output = [TextContent(type="text", text=f"Status: {editor.session.state.value}")]
    outcome = reply.payload
    if isinstance(outcome, RunOutcome) and outcome.result is not None:
        output.append(TextContent(type="text", text=f"Duration: {outcome.result.duration_ms:.1f}ms"))

    for entry in editor.output.entries(Channel.CONSOLE)[before:]:
        output.append(TextContent(type="text", text=f"{entry.severity.value.upper()}: {entry.text}"))
    return output


@mcp.tool()  # type: ignore[misc]
async def cancel_run() -> str:
    """
    Stop waiting for the current run.
    """
    reply = await editor.dispatch(cmd.Cancel())
    return reply.message if reply.ok else "Nothing is running."


@mcp.tool()  # type: ignore[misc]
async def new_file(name: str, buffer: str | None = None) -> str:
    """
    Create a file and make it active.
    """
    return _reply_text(await editor.dispatch(cmd.NewFile(name=name, buffer=buffer)))


@mcp.tool()  # type: ignore[misc]
async def switch_file(name: str, buffer: str | None = None) -> str:
    """
    Make another file active and return its content.
    """
    reply = await editor.dispatch(cmd.SwitchFile(name=name, buffer=buffer))
    return reply.payload["content"] if reply.ok else _reply_text(reply)


@mcp.tool()  # type: ignore[misc]
async def close_file(name: str) -> str:
    """
    Close a file.
    """
    return _reply_text(await editor.dispatch(cmd.CloseFile(name=name)))


@mcp.tool()  # type: ignore[misc]
async def rename_file(old_name: str, new_name: str) -> str:
    """
    Rename a file.
    """
    return _reply_text(await editor.dispatch(cmd.RenameFile(old_name=old_name, new_name=new_name)))


@mcp.tool()  # type: ignore[misc]
async def import_file(name: str, content: str) -> str:
    """
    Import text as a file, overwriting any file with the same name.
    """
    return _reply_text(await editor.dispatch(cmd.ImportFile(name=name, content=content)))


@mcp.tool()  # type: ignore[misc]
async def install_package(package_name: str) -> str:
    """
    Load a package into the runtime.
    """
    try:
        await _ensure_ready()
    except InitError as e:
        return f"Error initializing runtime: {e!s}"
    return _reply_text(await editor.dispatch(cmd.LoadPackage(name=package_name)))


@mcp.tool()  # type: ignore[misc]
async def terminal(command: str) -> list[str]:
    """
    Evaluate one interactive command and return the terminal lines it produced.
    """
    try:
        await _ensure_ready()
    except InitError as e:
        return [f"Error initializing runtime: {e!s}"]

    before = editor.output.count(Channel.TERMINAL)
    await editor.dispatch(cmd.TerminalCommand(command=command))
    return [entry.text for entry in editor.output.entries(Channel.TERMINAL)[before:]]


@mcp.tool()  # type: ignore[misc]
async def read_output(channel: Literal["console", "terminal", "debug"] = "console") -> str:
    """
    Read a whole output channel as timestamped text.
    """
    return editor.output.render(Channel(channel))


@mcp.tool()  # type: ignore[misc]
async def clear_output(channel: Literal["console", "terminal", "debug"] = "console") -> str:
    """
    Clear an output channel.
    """
    return _reply_text(await editor.dispatch(cmd.ClearOutput(channel=Channel(channel))))


@mcp.tool()  # type: ignore[misc]
async def export_file(
    name: str | None = None, format: Literal["raw", "html"] = "raw", buffer: str | None = None
) -> str:
    """
    Export a file as raw text or HTML and return the document.
    An unsaved editor buffer, if given, is flushed into the active file first.
    """
    reply = await editor.dispatch(cmd.ExportFile(name=name, format=format, buffer=buffer))
    return reply.payload.content if reply.ok else _reply_text(reply)


@mcp.tool()  # type: ignore[misc]
async def list_files() -> list[str]:
    """
    List open files in tab order; the active file is marked with `*`.
    """
    active = editor.files.active_name
    return [f"* {f.name}" if f.name == active else f.name for f in editor.files.snapshot_all()]


def main() -> None:
    """Entry point for the MCP server."""
    logger.info("Starting coreason-playground MCP server")
    mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
