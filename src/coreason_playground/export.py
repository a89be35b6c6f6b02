# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

"""Export and import of buffers and console output."""

import html
from pathlib import Path, PurePath

import aiofiles  # type: ignore[import-untyped]
from loguru import logger

from coreason_playground.files import FileStore
from coreason_playground.models import Channel, ExportDocument
from coreason_playground.output import OutputSink

CONSOLE_EXPORT_NAME = "output.txt"

_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>Python Code Export</title>
    <style>
        body {{ font-family: monospace; background: #1e1e1e; color: #d4d4d4; padding: 20px; }}
        pre {{ background: #2d2d30; padding: 20px; border-radius: 5px; overflow-x: auto; }}
    </style>
</head>
<body>
    <h1>Python Code - {title}</h1>
    <pre><code>{code}</code></pre>
</body>
</html>
"""


def export_raw(store: FileStore, name: str | None = None) -> ExportDocument:
    """Export a file as raw text, named after the file.

    Args:
        store: The file store.
        name: File to export; defaults to the active file.
    """
    file = store.get(name or store.active_name)
    return ExportDocument(filename=file.name, media_type="text/plain", content=file.content)


def export_html(store: FileStore, name: str | None = None) -> ExportDocument:
    """Export a file as an HTML document wrapping the escaped source."""
    file = store.get(name or store.active_name)
    content = _HTML_TEMPLATE.format(
        title=html.escape(file.name, quote=False),
        code=html.escape(file.content, quote=False),
    )
    filename = PurePath(file.name).with_suffix(".html").name
    return ExportDocument(filename=filename, media_type="text/html", content=content)


def export_console(sink: OutputSink) -> ExportDocument:
    """Export the console channel as plain text."""
    return ExportDocument(
        filename=CONSOLE_EXPORT_NAME,
        media_type="text/plain",
        content=sink.render(Channel.CONSOLE),
    )


async def write_export(document: ExportDocument, directory: Path) -> Path:
    """Write an exported document into a directory.

    Returns:
        Path: The path that was written.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / document.filename
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(document.content)
    logger.info(f"Wrote {document.filename} to {path}")
    return path


async def read_import(path: Path) -> tuple[str, str]:
    """Read a local file for import.

    Returns:
        tuple[str, str]: The file name and its text content.

    Raises:
        FileNotFoundError: If the path does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Import file not found: {path}")
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        content = await f.read()
    return path.name, content
