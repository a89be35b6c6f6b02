# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

"""Plain-text helpers for editor buffers."""

INDENT = "    "
_DEDENT_KEYWORDS = ("except", "elif", "else", "finally")


def format_code(source: str) -> str:
    """Re-indent source by block structure.

    Indentation grows after a line ending with a colon and shrinks before
    `except`, `elif`, `else` and `finally`. Comments are flushed left and
    blank lines kept.
    """
    level = 0
    lines = []
    for line in source.split("\n"):
        stripped = line.strip()
        if not stripped:
            lines.append("")
            continue
        if stripped.startswith("#"):
            lines.append(stripped)
            continue

        if stripped.startswith(_DEDENT_KEYWORDS):
            level = max(0, level - 1)

        lines.append(INDENT * level + stripped)

        if stripped.endswith(":"):
            level += 1
    return "\n".join(lines)


def find_next(text: str, term: str, position: int = -1) -> tuple[int, int] | None:
    """Find the next occurrence of term after position, wrapping to the start.

    Returns:
        tuple[int, int] | None: Start and end offsets, or None if absent.
    """
    if not term:
        return None
    start = text.find(term, position + 1)
    if start == -1:
        start = text.find(term)
    if start == -1:
        return None
    return start, start + len(term)


def replace_all(text: str, term: str, replacement: str) -> tuple[str, int]:
    """Replace every occurrence of term.

    Returns:
        tuple[str, int]: The new text and the number of replacements.
    """
    if not term:
        return text, 0
    return text.replace(term, replacement), text.count(term)
