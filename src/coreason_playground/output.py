# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

from collections.abc import Callable
from datetime import datetime

from coreason_playground.models import Channel, ExecutionResult, OutputEntry, Severity


class OutputSink:
    """Append-only, channel-partitioned log of output entries.

    Entries are never edited or reordered once appended, so consumers can
    rely on arrival order as completion order.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        """Initializes the OutputSink.

        Args:
            clock: Optional callable returning the timestamp for new entries.
                Defaults to local wall-clock time.
        """
        self._clock = clock or datetime.now
        self._channels: dict[Channel, list[OutputEntry]] = {channel: [] for channel in Channel}

    def append(
        self,
        channel: Channel,
        severity: Severity,
        text: str,
        result: ExecutionResult | None = None,
    ) -> OutputEntry:
        """Append an entry to a channel.

        The timestamp is captured here, not at render time, so re-renders are stable.

        Args:
            channel: The channel to write to.
            severity: Severity of the entry.
            text: The entry text.
            result: Optional execution result the entry reports on.

        Returns:
            OutputEntry: The appended entry.
        """
        entry = OutputEntry(
            timestamp=self._clock(),
            channel=channel,
            severity=severity,
            text=text,
            result=result,
        )
        self._channels[channel].append(entry)
        return entry

    def clear(self, channel: Channel) -> None:
        """Truncate one channel."""
        self._channels[channel] = []

    def entries(self, channel: Channel) -> tuple[OutputEntry, ...]:
        return tuple(self._channels[channel])

    def count(self, channel: Channel) -> int:
        return len(self._channels[channel])

    def render(self, channel: Channel) -> str:
        """Render a channel as plain text, one `[HH:MM:SS] text` line per entry."""
        return "\n".join(f"[{entry.timestamp:%H:%M:%S}] {entry.text}" for entry in self._channels[channel])
