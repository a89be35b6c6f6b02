from datetime import datetime
from typing import Any

import pytest
from pydantic import ValidationError

from coreason_playground.models import Channel, ExecutionResult, Severity
from coreason_playground.output import OutputSink


def test_append_records_entry_with_clock_timestamp(sink: OutputSink) -> None:
    entry = sink.append(Channel.CONSOLE, Severity.INFO, "hello")

    assert entry.timestamp == datetime(2025, 1, 1, 12, 30, 45)
    assert entry.channel is Channel.CONSOLE
    assert entry.severity is Severity.INFO
    assert sink.entries(Channel.CONSOLE) == (entry,)


def test_timestamp_captured_at_append_time() -> None:
    times = iter([datetime(2025, 1, 1, 9, 0, 0), datetime(2025, 1, 1, 9, 0, 5)])
    sink = OutputSink(clock=lambda: next(times))

    first = sink.append(Channel.CONSOLE, Severity.INFO, "a")
    second = sink.append(Channel.CONSOLE, Severity.INFO, "b")

    # Reading does not re-stamp
    assert sink.entries(Channel.CONSOLE)[0].timestamp == first.timestamp
    assert second.timestamp > first.timestamp


def test_channels_are_independent(sink: OutputSink) -> None:
    sink.append(Channel.CONSOLE, Severity.INFO, "console")
    sink.append(Channel.TERMINAL, Severity.SUCCESS, "terminal")

    assert sink.count(Channel.CONSOLE) == 1
    assert sink.count(Channel.TERMINAL) == 1
    assert sink.count(Channel.DEBUG) == 0


def test_arrival_order_is_preserved(sink: OutputSink) -> None:
    for i in range(5):
        sink.append(Channel.CONSOLE, Severity.INFO, str(i))
    assert [e.text for e in sink.entries(Channel.CONSOLE)] == ["0", "1", "2", "3", "4"]


def test_clear_truncates_one_channel(sink: OutputSink) -> None:
    sink.append(Channel.CONSOLE, Severity.INFO, "a")
    sink.append(Channel.DEBUG, Severity.INFO, "b")

    sink.clear(Channel.CONSOLE)

    assert sink.entries(Channel.CONSOLE) == ()
    assert sink.count(Channel.DEBUG) == 1


def test_clear_is_idempotent(sink: OutputSink) -> None:
    sink.append(Channel.CONSOLE, Severity.INFO, "a")
    sink.clear(Channel.CONSOLE)
    sink.clear(Channel.CONSOLE)
    assert sink.entries(Channel.CONSOLE) == ()


def test_entries_are_immutable(sink: OutputSink) -> None:
    entry = sink.append(Channel.CONSOLE, Severity.INFO, "a")
    with pytest.raises(ValidationError):
        entry.text = "b"  # type: ignore[misc]


def test_entries_snapshot_is_detached(sink: OutputSink) -> None:
    snapshot = sink.entries(Channel.CONSOLE)
    sink.append(Channel.CONSOLE, Severity.INFO, "later")
    assert snapshot == ()


def test_result_is_attached(sink: OutputSink) -> None:
    result = ExecutionResult(success=True, stdout="hi\n", stderr="", duration_ms=1.5)
    entry = sink.append(Channel.CONSOLE, Severity.SUCCESS, result.stdout, result)
    assert entry.result is result


def test_render_formats_timestamps(sink: OutputSink) -> None:
    sink.append(Channel.CONSOLE, Severity.INFO, "Executing code...")
    sink.append(Channel.CONSOLE, Severity.SUCCESS, "hi")

    assert sink.render(Channel.CONSOLE) == "[12:30:45] Executing code...\n[12:30:45] hi"


def test_render_empty_channel(fixed_clock: Any) -> None:
    assert OutputSink(clock=fixed_clock).render(Channel.DEBUG) == ""
