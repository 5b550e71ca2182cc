"""Tests for the console log buffer"""

import pytest

from chrome_console.console.log_buffer import ConsoleLogBuffer, format_console_message


def test_format_console_message():
    assert format_console_message({"level": "error", "text": "boom"}) == "[error] boom"
    assert format_console_message({"source": "console-api", "text": "hi"}) == "[log] hi"


def test_read_all_keeps_arrival_order():
    buffer = ConsoleLogBuffer()
    messages = [{"level": "info" if i % 2 else "warning", "text": f"message {i}"} for i in range(500)]

    for message in messages:
        buffer.append_message(message)

    assert buffer.read_all() == [format_console_message(m) for m in messages]
    assert len(buffer) == 500


def test_no_deduplication():
    buffer = ConsoleLogBuffer()
    buffer.append("[log] same")
    buffer.append("[log] same")

    assert buffer.read_all() == ["[log] same", "[log] same"]


def test_read_all_returns_snapshot():
    buffer = ConsoleLogBuffer()
    buffer.append("[log] a")
    snapshot = buffer.read_all()
    buffer.append("[log] b")

    assert snapshot == ["[log] a"]


def test_max_entries_drops_oldest():
    buffer = ConsoleLogBuffer(max_entries=3)
    for i in range(5):
        buffer.append(f"[log] {i}")

    assert buffer.read_all() == ["[log] 2", "[log] 3", "[log] 4"]


def test_invalid_max_entries():
    with pytest.raises(ValueError):
        ConsoleLogBuffer(max_entries=0)


def test_listeners_receive_entries_and_failures_are_isolated():
    buffer = ConsoleLogBuffer()
    received = []

    def broken(entry):
        raise RuntimeError("listener failed")

    buffer.subscribe(broken)
    buffer.subscribe(received.append)
    buffer.append_message({"level": "log", "text": "hello"})

    assert received == ["[log] hello"]
    assert buffer.read_all() == ["[log] hello"]

    buffer.unsubscribe(received.append)
    buffer.append("[log] again")
    assert received == ["[log] hello"]
