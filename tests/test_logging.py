"""Tests for JSONL logging."""

import json
import tempfile
from pathlib import Path

import pytest

from weeks.logging import JSONLLogger, LogEntry


@pytest.fixture
def temp_log_dir():
    """Create a temporary directory for logs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def logger(temp_log_dir: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=temp_log_dir)


def read_entries(logger: JSONLLogger) -> list[dict]:
    with open(logger.log_path) as f:
        return [json.loads(line) for line in f]


def test_log_entry_to_dict():
    """Test LogEntry excludes None values."""
    entry = LogEntry(timestamp="2024-01-01T00:00:00Z", event="test")
    data = entry.to_dict()

    assert "timestamp" in data
    assert "event" in data
    assert "birthday" not in data  # None excluded
    assert "extra" not in data  # Empty dict excluded


def test_log_writes_jsonl(logger: JSONLLogger):
    """Test that logs are written in JSONL format."""
    logger.log("birthday_set", birthday="1990-05-17")
    logger.log("birthday_cleared")

    entries = read_entries(logger)
    assert len(entries) == 2
    assert entries[0]["event"] == "birthday_set"
    assert entries[0]["birthday"] == "1990-05-17"
    assert entries[1]["event"] == "birthday_cleared"


def test_log_stats_update(logger: JSONLLogger):
    logger.log_stats_update(2607, 1553, birthday="1975-04-25")

    entry = read_entries(logger)[0]
    assert entry["event"] == "stats_update"
    assert entry["extra"] == {"weeks_lived": 2607, "weeks_remaining": 1553}


def test_log_reflection(logger: JSONLLogger):
    logger.log_reflection("deleted", 7, found=False)

    entry = read_entries(logger)[0]
    assert entry["event"] == "reflection_deleted"
    assert entry["reflection_id"] == 7
    assert entry["extra"]["found"] is False


def test_log_notification(logger: JSONLLogger):
    logger.log_notification("dailyReflectionNotification", chat_id="42")

    entry = read_entries(logger)[0]
    assert entry["event"] == "notification_scheduled"
    assert entry["chat_id"] == "42"
    assert entry["notification_id"] == "dailyReflectionNotification"


def test_log_rotation(temp_log_dir: Path):
    """Test log file rotation."""
    logger = JSONLLogger(log_dir=temp_log_dir, max_size_mb=0.0001)  # ~100 bytes

    for i in range(10):
        logger.log(f"event_{i}", extra_data="x" * 50)

    log_files = list(temp_log_dir.glob("*.jsonl"))
    assert len(log_files) >= 1
