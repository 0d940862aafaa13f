"""Tests for logging setup and formatters."""

import json
import logging

import pytest

from storage_deploy.utils.logging import ConsoleFormatter, JSONFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(**extra):
    record = logging.LogRecord("storage_deploy.test", logging.WARNING, __file__, 1, "upload failed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_includes_structured_fields(self):
        record = make_record(object_key="1.2.3/a", operation="put", attempt=2, unrelated="x")

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["message"] == "upload failed"
        assert data["object_key"] == "1.2.3/a"
        assert data["operation"] == "put"
        assert data["attempt"] == 2
        assert "unrelated" not in data

    def test_console_prefixes_object_key(self):
        assert "[1.2.3/a] upload failed" in ConsoleFormatter().format(make_record(object_key="1.2.3/a"))

    def test_timestamps_come_from_the_record(self):
        record = make_record()
        record.created = 0.0

        data = json.loads(JSONFormatter().format(record))

        assert data["timestamp"] == "1970-01-01T00:00:00Z"
        assert ConsoleFormatter().format(record).startswith("00:00:00 ")


class TestSetupLogging:
    def test_console_only(self, restore_root_logger):
        setup_logging("warning")

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 1
        assert logging.getLogger("botocore").level == logging.WARNING

    def test_json_lines_file(self, restore_root_logger, tmp_path):
        setup_logging("info", str(tmp_path / "logs"))

        get_logger("storage_deploy.test").debug("deleting", extra={"object_key": "1.0.0/a"})
        for handler in restore_root_logger.handlers:
            handler.flush()

        [log_file] = (tmp_path / "logs").glob("storage-deploy-*.jsonl")
        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert lines[-1]["message"] == "deleting"
        assert lines[-1]["object_key"] == "1.0.0/a"
