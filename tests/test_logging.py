"""
Tests for logging setup and credential masking
"""
import json
import logging

import pytest

from tuiman.utils.logging import (
    LogManager,
    SensitiveDataMasker,
    get_logger,
    init_logging,
)


@pytest.fixture
def masker():
    return SensitiveDataMasker()


@pytest.fixture
def log_manager(tmp_path):
    manager = init_logging(tmp_path / "logs", "DEBUG")
    yield manager
    manager.shutdown()


def read_entries(log_dir):
    lines = (log_dir / "tuiman.log").read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines]


class TestMasking:
    """Tests for SensitiveDataMasker"""

    @pytest.mark.parametrize(
        "text,secret",
        [
            ("Authorization: Bearer abc.def-123", "abc.def-123"),
            ("password=hunter2&user=me", "hunter2"),
            ('{"api_key": "k-999"}', "k-999"),
            ("token: t0ken", "t0ken"),
            ("secret=s3cret", "s3cret"),
        ],
    )
    def test_mask_string(self, masker, text, secret):
        masked = masker.mask_string(text)
        assert secret not in masked
        assert SensitiveDataMasker.REDACTED in masked

    def test_plain_text_untouched(self, masker):
        assert masker.mask_string("GET https://api.example.com/users") == (
            "GET https://api.example.com/users"
        )

    def test_mask_dict(self, masker):
        masked = masker.mask_dict(
            {"token": "abc", "nested": {"secret_value": "x"}, "note": "password=pw", "count": 2}
        )
        assert masked == {
            "token": "[REDACTED]",
            "nested": {"secret_value": "[REDACTED]"},
            "note": "password=[REDACTED]",
            "count": 2,
        }


class TestLoggers:
    """Tests for logger naming"""

    def test_names_prefixed(self):
        assert get_logger("core.editor").name == "tuiman.core.editor"
        assert get_logger("tuiman.tui.app").name == "tuiman.tui.app"
        assert get_logger().name == "tuiman"


class TestLogFile:
    """Tests for the rotating JSON log file"""

    def test_json_lines_written(self, log_manager, tmp_path):
        get_logger("tests").info("hello %s", "world")

        [entry] = read_entries(tmp_path / "logs")
        assert entry["level"] == "INFO"
        assert entry["logger"] == "tuiman.tests"
        assert entry["message"] == "hello world"

    def test_secrets_masked_in_file(self, log_manager, tmp_path):
        get_logger("tests").warning(
            "sending with Bearer abc123", extra={"context": {"password": "pw"}}
        )

        [entry] = read_entries(tmp_path / "logs")
        assert "abc123" not in entry["message"]
        assert entry["context"] == {"password": "[REDACTED]"}

    def test_level_filtering(self, tmp_path):
        manager = init_logging(tmp_path / "logs", "ERROR")
        get_logger("tests").info("quiet")
        get_logger("tests").error("loud")

        assert [e["message"] for e in read_entries(tmp_path / "logs")] == ["loud"]
        manager.shutdown()

    def test_invalid_level(self, tmp_path):
        with pytest.raises(ValueError, match="LOUD"):
            LogManager(tmp_path / "logs", "LOUD")

    def test_console_toggle(self, log_manager):
        root = logging.getLogger("tuiman")
        log_manager.set_console_enabled(False)
        assert log_manager.console_handler not in root.handlers
        log_manager.set_console_enabled(True)
        assert log_manager.console_handler in root.handlers
