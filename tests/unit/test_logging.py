"""Unit tests for IssueHub logging configuration."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from issuehub.logging import sanitize_for_log, setup_logging, truncate_output


@pytest.fixture(autouse=True)
def reset_issuehub_logger():
    """Detach handlers added by setup_logging after each test."""
    yield
    logger = logging.getLogger("issuehub")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_creates_log_directory(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "nested" / "logs"
        setup_logging(log_dir=log_dir, console=False)

        assert log_dir.exists()

    def test_writes_to_log_file(self, tmp_path: Path) -> None:
        logger = setup_logging(log_dir=tmp_path, console=False)
        logger.info("test message 123")

        content = (tmp_path / "issuehub.log").read_text()
        assert "test message 123" in content

    def test_log_format_includes_component_name(self, tmp_path: Path) -> None:
        """Child loggers write through the issuehub handlers."""
        setup_logging(log_dir=tmp_path, console=False)
        logging.getLogger("issuehub.reconciler").info("component test")

        content = (tmp_path / "issuehub.log").read_text()
        # Format: 2026-01-28 16:30:45 | INFO     | issuehub.reconciler | message
        assert " | INFO     | issuehub.reconciler | component test" in content

    def test_level_from_argument(self, tmp_path: Path) -> None:
        logger = setup_logging(log_dir=tmp_path, level="warning", console=False)
        logger.info("hidden")
        logger.warning("shown")

        content = (tmp_path / "issuehub.log").read_text()
        assert "hidden" not in content
        assert "shown" in content

    def test_level_and_dir_from_environment(self, tmp_path: Path) -> None:
        env = {"ISSUEHUB_LOG_DIR": str(tmp_path / "env-logs"), "ISSUEHUB_LOG_LEVEL": "DEBUG"}
        with patch.dict(os.environ, env):
            logger = setup_logging(console=False)

        assert logger.level == logging.DEBUG
        assert (tmp_path / "env-logs" / "issuehub.log").exists()

    def test_console_handler_optional(self, tmp_path: Path) -> None:
        with_console = setup_logging(log_dir=tmp_path, console=True)
        assert len(with_console.handlers) == 2

        without = setup_logging(log_dir=tmp_path, console=False)
        assert len(without.handlers) == 1

    def test_quiets_http_client_loggers(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path, level="INFO", console=False)

        assert logging.getLogger("httpx").level == logging.WARNING


@pytest.mark.unit
class TestTruncateOutput:
    """Tests for truncate_output."""

    def test_short_output_unchanged(self) -> None:
        assert truncate_output("short") == "short"

    def test_long_output_truncated(self) -> None:
        result = truncate_output("x" * 50, max_length=10)

        assert result == "xxxxxxxxxx... [truncated, 40 more chars]"


@pytest.mark.unit
class TestSanitizeForLog:
    """Tests for sanitize_for_log."""

    def test_masks_classic_token(self) -> None:
        token = "ghp_" + "a" * 36

        assert sanitize_for_log(f"token={token}") == "token=[GITHUB_TOKEN]"

    def test_masks_bearer_header(self) -> None:
        result = sanitize_for_log("Authorization: Bearer abc.def")

        assert result == "Authorization: Bearer [REDACTED]"

    def test_plain_text_unchanged(self) -> None:
        assert sanitize_for_log("Not Found") == "Not Found"
