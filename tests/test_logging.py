"""
Tests for structured logging.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Generator

import pytest

from opts.logging import get_group, get_logger, get_request_id, log_context, setup_logging


@pytest.fixture
def json_log(temp_dir: Path) -> Generator[Path, None, None]:
    """Route opts logs to a JSON Lines file for the duration of a test."""
    log_file = temp_dir / "logs" / "opts.jsonl"
    setup_logging("DEBUG", log_file=log_file, console_output=False)
    yield log_file
    for handler in logging.getLogger("opts").handlers:
        handler.close()
    setup_logging()


def _records(log_file: Path) -> list[dict]:
    for handler in logging.getLogger("opts").handlers:
        handler.flush()
    return [json.loads(line) for line in log_file.read_text().splitlines()]


class TestLogContext:
    def test_sets_and_restores(self) -> None:
        with log_context(request_id="req_1", group="g"):
            assert get_request_id() == "req_1"
            assert get_group() == "g"
            with log_context(group="inner"):
                assert get_request_id() == "req_1"
                assert get_group() == "inner"
            assert get_group() == "g"

        assert get_request_id() is None
        assert get_group() is None


class TestJSONLogging:
    def test_record_includes_context_and_fields(self, json_log: Path) -> None:
        logger = get_logger("opts.tests")

        with log_context(request_id="req_1", group="g"):
            logger.info("Loaded group", keys=3)

        [record] = _records(json_log)
        assert record["message"] == "Loaded group"
        assert record["level"] == "INFO"
        assert record["request_id"] == "req_1"
        assert record["group"] == "g"
        assert record["extra"]["keys"] == 3

    def test_level_filtering(self, temp_dir: Path) -> None:
        log_file = temp_dir / "warn.jsonl"
        setup_logging("WARNING", log_file=log_file, console_output=False)
        try:
            logger = get_logger("opts.tests")
            logger.debug("hidden")
            logger.warning("shown")

            messages = [r["message"] for r in _records(log_file)]
            assert messages == ["shown"]
        finally:
            for handler in logging.getLogger("opts").handlers:
                handler.close()
            setup_logging()

    def test_exception_logged(self, json_log: Path) -> None:
        logger = get_logger("opts.tests")
        try:
            raise ValueError("bad value")
        except ValueError:
            logger.exception("Failed")

        [record] = _records(json_log)
        assert "ValueError: bad value" in record["exception"]


def test_get_logger_namespaces_name() -> None:
    assert get_logger("store").name == "opts.store"
    assert get_logger("opts.accessor").name == "opts.accessor"
