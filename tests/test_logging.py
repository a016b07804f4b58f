"""Tests for structured logging."""

from __future__ import annotations

import io
import json
import logging
import logging.handlers
import os
import threading
from pathlib import Path

from itsm_tools.logging import LOGGER_NAME, setup_logging


def _flush(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.flush()


def _file_handlers(logger: logging.Logger) -> list[logging.handlers.RotatingFileHandler]:
    return [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]


class TestSetupLogging:
    def test_stderr_only_by_default(self) -> None:
        stream = io.StringIO()
        logger = setup_logging(stream=stream)
        logger.info("service_start", extra={"args_data": {"tools": 7}})
        _flush(logger)
        record = json.loads(stream.getvalue().strip())
        assert record["msg"] == "service_start"
        assert record["level"] == "INFO"
        assert record["args"] == {"tools": 7}
        assert _file_handlers(logger) == []

    def test_creates_log_file(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path, stream=io.StringIO())
        logger.info("test_message", extra={"tool": "get_ticket", "args_data": {"key": "val"}})
        _flush(logger)
        record = json.loads((tmp_path / "itsm_tools.log").read_text().strip())
        assert record["msg"] == "test_message"
        assert record["tool"] == "get_ticket"
        assert record["args"]["key"] == "val"

    def test_creates_missing_directory(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "nested" / "logs"
        logger = setup_logging(log_dir, stream=io.StringIO())
        logger.warning("hello")
        _flush(logger)
        assert (log_dir / "itsm_tools.log").exists()

    def test_json_format(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path, stream=io.StringIO())
        logger.info("formatted", extra={"tool": "list_tickets", "duration_ms": 42.5, "error": "boom"})
        _flush(logger)
        record = json.loads((tmp_path / "itsm_tools.log").read_text().strip().split("\n")[-1])
        assert record["duration_ms"] == 42.5
        assert record["error"] == "boom"
        assert "ts" in record

    def test_exception_is_recorded(self) -> None:
        stream = io.StringIO()
        logger = setup_logging(stream=stream)
        try:
            raise RuntimeError("kaput")
        except RuntimeError:
            logger.error("tool_error", exc_info=True)
        _flush(logger)
        assert json.loads(stream.getvalue().strip())["exception"] == "kaput"

    def test_level_filters(self) -> None:
        stream = io.StringIO()
        logger = setup_logging(level="warning", stream=stream)
        logger.info("quiet")
        logger.warning("loud")
        _flush(logger)
        lines = stream.getvalue().strip().splitlines()
        assert [json.loads(line)["msg"] for line in lines] == ["loud"]

    def test_child_loggers_propagate(self) -> None:
        stream = io.StringIO()
        setup_logging(stream=stream)
        logging.getLogger("itsm_tools.dispatcher").info("tool_call")
        assert json.loads(stream.getvalue().strip())["msg"] == "tool_call"

    def test_idempotent_setup(self, tmp_path: Path) -> None:
        logger1 = setup_logging(tmp_path, stream=io.StringIO())
        logger2 = setup_logging(tmp_path)
        assert logger1 is logger2
        assert len(logger1.handlers) == 2
        assert len(_file_handlers(logger1)) == 1

    def test_new_dir_replaces_file_handler(self, tmp_path: Path) -> None:
        setup_logging(tmp_path / "a", stream=io.StringIO())
        logger = setup_logging(tmp_path / "b")
        handlers = _file_handlers(logger)
        assert len(handlers) == 1
        assert handlers[0].baseFilename == os.path.abspath(str(tmp_path / "b" / "itsm_tools.log"))

    def test_no_duplicate_handlers_via_symlink(self, tmp_path: Path) -> None:
        real_dir = tmp_path / "real"
        real_dir.mkdir()
        link_dir = tmp_path / "link"
        os.symlink(str(real_dir), str(link_dir))
        logger1 = setup_logging(link_dir, stream=io.StringIO())
        logger2 = setup_logging(link_dir)
        assert logger1 is logger2
        assert len(_file_handlers(logger1)) == 1

    def test_no_duplicate_handlers_under_concurrency(self, tmp_path: Path) -> None:
        results: list[logging.Logger] = []
        barrier = threading.Barrier(4)

        def call_setup() -> None:
            barrier.wait()
            results.append(setup_logging(tmp_path, stream=io.StringIO()))

        threads = [threading.Thread(target=call_setup) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 4
        assert all(r is results[0] for r in results)
        logger = logging.getLogger(LOGGER_NAME)
        assert len(logger.handlers) == 2
        assert len(_file_handlers(logger)) == 1

    def teardown_method(self) -> None:
        """Clean up the itsm_tools logger handlers between tests."""
        logger = logging.getLogger(LOGGER_NAME)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
