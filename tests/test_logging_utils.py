import json
import os
import logging
import uuid

import numpy as np

from scoretime.config import PROJECT_ROOT, Settings
from scoretime.logging_utils import (
    JsonFormatter,
    build_formatter,
    clear_log_context,
    get_logger,
    LoggingContextFilter,
    set_log_context,
    summarize_payload,
)


def _has_file_handler(logger: logging.Logger) -> bool:
    return any(isinstance(handler, logging.FileHandler) for handler in logger.handlers)


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test_path.py",
        lineno=12,
        msg="hello",
        args=(),
        exc_info=None,
        func="test_func",
    )


def test_get_logger_in_prod_has_no_file_handler(monkeypatch):
    monkeypatch.setenv("APP_ENV", "prod")
    logger_name = f"test_logger_prod_{uuid.uuid4().hex}"
    logger = get_logger(logger_name)
    assert not _has_file_handler(logger)


def test_get_logger_in_dev_has_file_handler(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("SCORETIME_LOG_DIR", str(tmp_path))
    logger_name = f"test_logger_dev_{uuid.uuid4().hex}"
    logger = get_logger(logger_name)
    assert _has_file_handler(logger)
    assert (tmp_path / f"{logger_name}.log").exists()


def test_log_format_includes_context_fields(monkeypatch):
    monkeypatch.delenv("LOG_JSON", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    formatter = build_formatter()
    record = _record()
    set_log_context(run_id="r1", source="piano.xml")
    LoggingContextFilter().filter(record)
    formatted = formatter.format(record)
    assert "run_id=r1" in formatted
    assert "source=piano.xml" in formatted
    clear_log_context()


def test_json_format_includes_context_fields(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "json")
    formatter = build_formatter()
    assert isinstance(formatter, JsonFormatter)
    record = _record()
    set_log_context(run_id="r2", source="bass.xml")
    LoggingContextFilter().filter(record)
    payload = json.loads(formatter.format(record))
    assert payload["run_id"] == "r2"
    assert payload["source"] == "bass.xml"
    assert payload["message"] == "hello"
    clear_log_context()


def test_cleared_context_uses_placeholders():
    clear_log_context()
    record = _record()
    LoggingContextFilter().filter(record)
    assert record.run_id == "-"
    assert record.source == "-"


def test_summarize_payload_bounds_size():
    summary = summarize_payload({"events": list(range(100)), "name": "x" * 500})
    assert summary["events"]["__len__"] == 100
    assert len(summary["events"]["sample"]) == 5
    assert summary["name"].endswith("...(truncated)")


def test_summarize_payload_describes_arrays():
    summary = summarize_payload(np.zeros((3, 2), dtype=np.int32))
    assert summary == {"__ndarray__": [3, 2], "dtype": "int32"}


def test_prod_env_logs_propagate(caplog, monkeypatch):
    monkeypatch.setenv("APP_ENV", "prod")
    logger_name = f"test_logger_prod_emit_{uuid.uuid4().hex}"
    logger = get_logger(logger_name)
    assert not _has_file_handler(logger)
    assert logger.propagate is True

    caplog.set_level(logging.INFO)
    logger.info("prod_log_test")
    assert any(record.message == "prod_log_test" for record in caplog.records)


def test_relative_log_dir_is_anchored_at_project_root(monkeypatch, tmp_path):
    log_root = tmp_path / "logs_root"
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("SCORETIME_LOG_DIR", os.path.relpath(log_root, PROJECT_ROOT))
    logger_name = f"test_logger_relative_{uuid.uuid4().hex}"
    get_logger(logger_name)
    assert Settings.from_env().log_dir == log_root.resolve()
    assert (log_root / f"{logger_name}.log").exists()
    assert list(elsewhere.iterdir()) == []
