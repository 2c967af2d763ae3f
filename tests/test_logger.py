import logging
import os
import re
import time

import pytest

from adapters.external.rotating_file_sink import (
    LogRetention,
    RotatingFileSink,
    convert_date_format,
    create_rotating_sink,
    parse_max_logs,
    parse_max_size,
    rollover_interval,
)
from adapters.logger import (
    ROOT_LOGGER_NAME,
    SILENT,
    TRACE,
    IsoTimeFormatter,
    LoggerAdapter,
    configure_logging,
    to_stdlib_level,
)
from core.domain.entities import LoggingSettings, LogLevel, RotationDescriptor, RotationFrequency


@pytest.mark.parametrize(
    "label, level",
    [
        ("fatal", logging.CRITICAL),
        ("error", logging.ERROR),
        ("warn", logging.WARNING),
        ("info", logging.INFO),
        ("debug", logging.DEBUG),
        ("trace", TRACE),
        ("silent", SILENT),
    ],
)
def test_level_mapping(label, level):
    assert to_stdlib_level(label) == level


def test_formatter_uses_iso_time_and_level_label():
    record = logging.LogRecord(ROOT_LOGGER_NAME, logging.WARNING, __file__, 1, "hello", None, None)

    line = IsoTimeFormatter().format(record)

    assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z - ", line)
    assert " - warn - hello" in line


def test_adapter_names_are_nested_under_service_logger():
    adapter = LoggerAdapter("config")

    assert adapter.logger.name == f"{ROOT_LOGGER_NAME}.config"
    assert logging.getLogger(ROOT_LOGGER_NAME).handlers


def test_configure_logging_writes_to_rotating_sink(tmp_path):
    log_file = tmp_path / "logs" / "gateway.log"
    settings = LoggingSettings(
        level=LogLevel.DEBUG,
        rotation=RotationDescriptor(filename=str(log_file), max_logs="7", max_size="1k"),
    )

    root = configure_logging(settings)
    LoggerAdapter("test").debug("rotating sink message")
    for handler in root.handlers:
        handler.flush()

    assert isinstance(root.handlers[0], RotatingFileSink)
    assert root.handlers[0].retention == LogRetention(7, "files")
    assert root.handlers[0].max_bytes == 1024
    assert "rotating sink message" in log_file.read_text(encoding="utf-8")


def test_silent_level_drops_everything(tmp_path):
    log_file = tmp_path / "gateway.log"
    settings = LoggingSettings(level=LogLevel.SILENT, rotation=RotationDescriptor(filename=str(log_file)))

    configure_logging(settings)
    LoggerAdapter("test").error("should not appear")

    assert not log_file.exists() or log_file.read_text(encoding="utf-8") == ""


def test_size_rollover_keeps_previous_file(tmp_path):
    log_file = tmp_path / "gateway.log"
    sink = RotatingFileSink(str(log_file), max_bytes=64)
    sink.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.size_test")
    logger.propagate = False
    logger.addHandler(sink)
    try:
        for index in range(10):
            logger.warning("message number %02d with padding", index)
    finally:
        logger.removeHandler(sink)
        sink.close()

    rotated = [path for path in tmp_path.iterdir() if path.name != "gateway.log"]
    assert rotated
    assert all(sink.extMatch.match(path.name[len("gateway.log."):]) for path in rotated)


def test_convert_date_format():
    assert convert_date_format("YYYY-MM-DD") == "%Y-%m-%d"
    assert convert_date_format("YYYYMMDD-HHmmss") == "%Y%m%d-%H%M%S"
    assert convert_date_format("DD%") == "%d%%"


@pytest.mark.parametrize(
    "frequency, date_format, when",
    [
        (RotationFrequency.DAILY, "YYYY-MM-DD-HH", "midnight"),
        (RotationFrequency.TEST, "YYYY-MM-DD", "M"),
        (RotationFrequency.CUSTOM, "YYYY-MM-DD-HH", "H"),
        (RotationFrequency.CUSTOM, "YYYY-MM-DD-HH-mm", "M"),
        (RotationFrequency.CUSTOM, "YYYY-MM-DD", "midnight"),
    ],
)
def test_rollover_interval(frequency, date_format, when):
    assert rollover_interval(frequency, date_format) == when


def test_parse_rotation_limits():
    assert parse_max_size(None) == 0
    assert parse_max_size("512") == 512
    assert parse_max_size("10k") == 10 * 1024
    assert parse_max_size("5M") == 5 * 1024 ** 2
    assert parse_max_logs(None) is None
    assert parse_max_logs("10") == LogRetention(10, "files")
    assert parse_max_logs("14d") == LogRetention(14, "days")

    with pytest.raises(ValueError):
        parse_max_size("ten megabytes")
    with pytest.raises(ValueError):
        parse_max_logs("many")


def _write_messages(sink, count):
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.retention_test")
    logger.propagate = False
    logger.addHandler(sink)
    try:
        for index in range(count):
            logger.warning("retention message %03d", index)
    finally:
        logger.removeHandler(sink)
        sink.close()


def _age_file(path, days):
    path.write_text("old\n", encoding="utf-8")
    past = time.time() - days * 86400
    os.utime(path, (past, past))


def test_date_placeholder_in_filename_is_substituted(tmp_path):
    settings = LoggingSettings(rotation=RotationDescriptor(filename=str(tmp_path / "app-%DATE%.log")))

    root = configure_logging(settings)
    LoggerAdapter("test").info("dated file message")
    for handler in root.handlers:
        handler.flush()

    expected = f"app-{time.strftime('%Y-%m-%d')}.log"
    assert os.listdir(tmp_path) == [expected]
    assert "dated file message" in (tmp_path / expected).read_text(encoding="utf-8")


def test_date_placeholder_with_size_rollover(tmp_path):
    sink = create_rotating_sink(
        RotationDescriptor(filename=str(tmp_path / "app-%DATE%.log"), max_size="64")
    )
    sink.setFormatter(logging.Formatter("%(message)s"))

    _write_messages(sink, 10)

    today = f"app-{time.strftime('%Y-%m-%d')}.log"
    names = sorted(os.listdir(tmp_path))
    assert today in names
    assert f"{today}.1" in names
    assert not any("%DATE%" in name for name in names)


def test_day_retention_keeps_recent_files_under_test_frequency(tmp_path):
    log_file = tmp_path / "gateway.log"
    _age_file(tmp_path / "gateway.log.2020-01-01", days=20)
    _age_file(tmp_path / "gateway.log.2020-01-02", days=2)
    sink = create_rotating_sink(
        RotationDescriptor(
            filename=str(log_file),
            frequency=RotationFrequency.TEST,
            max_logs="14d",
            max_size="64",
        )
    )
    sink.setFormatter(logging.Formatter("%(message)s"))

    _write_messages(sink, 60)

    rotated = sink.rotated_files()
    assert str(tmp_path / "gateway.log.2020-01-01") not in rotated
    assert str(tmp_path / "gateway.log.2020-01-02") in rotated
    assert len(rotated) > 14


def test_day_retention_with_dated_filename(tmp_path):
    _age_file(tmp_path / "app-2020-01-01.log", days=30)
    sink = create_rotating_sink(
        RotationDescriptor(filename=str(tmp_path / "app-%DATE%.log"), max_logs="7d", max_size="64")
    )
    sink.setFormatter(logging.Formatter("%(message)s"))

    _write_messages(sink, 10)

    assert not (tmp_path / "app-2020-01-01.log").exists()


def test_file_count_retention(tmp_path):
    sink = create_rotating_sink(
        RotationDescriptor(filename=str(tmp_path / "gateway.log"), max_logs="3", max_size="64")
    )
    sink.setFormatter(logging.Formatter("%(message)s"))

    _write_messages(sink, 40)

    assert len(sink.rotated_files()) == 3
