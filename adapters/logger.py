"""
로거 어댑터

Core 레이어의 LoggerPort를 구현하는 Python 표준 로깅 어댑터입니다.
LOG_LEVEL 값(fatal, error, warn, info, debug, trace, silent)을
표준 로깅 레벨로 변환하고, 로테이션 설정이 있으면 파일 싱크로 출력합니다.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Union

from core.domain.entities import LoggingSettings, LogLevel
from core.domain.ports import LoggerPort
from adapters.external.rotating_file_sink import create_rotating_sink

ROOT_LOGGER_NAME = "fhir_auth_gateway"

TRACE = 5
SILENT = logging.CRITICAL + 10
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    LogLevel.FATAL: logging.CRITICAL,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: TRACE,
    LogLevel.SILENT: SILENT,
}

_LABELS = {
    logging.CRITICAL: "fatal",
    logging.ERROR: "error",
    logging.WARNING: "warn",
    logging.INFO: "info",
    logging.DEBUG: "debug",
    TRACE: "trace",
}


def to_stdlib_level(level: Union[str, LogLevel]) -> int:
    """LOG_LEVEL 값을 표준 로깅 레벨로 변환"""
    return _LEVELS[LogLevel(level)]


class IsoTimeFormatter(logging.Formatter):
    """ISO-8601 시각과 소문자 레벨 라벨을 사용하는 포매터"""

    def __init__(self):
        super().__init__("%(asctime)s - %(name)s - %(level_label)s - %(message)s")

    def formatTime(self, record, datefmt=None):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record):
        record.level_label = _LABELS.get(record.levelno, record.levelname.lower())
        return super().format(record)


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(IsoTimeFormatter())
    return handler


class LoggerAdapter(LoggerPort):
    """Python 표준 로깅을 사용하는 로거 어댑터"""

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self.logger = logging.getLogger(name)

        # 설정 해석 전에도 출력되도록 기본 콘솔 핸들러 추가
        root = logging.getLogger(ROOT_LOGGER_NAME)
        if not root.handlers:
            root.addHandler(_console_handler())
            root.setLevel(logging.INFO)
            root.propagate = False

    def info(self, message: str, **kwargs) -> None:
        """정보 로그"""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """경고 로그"""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs) -> None:
        """오류 로그"""
        self.logger.error(message, extra=kwargs)

    def debug(self, message: str, **kwargs) -> None:
        """디버그 로그"""
        self.logger.debug(message, extra=kwargs)


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """
    해석된 로깅 설정을 서비스 루트 로거에 적용합니다.

    기존 핸들러는 닫고 교체합니다. 로테이션 설정이 있으면 파일 싱크,
    없으면 표준 출력으로 기록합니다.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if settings.rotation is not None:
        handler = create_rotating_sink(settings.rotation)
        handler.setFormatter(IsoTimeFormatter())
    else:
        handler = _console_handler()

    root.addHandler(handler)
    root.setLevel(to_stdlib_level(settings.level))
    root.propagate = False
    return root


def create_logger(name: str = ROOT_LOGGER_NAME) -> LoggerPort:
    """로거 인스턴스를 생성합니다."""
    return LoggerAdapter(name)
