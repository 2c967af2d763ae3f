"""
로테이션 파일 싱크

RotationDescriptor를 받아 날짜와 크기 기준으로 로그 파일을 교체하는
표준 로깅 핸들러를 생성합니다.

- daily: 자정마다 교체
- test: 1분마다 교체
- custom: 날짜 형식의 가장 작은 단위(초/분/시/일)마다 교체

파일명에 %DATE%가 있으면 현재 날짜로 치환한 파일에 기록합니다.
LOG_ROTATION_MAX_LOGS는 "10"(파일 10개) 또는 "10d"(10일)로 보관 정책을 정합니다.
"""

import logging
import os
import re
import time
from logging.handlers import TimedRotatingFileHandler
from typing import List, NamedTuple, Optional

from core.domain.entities import RotationDescriptor, RotationFrequency

DATE_PLACEHOLDER = "%DATE%"

# 날짜 형식 토큰 -> (strftime 지시자, 파일명 매칭 정규식)
_DATE_TOKENS = {
    "YYYY": ("%Y", r"\d{4}"),
    "YY": ("%y", r"\d{2}"),
    "MM": ("%m", r"\d{2}"),
    "DD": ("%d", r"\d{2}"),
    "HH": ("%H", r"\d{2}"),
    "mm": ("%M", r"\d{2}"),
    "ss": ("%S", r"\d{2}"),
}
_DATE_TOKEN_PATTERN = re.compile("|".join(sorted(_DATE_TOKENS, key=len, reverse=True)))

_SIZE_UNITS = {"": 1, "k": 1024, "m": 1024 ** 2, "g": 1024 ** 3}
_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([kmg]?)\s*$", re.IGNORECASE)
_MAX_LOGS_PATTERN = re.compile(r"^\s*(\d+)\s*(d?)\s*$", re.IGNORECASE)


def convert_date_format(date_format: str) -> str:
    """날짜 형식(YYYY-MM-DD 등)을 strftime 형식으로 변환"""
    parts = []
    position = 0
    for match in _DATE_TOKEN_PATTERN.finditer(date_format):
        parts.append(date_format[position:match.start()].replace("%", "%%"))
        parts.append(_DATE_TOKENS[match.group()][0])
        position = match.end()
    parts.append(date_format[position:].replace("%", "%%"))
    return "".join(parts)


def _date_regex(date_format: str) -> str:
    parts = []
    position = 0
    for match in _DATE_TOKEN_PATTERN.finditer(date_format):
        parts.append(re.escape(date_format[position:match.start()]))
        parts.append(_DATE_TOKENS[match.group()][1])
        position = match.end()
    parts.append(re.escape(date_format[position:]))
    return "".join(parts)


def _suffix_pattern(date_format: str, before: str = "", after: str = "") -> "re.Pattern[str]":
    # 같은 주기 안에서 크기 기준으로 교체된 파일은 .1, .2 ... 가 붙음
    body = re.escape(before) + _date_regex(date_format) + re.escape(after)
    return re.compile("^" + body + r"(\.\d+)?$", re.ASCII)


def rollover_interval(frequency: RotationFrequency, date_format: str) -> str:
    """로테이션 주기를 TimedRotatingFileHandler의 when 값으로 변환"""
    if frequency == RotationFrequency.TEST:
        return "M"
    if frequency == RotationFrequency.CUSTOM:
        if "ss" in date_format:
            return "S"
        if "mm" in date_format:
            return "M"
        if "HH" in date_format:
            return "H"
    return "midnight"


def parse_max_size(value: Optional[str]) -> int:
    """파일 최대 크기("10k", "5m", "1g")를 바이트로 변환. 값이 없으면 0(무제한)"""
    if value is None:
        return 0
    match = _SIZE_PATTERN.match(value)
    if not match:
        raise ValueError(f"LOG_ROTATION_MAX_SIZE 형식이 잘못되었습니다: {value}")
    return int(match.group(1)) * _SIZE_UNITS[match.group(2).lower()]


class LogRetention(NamedTuple):
    """보관 정책. unit이 "files"면 개수, "days"면 일수 기준"""

    amount: int
    unit: str = "files"


def parse_max_logs(value: Optional[str]) -> Optional[LogRetention]:
    """보관 정책("10"은 파일 10개, "10d"는 10일)을 변환. 값이 없으면 None(무제한)"""
    if value is None:
        return None
    match = _MAX_LOGS_PATTERN.match(value)
    if not match:
        raise ValueError(f"LOG_ROTATION_MAX_LOGS 형식이 잘못되었습니다: {value}")
    return LogRetention(int(match.group(1)), "days" if match.group(2) else "files")


def _format_date(strftime_format: str, timestamp: float, utc: bool = False) -> str:
    moment = time.gmtime(timestamp) if utc else time.localtime(timestamp)
    return time.strftime(strftime_format, moment)


class RotatingFileSink(TimedRotatingFileHandler):
    """
    날짜와 크기 기준으로 교체되는 파일 핸들러

    파일명에 %DATE%가 있으면 현재 날짜로 치환한 파일에 기록하고, 교체 시
    새 날짜의 파일을 엽니다. 없으면 교체된 파일에 날짜 접미사를 붙입니다.
    """

    def __init__(
        self,
        filename: str,
        when: str = "midnight",
        retention: Optional[LogRetention] = None,
        max_bytes: int = 0,
        date_format: str = "YYYY-MM-DD",
    ):
        self.filename_pattern = os.path.abspath(filename)
        os.makedirs(os.path.dirname(self.filename_pattern), exist_ok=True)

        self.dated = DATE_PLACEHOLDER in os.path.basename(self.filename_pattern)
        date_suffix = convert_date_format(date_format)
        if self.dated:
            initial = self.filename_pattern.replace(DATE_PLACEHOLDER, _format_date(date_suffix, time.time()))
        else:
            initial = self.filename_pattern

        # 오래된 파일 삭제는 getFilesToDelete에서 retention 기준으로 처리
        super().__init__(initial, when=when, backupCount=0, encoding="utf-8", delay=True)
        self.retention = retention
        self.max_bytes = max_bytes
        self.suffix = date_suffix

        self.directory, pattern_name = os.path.split(self.filename_pattern)
        if self.dated:
            before, _, after = pattern_name.partition(DATE_PLACEHOLDER)
            self.rotated_prefix = ""
            self.extMatch = _suffix_pattern(date_format, before, after)
        else:
            self.rotated_prefix = f"{pattern_name}."
            self.extMatch = _suffix_pattern(date_format)

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        if super().shouldRollover(record):
            return True
        if self.max_bytes <= 0:
            return False

        if self.stream is None:
            self.stream = self._open()
        message = f"{self.format(record)}\n"
        self.stream.seek(0, 2)
        position = self.stream.tell()
        return position > 0 and position + len(message.encode(self.encoding or "utf-8")) > self.max_bytes

    def rotation_filename(self, default_name: str) -> str:
        name = super().rotation_filename(default_name)
        if not os.path.exists(name):
            return name

        index = 1
        while os.path.exists(f"{name}.{index}"):
            index += 1
        return f"{name}.{index}"

    def doRollover(self) -> None:
        if self.dated:
            self._open_next_dated_file()
        else:
            super().doRollover()

        for path in self.getFilesToDelete():
            os.remove(path)

    def _open_next_dated_file(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        now = int(time.time())
        dated_name = self.filename_pattern.replace(
            DATE_PLACEHOLDER, _format_date(self.suffix, now, self.utc)
        )
        # 같은 날짜 안에서 크기 기준으로 교체되면 .1, .2 ... 파일로 넘어감
        self.baseFilename = self.rotation_filename(dated_name)

        next_rollover = self.computeRollover(now)
        while next_rollover <= now:
            next_rollover += self.interval
        self.rolloverAt = next_rollover

    def rotated_files(self) -> List[str]:
        """현재 기록 중인 파일을 제외한 교체된 로그 파일 목록"""
        files = []
        for name in os.listdir(self.directory):
            path = os.path.join(self.directory, name)
            if path == self.baseFilename or not name.startswith(self.rotated_prefix):
                continue
            if self.extMatch.match(name[len(self.rotated_prefix):]):
                files.append(path)
        return files

    def getFilesToDelete(self) -> List[str]:
        if self.retention is None:
            return []

        files = self.rotated_files()
        if self.retention.unit == "days":
            cutoff = time.time() - self.retention.amount * 86400
            return [path for path in files if os.path.getmtime(path) < cutoff]

        files.sort(key=lambda path: (os.path.getmtime(path), path))
        return files[:max(len(files) - self.retention.amount, 0)]


def create_rotating_sink(descriptor: RotationDescriptor) -> RotatingFileSink:
    """로테이션 파라미터로부터 파일 핸들러를 생성합니다."""
    return RotatingFileSink(
        filename=descriptor.filename,
        when=rollover_interval(descriptor.frequency, descriptor.date_format),
        retention=parse_max_logs(descriptor.max_logs),
        max_bytes=parse_max_size(descriptor.max_size),
        date_format=descriptor.date_format,
    )
