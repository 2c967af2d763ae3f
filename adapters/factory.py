"""
어댑터 팩토리

어댑터들을 생성하고 유즈케이스에 의존성을 주입하는 팩토리 클래스입니다.
"""

from typing import Optional

from core.domain.ports import FileReaderPort, LoggerPort
from core.usecases.config_resolution import ConfigResolutionUseCase

from .external.file_reader import LocalFileReaderAdapter
from .logger import LoggerAdapter


class AdapterFactory:
    """어댑터 팩토리"""

    def __init__(
        self,
        file_reader: Optional[FileReaderPort] = None,
        logger: Optional[LoggerPort] = None,
    ):
        self._file_reader = file_reader
        self._logger = logger

    def create_logger(self) -> LoggerPort:
        """로거 어댑터를 생성합니다."""
        if self._logger is None:
            self._logger = LoggerAdapter(name="config")
        return self._logger

    def create_file_reader(self) -> FileReaderPort:
        """파일 읽기 어댑터를 생성합니다."""
        if self._file_reader is None:
            self._file_reader = LocalFileReaderAdapter()
        return self._file_reader

    def create_config_resolution_usecase(self) -> ConfigResolutionUseCase:
        """설정 해석 유즈케이스를 생성합니다."""
        return ConfigResolutionUseCase(
            file_reader=self.create_file_reader(),
            logger=self.create_logger(),
        )
