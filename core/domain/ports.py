"""
포트 인터페이스 정의

Core 레이어와 외부 어댑터 간의 계약을 정의합니다.
모든 포트는 추상 기본 클래스(ABC)로 정의되어 구현을 강제합니다.
"""

from abc import ABC, abstractmethod


class FileReaderPort(ABC):
    """파일 읽기 포트"""

    @abstractmethod
    async def read_bytes(self, path: str) -> bytes:
        """
        파일 전체를 읽어 반환합니다.

        파일 핸들은 성공/실패와 관계없이 읽기가 끝나면 해제되어야 합니다.
        읽기 실패 시 OSError를 발생시킵니다.
        """
        pass


class LoggerPort(ABC):
    """로거 포트"""

    @abstractmethod
    def info(self, message: str, **kwargs) -> None:
        """정보 로그"""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs) -> None:
        """경고 로그"""
        pass

    @abstractmethod
    def error(self, message: str, **kwargs) -> None:
        """오류 로그"""
        pass

    @abstractmethod
    def debug(self, message: str, **kwargs) -> None:
        """디버그 로그"""
        pass
