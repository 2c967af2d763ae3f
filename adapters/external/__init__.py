"""
외부 자원 어댑터 패키지

파일 시스템과 로그 파일 싱크를 담당하는 어댑터들을 포함합니다.
"""

from .file_reader import LocalFileReaderAdapter
from .rotating_file_sink import RotatingFileSink, create_rotating_sink

__all__ = [
    "LocalFileReaderAdapter",
    "RotatingFileSink",
    "create_rotating_sink",
]
