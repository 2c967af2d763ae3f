"""
파일 읽기 어댑터

FileReaderPort를 로컬 파일 시스템으로 구현합니다.
블로킹 읽기는 워커 스레드에서 수행하여 이벤트 루프를 막지 않습니다.
"""

import asyncio

from core.domain.ports import FileReaderPort


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class LocalFileReaderAdapter(FileReaderPort):
    """로컬 파일 읽기 어댑터"""

    async def read_bytes(self, path: str) -> bytes:
        """파일 전체를 읽습니다. 핸들은 읽기 직후 닫힙니다."""
        return await asyncio.to_thread(_read_file, path)
