"""
설정 해석 오류 정의

환경 변수 검증, JSON 목록 파싱, TLS 파일 로드 과정에서 발생하는 오류입니다.
모든 오류는 복구 불가능하며 프로세스 진입점까지 전파되어 시작을 중단시킵니다.
"""

from dataclasses import dataclass
from typing import List, Sequence


class ConfigResolutionError(Exception):
    """설정 해석 오류 기본 클래스"""


@dataclass(frozen=True)
class FieldError:
    """개별 필드 검증 오류"""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(ConfigResolutionError):
    """환경 변수 스키마 위반 (필수 필드 누락, 타입 또는 열거값 불일치)"""

    def __init__(self, field_errors: Sequence[FieldError]):
        self.field_errors: List[FieldError] = list(field_errors)
        details = "; ".join(str(error) for error in self.field_errors)
        super().__init__(f"환경 변수 검증 실패: {details}")

    @property
    def fields(self) -> List[str]:
        """오류가 발생한 필드 이름 목록"""
        return [error.field for error in self.field_errors]


class MalformedListError(ConfigResolutionError):
    """JSON 배열 형식 환경 변수의 파싱 실패"""

    def __init__(self, variable: str, reason: str):
        self.variable = variable
        self.reason = reason
        super().__init__(f"{variable} 값이 올바른 JSON 배열이 아닙니다: {reason}")


class TlsMaterialError(ConfigResolutionError):
    """TLS 인증서/키/PFX 파일 읽기 실패"""

    def __init__(self, path: str, material: str, reason: str = ""):
        self.path = path
        self.material = material
        self.reason = reason
        message = f"{material} 파일을 읽을 수 없습니다: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
