"""
환경 변수 검증 유즈케이스

원시 환경 변수 매핑을 스키마에 따라 검증하고 기본값을 적용합니다.
첫 번째 오류에서 멈추지 않고 모든 위반 사항을 모아 한 번에 보고합니다.
"""

from typing import List

from pydantic import ValidationError as PydanticValidationError

from ..domain.entities import RawEnvironment, ValidatedEnvironment
from ..domain.errors import FieldError, ValidationError


def _to_field_errors(exc: PydanticValidationError) -> List[FieldError]:
    """Pydantic 오류 목록을 필드 오류로 변환"""
    field_errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "<environment>"
        if error["type"] == "missing":
            message = "필수 환경 변수가 설정되지 않았습니다"
        else:
            message = error["msg"]
        field_errors.append(FieldError(field=field, message=message))
    return field_errors


def validate_environment(raw: RawEnvironment) -> ValidatedEnvironment:
    """
    원시 환경 변수를 검증합니다.

    Args:
        raw: 변수명 -> 문자열 값 매핑 (변경하지 않음)

    Returns:
        ValidatedEnvironment: 타입이 지정된 검증 결과

    Raises:
        ValidationError: 필수 필드 누락, 타입 또는 열거값 불일치
    """
    try:
        return ValidatedEnvironment.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise ValidationError(_to_field_errors(e)) from e
