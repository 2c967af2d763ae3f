"""
로그 스트림 유즈케이스

로그 로테이션 관련 환경 변수로부터 로테이션 파라미터를 조립합니다.
실제 파일 쓰기는 외부 로테이션 싱크가 담당하며 여기서는 I/O를 수행하지 않습니다.
"""

from typing import Optional

from ..domain.entities import RotationDescriptor, ValidatedEnvironment


def build_log_stream(validated: ValidatedEnvironment) -> Optional[RotationDescriptor]:
    """LOG_ROTATION_FILENAME이 설정된 경우에만 로테이션 파라미터를 반환합니다."""
    if validated.log_rotation_filename is None:
        return None

    return RotationDescriptor(
        filename=validated.log_rotation_filename,
        date_format=validated.log_rotation_date_format,
        frequency=validated.log_rotation_frequency,
        # 이전 버전은 오타 이름 LOG_ROTATION_MAX_LOG를 읽어 보관 정책이 항상 무시되었음
        max_logs=validated.log_rotation_max_logs,
        max_size=validated.log_rotation_max_size,
    )
