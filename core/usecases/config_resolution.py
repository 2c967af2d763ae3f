"""
설정 해석 유즈케이스

원시 환경 변수로부터 최종 런타임 설정(ResolvedConfig)을 조립합니다.
- 1단계: 환경 변수 스키마 검증
- 2단계: CORS / JWT / Bearer 토큰 파생 설정
- 3단계: 로그 로테이션 파라미터
- 4단계: TLS 자료 로드 (비동기)

어느 단계에서든 오류가 발생하면 부분 설정을 반환하지 않고 예외를 전파합니다.
"""

from ..domain.entities import (
    LoggingSettings,
    NetworkSettings,
    RawEnvironment,
    ResolvedConfig,
)
from ..domain.ports import FileReaderPort, LoggerPort
from .derived_settings import build_auth_key_set, build_cors_settings, build_jwt_settings
from .environment_validation import validate_environment
from .log_stream import build_log_stream
from .tls_material import TlsMaterialLoader


class ConfigResolutionUseCase:
    """설정 해석 유즈케이스"""

    def __init__(self, file_reader: FileReaderPort, logger: LoggerPort):
        self.logger = logger
        self.tls_loader = TlsMaterialLoader(file_reader=file_reader, logger=logger)

    async def resolve(self, raw: RawEnvironment) -> ResolvedConfig:
        """
        런타임 설정을 해석합니다.

        Args:
            raw: 원시 환경 변수 매핑

        Returns:
            ResolvedConfig: 변경 불가능한 최종 설정

        Raises:
            ValidationError: 스키마 위반
            MalformedListError: JSON 배열 형식 오류
            TlsMaterialError: TLS 파일 읽기 실패
        """
        validated = validate_environment(raw)
        self.logger.debug(f"환경 변수 검증 완료: NODE_ENV={validated.node_env}")

        cors = build_cors_settings(validated)
        jwt = build_jwt_settings(validated)
        auth_keys = build_auth_key_set(validated)
        self.logger.debug(f"파생 설정 생성 완료: bearer 토큰 {len(auth_keys)}개")

        rotation = build_log_stream(validated)
        if rotation is not None:
            self.logger.debug(f"로그 로테이션 설정: {rotation.filename} ({rotation.frequency.value})")

        tls = await self.tls_loader.load(validated)

        config = ResolvedConfig(
            network=NetworkSettings(host=validated.service_host, port=validated.service_port),
            logging=LoggingSettings(level=validated.log_level, rotation=rotation),
            cors=cors,
            jwt=jwt,
            auth_keys=auth_keys,
            tls=tls,
            redirect_url=validated.service_redirect_url,
            is_production=validated.is_production,
        )

        self.logger.info(
            f"설정 해석 완료: {config.network.host}:{config.network.port} "
            f"(production={config.is_production}, tls={config.is_tls_enabled()})"
        )
        return config
