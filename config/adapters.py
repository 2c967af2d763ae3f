"""
설정 어댑터

프로세스 환경 변수와 .env 파일을 읽어 원시 환경 변수 매핑을 만들고,
설정 해석 유즈케이스를 통해 프로세스 전역 런타임 설정을 한 번 초기화합니다.

환경 변수 읽기는 이 모듈에서만 수행하며, Core에는 명시적인 매핑만 전달합니다.
"""

from typing import Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.entities import RawEnvironment, ResolvedConfig
from adapters.factory import AdapterFactory

DEFAULT_ENV_FILE = ".env"


class RawEnvironmentSettings(BaseSettings):
    """선언된 환경 변수를 문자열 그대로 읽는 설정 소스"""

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # 서비스 설정
    NODE_ENV: Optional[str] = None
    SERVICE_HOST: Optional[str] = None
    SERVICE_PORT: Optional[str] = None
    SERVICE_REDIRECT_URL: Optional[str] = None

    # HTTPS 설정
    HTTPS_PFX_PASSPHRASE: Optional[str] = None
    HTTPS_PFX_FILE_PATH: Optional[str] = None
    HTTPS_SSL_CERT_PATH: Optional[str] = None
    HTTPS_SSL_KEY_PATH: Optional[str] = None

    # CORS 설정
    CORS_ORIGIN: Optional[str] = None
    CORS_METHODS: Optional[str] = None
    CORS_ALLOWED_HEADERS: Optional[str] = None
    CORS_EXPOSED_HEADERS: Optional[str] = None

    # 로깅 설정
    LOG_LEVEL: Optional[str] = None
    LOG_ROTATION_DATE_FORMAT: Optional[str] = None
    LOG_ROTATION_FILENAME: Optional[str] = None
    LOG_ROTATION_FREQUENCY: Optional[str] = None
    LOG_ROTATION_MAX_LOGS: Optional[str] = None
    LOG_ROTATION_MAX_SIZE: Optional[str] = None

    # 인증 설정
    AUTH_BEARER_TOKEN_ARRAY: Optional[str] = None
    JWKS_ENDPOINT: Optional[str] = None
    JWT_ALLOWED_AUDIENCE: Optional[str] = None
    JWT_ALLOWED_ALGO_ARRAY: Optional[str] = None
    JWT_ALLOWED_ISSUERS: Optional[str] = None
    JWT_MAX_AGE: Optional[str] = None


def load_raw_environment(env_file: Optional[str] = DEFAULT_ENV_FILE) -> Dict[str, str]:
    """
    프로세스 환경 변수와 .env 파일에서 선언된 변수만 읽어옵니다.

    같은 변수가 양쪽에 있으면 프로세스 환경 변수가 우선합니다.
    설정되지 않은 변수는 결과에 포함되지 않습니다.
    """
    settings = RawEnvironmentSettings(_env_file=env_file)
    return settings.model_dump(exclude_none=True)


# 전역 설정 인스턴스
_config: Optional[ResolvedConfig] = None


def get_config() -> ResolvedConfig:
    """전역 설정 인스턴스를 반환합니다."""
    if _config is None:
        raise RuntimeError("설정이 초기화되지 않았습니다")
    return _config


async def initialize_config(
    raw: Optional[RawEnvironment] = None,
    env_file: Optional[str] = DEFAULT_ENV_FILE,
    factory: Optional[AdapterFactory] = None,
) -> ResolvedConfig:
    """
    설정을 초기화합니다. 프로세스당 한 번만 호출할 수 있습니다.

    Args:
        raw: 원시 환경 변수 매핑 (없으면 프로세스 환경과 env_file에서 읽음)
        env_file: .env 파일 경로
        factory: 어댑터 팩토리

    Raises:
        RuntimeError: 이미 초기화된 경우
        ConfigResolutionError: 설정 해석 실패
    """
    global _config
    if _config is not None:
        raise RuntimeError("설정이 이미 초기화되었습니다")

    if raw is None:
        raw = load_raw_environment(env_file)
    factory = factory or AdapterFactory()

    usecase = factory.create_config_resolution_usecase()
    _config = await usecase.resolve(raw)
    return _config
