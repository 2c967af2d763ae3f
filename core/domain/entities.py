"""
도메인 엔티티 정의

런타임 설정을 구성하는 값 객체들을 정의합니다.
모든 엔티티는 Pydantic 모델을 기반으로 하며, 한 번 생성되면 변경할 수 없습니다.
"""

from enum import Enum
from typing import Annotated, Any, FrozenSet, Literal, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, conint, field_validator, model_validator


# 원시 환경 변수 매핑 (변수명 -> 문자열 값, 값이 없으면 None)
RawEnvironment = Mapping[str, Optional[str]]


class LogLevel(str, Enum):
    """로그 레벨"""
    FATAL = "fatal"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"
    SILENT = "silent"


class RotationFrequency(str, Enum):
    """로그 로테이션 주기"""
    CUSTOM = "custom"
    DAILY = "daily"
    TEST = "test"


class ValidatedEnvironment(BaseModel):
    """스키마 검증을 통과한 환경 변수"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # 서비스 설정 (필수)
    node_env: str = Field(..., alias="NODE_ENV", description="실행 환경")
    service_host: str = Field(..., alias="SERVICE_HOST", description="서비스 호스트")
    service_port: conint(gt=0, le=65535) = Field(..., alias="SERVICE_PORT", description="서비스 포트")
    service_redirect_url: Optional[str] = Field(None, alias="SERVICE_REDIRECT_URL", description="리다이렉트 대상 URL")

    # HTTPS 설정
    https_pfx_passphrase: Optional[str] = Field(None, alias="HTTPS_PFX_PASSPHRASE")
    https_pfx_file_path: Optional[str] = Field(None, alias="HTTPS_PFX_FILE_PATH")
    https_ssl_cert_path: Optional[str] = Field(None, alias="HTTPS_SSL_CERT_PATH")
    https_ssl_key_path: Optional[str] = Field(None, alias="HTTPS_SSL_KEY_PATH")

    # CORS 설정
    cors_origin: Optional[str] = Field(None, alias="CORS_ORIGIN")
    cors_methods: Optional[str] = Field(None, alias="CORS_METHODS")
    cors_allowed_headers: Optional[str] = Field(None, alias="CORS_ALLOWED_HEADERS")
    cors_exposed_headers: Optional[str] = Field(None, alias="CORS_EXPOSED_HEADERS")

    # 로깅 설정
    log_level: LogLevel = Field(default=LogLevel.INFO, alias="LOG_LEVEL")
    log_rotation_date_format: str = Field(default="YYYY-MM-DD", alias="LOG_ROTATION_DATE_FORMAT")
    log_rotation_filename: Optional[str] = Field(None, alias="LOG_ROTATION_FILENAME")
    log_rotation_frequency: RotationFrequency = Field(
        default=RotationFrequency.DAILY,
        alias="LOG_ROTATION_FREQUENCY",
    )
    log_rotation_max_logs: Optional[str] = Field(None, alias="LOG_ROTATION_MAX_LOGS")
    log_rotation_max_size: Optional[str] = Field(None, alias="LOG_ROTATION_MAX_SIZE")

    # 인증 설정
    auth_bearer_token_array: Optional[str] = Field(None, alias="AUTH_BEARER_TOKEN_ARRAY")
    jwks_endpoint: Optional[str] = Field(None, alias="JWKS_ENDPOINT")
    jwt_allowed_audience: Optional[str] = Field(None, alias="JWT_ALLOWED_AUDIENCE")
    jwt_allowed_algo_array: Optional[str] = Field(None, alias="JWT_ALLOWED_ALGO_ARRAY")
    jwt_allowed_issuers: Optional[str] = Field(None, alias="JWT_ALLOWED_ISSUERS")
    jwt_max_age: Optional[str] = Field(None, alias="JWT_MAX_AGE")

    @model_validator(mode="before")
    @classmethod
    def drop_unset_values(cls, data: Any) -> Any:
        """빈 문자열과 None 값은 설정되지 않은 것으로 취급"""
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value not in (None, "")}
        return data

    @field_validator("jwks_endpoint")
    @classmethod
    def validate_jwks_endpoint(cls, v):
        """JWKS 엔드포인트 URI 형식 검증"""
        if v is None:
            return v
        parsed = urlparse(v)
        if not parsed.scheme or not (parsed.netloc or parsed.path):
            raise ValueError("유효한 URI가 아닙니다")
        return v

    @property
    def is_production(self) -> bool:
        """운영 환경인지 확인"""
        return self.node_env == "production"


class NetworkSettings(BaseModel):
    """HTTP 리스너 주소"""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., description="바인딩 호스트")
    port: conint(gt=0, le=65535) = Field(..., description="바인딩 포트")


class RotationDescriptor(BaseModel):
    """외부 로테이션 싱크에 전달할 파라미터"""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description="로그 파일 경로")
    date_format: str = Field(default="YYYY-MM-DD", description="파일명 날짜 형식")
    frequency: RotationFrequency = Field(default=RotationFrequency.DAILY, description="로테이션 주기")
    max_logs: Optional[str] = Field(None, description="보관할 최대 로그 수")
    max_size: Optional[str] = Field(None, description="파일당 최대 크기")


class LoggingSettings(BaseModel):
    """로깅 설정"""

    model_config = ConfigDict(frozen=True)

    level: LogLevel = Field(default=LogLevel.INFO, description="로그 레벨")
    rotation: Optional[RotationDescriptor] = Field(None, description="파일 로테이션 설정")


class CorsSettings(BaseModel):
    """CORS 미들웨어 설정"""

    model_config = ConfigDict(frozen=True)

    origin: Union[bool, str] = Field(default=False, description="허용 오리진")
    methods: Optional[str] = None
    allowed_headers: Optional[str] = None
    exposed_headers: Optional[str] = None


class JwtSettings(BaseModel):
    """JWT 검증 미들웨어 설정"""

    model_config = ConfigDict(frozen=True)

    jwks_endpoint: Optional[str] = None
    allowed_audiences: Optional[str] = None
    allowed_algorithms: Optional[Tuple[str, ...]] = None
    allowed_issuers: Optional[str] = None
    max_age: Optional[str] = None


class TlsCertKeyPair(BaseModel):
    """인증서/개인키 쌍"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["cert_key_pair"] = "cert_key_pair"
    cert: bytes = Field(..., repr=False)
    key: bytes = Field(..., repr=False)


class TlsPfxBundle(BaseModel):
    """PFX(PKCS#12) 번들"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pfx_bundle"] = "pfx_bundle"
    pfx: bytes = Field(..., repr=False)
    passphrase: str = Field(..., repr=False)


TlsConfig = Annotated[Union[TlsCertKeyPair, TlsPfxBundle], Field(discriminator="kind")]


class ResolvedConfig(BaseModel):
    """서비스 시작 시 한 번 생성되는 최종 런타임 설정"""

    model_config = ConfigDict(frozen=True)

    network: NetworkSettings
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)
    jwt: JwtSettings = Field(default_factory=JwtSettings)
    auth_keys: FrozenSet[str] = Field(default_factory=frozenset, repr=False)
    tls: Optional[TlsConfig] = None
    redirect_url: Optional[str] = None
    is_production: bool = False

    def is_tls_enabled(self) -> bool:
        """TLS 설정 여부 확인"""
        return self.tls is not None

    def is_bearer_auth_enabled(self) -> bool:
        """Bearer 토큰 인증 사용 여부 확인"""
        return len(self.auth_keys) > 0
