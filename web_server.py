"""
FastAPI 웹 서버

해석된 런타임 설정(ResolvedConfig)으로 FastAPI 앱을 구성하고 uvicorn으로 실행합니다.
"""

import tempfile
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.domain.entities import CorsSettings, LogLevel, ResolvedConfig
from adapters.logger import configure_logging, create_logger
from adapters.web.routes import redirect_router, system_router
from adapters.web.tls import build_ssl_options

VERSION = "1.0.0"

# fastify-cors 기본값과 동일
DEFAULT_CORS_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]

OPENAPI_TAGS = [
    {
        "name": "Redirects",
        "description": "FHIR 리스너로의 리다이렉트 관련 엔드포인트",
    },
    {
        "name": "System Administration",
        "description": "",
    },
]

_UVICORN_LOG_LEVELS = {
    LogLevel.FATAL: "critical",
    LogLevel.ERROR: "error",
    LogLevel.WARN: "warning",
    LogLevel.INFO: "info",
    LogLevel.DEBUG: "debug",
    LogLevel.TRACE: "trace",
    LogLevel.SILENT: "critical",
}

logger = create_logger("web_server")


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def build_cors_options(cors: CorsSettings) -> Optional[Dict[str, Any]]:
    """
    CORS 설정을 CORSMiddleware 옵션으로 변환합니다.

    origin이 False면 None(미들웨어 미사용), True면 요청 오리진을 그대로 허용하고,
    문자열이면 쉼표로 구분된 오리진 목록으로 취급합니다.
    """
    if cors.origin is False:
        return None

    options: Dict[str, Any] = {
        "allow_methods": _split(cors.methods) if cors.methods else DEFAULT_CORS_METHODS,
        "allow_headers": _split(cors.allowed_headers) if cors.allowed_headers else ["*"],
    }
    if cors.origin is True:
        options["allow_origin_regex"] = ".*"
    else:
        options["allow_origins"] = _split(cors.origin)
    if cors.exposed_headers:
        options["expose_headers"] = _split(cors.exposed_headers)
    return options


def create_app(config: ResolvedConfig) -> FastAPI:
    """런타임 설정으로 FastAPI 앱을 생성합니다."""
    app = FastAPI(
        title="fhir-auth-gateway",
        description="Bearer 토큰 인증 후 FHIR 리스너로 리다이렉트하는 게이트웨이",
        version=VERSION,
        contact={
            "name": "Solutions Development Team",
            "email": "servicedesk@ydh.nhs.uk",
        },
        license_info={"name": "MIT"},
        openapi_tags=OPENAPI_TAGS,
        docs_url=None if config.is_production else "/docs",
        redoc_url=None,
    )
    app.state.config = config

    cors_options = build_cors_options(config.cors)
    if cors_options is not None:
        app.add_middleware(CORSMiddleware, **cors_options)

    app.include_router(system_router)
    app.include_router(redirect_router)
    return app


def run_server(config: ResolvedConfig) -> None:
    """로깅을 구성하고 uvicorn으로 서버를 실행합니다."""
    configure_logging(config.logging)
    app = create_app(config)

    # PEM 파일은 서버 종료 시 함께 삭제
    with tempfile.TemporaryDirectory(prefix="fhir-auth-gateway-tls-") as tls_dir:
        ssl_options = build_ssl_options(config.tls, tls_dir)
        scheme = "https" if ssl_options else "http"
        logger.info(f"서버 시작: {scheme}://{config.network.host}:{config.network.port}")

        uvicorn.run(
            app,
            host=config.network.host,
            port=config.network.port,
            log_level=_UVICORN_LOG_LEVELS[config.logging.level],
            **ssl_options,
        )


if __name__ == "__main__":
    from main import app as cli

    cli(["serve"])
