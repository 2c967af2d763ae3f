"""
FastAPI 라우터

헬스체크와 리다이렉트 엔드포인트를 제공합니다.
설정은 앱 상태(app.state.config)에 보관된 ResolvedConfig를 사용합니다.
"""

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from core.domain.entities import ResolvedConfig
from adapters.logger import create_logger

system_router = APIRouter(tags=["System Administration"])
redirect_router = APIRouter(tags=["Redirects"])
logger = create_logger("web")


def get_app_config(request: Request) -> ResolvedConfig:
    """앱에 등록된 런타임 설정을 반환하는 의존성 주입 함수"""
    return request.app.state.config


def require_bearer_token(
    authorization: Optional[str] = Header(None),
    config: ResolvedConfig = Depends(get_app_config),
) -> None:
    """Bearer 토큰이 설정된 경우 Authorization 헤더를 검증합니다."""
    if not config.is_bearer_auth_enabled():
        return

    scheme, _, token = (authorization or "").partition(" ")
    valid = scheme.lower() == "bearer" and any(
        secrets.compare_digest(token.strip().encode(), key.encode()) for key in config.auth_keys
    )
    if not valid:
        logger.warning("Bearer 토큰 인증 실패")
        raise HTTPException(
            status_code=401,
            detail="유효한 Bearer 토큰이 필요합니다",
            headers={"WWW-Authenticate": "Bearer"},
        )


@system_router.get("/healthcheck", response_class=PlainTextResponse)
async def healthcheck():
    """헬스체크"""
    return "ok"


@redirect_router.get("/redirect", dependencies=[Depends(require_bearer_token)])
async def redirect(request: Request, config: ResolvedConfig = Depends(get_app_config)):
    """설정된 리다이렉트 URL로 쿼리 문자열을 유지한 채 이동합니다."""
    if not config.redirect_url:
        raise HTTPException(status_code=503, detail="리다이렉트 URL이 설정되지 않았습니다")

    target = config.redirect_url
    if request.url.query:
        separator = "&" if "?" in target else "?"
        target = f"{target}{separator}{request.url.query}"

    logger.debug(f"리다이렉트: {target}")
    return RedirectResponse(url=target, status_code=302)
