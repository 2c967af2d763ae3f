"""
파생 설정 유즈케이스

검증된 환경 변수로부터 CORS, JWT, Bearer 토큰 설정을 만듭니다.
모든 함수는 순수 함수이며 I/O를 수행하지 않습니다.

JSON 배열 형식의 값은 타입이 지정된 파싱 함수를 거쳐
ParsedList(성공) 또는 ListParseFailure(실패) 중 하나로 반환됩니다.
"""

import json
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple, Union

from ..domain.entities import CorsSettings, JwtSettings, ValidatedEnvironment
from ..domain.errors import MalformedListError


@dataclass(frozen=True)
class ParsedList:
    """JSON 배열 파싱 성공"""
    items: Tuple[str, ...]


@dataclass(frozen=True)
class ListParseFailure:
    """JSON 배열 파싱 실패"""
    reason: str


ListParseResult = Union[ParsedList, ListParseFailure]


def _load_json_array(value: str) -> Union[list, ListParseFailure]:
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as e:
        return ListParseFailure(reason=f"JSON 파싱 실패 ({e.msg})")
    if not isinstance(decoded, list):
        return ListParseFailure(reason="배열이 아닙니다")
    return decoded


def parse_string_list(value: str) -> ListParseResult:
    """문자열 JSON 배열을 파싱합니다. 예: '["RS256", "ES256"]'"""
    decoded = _load_json_array(value)
    if isinstance(decoded, ListParseFailure):
        return decoded

    for index, item in enumerate(decoded):
        if not isinstance(item, str):
            return ListParseFailure(reason=f"{index}번째 항목이 문자열이 아닙니다")
    return ParsedList(items=tuple(decoded))


def parse_token_array(value: str) -> ListParseResult:
    """
    토큰 객체 JSON 배열을 파싱합니다.

    각 항목은 문자열 "value" 필드를 가진 객체여야 합니다.
    예: '[{"service": "a", "value": "token-1"}]'
    """
    decoded = _load_json_array(value)
    if isinstance(decoded, ListParseFailure):
        return decoded

    values = []
    for index, element in enumerate(decoded):
        if not isinstance(element, dict) or "value" not in element:
            return ListParseFailure(reason=f"{index}번째 항목에 value 필드가 없습니다")
        if not isinstance(element["value"], str):
            return ListParseFailure(reason=f"{index}번째 항목의 value가 문자열이 아닙니다")
        values.append(element["value"])
    return ParsedList(items=tuple(values))


def _unwrap(variable: str, result: ListParseResult) -> Tuple[str, ...]:
    if isinstance(result, ListParseFailure):
        raise MalformedListError(variable, result.reason)
    return result.items


def parse_cors_origin(value: Optional[str]) -> Union[bool, str]:
    """
    CORS 오리진 문자열을 변환합니다.

    "true" -> True, "false" -> False, 그 외 문자열은 그대로 반환하고
    값이 없거나 빈 문자열이면 False를 반환합니다.
    """
    if value == "true":
        return True
    if value == "false":
        return False
    return value or False


def build_cors_settings(validated: ValidatedEnvironment) -> CorsSettings:
    """CORS 미들웨어 설정을 생성합니다."""
    return CorsSettings(
        origin=parse_cors_origin(validated.cors_origin),
        methods=validated.cors_methods,
        allowed_headers=validated.cors_allowed_headers,
        exposed_headers=validated.cors_exposed_headers,
    )


def build_jwt_settings(validated: ValidatedEnvironment) -> JwtSettings:
    """
    JWT 검증 설정을 생성합니다.

    Raises:
        MalformedListError: JWT_ALLOWED_ALGO_ARRAY가 문자열 JSON 배열이 아닌 경우
    """
    allowed_algorithms = None
    if validated.jwt_allowed_algo_array is not None:
        allowed_algorithms = _unwrap(
            "JWT_ALLOWED_ALGO_ARRAY",
            parse_string_list(validated.jwt_allowed_algo_array),
        )

    return JwtSettings(
        jwks_endpoint=validated.jwks_endpoint,
        allowed_audiences=validated.jwt_allowed_audience,
        allowed_algorithms=allowed_algorithms,
        allowed_issuers=validated.jwt_allowed_issuers,
        max_age=validated.jwt_max_age,
    )


def build_auth_key_set(validated: ValidatedEnvironment) -> FrozenSet[str]:
    """
    Bearer 토큰 집합을 생성합니다. 중복 토큰은 하나로 합쳐집니다.

    AUTH_BEARER_TOKEN_ARRAY가 없으면 빈 집합(인증 비활성화)을 반환합니다.

    Raises:
        MalformedListError: 잘못된 JSON이거나 value 필드가 없는 항목이 있는 경우
    """
    if validated.auth_bearer_token_array is None:
        return frozenset()

    tokens = _unwrap(
        "AUTH_BEARER_TOKEN_ARRAY",
        parse_token_array(validated.auth_bearer_token_array),
    )
    return frozenset(tokens)
