"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.

JWT Payload Structure:
    액세스/리프레시 토큰 모두 동일한 기본 페이로드를 사용합니다.
    Both access and refresh tokens share the same base payload:
    {
        "sub": "user_uuid",         # 사용자 ID (User identifier)
        "role": "MANAGER",          # 역할 이름 (Role name)
        "level": 2,                 # 역할 레벨 (Role permission level)
        "exp": 1234567890,          # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"|"refresh"  # 토큰 유형 (Token type discriminator)
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any
import uuid

import jwt

from mms.config import settings


def _encode(data: dict[str, Any], expires_in: timedelta, token_type: str) -> str:
    to_encode: dict[str, Any] = data.copy()
    # jti — 같은 초에 발급된 토큰도 서로 다른 값이 되도록 (Unique per token)
    to_encode.update({
        "exp": datetime.now(timezone.utc) + expires_in,
        "type": token_type,
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any]) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a short-lived access token (JWT_ACCESS_TOKEN_EXPIRE_MINUTES).

    Args:
        data: JWT 페이로드 데이터 — {"sub": user_id, "role": role, "level": level}

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    return _encode(data, timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES), "access")


def create_refresh_token(data: dict[str, Any]) -> str:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a long-lived refresh token (JWT_REFRESH_TOKEN_EXPIRE_DAYS).
    Refresh tokens are also persisted so they can be revoked on logout.
    """
    return _encode(data, timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS), "refresh")


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
