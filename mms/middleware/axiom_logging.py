"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Ships one structured event per API request to Axiom: portal, endpoint,
method, acting user, payload, status code, duration and error reason.
Sensitive fields (password, token, secret) are masked. When Axiom is not
configured the middleware passes requests straight through.
"""

import json
import re
import time
from typing import Any

import jwt
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from mms.config import settings
from mms.utils.jwt import decode_token

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and query strings
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential|id_passport)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
_SKIP_PREFIXES = ("/uploads/",)

# 바디를 기록하지 않는 경로 (바이너리 업로드) — Binary upload sink
_NO_BODY_PREFIXES = ("/api/v1/storage/upload/",)

_MAX_ERROR_LEN = 500


def _mask(data: Any, depth: int = 0) -> Any:
    """민감 필드 재귀 마스킹 — Recursively mask sensitive keys."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {k: "***" if _SENSITIVE_KEYS.search(k) else _mask(v, depth + 1) for k, v in data.items()}
    if isinstance(data, list):
        return [_mask(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > 2000:
        return data[:2000] + "...(truncated)"
    return data


def _portal(path: str) -> str | None:
    """/api/v1/<portal>/... 에서 포털 이름을 추출합니다 (admin, manager, worker, auth, storage)."""
    parts = path.split("/")
    if len(parts) > 3 and parts[1] == "api" and parts[2] == "v1":
        return parts[3]
    return None


def _actor(request: Request) -> str | None:
    """Authorization 헤더의 액세스 토큰에서 사용자 ID를 읽습니다. 실패 시 None."""
    header: str = request.headers.get("authorization", "")
    if not header.lower().startswith("bearer "):
        return None
    try:
        return decode_token(header[7:]).get("sub")
    except jwt.InvalidTokenError:
        return None


async def _read_error_body(response: Response) -> tuple[bytes, str]:
    body = b""
    async for chunk in response.body_iterator:
        body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
    try:
        detail = json.loads(body).get("detail", "")
        detail = detail if isinstance(detail, str) else json.dumps(detail)
    except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        detail = body.decode("utf-8", errors="replace")
    return body, detail[:_MAX_ERROR_LEN]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs every API request and response to Axiom.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path: str = request.url.path
        if not self._client or path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES):
            return await call_next(request)

        started: float = time.perf_counter()
        event: dict[str, Any] = {
            "service": settings.APP_NAME,
            "method": request.method,
            "path": path,
            "portal": _portal(path),
            "user_id": _actor(request),
        }
        if request.query_params:
            event["query_params"] = _mask(dict(request.query_params))

        if request.method in ("POST", "PUT", "PATCH") and not path.startswith(_NO_BODY_PREFIXES):
            try:
                raw = await request.body()
                if raw:
                    event["request_body"] = _mask(json.loads(raw))
            except (json.JSONDecodeError, UnicodeDecodeError):
                event["request_body"] = "(non-json body)"

        event["status_code"] = 500
        try:
            response = await call_next(request)
            event["status_code"] = response.status_code

            # 에러 응답은 사유를 기록하고 body를 다시 감싸 반환 — Keep error reason, re-wrap body
            if response.status_code >= 400:
                body, event["error"] = await _read_error_body(response)
                response = Response(
                    content=body,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            if request.path_params:
                event["path_params"] = dict(request.path_params)
            try:
                self._client.ingest_events(self._dataset, [event])
            except Exception:
                pass  # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure

        return response
