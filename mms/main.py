"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Middleware and router registration.
Configures Axiom logging, CORS, health check, local upload serving and
the auth / admin / manager / worker / storage routers under /api/v1.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from mms.config import settings
from mms.database import create_all
from mms.middleware.axiom_logging import AxiomLoggingMiddleware
from mms.services.storage_service import UPLOADS_DIR


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    # 테이블이 없으면 생성 — Create missing tables on startup
    await create_all()
    yield


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — CORS보다 먼저 등록하여 모든 요청을 캡처
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 로컬 업로드 파일 제공 (S3 미설정 시) — Serve locally stored uploads
app.mount("/uploads", StaticFiles(directory=str(UPLOADS_DIR), check_dir=False), name="uploads")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from mms.api.admin import router as admin_router  # noqa: E402
from mms.api.auth import router as auth_router  # noqa: E402
from mms.api.manager import router as manager_router  # noqa: E402
from mms.api.storage import router as storage_router  # noqa: E402
from mms.api.worker import router as worker_router  # noqa: E402

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(manager_router, prefix="/api/v1/manager")
app.include_router(worker_router, prefix="/api/v1/worker")
app.include_router(storage_router, prefix="/api/v1/storage", tags=["Storage"])
