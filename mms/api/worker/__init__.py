"""작업자 API 라우터 패키지 — 모든 작업자 엔드포인트 통합.

Worker API Router package — Aggregates worker-facing endpoints.

Included routers:
    - projects: 배정 프로젝트와 유닛 (Assigned projects and their units)
    - issues: 이슈 보고, 내 이슈, 검증 대기열 (Reporting, own issues, verification queue)
    - dashboard: 작업자 대시보드 (Worker dashboard)
"""

from fastapi import APIRouter

from mms.api.worker.dashboard import router as dashboard_router
from mms.api.worker.issues import router as issues_router
from mms.api.worker.projects import router as projects_router

router: APIRouter = APIRouter()

router.include_router(projects_router, prefix="/projects", tags=["Worker - Projects"])
router.include_router(issues_router, prefix="/issues", tags=["Worker - Issues"])
router.include_router(dashboard_router, prefix="/dashboard", tags=["Worker - Dashboard"])
