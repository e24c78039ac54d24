"""매니저 API 라우터 패키지 — 모든 매니저 엔드포인트 통합.

Manager API Router package — Aggregates manager-facing endpoints.
Managers review issues, manage worker accounts, projects, units and occupants.

Included routers:
    - workers: 작업자 계정 관리 (Worker account management)
    - projects: 프로젝트 조회 및 작업자 배정 (Projects and worker assignment)
    - units: 유닛 및 입주 관리 (Units and occupancy)
    - occupants: 입주자 관리 (Occupants)
    - issues: 이슈 검토 (Issue review workflow)
    - reports: 개요 및 내보내기 (Overview and export)
"""

from fastapi import APIRouter

from mms.api.manager.issues import router as issues_router
from mms.api.manager.occupants import router as occupants_router
from mms.api.manager.projects import router as projects_router
from mms.api.manager.reports import router as reports_router
from mms.api.manager.units import router as units_router
from mms.api.manager.workers import router as workers_router

router: APIRouter = APIRouter()

router.include_router(workers_router, prefix="/workers", tags=["Manager - Workers"])
router.include_router(projects_router, prefix="/projects", tags=["Manager - Projects"])
router.include_router(units_router, tags=["Manager - Units"])
router.include_router(occupants_router, prefix="/occupants", tags=["Manager - Occupants"])
router.include_router(issues_router, prefix="/issues", tags=["Manager - Issues"])
router.include_router(reports_router, tags=["Manager - Reports"])
