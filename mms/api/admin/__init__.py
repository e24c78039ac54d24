"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints.

Admin-only routers:
    - users: 전체 사용자 관리 (All user accounts)
    - projects: 프로젝트 생성/수정 (Project create/update)
    - issues: 강제 변경, 검증 증빙 (Override, VERIFICATION proofs)
    - logs: 시스템 로그 (Audit trail)

Shared with the manager portal (mounted here behind require_admin):
    - projects, units, occupants, issues, reports
"""

from fastapi import APIRouter, Depends

from mms.api.admin.issues import router as issues_router
from mms.api.admin.logs import router as logs_router
from mms.api.admin.projects import router as projects_router
from mms.api.admin.users import router as users_router
from mms.api.deps import require_admin
from mms.api.manager.issues import router as shared_issues_router
from mms.api.manager.occupants import router as shared_occupants_router
from mms.api.manager.projects import router as shared_projects_router
from mms.api.manager.reports import router as shared_reports_router
from mms.api.manager.units import router as shared_units_router

router: APIRouter = APIRouter()
_admin_only = [Depends(require_admin)]

router.include_router(users_router, prefix="/users", tags=["Admin - Users"])
router.include_router(projects_router, prefix="/projects", tags=["Admin - Projects"])
router.include_router(issues_router, prefix="/issues", tags=["Admin - Issues"])
router.include_router(logs_router, prefix="/logs", tags=["Admin - Logs"])

router.include_router(shared_projects_router, prefix="/projects", tags=["Admin - Projects"], dependencies=_admin_only)
router.include_router(shared_units_router, tags=["Admin - Units"], dependencies=_admin_only)
router.include_router(shared_occupants_router, prefix="/occupants", tags=["Admin - Occupants"], dependencies=_admin_only)
router.include_router(shared_issues_router, prefix="/issues", tags=["Admin - Issues"], dependencies=_admin_only)
router.include_router(shared_reports_router, tags=["Admin - Reports"], dependencies=_admin_only)
