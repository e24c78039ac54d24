"""작업자 대시보드 라우터.

Worker Dashboard Router — Counts over the worker's own reports.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_worker
from mms.database import get_db
from mms.models.user import User
from mms.schemas.dashboard import WorkerDashboardResponse
from mms.services.report_service import report_service

router: APIRouter = APIRouter()


@router.get("", response_model=WorkerDashboardResponse)
async def get_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
) -> WorkerDashboardResponse:
    return await report_service.get_worker_dashboard(db, current_user)
