"""리포트 라우터 — 개요 통계 및 Excel 내보내기 API.

Report Router — Overview statistics and the issue workbook export.
Shared by the manager and admin portals.
"""

from datetime import date
from io import BytesIO
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_manager
from mms.database import get_db
from mms.models.user import User
from mms.schemas.dashboard import OverviewResponse
from mms.services.report_service import report_service
from mms.utils.parsing import parse_uuid

router: APIRouter = APIRouter()


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
    project_id: str | None = Query(None),
) -> OverviewResponse:
    return await report_service.get_overview(
        db, parse_uuid(project_id, "project_id") if project_id else None
    )


@router.get("/reports/export")
async def export_report(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
    project_id: Annotated[str | None, Query()] = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    scope: Annotated[Literal["active", "archived", "all"], Query()] = "all",
) -> StreamingResponse:
    """이슈 리포트를 Excel 파일로 내보냅니다."""
    excel_bytes: bytes = await report_service.export_excel(
        db,
        project_id=parse_uuid(project_id, "project_id") if project_id else None,
        date_from=date_from,
        date_to=date_to,
        scope=scope,
    )
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=issue_report.xlsx"},
    )
