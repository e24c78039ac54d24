"""리포트 서비스 — 개요 통계, 작업자 대시보드, Excel 내보내기.

Report Service — Overview statistics for admins and managers, the worker
dashboard, and the issue report workbook export.
"""

from datetime import date, datetime, time, timedelta, timezone
from io import BytesIO
from uuid import UUID

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.issue import Issue
from mms.models.project import Project
from mms.models.unit import Unit
from mms.models.user import User
from mms.repositories.issue_repository import issue_repository
from mms.repositories.project_repository import project_repository
from mms.repositories.user_repository import user_repository
from mms.schemas.dashboard import OverviewResponse, WorkerDashboardResponse
from mms.schemas.issue import IssueStats
from mms.services.issue_service import issue_service


class ReportService:
    """리포트/대시보드 관련 비즈니스 로직을 처리하는 서비스."""

    async def get_overview(self, db: AsyncSession, project_id: UUID | None = None) -> OverviewResponse:
        """관리자/매니저 개요 — 이슈 통계, 프로젝트/유닛 수, 역할별 사용자 수.

        Overview for the admin and manager portals.
        """
        stats: IssueStats = await issue_service.get_stats(db, project_id=project_id)

        unit_query = select(func.count(), func.sum(case((Unit.is_occupied == True, 1), else_=0)))  # noqa: E712
        if project_id is not None:
            unit_query = unit_query.where(Unit.project_id == project_id)
        unit_count, occupied = (await db.execute(unit_query)).one()

        project_count: int = (await db.execute(select(func.count()).select_from(Project))).scalar() or 0

        return OverviewResponse(
            issues=stats,
            project_count=project_count,
            unit_count=unit_count or 0,
            occupied_unit_count=int(occupied or 0),
            users_by_role=await user_repository.count_by_role(db),
        )

    async def get_worker_dashboard(self, db: AsyncSession, worker: User) -> WorkerDashboardResponse:
        """작업자 대시보드 — 본인 보고 이슈 통계와 검증 대기 수."""
        stats: IssueStats = await issue_service.get_stats(db, reported_by_user_id=worker.id)
        projects = await project_repository.list_for_worker(db, worker.id)
        return WorkerDashboardResponse(
            project_count=len(projects),
            issues=stats,
            verification_queue=stats.verify_pending,
        )

    async def export_excel(
        self,
        db: AsyncSession,
        project_id: UUID | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        scope: str = "all",
    ) -> bytes:
        """이슈 리포트를 Excel 파일로 내보내기.

        Export issues as an .xlsx workbook: an "Issues" sheet with one row per
        issue and a "Summary" sheet with status / priority / project counts.
        Defaults to the last 30 days.
        """
        if date_from is None:
            date_from = datetime.now(timezone.utc).date() - timedelta(days=30)
        if date_to is None:
            date_to = datetime.now(timezone.utc).date()

        wb = Workbook()
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_fill = PatternFill(start_color="1F3A5F", end_color="1F3A5F", fill_type="solid")

        def style_headers(ws, headers: list[str]) -> None:
            for col_idx, h in enumerate(headers, 1):
                cell = ws.cell(row=1, column=col_idx, value=h)
                cell.font = header_font
                cell.fill = header_fill
                cell.alignment = Alignment(horizontal="center")

        # --- Sheet 1: Issues ---
        ws1 = wb.active
        ws1.title = "Issues"
        headers1 = [
            "Reported", "Project", "Location", "Category", "Cause", "Status",
            "Verified", "Priority", "Vendor", "Reporter", "Resolved", "Rejection Reason",
        ]
        style_headers(ws1, headers1)

        query = (
            issue_repository.build_query(scope=scope, project_id=project_id)
            .add_columns(Project.name, Unit.unit_no, User.full_name)
            .join(Project, Project.id == Issue.project_id)
            .outerjoin(Unit, Unit.id == Issue.unit_id)
            .join(User, User.id == Issue.reported_by_user_id)
            .where(
                Issue.created_at >= datetime.combine(date_from, time.min, tzinfo=timezone.utc),
                Issue.created_at < datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=timezone.utc),
            )
        )
        result = await db.execute(query)
        rows = result.all()

        status_counts: dict[str, int] = {}
        priority_counts: dict[str, int] = {}
        project_counts: dict[str, int] = {}
        for issue, project_name, unit_no, reporter_name in rows:
            location: str = f"Unit {unit_no}" if unit_no else (issue.other_area or "")
            ws1.append([
                issue.created_at.strftime("%Y-%m-%d %H:%M"),
                project_name,
                location,
                issue.complaint_type,
                issue.issue_caused_by,
                issue.status,
                "Yes" if issue.verified else "No",
                issue.priority,
                issue.assigned_vendor_name or "",
                reporter_name,
                issue.resolved_at.strftime("%Y-%m-%d %H:%M") if issue.resolved_at else "",
                issue.rejection_reason or "",
            ])
            status_counts[issue.status] = status_counts.get(issue.status, 0) + 1
            priority_counts[issue.priority] = priority_counts.get(issue.priority, 0) + 1
            project_counts[project_name] = project_counts.get(project_name, 0) + 1

        for i, w in enumerate([17, 20, 16, 16, 18, 13, 10, 10, 20, 20, 17, 30], 1):
            ws1.column_dimensions[ws1.cell(row=1, column=i).column_letter].width = w

        # --- Sheet 2: Summary ---
        ws2 = wb.create_sheet("Summary")
        style_headers(ws2, ["Group", "Value", "Count"])
        ws2.append(["Period", f"{date_from} ~ {date_to}", len(rows)])
        for status, n in sorted(status_counts.items()):
            ws2.append(["Status", status, n])
        for priority, n in sorted(priority_counts.items()):
            ws2.append(["Priority", priority, n])
        for name, n in sorted(project_counts.items()):
            ws2.append(["Project", name, n])

        for i, w in enumerate([12, 28, 10], 1):
            ws2.column_dimensions[ws2.cell(row=1, column=i).column_letter].width = w

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()


# 싱글턴 인스턴스
report_service: ReportService = ReportService()
