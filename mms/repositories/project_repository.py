"""프로젝트 레포지토리 — 프로젝트 및 작업자 배정 쿼리.

Project Repository — Queries for projects and worker-to-project assignments.
"""

from uuid import UUID

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.issue import Issue
from mms.models.project import Project, WorkerProjectAssignment
from mms.models.unit import Unit
from mms.models.user import User
from mms.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """프로젝트 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the projects table
    and the worker_project_assignments link table.
    """

    def __init__(self) -> None:
        super().__init__(Project)

    async def list_all(self, db: AsyncSession) -> list[Project]:
        result = await db.execute(select(Project).order_by(Project.created_at))
        return list(result.scalars().all())

    async def list_for_worker(self, db: AsyncSession, worker_user_id: UUID) -> list[Project]:
        """작업자에게 활성 배정된 프로젝트 목록을 조회합니다.

        List projects the worker is actively assigned to.
        """
        query: Select = (
            select(Project)
            .join(WorkerProjectAssignment, WorkerProjectAssignment.project_id == Project.id)
            .where(
                WorkerProjectAssignment.worker_user_id == worker_user_id,
                WorkerProjectAssignment.active == True,  # noqa: E712
            )
            .order_by(Project.name)
        )
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    async def count_units(self, db: AsyncSession, project_id: UUID) -> tuple[int, int]:
        """프로젝트의 전체/입주 유닛 수를 반환합니다.

        Returns:
            tuple[int, int]: (전체 유닛 수, 입주 유닛 수) (Total units, occupied units)
        """
        query: Select = select(
            func.count(),
            func.sum(case((Unit.is_occupied == True, 1), else_=0)),  # noqa: E712
        ).where(Unit.project_id == project_id)
        total, occupied = (await db.execute(query)).one()
        return total or 0, occupied or 0

    async def count_issues(self, db: AsyncSession, project_id: UUID) -> int:
        query: Select = select(func.count()).select_from(Issue).where(Issue.project_id == project_id)
        return (await db.execute(query)).scalar() or 0

    # --- 작업자 배정 (Worker assignments) ---

    async def get_active_assignment(
        self,
        db: AsyncSession,
        project_id: UUID,
        worker_user_id: UUID,
    ) -> WorkerProjectAssignment | None:
        query: Select = select(WorkerProjectAssignment).where(
            WorkerProjectAssignment.project_id == project_id,
            WorkerProjectAssignment.worker_user_id == worker_user_id,
            WorkerProjectAssignment.active == True,  # noqa: E712
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def create_assignment(
        self,
        db: AsyncSession,
        project_id: UUID,
        worker_user_id: UUID,
        assigned_by_user_id: UUID,
    ) -> WorkerProjectAssignment:
        assignment: WorkerProjectAssignment = WorkerProjectAssignment(
            project_id=project_id,
            worker_user_id=worker_user_id,
            assigned_by_user_id=assigned_by_user_id,
        )
        db.add(assignment)
        await db.flush()
        await db.refresh(assignment)
        return assignment

    async def list_project_workers(
        self,
        db: AsyncSession,
        project_id: UUID,
    ) -> list[tuple[WorkerProjectAssignment, User]]:
        """프로젝트에 활성 배정된 작업자와 배정 레코드를 조회합니다.

        List active assignments of a project joined with the worker user.
        """
        query: Select = (
            select(WorkerProjectAssignment, User)
            .join(User, User.id == WorkerProjectAssignment.worker_user_id)
            .where(
                WorkerProjectAssignment.project_id == project_id,
                WorkerProjectAssignment.active == True,  # noqa: E712
            )
            .order_by(User.full_name)
        )
        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]


# 싱글턴 인스턴스 — Singleton instance
project_repository: ProjectRepository = ProjectRepository()
