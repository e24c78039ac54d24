"""프로젝트 서비스 — 프로젝트 및 작업자 배정 비즈니스 로직.

Project Service — Business logic for projects (buildings / sites)
and worker-to-project assignments.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.enums import LogAction, UserRole
from mms.models.project import Project, WorkerProjectAssignment
from mms.models.user import User
from mms.repositories.project_repository import project_repository
from mms.repositories.user_repository import user_repository
from mms.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate, ProjectWorkerResponse
from mms.services.audit_service import audit_service
from mms.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from mms.utils.parsing import is_blank, parse_uuid


class ProjectService:
    """프로젝트 관련 비즈니스 로직을 처리하는 서비스."""

    async def to_response(self, db: AsyncSession, project: Project) -> ProjectResponse:
        unit_count, occupied = await project_repository.count_units(db, project.id)
        issue_count: int = await project_repository.count_issues(db, project.id)
        return ProjectResponse(
            id=str(project.id),
            name=project.name,
            location=project.location,
            unit_count=unit_count,
            occupied_unit_count=occupied,
            issue_count=issue_count,
            created_at=project.created_at,
        )

    async def get_project(self, db: AsyncSession, project_id: UUID) -> Project:
        """프로젝트를 조회합니다.

        Raises:
            NotFoundError: 프로젝트가 없을 때 (Project not found)
        """
        project: Project | None = await project_repository.get_by_id(db, project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def list_projects(self, db: AsyncSession) -> list[ProjectResponse]:
        projects: list[Project] = await project_repository.list_all(db)
        return [await self.to_response(db, p) for p in projects]

    async def list_worker_projects(self, db: AsyncSession, worker: User) -> list[ProjectResponse]:
        projects: list[Project] = await project_repository.list_for_worker(db, worker.id)
        return [await self.to_response(db, p) for p in projects]

    async def create_project(self, db: AsyncSession, data: ProjectCreate, caller: User) -> ProjectResponse:
        if is_blank(data.name):
            raise BadRequestError("Project name is required")

        project: Project = await project_repository.create(db, {
            "name": data.name.strip(),
            "location": data.location,
            "created_by_user_id": caller.id,
        })
        await audit_service.record(
            db, LogAction.CREATE, "PROJECT", project.id, caller.id, f"Created project {project.name}"
        )
        return await self.to_response(db, project)

    async def update_project(
        self,
        db: AsyncSession,
        project_id: UUID,
        data: ProjectUpdate,
        caller: User,
    ) -> ProjectResponse:
        project: Project = await self.get_project(db, project_id)
        update_data: dict = data.model_dump(exclude_unset=True)
        if "name" in update_data:
            if is_blank(update_data["name"]):
                raise BadRequestError("Project name cannot be blank")
            update_data["name"] = update_data["name"].strip()

        project = await project_repository.update(db, project, update_data)
        await audit_service.record(
            db, LogAction.UPDATE, "PROJECT", project.id, caller.id, f"Updated project {project.name}"
        )
        return await self.to_response(db, project)

    # --- 작업자 배정 (Worker assignments) ---

    async def is_worker_assigned(self, db: AsyncSession, project_id: UUID, worker_user_id: UUID) -> bool:
        return await project_repository.get_active_assignment(db, project_id, worker_user_id) is not None

    async def assign_worker(
        self,
        db: AsyncSession,
        project_id: UUID,
        worker_user_id: str,
        caller: User,
    ) -> ProjectWorkerResponse:
        """작업자를 프로젝트에 배정합니다.

        Assign an active WORKER account to a project.

        Raises:
            NotFoundError: 프로젝트 또는 작업자가 없을 때
            BadRequestError: WORKER가 아니거나 비활성 계정일 때
            DuplicateError: 이미 배정된 경우 (Already actively assigned)
        """
        project: Project = await self.get_project(db, project_id)
        worker: User | None = await user_repository.get_by_id(db, parse_uuid(worker_user_id, "worker_user_id"))
        if worker is None:
            raise NotFoundError("Worker not found")
        if worker.role != UserRole.WORKER.value:
            raise BadRequestError("Only worker accounts can be assigned to projects")
        if not worker.active:
            raise BadRequestError("Cannot assign an inactive worker")
        if await self.is_worker_assigned(db, project.id, worker.id):
            raise DuplicateError("Worker is already assigned to this project")

        assignment: WorkerProjectAssignment = await project_repository.create_assignment(
            db, project.id, worker.id, caller.id
        )
        await audit_service.record(
            db, LogAction.ASSIGN, "PROJECT", project.id, caller.id,
            f"Assigned {worker.employee_id} to {project.name}",
        )
        return self._to_worker_response(assignment, worker)

    async def end_assignment(
        self,
        db: AsyncSession,
        project_id: UUID,
        worker_user_id: UUID,
        caller: User,
    ) -> None:
        project: Project = await self.get_project(db, project_id)
        assignment: WorkerProjectAssignment | None = await project_repository.get_active_assignment(
            db, project.id, worker_user_id
        )
        if assignment is None:
            raise NotFoundError("Active assignment not found")

        assignment.active = False
        assignment.ended_at = datetime.now(timezone.utc)
        await db.flush()
        await audit_service.record(
            db, LogAction.UNASSIGN, "PROJECT", project.id, caller.id,
            f"Ended assignment of worker {worker_user_id} on {project.name}",
        )

    async def list_workers(self, db: AsyncSession, project_id: UUID) -> list[ProjectWorkerResponse]:
        await self.get_project(db, project_id)
        rows = await project_repository.list_project_workers(db, project_id)
        return [self._to_worker_response(assignment, worker) for assignment, worker in rows]

    def _to_worker_response(self, assignment: WorkerProjectAssignment, worker: User) -> ProjectWorkerResponse:
        return ProjectWorkerResponse(
            assignment_id=str(assignment.id),
            worker_user_id=str(worker.id),
            employee_id=worker.employee_id,
            full_name=worker.full_name,
            active=worker.active,
            assigned_at=assignment.assigned_at,
        )


# 싱글턴 인스턴스 — Singleton instance
project_service: ProjectService = ProjectService()
