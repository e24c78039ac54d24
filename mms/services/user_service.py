"""사용자 서비스 — 사용자 CRUD 및 활성화 관리 비즈니스 로직.

User Service — Business logic for user creation, update,
deactivation and reactivation. Users are never deleted.

Access rules:
    - ADMIN: 모든 사용자 관리 (Manages every account)
    - MANAGER: WORKER 계정만 관리 (Manages WORKER accounts only)
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.enums import LogAction, UserRole
from mms.models.user import User
from mms.repositories.auth_repository import auth_repository
from mms.repositories.user_repository import user_repository
from mms.schemas.user import UserCreate, UserResponse, UserUpdate
from mms.services.audit_service import audit_service
from mms.utils.exceptions import BadRequestError, DuplicateError, ForbiddenError, NotFoundError
from mms.utils.parsing import is_blank
from mms.utils.password import hash_password

DEFAULT_DEACTIVATION_REASON: str = "Deactivated by admin"


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user business logic.
    """

    def to_response(self, user: User) -> UserResponse:
        return UserResponse(
            id=str(user.id),
            employee_id=user.employee_id,
            full_name=user.full_name,
            role=user.role,
            phone=user.phone,
            active=user.active,
            inactive_reason=user.inactive_reason,
            created_at=user.created_at,
        )

    def _check_manageable(self, caller: User, role: str) -> None:
        """호출자가 해당 역할의 계정을 관리할 수 있는지 확인합니다.

        Managers may only manage WORKER accounts.

        Raises:
            ForbiddenError: 권한 밖의 역할일 때 (Role outside caller's authority)
        """
        if caller.role == UserRole.ADMIN.value:
            return
        if role != UserRole.WORKER.value:
            raise ForbiddenError("Managers can only manage worker accounts")

    async def _get_managed(self, db: AsyncSession, user_id: UUID, caller: User) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        # 매니저에게 WORKER 외 계정은 존재하지 않는 것으로 보임
        if caller.role != UserRole.ADMIN.value and user.role != UserRole.WORKER.value:
            raise NotFoundError("User not found")
        return user

    async def list_users(
        self,
        db: AsyncSession,
        caller: User,
        role: str | None = None,
        active: bool | None = None,
        q: str | None = None,
    ) -> list[UserResponse]:
        """사용자 목록을 조회합니다. 비활성 사용자도 포함됩니다.

        List users; deactivated accounts stay enumerable. Managers only see workers.
        """
        if caller.role != UserRole.ADMIN.value:
            role = UserRole.WORKER.value
        users: list[User] = await user_repository.list_filtered(db, role=role, active=active, q=q)
        return [self.to_response(u) for u in users]

    async def get_user(self, db: AsyncSession, user_id: UUID, caller: User) -> UserResponse:
        return self.to_response(await self._get_managed(db, user_id, caller))

    async def create_user(self, db: AsyncSession, data: UserCreate, caller: User) -> UserResponse:
        """새 사용자를 생성합니다.

        Create a new user account.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 사용자 생성 데이터 (User creation data)
            caller: 요청자 (Acting admin or manager)

        Returns:
            UserResponse: 생성된 사용자 (Created user)

        Raises:
            BadRequestError: 필수 값 누락 (Blank employee ID, name or password)
            ForbiddenError: 매니저가 WORKER 외 계정을 생성할 때
            DuplicateError: 사번 중복 (Employee ID already in use)
        """
        if is_blank(data.employee_id) or is_blank(data.full_name) or is_blank(data.password):
            raise BadRequestError("Employee ID, full name and password are required")

        self._check_manageable(caller, data.role.value)

        employee_id: str = data.employee_id.strip()
        if await user_repository.get_by_employee_id(db, employee_id) is not None:
            raise DuplicateError("Employee ID already exists")

        user: User = await user_repository.create(db, {
            "employee_id": employee_id,
            "full_name": data.full_name.strip(),
            "role": data.role.value,
            "phone": data.phone,
            "password_hash": hash_password(data.password),
        })
        await audit_service.record(
            db, LogAction.CREATE, "USER", user.id, caller.id,
            f"Created {user.role} {user.employee_id} ({user.full_name})",
        )
        return self.to_response(user)

    async def update_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: UserUpdate,
        caller: User,
    ) -> UserResponse:
        """사용자 정보를 수정합니다 (부분 업데이트).

        Partial update. Changing ``employee_id`` keeps it unique; managers
        cannot promote a worker.
        """
        user: User = await self._get_managed(db, user_id, caller)
        update_data: dict = data.model_dump(exclude_unset=True, exclude={"password"})

        if "role" in update_data:
            if update_data["role"] is None:
                update_data.pop("role")
            else:
                update_data["role"] = update_data["role"].value
                self._check_manageable(caller, update_data["role"])

        if "employee_id" in update_data:
            if is_blank(update_data["employee_id"]):
                raise BadRequestError("Employee ID cannot be blank")
            update_data["employee_id"] = update_data["employee_id"].strip()
            existing: User | None = await user_repository.get_by_employee_id(db, update_data["employee_id"])
            if existing is not None and existing.id != user.id:
                raise DuplicateError("Employee ID already exists")

        if "full_name" in update_data and is_blank(update_data["full_name"]):
            raise BadRequestError("Full name cannot be blank")

        if data.password:
            update_data["password_hash"] = hash_password(data.password)

        user = await user_repository.update(db, user, update_data)
        changed: list[str] = sorted(k for k in update_data if k != "password_hash")
        if "password_hash" in update_data:
            changed.append("password")
        await audit_service.record(
            db, LogAction.UPDATE, "USER", user.id, caller.id,
            f"Updated {user.employee_id}: {', '.join(changed) or 'no changes'}",
        )
        return self.to_response(user)

    async def deactivate_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        caller: User,
        reason: str | None = None,
    ) -> UserResponse:
        """사용자를 비활성화합니다. 레코드는 삭제되지 않습니다.

        Deactivate a user: ``active`` flips to false, the record stays and
        outstanding refresh tokens are revoked.

        Raises:
            BadRequestError: 자기 자신을 비활성화하거나 이미 비활성일 때
                             (Self-deactivation or already inactive)
        """
        user: User = await self._get_managed(db, user_id, caller)
        if user.id == caller.id:
            raise BadRequestError("You cannot deactivate your own account")
        if not user.active:
            raise BadRequestError("User is already inactive")

        final_reason: str = DEFAULT_DEACTIVATION_REASON if is_blank(reason) else reason.strip()
        user = await user_repository.update(db, user, {"active": False, "inactive_reason": final_reason})
        await auth_repository.delete_user_refresh_tokens(db, user.id)
        await audit_service.record(
            db, LogAction.DEACTIVATE, "USER", user.id, caller.id,
            f"Deactivated {user.employee_id}: {final_reason}",
        )
        return self.to_response(user)

    async def reactivate_user(self, db: AsyncSession, user_id: UUID, caller: User) -> UserResponse:
        user: User = await self._get_managed(db, user_id, caller)
        if user.active:
            raise BadRequestError("User is already active")

        user = await user_repository.update(db, user, {"active": True, "inactive_reason": None})
        await audit_service.record(
            db, LogAction.REACTIVATE, "USER", user.id, caller.id, f"Reactivated {user.employee_id}"
        )
        return self.to_response(user)


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
