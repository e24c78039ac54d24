"""초기 데이터 시드 스크립트 — 데모 사용자, 프로젝트, 유닛, 이슈 생성.

Seed script — Creates demo users, projects, units, an occupant and sample
issues so every portal has something to show.

Usage:
    python -m mms.seed

Creates:
    - 3개 계정: admin/admin123, manager1/manager123, guard/guard123
    - 2개 프로젝트: Skyline Towers, Oasis Heights
    - Skyline Towers 유닛 101 (입주: Alice Johnson), 102 (공실)
    - 이슈 3건: OPEN / IN_PROGRESS / RESOLVED(검증 대기)
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from mms.database import async_session, create_all
from mms.models import (
    Issue,
    IssueAttachment,
    Occupant,
    OccupantUnitAssignment,
    Project,
    Unit,
    User,
    WorkerProjectAssignment,
)
from mms.models.enums import (
    IssuePriority,
    IssueStatus,
    LocationType,
    MediaType,
    OccupantType,
    ProofType,
    UserRole,
)
from mms.utils.password import hash_password


async def seed() -> None:
    """데이터베이스를 데모 데이터로 시드합니다.

    Create tables if missing, then insert the demo data set.
    Idempotent: 사용자가 이미 있으면 건너뜁니다 (Skips if any user exists).
    """
    await create_all()

    async with async_session() as db:
        result = await db.execute(select(User).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        now: datetime = datetime.now(timezone.utc)

        # 사용자 — Users (employee_id / password)
        users: dict[str, User] = {}
        for employee_id, full_name, role, phone, password in [
            ("admin", "Admin User", UserRole.ADMIN, "1234567890", "admin123"),
            ("manager1", "John Manager", UserRole.MANAGER, "0987654321", "manager123"),
            ("guard", "Mike Worker", UserRole.WORKER, "1122334455", "guard123"),
        ]:
            user = User(
                employee_id=employee_id,
                full_name=full_name,
                role=role.value,
                phone=phone,
                password_hash=hash_password(password),
            )
            db.add(user)
            users[employee_id] = user
        await db.flush()

        admin, manager, worker = users["admin"], users["manager1"], users["guard"]

        # 프로젝트 — Projects
        skyline = Project(name="Skyline Towers", location="123 Main St, Metro City", created_by_user_id=admin.id)
        oasis = Project(name="Oasis Heights", location="456 Palm Ave, Beach City", created_by_user_id=admin.id)
        db.add_all([skyline, oasis])
        await db.flush()

        db.add(WorkerProjectAssignment(
            worker_user_id=worker.id, project_id=skyline.id, assigned_by_user_id=manager.id
        ))

        # 입주자 및 유닛 — Occupant and units
        alice = Occupant(
            id_passport="A1234567", name="Alice Johnson", phone="9876543210",
            occupant_type=OccupantType.TENANT.value,
        )
        db.add(alice)
        await db.flush()

        unit101 = Unit(
            project_id=skyline.id, unit_no="101", type="2BHK", is_occupied=True,
            current_occupant_id=alice.id, created_by_user_id=manager.id,
        )
        unit102 = Unit(project_id=skyline.id, unit_no="102", type="3BHK", created_by_user_id=manager.id)
        db.add_all([unit101, unit102])
        await db.flush()

        db.add(OccupantUnitAssignment(
            occupant_id=alice.id, unit_id=unit101.id, assigned_by_user_id=manager.id,
            start_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
        ))

        # 이슈 — Sample issues across the workflow
        leak = Issue(
            project_id=skyline.id, reported_by_user_id=worker.id,
            location_type=LocationType.UNIT.value, unit_id=unit101.id,
            issue_caused_by="Tenant Misuse", complaint_type="Plumbing",
            description_text="Leaking faucet in kitchen",
            status=IssueStatus.OPEN.value, priority=IssuePriority.MEDIUM.value,
            created_at=now - timedelta(days=1),
        )
        lights = Issue(
            project_id=skyline.id, reported_by_user_id=worker.id,
            location_type=LocationType.OTHER.value, other_area="Lobby Entrance",
            issue_caused_by="Wear and Tear", complaint_type="Electrical",
            description_text="Light flickering",
            status=IssueStatus.IN_PROGRESS.value, priority=IssuePriority.HIGH.value,
            assigned_vendor_name="ElectroFix Inc.", approved=True,
            approved_by_user_id=manager.id, approved_at=now - timedelta(days=1),
            created_at=now - timedelta(days=2),
        )
        windows = Issue(
            project_id=skyline.id, reported_by_user_id=worker.id,
            location_type=LocationType.UNIT.value, unit_id=unit102.id,
            issue_caused_by="Unknown", complaint_type="Cleaning",
            description_text="Dusty windows",
            status=IssueStatus.RESOLVED.value, priority=IssuePriority.LOW.value,
            assigned_vendor_name="CleanCo", approved=True,
            approved_by_user_id=manager.id, approved_at=now - timedelta(days=2),
            resolved_by_user_id=manager.id, resolved_at=now - timedelta(hours=12),
            created_at=now - timedelta(days=3),
        )
        db.add_all([leak, lights, windows])
        await db.flush()

        db.add(IssueAttachment(
            issue_id=leak.id,
            url="https://placehold.co/600x400/png?text=Leaking+Faucet",
            media_type=MediaType.IMAGE.value,
            proof_type=ProofType.BEFORE.value,
            uploaded_by_user_id=worker.id,
        ))

        await db.commit()
        print("Seeded: admin/admin123, manager1/manager123, guard/guard123")


if __name__ == "__main__":
    asyncio.run(seed())
