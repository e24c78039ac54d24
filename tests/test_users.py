"""사용자 관리 API 테스트 — 관리자/매니저 포털."""

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.system_log import SystemLog
from mms.models.user import User
from tests.conftest import auth_header


class TestAdminUsers:
    """/api/v1/admin/users"""

    async def test_create_user(self, client: AsyncClient, admin_token):
        """관리자는 모든 역할의 사용자를 생성할 수 있다."""
        res = await client.post("/api/v1/admin/users", headers=auth_header(admin_token), json={
            "employee_id": "manager2",
            "password": "pass1234",
            "full_name": "Second Manager",
            "role": "MANAGER",
        })
        assert res.status_code == 201
        body = res.json()
        assert body["role"] == "MANAGER"
        assert body["active"] is True
        assert "password" not in body

    async def test_create_duplicate_employee_id(self, client: AsyncClient, admin_token, worker_user):
        """중복 사번은 409."""
        res = await client.post("/api/v1/admin/users", headers=auth_header(admin_token), json={
            "employee_id": "guard", "password": "x1", "full_name": "Dup",
        })
        assert res.status_code == 409

    async def test_create_blank_name(self, client: AsyncClient, admin_token):
        """공백 이름은 400."""
        res = await client.post("/api/v1/admin/users", headers=auth_header(admin_token), json={
            "employee_id": "newbie", "password": "x1", "full_name": "   ",
        })
        assert res.status_code == 400

    async def test_deactivate_keeps_record(
        self, client: AsyncClient, db: AsyncSession, admin_token, worker_user
    ):
        """비활성화해도 레코드는 남아 있고 목록에 계속 나타난다."""
        res = await client.post(
            f"/api/v1/admin/users/{worker_user.id}/deactivate", headers=auth_header(admin_token), json={}
        )
        assert res.status_code == 200
        body = res.json()
        assert body["active"] is False
        assert body["inactive_reason"] == "Deactivated by admin"

        listed = await client.get("/api/v1/admin/users", headers=auth_header(admin_token))
        match = [u for u in listed.json() if u["id"] == str(worker_user.id)]
        assert len(match) == 1
        assert match[0]["active"] is False

        row = (await db.execute(select(User).where(User.id == worker_user.id))).scalar_one()
        assert row.active is False

        log = (await db.execute(select(SystemLog).where(SystemLog.action == "DEACTIVATE"))).scalar_one()
        assert log.entity_id == str(worker_user.id)

    async def test_deactivate_with_reason(self, client: AsyncClient, admin_token, worker_user):
        """지정한 사유가 저장된다."""
        res = await client.post(
            f"/api/v1/admin/users/{worker_user.id}/deactivate",
            headers=auth_header(admin_token),
            json={"reason": "Left the company"},
        )
        assert res.json()["inactive_reason"] == "Left the company"

    async def test_cannot_deactivate_self(self, client: AsyncClient, admin_token, admin_user):
        """자기 자신은 비활성화할 수 없다."""
        res = await client.post(
            f"/api/v1/admin/users/{admin_user.id}/deactivate", headers=auth_header(admin_token), json={}
        )
        assert res.status_code == 400

    async def test_deactivate_twice(self, client: AsyncClient, admin_token, worker_user):
        """이미 비활성인 사용자는 400."""
        url = f"/api/v1/admin/users/{worker_user.id}/deactivate"
        await client.post(url, headers=auth_header(admin_token), json={})
        res = await client.post(url, headers=auth_header(admin_token), json={})
        assert res.status_code == 400

    async def test_reactivate(self, client: AsyncClient, admin_token, worker_user):
        """재활성화하면 사유가 지워진다."""
        await client.post(
            f"/api/v1/admin/users/{worker_user.id}/deactivate", headers=auth_header(admin_token), json={}
        )
        res = await client.post(f"/api/v1/admin/users/{worker_user.id}/reactivate", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["active"] is True
        assert res.json()["inactive_reason"] is None

    async def test_filter_by_role(self, client: AsyncClient, admin_token, manager_user, worker_user):
        """역할 필터."""
        res = await client.get("/api/v1/admin/users", headers=auth_header(admin_token), params={"role": "WORKER"})
        assert res.status_code == 200
        assert {u["employee_id"] for u in res.json()} == {"guard"}

    async def test_update_employee_id_duplicate(
        self, client: AsyncClient, admin_token, manager_user, worker_user
    ):
        """다른 사용자의 사번으로 변경하면 409."""
        res = await client.put(
            f"/api/v1/admin/users/{worker_user.id}",
            headers=auth_header(admin_token),
            json={"employee_id": "manager1"},
        )
        assert res.status_code == 409

    async def test_get_unknown_user(self, client: AsyncClient, admin_token):
        """없는 사용자는 404."""
        res = await client.get(
            "/api/v1/admin/users/00000000-0000-0000-0000-000000000000", headers=auth_header(admin_token)
        )
        assert res.status_code == 404


class TestManagerWorkers:
    """/api/v1/manager/workers — 매니저는 작업자 계정만 관리."""

    async def test_create_worker_forces_role(self, client: AsyncClient, manager_token):
        """매니저가 생성한 계정은 항상 WORKER다."""
        res = await client.post("/api/v1/manager/workers", headers=auth_header(manager_token), json={
            "employee_id": "guard9", "password": "pw1234", "full_name": "New Guard", "role": "ADMIN",
        })
        assert res.status_code == 201
        assert res.json()["role"] == "WORKER"

    async def test_list_only_workers(self, client: AsyncClient, manager_token, admin_user, worker_user):
        """작업자 목록에는 WORKER만 포함된다."""
        res = await client.get("/api/v1/manager/workers", headers=auth_header(manager_token))
        assert res.status_code == 200
        assert all(u["role"] == "WORKER" for u in res.json())
        assert len(res.json()) == 1

    async def test_manager_cannot_see_admin(self, client: AsyncClient, manager_token, admin_user):
        """매니저에게 관리자 계정은 404로 보인다."""
        res = await client.get(f"/api/v1/manager/workers/{admin_user.id}", headers=auth_header(manager_token))
        assert res.status_code == 404

    async def test_manager_cannot_promote_worker(self, client: AsyncClient, manager_token, worker_user):
        """매니저는 작업자를 승격할 수 없다."""
        res = await client.put(
            f"/api/v1/manager/workers/{worker_user.id}",
            headers=auth_header(manager_token),
            json={"role": "MANAGER"},
        )
        assert res.status_code == 403

    async def test_manager_deactivates_worker(self, client: AsyncClient, manager_token, worker_user):
        """매니저는 작업자를 비활성화할 수 있다."""
        res = await client.post(
            f"/api/v1/manager/workers/{worker_user.id}/deactivate",
            headers=auth_header(manager_token),
            json={"reason": "Contract ended"},
        )
        assert res.status_code == 200
        assert res.json()["active"] is False
