"""인증 API 테스트 — 로그인, 토큰 갱신, 로그아웃, 내 정보."""

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.system_log import SystemLog
from mms.utils.jwt import decode_token
from tests.conftest import auth_header


class TestLogin:
    """POST /api/v1/auth/login"""

    async def test_login_success(self, client: AsyncClient, db: AsyncSession, worker_user):
        """사번과 비밀번호로 로그인하면 토큰 쌍과 LOGIN 로그가 생성된다."""
        res = await client.post("/api/v1/auth/login", json={"employee_id": "guard", "password": "guard123"})
        assert res.status_code == 200
        body = res.json()
        assert body["token_type"] == "bearer"

        payload = decode_token(body["access_token"])
        assert payload["sub"] == str(worker_user.id)
        assert payload["role"] == "WORKER"
        assert payload["level"] == 3
        assert payload["type"] == "access"

        logs = (await db.execute(select(SystemLog).where(SystemLog.action == "LOGIN"))).scalars().all()
        assert len(logs) == 1
        assert logs[0].performed_by_user_id == worker_user.id

    async def test_login_wrong_password(self, client: AsyncClient, worker_user):
        """잘못된 비밀번호는 401."""
        res = await client.post("/api/v1/auth/login", json={"employee_id": "guard", "password": "nope"})
        assert res.status_code == 401

    async def test_login_unknown_employee(self, client: AsyncClient):
        """존재하지 않는 사번은 401."""
        res = await client.post("/api/v1/auth/login", json={"employee_id": "ghost", "password": "x"})
        assert res.status_code == 401

    async def test_login_deactivated_user(self, client: AsyncClient, db: AsyncSession, worker_user):
        """비활성 계정은 로그인할 수 없다."""
        worker_user.active = False
        await db.flush()
        res = await client.post("/api/v1/auth/login", json={"employee_id": "guard", "password": "guard123"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Account is deactivated"


class TestRefreshAndLogout:
    """POST /api/v1/auth/refresh, /logout"""

    async def test_refresh_rotates_token(self, client: AsyncClient, manager_user):
        """리프레시 후 이전 리프레시 토큰은 더 이상 사용할 수 없다."""
        login = await client.post("/api/v1/auth/login", json={"employee_id": "manager1", "password": "manager123"})
        old_refresh = login.json()["refresh_token"]

        res = await client.post("/api/v1/auth/refresh", json={"refresh_token": old_refresh})
        assert res.status_code == 200
        assert res.json()["refresh_token"] != old_refresh

        again = await client.post("/api/v1/auth/refresh", json={"refresh_token": old_refresh})
        assert again.status_code == 401

    async def test_logout_revokes_refresh_token(self, client: AsyncClient, manager_user):
        """로그아웃한 리프레시 토큰은 거부된다."""
        login = await client.post("/api/v1/auth/login", json={"employee_id": "manager1", "password": "manager123"})
        refresh_token = login.json()["refresh_token"]

        res = await client.post("/api/v1/auth/logout", json={"refresh_token": refresh_token})
        assert res.status_code == 200

        res = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert res.status_code == 401


class TestMe:
    """GET /api/v1/auth/me"""

    async def test_me_returns_profile(self, client: AsyncClient, admin_token):
        """내 정보에 역할과 레벨이 포함된다."""
        res = await client.get("/api/v1/auth/me", headers=auth_header(admin_token))
        assert res.status_code == 200
        body = res.json()
        assert body["employee_id"] == "admin"
        assert body["role"] == "ADMIN"
        assert body["level"] == 1

    async def test_me_without_token(self, client: AsyncClient):
        """토큰 없이 요청하면 거부된다."""
        res = await client.get("/api/v1/auth/me")
        assert res.status_code in (401, 403)

    async def test_refresh_token_cannot_be_used_as_access(self, client: AsyncClient, worker_user):
        """리프레시 토큰으로 API를 호출하면 401."""
        login = await client.post("/api/v1/auth/login", json={"employee_id": "guard", "password": "guard123"})
        res = await client.get("/api/v1/auth/me", headers=auth_header(login.json()["refresh_token"]))
        assert res.status_code == 401

    async def test_deactivated_user_token_rejected(
        self, client: AsyncClient, db: AsyncSession, worker_user, worker_token
    ):
        """비활성화된 사용자의 토큰은 즉시 무효가 된다."""
        worker_user.active = False
        await db.flush()
        res = await client.get("/api/v1/auth/me", headers=auth_header(worker_token))
        assert res.status_code == 401


class TestPortalGuards:
    """포털 접근 제어 — 레벨 기반."""

    async def test_worker_cannot_access_manager_portal(self, client: AsyncClient, worker_token):
        """작업자는 매니저 포털에 접근할 수 없다."""
        res = await client.get("/api/v1/manager/issues", headers=auth_header(worker_token))
        assert res.status_code == 403

    async def test_manager_cannot_access_admin_portal(self, client: AsyncClient, manager_token):
        """매니저는 관리자 포털에 접근할 수 없다."""
        res = await client.get("/api/v1/admin/users", headers=auth_header(manager_token))
        assert res.status_code == 403
        res = await client.get("/api/v1/admin/issues", headers=auth_header(manager_token))
        assert res.status_code == 403

    async def test_manager_cannot_use_worker_portal(self, client: AsyncClient, manager_token):
        """작업자 포털은 WORKER 역할만 사용할 수 있다."""
        res = await client.get("/api/v1/worker/issues", headers=auth_header(manager_token))
        assert res.status_code == 403

    async def test_admin_can_use_manager_portal(self, client: AsyncClient, admin_token):
        """관리자는 매니저 포털에도 접근할 수 있다."""
        res = await client.get("/api/v1/manager/issues", headers=auth_header(admin_token))
        assert res.status_code == 200
