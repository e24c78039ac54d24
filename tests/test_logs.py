"""시스템 로그 API 테스트 — 관리자 전용, 읽기 전용."""

from httpx import AsyncClient

from tests.conftest import auth_header


class TestSystemLogs:
    """/api/v1/admin/logs"""

    async def test_newest_first(self, client: AsyncClient, admin_token, resolved_issue):
        """최신 로그가 먼저 온다."""
        res = await client.get("/api/v1/admin/logs", headers=auth_header(admin_token))
        assert res.status_code == 200
        actions = [log["action"] for log in res.json()["items"]]
        assert actions[:3] == ["RESOLVE", "APPROVE", "CREATE"]

    async def test_actor_name_resolved(self, client: AsyncClient, admin_token, open_issue):
        """수행자 이름이 함께 반환된다."""
        res = await client.get("/api/v1/admin/logs", headers=auth_header(admin_token), params={"action": "CREATE"})
        items = res.json()["items"]
        assert len(items) == 1
        assert items[0]["performed_by_name"] == "Test Worker"
        assert items[0]["entity_type"] == "ISSUE"

    async def test_filter_and_search(self, client: AsyncClient, admin_token, resolved_issue):
        """엔티티 유형 필터와 상세 검색."""
        res = await client.get(
            "/api/v1/admin/logs", headers=auth_header(admin_token), params={"entity_type": "ISSUE", "q": "pipeworks"}
        )
        body = res.json()
        assert body["total"] == 1
        assert body["items"][0]["action"] == "APPROVE"

    async def test_distinct_actions(self, client: AsyncClient, admin_token, resolved_issue):
        """기록된 액션 코드 목록."""
        res = await client.get("/api/v1/admin/logs/actions", headers=auth_header(admin_token))
        assert res.json() == ["APPROVE", "CREATE", "RESOLVE"]

    async def test_manager_forbidden(self, client: AsyncClient, manager_token):
        """매니저는 시스템 로그를 볼 수 없다."""
        res = await client.get("/api/v1/admin/logs", headers=auth_header(manager_token))
        assert res.status_code == 403

    async def test_no_delete_endpoint(self, client: AsyncClient, admin_token, open_issue):
        """로그는 삭제할 수 없다."""
        res = await client.get("/api/v1/admin/logs", headers=auth_header(admin_token))
        log_id = res.json()["items"][0]["id"]
        res = await client.delete(f"/api/v1/admin/logs/{log_id}", headers=auth_header(admin_token))
        assert res.status_code in (404, 405)
