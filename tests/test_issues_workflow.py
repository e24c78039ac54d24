"""이슈 보고 및 상태 전이 테스트.

Issue reporting and review workflow: approve, reject, resolve, verify,
admin override, optimistic version checks, history and audit rows.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.issue import Issue, IssueAttachment, IssueStatusHistory
from mms.models.system_log import SystemLog
from mms.schemas.issue import ApproveRequest
from mms.services.issue_service import issue_service
from mms.utils.exceptions import ConflictError
from tests.conftest import auth_header


async def _count(db: AsyncSession, model, *where) -> int:
    return (await db.execute(select(func.count()).select_from(model).where(*where))).scalar()


def _report(project, unit=None, **overrides) -> dict:
    body = {
        "project_id": str(project.id),
        "location_type": "UNIT" if unit is not None else "OTHER",
        "issue_caused_by": "Wear and Tear",
        "complaint_type": "Electrical",
        "description_text": "Light flickering",
    }
    if unit is not None:
        body["unit_id"] = str(unit.id)
    else:
        body["other_area"] = "Lobby Entrance"
    body.update(overrides)
    return body


class TestReportIssue:
    """POST /api/v1/worker/issues"""

    async def test_new_issue_is_open_and_unverified(
        self, client: AsyncClient, worker_token, project, unit, assignment
    ):
        """새 이슈는 항상 OPEN, 미검증, 미승인, 기본 우선순위 MEDIUM."""
        res = await client.post("/api/v1/worker/issues", headers=auth_header(worker_token), json=_report(project, unit))
        assert res.status_code == 201
        body = res.json()
        assert body["status"] == "OPEN"
        assert body["verified"] is False
        assert body["approved"] is False
        assert body["priority"] == "MEDIUM"
        assert body["is_archived"] is False
        assert body["is_actionable"] is True
        assert body["version"] == 1

    async def test_common_area_issue(self, client: AsyncClient, worker_token, project, assignment):
        """공용 구역 이슈."""
        res = await client.post("/api/v1/worker/issues", headers=auth_header(worker_token), json=_report(project))
        assert res.status_code == 201
        assert res.json()["other_area"] == "Lobby Entrance"
        assert res.json()["unit_id"] is None

    async def test_urgent_priority_becomes_high(self, client: AsyncClient, worker_token, project, assignment):
        """구버전 URGENT 우선순위는 HIGH로 저장된다."""
        res = await client.post(
            "/api/v1/worker/issues", headers=auth_header(worker_token), json=_report(project, priority="urgent")
        )
        assert res.status_code == 201
        assert res.json()["priority"] == "HIGH"

    async def test_invalid_priority(self, client: AsyncClient, worker_token, project, assignment):
        """알 수 없는 우선순위는 422."""
        res = await client.post(
            "/api/v1/worker/issues", headers=auth_header(worker_token), json=_report(project, priority="CRITICAL")
        )
        assert res.status_code == 422

    async def test_before_photos_stored(
        self, client: AsyncClient, db: AsyncSession, worker_token, project, assignment
    ):
        """첨부 URL은 BEFORE 증빙으로 저장된다."""
        res = await client.post(
            "/api/v1/worker/issues",
            headers=auth_header(worker_token),
            json=_report(project, attachment_urls=["https://placehold.co/600x400.png", "  "]),
        )
        assert res.status_code == 201
        attachments = res.json()["attachments"]
        assert len(attachments) == 1
        assert attachments[0]["proof_type"] == "BEFORE"
        assert attachments[0]["url"] == "https://placehold.co/600x400.png"

    async def test_unassigned_worker_forbidden(self, client: AsyncClient, other_worker_token, project, assignment):
        """배정되지 않은 프로젝트에는 보고할 수 없다."""
        res = await client.post("/api/v1/worker/issues", headers=auth_header(other_worker_token), json=_report(project))
        assert res.status_code == 403

    async def test_manager_reports_without_assignment(
        self, client: AsyncClient, manager_token, manager_user, project, unit
    ):
        """매니저는 배정 없이도 이슈를 보고할 수 있다."""
        res = await client.post("/api/v1/manager/issues", headers=auth_header(manager_token), json=_report(project, unit))
        assert res.status_code == 201
        body = res.json()
        assert body["status"] == "OPEN"
        assert body["verified"] is False
        assert body["reported_by_user_id"] == str(manager_user.id)

    async def test_admin_reports_common_area(self, client: AsyncClient, admin_token, project):
        """관리자도 공용 구역 이슈를 보고할 수 있다."""
        res = await client.post("/api/v1/admin/issues", headers=auth_header(admin_token), json=_report(project))
        assert res.status_code == 201
        assert res.json()["other_area"] == "Lobby Entrance"

    async def test_worker_cannot_use_review_portal(self, client: AsyncClient, worker_token, project, assignment):
        """작업자는 매니저 포털로 보고할 수 없다."""
        res = await client.post("/api/v1/manager/issues", headers=auth_header(worker_token), json=_report(project))
        assert res.status_code == 403

    async def test_unit_issue_requires_unit(self, client: AsyncClient, worker_token, project, assignment):
        """UNIT 위치는 유닛이 필요하다."""
        body = _report(project, location_type="UNIT")
        res = await client.post("/api/v1/worker/issues", headers=auth_header(worker_token), json=body)
        assert res.status_code == 400

    async def test_unit_from_other_project(
        self, client: AsyncClient, db: AsyncSession, worker_token, project, unit, assignment, admin_user
    ):
        """다른 프로젝트의 유닛은 404."""
        from mms.models.project import Project, WorkerProjectAssignment
        other = Project(name="Oasis Heights", created_by_user_id=admin_user.id)
        db.add(other)
        await db.flush()
        db.add(WorkerProjectAssignment(
            worker_user_id=assignment.worker_user_id, project_id=other.id, assigned_by_user_id=admin_user.id
        ))
        await db.flush()

        res = await client.post(
            "/api/v1/worker/issues", headers=auth_header(worker_token), json=_report(other, unit)
        )
        assert res.status_code == 404

    async def test_other_area_required(self, client: AsyncClient, worker_token, project, assignment):
        """OTHER 위치는 구역 이름이 필요하다."""
        res = await client.post(
            "/api/v1/worker/issues", headers=auth_header(worker_token), json=_report(project, other_area=" ")
        )
        assert res.status_code == 400

    async def test_cause_and_category_required(self, client: AsyncClient, worker_token, project, assignment):
        """원인과 분류는 공백일 수 없다."""
        res = await client.post(
            "/api/v1/worker/issues", headers=auth_header(worker_token), json=_report(project, issue_caused_by="")
        )
        assert res.status_code == 400
        res = await client.post(
            "/api/v1/worker/issues", headers=auth_header(worker_token), json=_report(project, complaint_type="  ")
        )
        assert res.status_code == 400

    async def test_creation_logged(self, db: AsyncSession, open_issue):
        """보고 시 CREATE 로그가 남고 상태 이력은 없다."""
        assert await _count(db, SystemLog, SystemLog.action == "CREATE", SystemLog.entity_id == str(open_issue.id)) == 1
        assert await _count(db, IssueStatusHistory, IssueStatusHistory.issue_id == open_issue.id) == 0


class TestApproveReject:
    """POST /api/v1/manager/issues/{id}/approve, /reject"""

    async def test_approve_requires_vendor(self, client: AsyncClient, manager_token, open_issue):
        """업체명이 비어 있으면 승인할 수 없다."""
        res = await client.post(
            f"/api/v1/manager/issues/{open_issue.id}/approve",
            headers=auth_header(manager_token),
            json={"vendor_name": "   "},
        )
        assert res.status_code == 400

        res = await client.get(f"/api/v1/manager/issues/{open_issue.id}", headers=auth_header(manager_token))
        assert res.json()["status"] == "OPEN"

    async def test_approve(self, client: AsyncClient, manager_token, manager_user, open_issue):
        """승인하면 IN_PROGRESS가 되고 업체가 배정된다."""
        res = await client.post(
            f"/api/v1/manager/issues/{open_issue.id}/approve",
            headers=auth_header(manager_token),
            json={"vendor_name": " ElectroFix Inc. ", "priority": "HIGH", "version": 1},
        )
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "IN_PROGRESS"
        assert body["approved"] is True
        assert body["approved_by_user_id"] == str(manager_user.id)
        assert body["assigned_vendor_name"] == "ElectroFix Inc."
        assert body["priority"] == "HIGH"
        assert body["version"] == 2

    async def test_approve_twice(self, client: AsyncClient, manager_token, open_issue):
        """OPEN이 아닌 이슈는 승인할 수 없다."""
        url = f"/api/v1/manager/issues/{open_issue.id}/approve"
        await client.post(url, headers=auth_header(manager_token), json={"vendor_name": "A"})
        res = await client.post(url, headers=auth_header(manager_token), json={"vendor_name": "B"})
        assert res.status_code == 400

    async def test_reject_requires_reason(self, client: AsyncClient, manager_token, open_issue):
        """사유 없이 반려할 수 없다."""
        res = await client.post(
            f"/api/v1/manager/issues/{open_issue.id}/reject", headers=auth_header(manager_token), json={"reason": ""}
        )
        assert res.status_code == 400

    async def test_reject_archives_issue(self, client: AsyncClient, manager_token, open_issue):
        """반려된 이슈는 보관 처리된다."""
        res = await client.post(
            f"/api/v1/manager/issues/{open_issue.id}/reject",
            headers=auth_header(manager_token),
            json={"reason": "Duplicate report"},
        )
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "REJECTED"
        assert body["rejection_reason"] == "Duplicate report"
        assert body["is_archived"] is True
        assert body["is_actionable"] is False

        active = await client.get("/api/v1/manager/issues", headers=auth_header(manager_token))
        assert active.json()["total"] == 0
        archived = await client.get(
            "/api/v1/manager/issues", headers=auth_header(manager_token), params={"scope": "archived"}
        )
        assert archived.json()["total"] == 1

    async def test_worker_cannot_approve(self, client: AsyncClient, worker_token, open_issue):
        """작업자는 승인할 수 없다."""
        res = await client.post(
            f"/api/v1/manager/issues/{open_issue.id}/approve",
            headers=auth_header(worker_token),
            json={"vendor_name": "X"},
        )
        assert res.status_code == 403

    async def test_unknown_issue(self, client: AsyncClient, manager_token):
        """없는 이슈는 404."""
        res = await client.post(
            "/api/v1/manager/issues/00000000-0000-0000-0000-000000000000/approve",
            headers=auth_header(manager_token),
            json={"vendor_name": "X"},
        )
        assert res.status_code == 404


class TestResolveVerify:
    """POST /api/v1/manager/issues/{id}/resolve, /verify"""

    async def test_resolve_requires_in_progress(self, client: AsyncClient, manager_token, open_issue):
        """OPEN 이슈는 바로 해결할 수 없다."""
        res = await client.post(
            f"/api/v1/manager/issues/{open_issue.id}/resolve", headers=auth_header(manager_token), json={}
        )
        assert res.status_code == 400

    async def test_verify_requires_after_proof(self, client: AsyncClient, manager_token, resolved_issue):
        """AFTER 증빙 없이 검증할 수 없다."""
        res = await client.post(
            f"/api/v1/manager/issues/{resolved_issue.id}/verify", headers=auth_header(manager_token), json={}
        )
        assert res.status_code == 400
        assert "AFTER" in res.json()["detail"]

    async def test_before_proof_does_not_count(
        self, client: AsyncClient, db: AsyncSession, manager_token, resolved_issue, worker_user
    ):
        """BEFORE 증빙만으로는 검증할 수 없다."""
        db.add(IssueAttachment(
            issue_id=resolved_issue.id, url="https://x/before.png", proof_type="BEFORE", uploaded_by_user_id=worker_user.id
        ))
        await db.flush()
        res = await client.post(
            f"/api/v1/manager/issues/{resolved_issue.id}/verify", headers=auth_header(manager_token), json={}
        )
        assert res.status_code == 400

    async def test_full_lifecycle(
        self, client: AsyncClient, worker_token, manager_token, resolved_issue
    ):
        """작업자가 AFTER 증빙을 올리면 검증 후 보관된다."""
        queue = await client.get("/api/v1/worker/issues/verification-queue", headers=auth_header(worker_token))
        assert [i["id"] for i in queue.json()] == [str(resolved_issue.id)]

        res = await client.post(
            f"/api/v1/worker/issues/{resolved_issue.id}/attachments",
            headers=auth_header(worker_token),
            json={"url": "https://x/after.png"},
        )
        assert res.status_code == 201
        assert res.json()["proof_type"] == "AFTER"

        res = await client.post(
            f"/api/v1/manager/issues/{resolved_issue.id}/verify",
            headers=auth_header(manager_token),
            json={"note": "Checked on site"},
        )
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "RESOLVED"
        assert body["verified"] is True
        assert body["is_archived"] is True

        queue = await client.get("/api/v1/worker/issues/verification-queue", headers=auth_header(worker_token))
        assert queue.json() == []

        res = await client.post(
            f"/api/v1/worker/issues/{resolved_issue.id}/attachments",
            headers=auth_header(worker_token),
            json={"url": "https://x/late.png"},
        )
        assert res.status_code == 400

    async def test_after_proof_on_open_issue(self, client: AsyncClient, worker_token, open_issue):
        """RESOLVED가 아닌 이슈에는 AFTER 증빙을 올릴 수 없다."""
        res = await client.post(
            f"/api/v1/worker/issues/{open_issue.id}/attachments",
            headers=auth_header(worker_token),
            json={"url": "https://x/after.png"},
        )
        assert res.status_code == 400

    async def test_after_proof_other_workers_issue(self, client: AsyncClient, other_worker_token, resolved_issue):
        """다른 작업자의 이슈는 보이지 않는다."""
        res = await client.post(
            f"/api/v1/worker/issues/{resolved_issue.id}/attachments",
            headers=auth_header(other_worker_token),
            json={"url": "https://x/after.png"},
        )
        assert res.status_code == 404


class TestOverride:
    """POST /api/v1/admin/issues/{id}/override"""

    async def test_override_requires_change(self, client: AsyncClient, admin_token, open_issue):
        """아무것도 바뀌지 않으면 400."""
        res = await client.post(
            f"/api/v1/admin/issues/{open_issue.id}/override",
            headers=auth_header(admin_token),
            json={"status": "OPEN", "priority": "MEDIUM"},
        )
        assert res.status_code == 400

    async def test_override_status_bypasses_workflow(self, client: AsyncClient, admin_token, open_issue):
        """강제 변경은 전제조건을 우회한다."""
        res = await client.post(
            f"/api/v1/admin/issues/{open_issue.id}/override",
            headers=auth_header(admin_token),
            json={"status": "RESOLVED", "comment": "Fixed during inspection"},
        )
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "RESOLVED"
        assert body["verified"] is False
        assert body["resolved_at"] is not None

    async def test_override_clears_verification(
        self, client: AsyncClient, db: AsyncSession, admin_token, manager_user, resolved_issue, worker_user
    ):
        """검증된 이슈를 RESOLVED 외 상태로 바꾸면 검증이 해제된다."""
        db.add(IssueAttachment(
            issue_id=resolved_issue.id, url="https://x/after.png", proof_type="AFTER", uploaded_by_user_id=worker_user.id
        ))
        await db.flush()
        res = await client.post(
            f"/api/v1/admin/issues/{resolved_issue.id}/verify", headers=auth_header(admin_token), json={}
        )
        assert res.json()["verified"] is True

        res = await client.post(
            f"/api/v1/admin/issues/{resolved_issue.id}/override",
            headers=auth_header(admin_token),
            json={"status": "IN_PROGRESS"},
        )
        body = res.json()
        assert body["status"] == "IN_PROGRESS"
        assert body["verified"] is False
        assert body["verified_at"] is None
        assert body["is_archived"] is False

    async def test_override_priority_only(self, client: AsyncClient, db: AsyncSession, admin_token, open_issue):
        """우선순위만 변경해도 이력과 로그가 남는다."""
        res = await client.post(
            f"/api/v1/admin/issues/{open_issue.id}/override",
            headers=auth_header(admin_token),
            json={"priority": "LOW"},
        )
        assert res.status_code == 200
        assert res.json()["priority"] == "LOW"
        assert res.json()["status"] == "OPEN"

        log = (await db.execute(select(SystemLog).where(SystemLog.action == "OVERRIDE"))).scalar_one()
        assert "priority MEDIUM -> LOW" in log.details

    async def test_manager_cannot_override(self, client: AsyncClient, manager_token, open_issue):
        """매니저는 강제 변경할 수 없다."""
        res = await client.post(
            f"/api/v1/admin/issues/{open_issue.id}/override",
            headers=auth_header(manager_token),
            json={"status": "REJECTED"},
        )
        assert res.status_code == 403

    async def test_admin_verification_proof(self, client: AsyncClient, admin_token, open_issue):
        """관리자는 VERIFICATION 증빙을 첨부할 수 있다."""
        res = await client.post(
            f"/api/v1/admin/issues/{open_issue.id}/attachments",
            headers=auth_header(admin_token),
            json={"url": "https://x/inspection.mp4", "media_type": "VIDEO"},
        )
        assert res.status_code == 201
        assert res.json()["proof_type"] == "VERIFICATION"
        assert res.json()["media_type"] == "VIDEO"


class TestConcurrencyAndAudit:
    """버전 검사, 상태 이력, 시스템 로그."""

    async def test_stale_version_conflict(self, client: AsyncClient, db: AsyncSession, manager_token, open_issue):
        """오래된 버전으로 요청하면 409이고 아무것도 바뀌지 않는다."""
        res = await client.post(
            f"/api/v1/manager/issues/{open_issue.id}/approve",
            headers=auth_header(manager_token),
            json={"vendor_name": "ElectroFix", "version": 7},
        )
        assert res.status_code == 409

        res = await client.get(f"/api/v1/manager/issues/{open_issue.id}", headers=auth_header(manager_token))
        assert res.json()["status"] == "OPEN"
        assert res.json()["version"] == 1
        assert await _count(db, IssueStatusHistory, IssueStatusHistory.issue_id == open_issue.id) == 0
        assert await _count(db, SystemLog, SystemLog.action == "APPROVE") == 0

    async def test_concurrent_write_detected(self, db: AsyncSession, manager_user, open_issue):
        """다른 쓰기가 먼저 커밋되면 ConflictError."""
        await db.execute(
            update(Issue)
            .where(Issue.id == open_issue.id)
            .values(version=Issue.version + 1)
            .execution_options(synchronize_session=False)
        )
        with pytest.raises(ConflictError):
            await issue_service.approve(db, open_issue.id, ApproveRequest(vendor_name="X"), manager_user)

    async def test_each_transition_writes_history_and_log(
        self, client: AsyncClient, db: AsyncSession, worker_token, manager_token, open_issue
    ):
        """전이마다 상태 이력 1건과 시스템 로그 1건이 기록된다."""
        headers = auth_header(manager_token)
        base = f"/api/v1/manager/issues/{open_issue.id}"
        await client.post(f"{base}/approve", headers=headers, json={"vendor_name": "PipeWorks"})
        await client.post(f"{base}/resolve", headers=headers, json={"note": "Replaced washer"})
        await client.post(
            f"/api/v1/worker/issues/{open_issue.id}/attachments",
            headers=auth_header(worker_token),
            json={"url": "https://x/after.png"},
        )
        await client.post(f"{base}/verify", headers=headers, json={})

        history = await client.get(f"{base}/history", headers=headers)
        steps = [(h["from_status"], h["to_status"]) for h in history.json()]
        assert steps == [
            ("OPEN", "IN_PROGRESS"),
            ("IN_PROGRESS", "RESOLVED"),
            ("RESOLVED", "RESOLVED"),
        ]

        for action in ("APPROVE", "RESOLVE", "VERIFY"):
            assert await _count(
                db, SystemLog, SystemLog.action == action, SystemLog.entity_id == str(open_issue.id)
            ) == 1

        worker_view = await client.get(
            f"/api/v1/worker/issues/{open_issue.id}/history", headers=auth_header(worker_token)
        )
        assert len(worker_view.json()) == 3

    async def test_verified_implies_resolved(
        self, client: AsyncClient, db: AsyncSession, admin_token, resolved_issue, worker_user
    ):
        """검증된 이슈를 반려로 강제 변경해도 verified ⇒ RESOLVED가 유지된다."""
        db.add(IssueAttachment(
            issue_id=resolved_issue.id, url="https://x/after.png", proof_type="AFTER", uploaded_by_user_id=worker_user.id
        ))
        await db.flush()
        await client.post(f"/api/v1/admin/issues/{resolved_issue.id}/verify", headers=auth_header(admin_token), json={})

        res = await client.post(
            f"/api/v1/admin/issues/{resolved_issue.id}/override",
            headers=auth_header(admin_token),
            json={"status": "REJECTED", "comment": "Vendor invoice disputed"},
        )
        assert res.status_code == 200
        assert res.json()["verified"] is False

        issues = (await db.execute(select(Issue))).scalars().all()
        assert all(i.status == "RESOLVED" for i in issues if i.verified)


class TestIssueViews:
    """목록, 검색, 통계."""

    async def test_search_and_filters(self, client: AsyncClient, worker_token, manager_token, project, assignment):
        """검색어와 상태 필터."""
        headers = auth_header(worker_token)
        await client.post("/api/v1/worker/issues", headers=headers, json=_report(project))
        await client.post(
            "/api/v1/worker/issues",
            headers=headers,
            json=_report(project, complaint_type="Plumbing", description_text="Leaking pipe"),
        )

        res = await client.get("/api/v1/manager/issues", headers=auth_header(manager_token), params={"q": "leak"})
        assert res.json()["total"] == 1
        assert res.json()["items"][0]["complaint_type"] == "Plumbing"

        res = await client.get(
            "/api/v1/manager/issues", headers=auth_header(manager_token), params={"status": "OPEN", "per_page": 1}
        )
        assert res.json()["total"] == 2
        assert len(res.json()["items"]) == 1

    async def test_search_wildcards_are_literal(
        self, client: AsyncClient, worker_token, manager_token, project, assignment
    ):
        """검색어의 %, _ 는 와일드카드가 아니라 문자 그대로 비교된다."""
        headers = auth_header(worker_token)
        await client.post("/api/v1/worker/issues", headers=headers, json=_report(project))
        await client.post(
            "/api/v1/worker/issues",
            headers=headers,
            json=_report(project, description_text="Door jammed 100% shut"),
        )

        manager = auth_header(manager_token)
        res = await client.get("/api/v1/manager/issues", headers=manager, params={"q": "%"})
        assert res.json()["total"] == 1
        assert res.json()["items"][0]["description_text"] == "Door jammed 100% shut"

        res = await client.get("/api/v1/manager/issues", headers=manager, params={"q": "_"})
        assert res.json()["total"] == 0

    async def test_worker_sees_only_own_issues(
        self, client: AsyncClient, other_worker_token, worker_token, open_issue
    ):
        """작업자는 본인이 보고한 이슈만 본다."""
        mine = await client.get("/api/v1/worker/issues", headers=auth_header(worker_token))
        assert mine.json()["total"] == 1
        theirs = await client.get("/api/v1/worker/issues", headers=auth_header(other_worker_token))
        assert theirs.json()["total"] == 0
        res = await client.get(f"/api/v1/worker/issues/{open_issue.id}", headers=auth_header(other_worker_token))
        assert res.status_code == 404

    async def test_stats(self, client: AsyncClient, manager_token, resolved_issue):
        """통계에 상태별/검증 대기 수가 포함된다."""
        res = await client.get("/api/v1/manager/issues/stats", headers=auth_header(manager_token))
        assert res.status_code == 200
        body = res.json()
        assert body["total"] == 1
        assert body["actionable"] == 1
        assert body["by_status"]["RESOLVED"] == 1
        assert body["by_status"]["OPEN"] == 0
        assert body["verify_pending"] == 1
        assert body["verified"] == 0
