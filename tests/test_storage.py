"""스토리지 API 테스트 — 로컬 모드 presigned URL과 업로드."""

import pytest
from httpx import AsyncClient

from mms.services import storage_service as storage_module
from mms.services.storage_service import storage_service
from tests.conftest import auth_header


@pytest.fixture
def uploads_dir(tmp_path, monkeypatch):
    """업로드 디렉토리를 임시 경로로 바꿉니다."""
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    monkeypatch.setattr(storage_module, "UPLOADS_DIR", uploads)
    return uploads


class TestPresignedUrl:
    """POST /api/v1/storage/presigned-url"""

    async def test_local_upload_url(self, client: AsyncClient, worker_token):
        """AWS 미설정 시 로컬 업로드 URL을 반환한다."""
        res = await client.post(
            "/api/v1/storage/presigned-url",
            headers=auth_header(worker_token),
            json={"filename": "leak.JPG", "content_type": "image/jpeg"},
        )
        assert res.status_code == 200
        body = res.json()
        assert "/api/v1/storage/upload/temp/issues/" in body["upload_url"]
        assert "/uploads/temp/issues/" in body["file_url"]
        assert body["file_url"].endswith(".jpg")

    async def test_unknown_folder(self, client: AsyncClient, worker_token):
        res = await client.post(
            "/api/v1/storage/presigned-url",
            headers=auth_header(worker_token),
            json={"filename": "a.png", "content_type": "image/png", "folder": "secrets"},
        )
        assert res.status_code == 400

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.post("/api/v1/storage/presigned-url", json={"filename": "a.png", "content_type": "image/png"})
        assert res.status_code in (401, 403)


class TestLocalUpload:
    """PUT /api/v1/storage/upload/{key}"""

    async def test_upload_and_finalize(self, client: AsyncClient, uploads_dir):
        """temp/에 저장된 파일은 첨부 시 최종 위치로 이동한다."""
        res = await client.put("/api/v1/storage/upload/temp/issues/2026/01/01/abc.png", content=b"png-bytes")
        assert res.status_code == 200
        assert (uploads_dir / "temp/issues/2026/01/01/abc.png").read_bytes() == b"png-bytes"

        temp_url = f"{storage_service._public_prefix}temp/issues/2026/01/01/abc.png"
        final_url = storage_service.finalize_upload(temp_url)
        assert final_url == f"{storage_service._public_prefix}issues/2026/01/01/abc.png"
        assert (uploads_dir / "issues/2026/01/01/abc.png").exists()
        assert not (uploads_dir / "temp/issues/2026/01/01/abc.png").exists()

    async def test_rejects_key_outside_temp(self, client: AsyncClient, uploads_dir):
        """temp/ 밖의 키는 거부된다."""
        res = await client.put("/api/v1/storage/upload/issues/abc.png", content=b"x")
        assert res.status_code == 400

    async def test_rejects_parent_reference(self, uploads_dir):
        """상위 경로 참조는 거부된다."""
        from mms.utils.exceptions import BadRequestError
        with pytest.raises(BadRequestError):
            storage_service.save_local("temp/../../etc/passwd", b"x")

    async def test_external_url_unchanged(self, uploads_dir):
        """외부 URL은 그대로 반환된다."""
        assert storage_service.finalize_upload("https://placehold.co/600x400.png") == "https://placehold.co/600x400.png"


class TestFinalizeTraversal:
    """업로드 디렉토리 밖을 가리키는 temp/ URL"""

    async def test_finalize_rejects_parent_reference(self, uploads_dir):
        """상위 경로를 참조하는 temp/ URL은 거부되고 파일은 이동하지 않는다."""
        from mms.utils.exceptions import BadRequestError
        (uploads_dir / "temp").mkdir()
        outside = uploads_dir.parent / "secret.db"
        outside.write_bytes(b"data")

        with pytest.raises(BadRequestError):
            storage_service.finalize_upload(f"{storage_service._public_prefix}temp/../../secret.db")
        assert outside.read_bytes() == b"data"
        assert not (uploads_dir.parent.parent / "secret.db").exists()

    async def test_report_with_escaping_attachment(
        self, client: AsyncClient, worker_token, project, assignment, uploads_dir
    ):
        """이슈 첨부 URL이 업로드 디렉토리를 벗어나면 400, 이슈는 생성되지 않는다."""
        (uploads_dir / "temp").mkdir()
        outside = uploads_dir.parent / "secret.db"
        outside.write_bytes(b"data")

        res = await client.post(
            "/api/v1/worker/issues",
            headers=auth_header(worker_token),
            json={
                "project_id": str(project.id),
                "location_type": "OTHER",
                "other_area": "Lobby Entrance",
                "issue_caused_by": "Wear and Tear",
                "complaint_type": "Electrical",
                "attachment_urls": [f"{storage_service._public_prefix}temp/../../secret.db"],
            },
        )
        assert res.status_code == 400
        assert outside.exists()

        listed = await client.get("/api/v1/worker/issues", headers=auth_header(worker_token))
        assert listed.json()["total"] == 0
