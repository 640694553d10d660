"""Unit tests for the HTTP front end."""

import asyncio
import io
import json

import pytest
from fastapi import HTTPException, UploadFile
from fastapi.testclient import TestClient

from prefix_swap.api.templates import _store_upload
from prefix_swap.main import create_app

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

PREVIEW_XML = (
    "<w:document><w:body>"
    "<w:t>{a.name}</w:t><w:t>{цикл(i из b.items)}</w:t>"
    "<w:t>{format(c.date)}</w:t><w:t>{если(a.flag)}</w:t><w:t>{a.name}</w:t>"
    "</w:body></w:document>"
)


@pytest.fixture
def client(settings):
    """Create a test client bound to temporary settings."""
    return TestClient(create_app(settings))


# =============================================================================
# Health Tests
# =============================================================================


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# =============================================================================
# Upload and Analyze Tests
# =============================================================================


class TestUploadAndAnalyze:
    """Test suite for POST /api/upload-and-analyze."""

    def test_lists_fields_and_prefixes(self, client, make_docx):
        response = client.post(
            "/api/upload-and-analyze",
            files={"file": ("template.docx", make_docx(PREVIEW_XML), DOCX_MEDIA_TYPE)},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["fileName"] == "template.docx"
        assert body["fields"] == ["a.flag", "a.name", "b.items", "c.date"]
        assert body["prefixes"] == ["a", "b", "c"]
        assert body["totalFields"] == 4
        assert body["totalPrefixes"] == 3

    def test_fdt_upload(self, client, make_docx, make_fdt):
        data = make_fdt(make_docx(PREVIEW_XML))

        response = client.post(
            "/api/upload-and-analyze",
            files={"file": ("template.fdt", data, "application/octet-stream")},
        )

        assert response.status_code == 200
        assert response.json()["totalPrefixes"] == 3

    def test_upload_is_not_kept(self, client, settings, make_docx):
        """Test that the per-request upload directory is removed afterwards."""
        client.post(
            "/api/upload-and-analyze",
            files={"file": ("template.docx", make_docx(PREVIEW_XML), DOCX_MEDIA_TYPE)},
        )

        assert list(settings.upload_dir.iterdir()) == []

    def test_unsupported_type(self, client):
        response = client.post(
            "/api/upload-and-analyze",
            files={"file": ("template.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 415
        assert response.json()["success"] is False

    def test_corrupt_archive(self, client, settings):
        response = client.post(
            "/api/upload-and-analyze",
            files={"file": ("template.docx", b"not a zip", DOCX_MEDIA_TYPE)},
        )

        assert response.status_code == 400
        assert "zip" in response.json()["message"]
        assert list(settings.upload_dir.iterdir()) == []

    def test_corrupt_archive_member(self, client, settings, corrupt_docx):
        """Test that a damaged document part is a bad request, not a server error."""
        response = client.post(
            "/api/upload-and-analyze",
            files={"file": ("template.docx", corrupt_docx, DOCX_MEDIA_TYPE)},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "corrupt" in response.json()["message"]
        assert list(settings.upload_dir.iterdir()) == []

    def test_too_large(self, settings, make_docx):
        limited = settings.model_copy(update={"max_upload_bytes": 10})
        client = TestClient(create_app(limited))

        response = client.post(
            "/api/upload-and-analyze",
            files={"file": ("template.docx", make_docx(PREVIEW_XML), DOCX_MEDIA_TYPE)},
        )

        assert response.status_code == 413

    def test_missing_file(self, client):
        response = client.post("/api/upload-and-analyze")
        assert response.status_code == 422

    def test_size_limit_without_declared_size(self, tmp_path, monkeypatch):
        """Test that an upload of unknown size is cut off once it passes the limit."""
        monkeypatch.setattr("prefix_swap.api.templates.UPLOAD_CHUNK_BYTES", 4)
        upload = UploadFile(file=io.BytesIO(b"x" * 20), filename="template.docx")
        destination = tmp_path / "template.docx"

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(_store_upload(upload, destination, limit=10))

        assert exc_info.value.status_code == 413
        assert destination.stat().st_size <= 10

    def test_store_upload_within_limit(self, tmp_path):
        upload = UploadFile(file=io.BytesIO(b"x" * 10), filename="template.docx")
        destination = tmp_path / "template.docx"

        assert asyncio.run(_store_upload(upload, destination, limit=10)) == 10
        assert destination.read_bytes() == b"x" * 10


# =============================================================================
# Generate Config Tests
# =============================================================================


class TestGenerateConfig:
    """Test suite for POST /api/generate-config."""

    def test_writes_config(self, client, settings):
        response = client.post(
            "/api/generate-config",
            json={"fileName": "template.docx", "oldPrefix": "old", "newPrefix": "new"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["filePath"] == str(settings.config_path)
        assert body["config"]["analyzer"]["originalPrefix"] == "old."

        written = json.loads(settings.config_path.read_text(encoding="utf-8"))
        assert written["generator"]["newPrefix"] == "new."
        assert written["replacer"]["replacementMapFile"].endswith("replacement_map.json")

    def test_cyrillic_prefixes(self, client, settings):
        response = client.post(
            "/api/generate-config",
            json={"fileName": "t.docx", "oldPrefix": "Клиент", "newPrefix": "Заказчик"},
        )

        assert response.status_code == 200
        written = json.loads(settings.config_path.read_text(encoding="utf-8"))
        assert written["analyzer"]["originalPrefix"] == "Клиент."

    def test_missing_fields(self, client, settings):
        response = client.post("/api/generate-config", json={"fileName": "t.docx", "oldPrefix": "old"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "All fields are required"}
        assert not settings.config_path.exists()

    def test_invalid_prefix(self, client):
        response = client.post(
            "/api/generate-config",
            json={"fileName": "t.docx", "oldPrefix": "old-x", "newPrefix": "new"},
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("Old prefix:")

    def test_identical_prefixes(self, client):
        response = client.post(
            "/api/generate-config",
            json={"fileName": "t.docx", "oldPrefix": "same", "newPrefix": "same"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Prefixes must differ"
