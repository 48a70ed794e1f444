from __future__ import annotations

import os
import re
from io import BytesIO
from urllib.parse import urlparse

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from conftest import PNG_BYTES, auth
from docvault.documents import service
from docvault.extraction import TextExtractor
from docvault.main import create_app
from docvault.storage.files import FileStore


@pytest.fixture
def token(register):
    return register()["token"]


def test_upload_creates_document(upload, token):
    r = upload(token, description="Water bill")
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Document uploaded successfully"

    doc = body["data"]["document"]
    assert doc["title"] == "Invoice March"
    assert doc["description"] == "Water bill"
    assert doc["fileType"] == "image/png"
    assert doc["fileSize"] == len(PNG_BYTES)
    assert doc["isPublic"] is False
    assert re.fullmatch(r"[0-9a-f]{32}\.png", doc["filePath"])
    assert doc["fileUrl"] == f"http://testserver/uploads/{doc['filePath']}"
    assert doc["ocrText"] == f"OCR text would be extracted from {doc['filePath']} in a real implementation."


def test_uploaded_bytes_round_trip(client, uploaded, token):
    content = os.urandom(200_000)
    doc = uploaded(token, content=content, filename="photo.JPG", content_type="image/jpeg")
    assert doc["filePath"].endswith(".jpg")

    listed = client.get("/api/documents", headers=auth(token)).json()["data"]["documents"]
    assert [d["id"] for d in listed] == [doc["id"]]

    r = client.get(urlparse(listed[0]["fileUrl"]).path)
    assert r.status_code == 200
    assert r.content == content


def test_upload_without_file_part(client, token):
    r = client.post("/api/upload", headers=auth(token), data={"title": "No file here"})
    assert r.status_code == 400
    assert r.json()["error"] == "Bad Request"
    assert r.json()["message"].startswith("No file uploaded")


def test_upload_with_empty_filename(client, token, settings):
    r = client.post("/api/upload", headers=auth(token), data={"title": "Nameless"},
                    files={"file": ("", BytesIO(PNG_BYTES), "image/png")})
    assert r.status_code == 400
    assert r.json()["message"] == "File must have a filename"
    assert os.listdir(settings.upload_dir) == []


def test_upload_with_odd_extension_is_stored_without_it(upload, token):
    r = upload(token, filename="scan.p\\ng")
    assert r.status_code == 201
    assert len(r.json()["data"]["document"]["filePath"]) == 32


def test_upload_with_empty_title(upload, token):
    r = upload(token, title="")
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation Error"
    assert "title" in {e["field"] for e in body["details"]["errors"]}


def test_upload_without_title(upload, token):
    r = upload(token, title=None)
    assert r.status_code == 400
    assert r.json()["details"]["errorsByField"]["title"][0]["message"] == "Title is required"


@pytest.mark.parametrize("length", [2, 255])
def test_title_length_accepted(upload, token, length):
    assert upload(token, title="t" * length).status_code == 201


@pytest.mark.parametrize("length", [1, 256])
def test_title_length_rejected(upload, token, length):
    r = upload(token, title="t" * length)
    assert r.status_code == 400
    assert r.json()["details"]["errors"][0]["field"] == "title"


def test_upload_reports_all_field_errors(upload, token, settings):
    r = upload(token, title=" ", description="d" * 1001)
    assert r.status_code == 400
    body = r.json()
    assert set(body["details"]["errorsByField"]) == {"title", "description"}
    # nothing was written for a rejected request
    assert os.listdir(settings.upload_dir) == []


def test_upload_can_be_public(uploaded, token):
    assert uploaded(token, is_public=True)["isPublic"] is True


def test_upload_requires_auth(client, settings):
    r = client.post("/api/upload", data={"title": "Anon"},
                    files={"file": ("a.png", BytesIO(PNG_BYTES), "image/png")})
    assert r.status_code == 401
    assert os.listdir(settings.upload_dir) == []


def test_extraction_failure_does_not_fail_upload(upload, token, monkeypatch):
    def boom(self, path):
        raise RuntimeError("ocr backend down")

    monkeypatch.setattr(TextExtractor, "_placeholder", boom)
    r = upload(token)
    assert r.status_code == 201
    assert r.json()["data"]["document"]["ocrText"] == ""


def test_storage_failure_is_500(upload, token, monkeypatch):
    def broken(self, stream, original_name):
        raise OSError("disk full")

    monkeypatch.setattr(FileStore, "save", broken)
    r = upload(token)
    assert r.status_code == 500
    assert r.json()["message"] == "Failed to save uploaded file"


def test_metadata_failure_removes_stored_file(upload, token, settings, monkeypatch):
    def broken(*args, **kwargs):
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr(service, "create_document", broken)
    r = upload(token)
    assert r.status_code == 500
    assert r.json()["message"] == "Failed to save document metadata"
    assert os.listdir(settings.upload_dir) == []


@pytest.fixture
def small_client(settings):
    app = create_app(settings.model_copy(update={"max_file_size": 1024}))
    with TestClient(app) as c:
        yield c


def test_oversized_file_is_rejected_and_not_kept(small_client, settings):
    r = small_client.post("/auth/register", json={"email": "a@example.com", "password": "secret123", "name": "Al"})
    token = r.json()["data"]["token"]

    r = small_client.post("/api/upload", headers=auth(token), data={"title": "Big one"},
                          files={"file": ("big.png", BytesIO(b"x" * 4096), "image/png")})
    assert r.status_code == 413
    assert r.json()["error"] == "Payload Too Large"
    assert os.listdir(settings.upload_dir) == []


def test_oversized_request_is_rejected_before_reading(small_client):
    r = small_client.post("/api/upload", data={"title": "Huge"},
                          files={"file": ("huge.png", BytesIO(b"x" * 200_000), "image/png")})
    assert r.status_code == 413
