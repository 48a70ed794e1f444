"""
Shared fixtures for docvault tests.

Every test gets its own app built from a ``Settings`` object that points at
a throwaway SQLite file and upload directory under ``tmp_path``.
"""

from __future__ import annotations

from io import BytesIO

import pytest
from fastapi.testclient import TestClient

from docvault.config import Settings
from docvault.main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 4


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        APP_ENV="test",
        JWT_SECRET="test-secret",
        APP_URL="http://testserver",
        DATABASE_URL=f"sqlite:///{tmp_path / 'docvault.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        MAX_FILE_SIZE=1024 * 1024,
        ADMIN_EMAILS="admin@example.com",
        RATE_LIMIT_MAX_CALLS=1000,
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return the response ``data`` (``user`` + ``token``)."""

    def _register(email="alice@example.com", password="secret123", name="Alice"):
        r = client.post("/auth/register", json={"email": email, "password": password, "name": name})
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _register


@pytest.fixture
def upload(client):
    """POST a file to /api/upload and return the raw response."""

    def _upload(token, *, content=PNG_BYTES, filename="scan.png", content_type="image/png",
                title="Invoice March", description=None, is_public=None):
        data = {}
        if title is not None:
            data["title"] = title
        if description is not None:
            data["description"] = description
        if is_public is not None:
            data["isPublic"] = "true" if is_public else "false"
        return client.post(
            "/api/upload",
            headers=auth(token),
            data=data,
            files={"file": (filename, BytesIO(content), content_type)},
        )

    return _upload


@pytest.fixture
def uploaded(upload):
    """Upload and return the created document JSON."""

    def _uploaded(token, **kwargs):
        r = upload(token, **kwargs)
        assert r.status_code == 201, r.text
        return r.json()["data"]["document"]

    return _uploaded
