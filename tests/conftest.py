"""Pytest fixtures for the storefront tests."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from src.database.catalog_store import CatalogStore
from src.database.session_registry import AdminSessionRegistry
from src.utils.config_loader import AdminConfig, ServerConfig, Settings

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret"


class FakeClock:
    """Manually advanced clock for token expiry tests."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return AdminSessionRegistry(ADMIN_USERNAME, ADMIN_PASSWORD, clock=clock)


@pytest.fixture
def store(tmp_path):
    catalog = CatalogStore(tmp_path / "data")
    catalog.init()
    return catalog


@pytest.fixture
def settings(tmp_path):
    public_dir = tmp_path / "public"
    public_dir.mkdir()
    (public_dir / "index.html").write_text("<h1>store</h1>", encoding="utf-8")
    return Settings(
        admin=AdminConfig(username=ADMIN_USERNAME, password=ADMIN_PASSWORD),
        server=ServerConfig(
            data_dir=public_dir / "data",
            public_dir=public_dir,
            integrations_mode="mock",
        ),
    )


@pytest.fixture
def app(settings):
    from src.api.main import create_app

    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
