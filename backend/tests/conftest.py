import pytest
from fastapi.testclient import TestClient

from signdesk.config import settings
from signdesk.database import get_session_factory, init_db
from signdesk.dependencies import get_auth_service, get_store
from signdesk.main import app
from signdesk.services.auth_service import AuthService
from signdesk.services.document_store import DocumentStore
from signdesk.services.kv_store import KeyValueStore


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "SignDesk"
    data_path.mkdir()
    return data_path


@pytest.fixture
def kv(tmp_data):
    db_path = tmp_data / "store.sqlite"
    init_db(db_path)
    return KeyValueStore(get_session_factory(db_path))


@pytest.fixture
def store(kv):
    """An opened store seeded with no documents."""
    s = DocumentStore(kv, seed=[]).open()
    yield s
    s.close()


@pytest.fixture
def no_latency():
    original = (
        settings.login_delay_seconds,
        settings.upload_delay_seconds,
        settings.sign_delay_seconds,
        settings.simulated_failure_rate,
    )
    settings.login_delay_seconds = 0
    settings.upload_delay_seconds = 0
    settings.sign_delay_seconds = 0
    settings.simulated_failure_rate = 0.0
    yield settings
    (
        settings.login_delay_seconds,
        settings.upload_delay_seconds,
        settings.sign_delay_seconds,
        settings.simulated_failure_rate,
    ) = original


@pytest.fixture
def auth_service(kv, no_latency):
    return AuthService(kv, settings)


@pytest.fixture
def client(tmp_data, store, auth_service, no_latency):
    original_data_path = settings.data_path
    settings.data_path = tmp_data
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
    settings.data_path = original_data_path


@pytest.fixture
def admin_headers(client):
    r = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "password"})
    return {"Authorization": f"Bearer {r.json()['token']}"}
