import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        DATA_DIR=str(tmp_path / "data"),
        DATABASE_URL=None,
        STORAGE_BUCKET=None,
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="DEBUG",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def make_client(tmp_path):
    """Build a client with extra settings; closed at teardown."""
    opened = []

    def _make(**overrides):
        c = TestClient(create_app(make_settings(tmp_path, **overrides)))
        c.__enter__()
        opened.append(c)
        return c

    yield _make
    for c in opened:
        c.__exit__(None, None, None)


@pytest.fixture
def admin_headers(client):
    res = client.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def remote_url(tmp_path):
    return f"sqlite+pysqlite:///{tmp_path / 'remote.db'}"


@pytest.fixture
def broken_remote_url(tmp_path):
    # parent directory does not exist, so every connection attempt fails
    return f"sqlite+pysqlite:///{tmp_path / 'missing' / 'remote.db'}"
