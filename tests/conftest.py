"""Root conftest — shared test configuration."""

import os
import tempfile

# Module-level app objects read settings at import; keep them off any real database.
_import_dir = tempfile.mkdtemp()
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_import_dir, 'import.db')}")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.config import Settings  # noqa: E402
from app.main import build_database, create_app  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    return Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'users.db'}", _env_file=None)


@pytest.fixture
def database(settings):
    db = build_database(settings)
    assert db.reconcile()
    yield db
    db.dispose()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_payload():
    return {"name": "Ana", "email": "ana@x.com", "phone": "123"}
