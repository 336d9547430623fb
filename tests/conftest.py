import io
import os
import tempfile

# Importing menu_backend.main builds a default app; keep its files out of the repo
_IMPORT_DIR = tempfile.mkdtemp(prefix="menu-backend-tests-")
os.environ.setdefault("STATIC_DIR", os.path.join(_IMPORT_DIR, "static"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_IMPORT_DIR, 'import.db')}")

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlmodel import Session

from menu_backend.core.config import Settings
from menu_backend.main import create_app
from menu_backend.services.auth.auth_service import ADMIN_ROLE, AuthService


def make_image(path, size=(1920, 1080), color=(200, 40, 40), mode="RGB", fmt=None):
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new(mode, size, color)
    img.save(path, format=fmt)
    return path


def jpeg_bytes(size=(200, 120), color=(10, 120, 200)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def static_dir(tmp_path):
    path = tmp_path / "static"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path, static_dir):
    return Settings(
        STATIC_DIR=str(static_dir),
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY="test-secret",
        FRONTPAD_SECRET="",
        RATE_LIMIT_AUTH_MAX=100,
        REDIS_URL=None,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def _token_for(app, login, password, role):
    with Session(app.state.engine) as session:
        service = AuthService(session, app.state.settings)
        user = service.create_user(login, password, role=role)
        return service.issue(user.id, user.login, user.role)["jwtToken"]


@pytest.fixture
def admin_headers(client, app):
    token = _token_for(app, "admin", "secret123", ADMIN_ROLE)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(client, app):
    token = _token_for(app, "customer", "secret123", "USER")
    return {"Authorization": f"Bearer {token}"}
