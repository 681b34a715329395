import pytest

from db import get_session
from main import create_app
from services.auth_service import UsersService, issue_token
from tests.factories import bind_session

TEST_SECRET = "test-secret"


@pytest.fixture
def app(tmp_path):
    """Application bound to a throw-away SQLite file."""
    app = create_app({
        "TESTING": True,
        "DB_URL": f"sqlite:///{tmp_path / 'test.sqlite'}",
        "SECRET_KEY": TEST_SECRET,
        "ADMIN_EMAIL": "",
        "ADMIN_PASSWORD": "",
    })
    yield app


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def session(app):
    """Session shared with the factories; rolled back afterwards."""
    s = get_session()
    bind_session(s)
    yield s
    s.rollback()
    s.close()
    bind_session(None)


def _auth_headers(app, permission: str) -> dict:
    s = get_session()
    try:
        user = UsersService.create(s, {
            "email": f"{permission}@example.com",
            "password": "pw",
            "firstName": permission.title(),
            "lastName": "Tester",
            "userPermission": permission,
        })
        s.commit()
        token = issue_token(app.config["SECRET_KEY"], user)
    finally:
        s.close()
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def editor_headers(app):
    return _auth_headers(app, "editor")


@pytest.fixture
def admin_headers(app):
    return _auth_headers(app, "admin")


@pytest.fixture
def readonly_headers(app):
    return _auth_headers(app, "readonly")
