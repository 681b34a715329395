import pytest

from services.auth_service import Identity, UsersService, issue_token, verify_token
from services.errors import AuthError, Conflict, PermissionDenied, ValidationError
from tests.factories import UserFactory


def test_token_round_trip(session):
    user = UserFactory(permission="admin")
    identity = verify_token("s3cret", issue_token("s3cret", user))
    assert identity == Identity(user_id=user.id, permission="admin")
    assert identity.is_admin and identity.can_edit


def test_token_with_wrong_secret_rejected(session):
    token = issue_token("s3cret", UserFactory())
    with pytest.raises(AuthError):
        verify_token("other", token)


def test_expired_token_rejected(session):
    token = issue_token("s3cret", UserFactory())
    with pytest.raises(AuthError):
        verify_token("s3cret", token, max_age_days=-1)


def test_garbage_token_rejected():
    with pytest.raises(AuthError):
        verify_token("s3cret", "not-a-token")


def test_readonly_identity_cannot_edit():
    ident = Identity(user_id="u", permission="readonly")
    assert not ident.can_edit
    assert not ident.is_admin


def test_register_creates_disabled_readonly_user(session):
    user = UsersService.register(session, {
        "email": "New@Example.com", "password": "pw",
        "firstName": "Ada", "lastName": "Lovelace",
    })
    assert user.email == "new@example.com"
    assert user.permission == "readonly"
    assert user.enabled is False


def test_register_rejects_duplicates_case_insensitively(session):
    UserFactory(email="taken@example.com")
    with pytest.raises(Conflict):
        UsersService.register(session, {
            "email": "TAKEN@example.com", "password": "pw",
            "firstName": "A", "lastName": "B",
        })


def test_register_rejects_bad_email(session):
    with pytest.raises(ValidationError):
        UsersService.register(session, {
            "email": "nope", "password": "pw", "firstName": "A", "lastName": "B",
        })


def test_authenticate(session):
    UserFactory(email="ok@example.com", password="right")
    assert UsersService.authenticate(session, "OK@example.com", "right").email == "ok@example.com"
    with pytest.raises(AuthError):
        UsersService.authenticate(session, "ok@example.com", "wrong")
    with pytest.raises(AuthError):
        UsersService.authenticate(session, "missing@example.com", "right")


def test_disabled_user_cannot_log_in(session):
    UserFactory(email="off@example.com", password="pw", enabled=False)
    with pytest.raises(PermissionDenied):
        UsersService.authenticate(session, "off@example.com", "pw")


def test_change_password_checks_old(session):
    user = UserFactory(password="old")
    with pytest.raises(AuthError):
        UsersService.change_password(session, user, "bad", "new")
    UsersService.change_password(session, user, "old", "new")
    assert UsersService.authenticate(session, user.email, "new") is user


def test_bootstrap_admin_only_on_empty_table(session):
    admin = UsersService.ensure_admin(session, "root@example.com", "pw")
    assert admin.permission == "admin" and admin.enabled
    assert UsersService.ensure_admin(session, "other@example.com", "pw") is None
