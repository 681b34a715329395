"""
services.auth_service - Accounts, password hashing and bearer tokens.

Passwords are stored as Werkzeug hashes.  Tokens are itsdangerous
signed payloads carrying (user id, permission) and expire after
config.TOKEN_DAYS.  The permission inside a verified token is trusted
for the life of the token, as the request layer never re-reads it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from itsdangerous import BadData, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

import config
from db.models import User
from schema.statuses import PERMISSIONS
from services.errors import AuthError, Conflict, NotFound, PermissionDenied, ValidationError

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


@dataclass(frozen=True)
class Identity:
    """An already-verified caller, as seen by the core."""
    user_id: str
    permission: str

    @property
    def can_edit(self) -> bool:
        return self.permission in ("editor", "admin")

    @property
    def is_admin(self) -> bool:
        return self.permission == "admin"


# ── Tokens ─────────────────────────────────────────────────────────────

def _serializer(secret: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret, salt=config.TOKEN_SALT)


def issue_token(secret: str, user: User) -> str:
    return _serializer(secret).dumps({"uid": user.id, "perm": user.permission})


def verify_token(secret: str, token: str, max_age_days: int | None = None) -> Identity:
    """Return the Identity inside ``token`` or raise AuthError."""
    days = config.TOKEN_DAYS if max_age_days is None else max_age_days
    try:
        payload = _serializer(secret).loads(token, max_age=days * 24 * 3600)
    except SignatureExpired:
        raise AuthError("Unauthorized") from None
    except BadData:
        raise AuthError("Unauthorized") from None
    if not isinstance(payload, dict):
        raise AuthError("Unauthorized")
    uid, perm = payload.get("uid"), payload.get("perm")
    if not uid or perm not in PERMISSIONS:
        raise AuthError("Unauthorized")
    return Identity(user_id=uid, permission=perm)


# ── Helpers ────────────────────────────────────────────────────────────

def normalize_email(email) -> str:
    return str(email or "").strip().lower()


def _check_permission(value) -> str:
    if value not in PERMISSIONS:
        raise ValidationError("Invalid permission")
    return value


class UsersService:

    @staticmethod
    def authenticate(session: Session, email, password) -> User:
        if not email or not password:
            raise ValidationError("Email and password required")
        user = session.query(User).filter(User.email == normalize_email(email)).first()
        if user is None or not check_password_hash(user.password_hash, password):
            logger.warning("Failed login for %s", normalize_email(email))
            raise AuthError("Invalid email or password")
        if not user.enabled:
            raise PermissionDenied("Account is disabled")
        return user

    @staticmethod
    def register(session: Session, data: dict) -> User:
        """Self-service sign-up: read-only and disabled until an admin approves."""
        email, password = data.get("email"), data.get("password")
        first, last = data.get("firstName"), data.get("lastName")
        if not email or not password or not first or not last:
            raise ValidationError("All fields required")
        if not _EMAIL_RE.match(str(email)):
            raise ValidationError("Invalid email format")
        return UsersService._insert(
            session, email, password, first, last,
            permission="readonly", enabled=False,
        )

    @staticmethod
    def create(session: Session, data: dict) -> User:
        """Admin-created account; enabled unless told otherwise."""
        email, password = data.get("email"), data.get("password")
        first, last = data.get("firstName"), data.get("lastName")
        permission = data.get("userPermission")
        if not email or not password or not first or not last or not permission:
            raise ValidationError("All fields required")
        enabled = data.get("enabled")
        return UsersService._insert(
            session, email, password, first, last,
            permission=_check_permission(permission),
            enabled=True if enabled is None else bool(enabled),
        )

    @staticmethod
    def _insert(session, email, password, first, last, *, permission, enabled) -> User:
        email = normalize_email(email)
        if session.query(User.id).filter(User.email == email).first() is not None:
            raise Conflict("Email already registered")
        user = User(
            email=email,
            password_hash=generate_password_hash(password),
            first_name=str(first).strip(),
            last_name=str(last).strip(),
            permission=permission,
            enabled=enabled,
        )
        session.add(user)
        session.flush()
        logger.info("Created user %s (%s, enabled=%s)", email, permission, enabled)
        return user

    @staticmethod
    def list(session: Session) -> list[User]:
        return session.query(User).order_by(User.last_name, User.first_name).all()

    @staticmethod
    def get(session: Session, user_id: str) -> User:
        user = session.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    @staticmethod
    def update(session: Session, user: User, data: dict) -> User:
        if data.get("email"):
            email = normalize_email(data["email"])
            clash = session.query(User.id).filter(
                User.email == email, User.id != user.id,
            ).first()
            if clash is not None:
                raise Conflict("Email already registered")
            user.email = email
        if data.get("firstName"):
            user.first_name = str(data["firstName"]).strip()
        if data.get("lastName"):
            user.last_name = str(data["lastName"]).strip()
        if data.get("permission"):
            user.permission = _check_permission(data["permission"])
        if isinstance(data.get("enabled"), bool):
            user.enabled = data["enabled"]
        if data.get("password"):
            user.password_hash = generate_password_hash(data["password"])
        session.flush()
        return user

    @staticmethod
    def change_password(session: Session, user: User, old, new) -> None:
        if not old or not new:
            raise ValidationError("Old and new password required")
        if not check_password_hash(user.password_hash, old):
            raise AuthError("Invalid old password")
        user.password_hash = generate_password_hash(new)
        session.flush()

    @staticmethod
    def delete(session: Session, user: User) -> None:
        session.delete(user)
        session.flush()

    @staticmethod
    def ensure_admin(session: Session, email: str, password: str) -> User | None:
        """Create a bootstrap admin when no users exist yet."""
        if not email or not password:
            return None
        if session.query(User.id).first() is not None:
            return None
        user = UsersService._insert(
            session, email, password, "Admin", "User",
            permission="admin", enabled=True,
        )
        logger.info("Bootstrap admin %s created", user.email)
        return user
