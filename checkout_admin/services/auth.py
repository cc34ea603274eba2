"""Dashboard admin login: bcrypt password check and JWT access tokens."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
from fastapi import HTTPException
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.orm import Session

from checkout_admin.config import Settings, settings
from checkout_admin.models.checkout import AdminUser
from checkout_admin.schemas.auth import AdminUserRead, LoginResponse
from checkout_admin.services.common import data_store_guard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminIdentity:
    id: str
    email: str | None = None
    username: str | None = None

    def acting_name(self, default: str) -> str:
        return self.username or default


def _now() -> datetime:
    return datetime.now(UTC)


def _jwt_secret(s: Settings) -> str:
    if not s.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT secret not configured")
    return s.jwt_secret


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def issue_access_token(user: AdminUser, s: Settings | None = None) -> str:
    s = s or settings
    now = _now()
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "username": user.username or user.name,
        "typ": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=s.jwt_access_ttl_minutes)).timestamp()),
    }
    return jwt.encode(payload, _jwt_secret(s), algorithm=s.jwt_algorithm)


def decode_access_token(token: str, s: Settings | None = None) -> AdminIdentity:
    s = s or settings
    try:
        payload = jwt.decode(token, _jwt_secret(s), algorithms=[s.jwt_algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    if payload.get("typ") != "access" or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")
    return AdminIdentity(
        id=str(payload["sub"]),
        email=payload.get("email"),
        username=payload.get("username"),
    )


def login(
    db: Session, email: str, password: str, s: Settings | None = None
) -> LoginResponse:
    with data_store_guard(db, "Error during login"):
        user = db.scalars(select(AdminUser).where(AdminUser.email == email)).first()
    if not user or not verify_password(password, user.password):
        logger.warning("Failed dashboard login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(
        token=issue_access_token(user, s),
        user=AdminUserRead(id=user.id, email=user.email, name=user.name),
    )
