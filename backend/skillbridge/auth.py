# backend/skillbridge/auth.py
"""
Session gate.

Identity is owned by an external provider that issues HS256 bearer tokens
(Supabase style): ``sub`` is the user id and ``user_metadata.role`` carries
``Candidate`` or ``Enterprise``. This module is the only place that role is
read; routes depend on ``require_role`` / ``get_current_user``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from skillbridge.config import settings
from skillbridge.errors import ConfigurationError

log = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class UserRole(str, Enum):
    CANDIDATE = "Candidate"
    ENTERPRISE = "Enterprise"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "UserRole":
        # signup stores lowercase values, older accounts carry capitalized ones
        if raw is None or not str(raw).strip():
            return cls.CANDIDATE
        value = str(raw).strip().lower()
        for role in cls:
            if role.value.lower() == value:
                return role
        raise ValueError(f"unknown role: {raw!r}")


def home_path(role: UserRole) -> str:
    if role is UserRole.CANDIDATE:
        return "/dashboard"
    if role is UserRole.ENTERPRISE:
        return "/recruiter"
    raise AssertionError(f"unhandled role {role}")


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    role: UserRole
    email: Optional[str] = None


def decode_token(token: str) -> dict:
    if not settings.auth_jwt_secret:
        log.error("AUTH_JWT_SECRET is not set")
        raise ConfigurationError("Server configuration error: auth secret missing")
    try:
        return jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def user_from_claims(claims: dict) -> CurrentUser:
    sub = claims.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    metadata = claims.get("user_metadata") or {}
    if not isinstance(metadata, dict):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    try:
        role = UserRole.parse(metadata.get("role"))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unknown role")
    return CurrentUser(user_id=str(sub), role=role, email=claims.get("email"))


async def get_optional_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[CurrentUser]:
    if creds is None:
        return None
    return user_from_claims(decode_token(creds.credentials))


async def get_current_user(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_role(required: UserRole):
    async def _dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role is not required:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user
    return _dependency
