"""Caller identity and role checks.

The caller names itself with the ``x-user-id`` header. Id ``0`` is the
super-admin, which has no row in ``users`` and always acts as ``admin``. The
header carries no signature, so anyone can claim any id; a bearer token issued
at login is accepted too and wins over the header when both are sent. Setting
``ALLOW_HEADER_IDENTITY=false`` makes the token mandatory.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import Depends, Header
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import AuthenticationError, AuthorizationError
from app.core.security import decode_access_token
from app.db.session import get_db
from app.models.user import User

SUPER_ADMIN_ID = 0

ROLE_ADMIN = "admin"
ROLE_QUIZ_MANAGER = "quiz_manager"
ROLE_USER = "user"
ALL_ROLES = (ROLE_ADMIN, ROLE_QUIZ_MANAGER, ROLE_USER)
CONTENT_ROLES = (ROLE_ADMIN, ROLE_QUIZ_MANAGER)


@dataclass(frozen=True)
class Identity:
    id: int
    role: str
    email: Optional[str] = None

    @property
    def is_super_admin(self) -> bool:
        return self.id == SUPER_ADMIN_ID


def parse_claimed_id(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        raise AuthenticationError("missing x-user-id header")
    try:
        return int(raw.strip())
    except ValueError:
        raise AuthenticationError("invalid x-user-id header")


def _claimed_id_from_token(authorization: str) -> int:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("unsupported authorization scheme")
    try:
        payload = decode_access_token(token)
        return int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError):
        raise AuthenticationError("invalid or expired token")


async def resolve_identity(db: AsyncSession, user_id: int) -> Identity:
    if user_id == SUPER_ADMIN_ID:
        return Identity(id=SUPER_ADMIN_ID, role=ROLE_ADMIN)
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise AuthenticationError("unknown user")
    return Identity(id=user.id, role=user.role, email=user.email)


def ensure_role(identity: Identity, allowed: Iterable[str]) -> Identity:
    if identity.role not in allowed:
        raise AuthorizationError(f"role '{identity.role}' is not allowed to perform this action")
    return identity


async def current_identity(
    x_user_id: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    if authorization:
        claimed = _claimed_id_from_token(authorization)
    elif settings.ALLOW_HEADER_IDENTITY:
        claimed = parse_claimed_id(x_user_id)
    else:
        raise AuthenticationError("missing bearer token")
    return await resolve_identity(db, claimed)


def require_roles(*roles: str):
    """Dependency factory: authenticate the caller and check its role."""
    allowed = roles or ALL_ROLES

    async def dependency(identity: Identity = Depends(current_identity)) -> Identity:
        return ensure_role(identity, allowed)

    return dependency


async def require_super_admin(identity: Identity = Depends(current_identity)) -> Identity:
    if not identity.is_super_admin:
        raise AuthorizationError("only the super-admin can perform this action")
    return identity
