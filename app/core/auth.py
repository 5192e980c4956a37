"""Bearer-token authentication and per-route access policies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import decode_access_token

ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "superAdmin"
ROLE_CUSTOMER = "customer"
USER_TYPE_ADMIN = "admin"
USER_TYPE_CUSTOMER = "customer"

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by /users/login or /customers/login")


@dataclass(frozen=True)
class Principal:
    id: int
    username: Optional[str]
    email: Optional[str]
    role: Optional[str]
    user_type: Optional[str]

    @property
    def is_admin(self) -> bool:
        return self.user_type == USER_TYPE_ADMIN


def _principal_from_credentials(credentials: Optional[HTTPAuthorizationCredentials]) -> Principal:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing or invalid authorization header")
    payload = decode_access_token(credentials.credentials)
    return Principal(
        id=int(payload["id"]),
        username=payload.get("username"),
        email=payload.get("email"),
        role=payload.get("role"),
        user_type=payload.get("user_type"),
    )


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    return _principal_from_credentials(credentials)


def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """Resolve the caller when a token is sent; anonymous callers get None."""
    if credentials is None:
        return None
    return _principal_from_credentials(credentials)


@dataclass(frozen=True)
class AccessPolicy:
    """Declarative gate: the caller's role and user type must both be allowed.

    An empty set means that axis is not checked. Instances are FastAPI
    dependencies returning the authenticated principal.
    """

    roles: FrozenSet[str] = frozenset()
    user_types: FrozenSet[str] = frozenset()

    def check(self, principal: Principal) -> Principal:
        if self.roles and principal.role not in self.roles:
            raise ForbiddenError(
                f"Access denied. Required role: {' or '.join(sorted(self.roles))}. "
                f"Your role: {principal.role}"
            )
        if self.user_types and principal.user_type not in self.user_types:
            raise ForbiddenError(
                f"Access denied. Required user type: {' or '.join(sorted(self.user_types))}. "
                f"Your type: {principal.user_type}"
            )
        return principal

    def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        return self.check(principal)


AUTHENTICATED = AccessPolicy()
ADMIN_ROLES = AccessPolicy(roles=frozenset({ROLE_ADMIN, ROLE_SUPER_ADMIN}))
SUPER_ADMIN = AccessPolicy(roles=frozenset({ROLE_SUPER_ADMIN}))
ADMIN_TYPE = AccessPolicy(user_types=frozenset({USER_TYPE_ADMIN}))
