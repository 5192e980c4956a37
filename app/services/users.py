from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.auth import ROLE_SUPER_ADMIN, USER_TYPE_ADMIN
from app.core.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from app.core.security import create_access_token, hash_password, verify_password
from app.db.models import User
from app.queries import users as queries
from app.schemas.users import UserCreate, UserListItem, UserOut
from app.services import notifications

logger = logging.getLogger("app.users")


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        phone=user.phone,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def to_user_list_item(user: User) -> UserListItem:
    return UserListItem(id=user.id, username=user.username, email=user.email, role=user.role, isActive=user.is_active)


def create_user(db: Session, payload: UserCreate) -> UserOut:
    if queries.get_user_by_username(db, payload.username):
        raise ConflictError("Username already exists")
    if queries.get_user_by_email(db, payload.email):
        raise ConflictError("Email already exists")

    user = queries.insert_user(
        db,
        username=payload.username,
        email=payload.email,
        password=hash_password(payload.password),
        role=payload.role,
        phone=payload.phone,
    )
    db.commit()
    db.refresh(user)
    logger.info("user_created", extra={"user_id": user.id, "role": user.role})

    notifications.send_user_welcome(user.username, user.email, user.role, user.phone)
    return to_user_out(user)


def authenticate(db: Session, username: str | None, password: str | None) -> Tuple[UserOut, str]:
    if not username or not password:
        raise BadRequestError("Username and password required")

    user = queries.get_user_by_username(db, username)
    if not user or not user.is_active or not verify_password(password, user.password):
        logger.warning("user_login_failed", extra={"username": username})
        raise UnauthorizedError("Invalid username or password")

    token = create_access_token(
        {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "role": user.role,
            "user_type": USER_TYPE_ADMIN,
        }
    )
    logger.info("user_login", extra={"user_id": user.id})
    return to_user_out(user), token


def list_users(db: Session) -> List[UserListItem]:
    return [to_user_list_item(user) for user in queries.list_users(db)]


def get_user(db: Session, user_id: int) -> UserOut:
    user = queries.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return to_user_out(user)


def delete_user(db: Session, user_id: int) -> UserOut:
    user = queries.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    user.mark_deleted()
    db.commit()
    logger.info("user_deleted", extra={"user_id": user_id})
    return to_user_out(user)


def ensure_super_admin(db: Session, username: str, email: str, password: Optional[str]) -> Tuple[User, bool]:
    """Create the superAdmin account, or refresh its email and password if it exists.

    Returns the user and whether it was newly created.
    """
    user = queries.get_user_by_username(db, username)
    if user:
        user.email = email
        user.role = ROLE_SUPER_ADMIN
        user.is_active = True
        if password:
            user.password = hash_password(password)
        db.commit()
        db.refresh(user)
        logger.info("super_admin_refreshed", extra={"user_id": user.id})
        return user, False

    if not password:
        raise ValueError("A password is required when creating the superAdmin account.")
    user = queries.insert_user(
        db, username=username, email=email, password=hash_password(password), role=ROLE_SUPER_ADMIN
    )
    db.commit()
    db.refresh(user)
    logger.info("super_admin_created", extra={"user_id": user.id})
    return user, True
