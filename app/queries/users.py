from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import User


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.scalar(select(User).where(User.id == user_id, User.is_deleted.is_(False)))


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.scalar(select(User).where(User.username == username, User.is_deleted.is_(False)))


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == email, User.is_deleted.is_(False)))


def list_users(db: Session) -> List[User]:
    stmt = select(User).where(User.is_deleted.is_(False)).order_by(User.id)
    return list(db.execute(stmt).scalars())


def insert_user(db: Session, **values) -> User:
    user = User(**values)
    db.add(user)
    db.flush()
    return user
