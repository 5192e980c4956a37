from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.core.errors import UnauthorizedError


password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_CLAIMS = ("id", "username", "email", "role", "user_type")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True when the provided password matches the stored hash."""
    if not plain_password or not hashed_password:
        return False
    return password_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    """Hash the provided password for storage."""
    return password_context.hash(password)


def create_access_token(claims: Dict[str, Any]) -> str:
    """Sign the identity claims with an expiry taken from settings."""
    settings = get_settings()
    payload = {key: claims.get(key) for key in TOKEN_CLAIMS}
    payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expires_minutes)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise UnauthorizedError("Invalid or expired token") from exc
    if payload.get("id") is None:
        raise UnauthorizedError("Invalid or expired token")
    return payload
