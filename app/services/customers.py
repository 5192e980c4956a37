from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.auth import ROLE_CUSTOMER, USER_TYPE_CUSTOMER, Principal
from app.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
from app.core.security import create_access_token, hash_password, verify_password
from app.db.models import Customer, utcnow
from app.queries import customers as queries
from app.schemas.customers import CustomerOut, CustomerRegister, CustomerUpdate
from app.services import notifications

logger = logging.getLogger("app.customers")

VERIFICATION_CODE_TTL = timedelta(days=2)
RESET_CODE_TTL = timedelta(hours=24)
RESET_REQUESTED_MESSAGE = "If an account exists with this email, a password reset code has been sent"


def to_customer_out(customer: Customer) -> CustomerOut:
    return CustomerOut(
        id=customer.id,
        first_name=customer.first_name,
        last_name=customer.last_name,
        phone=customer.phone,
        address=customer.address,
        city=customer.city,
        state=customer.state,
        zip_code=customer.zip_code,
        country=customer.country,
        email=customer.email,
        is_active=customer.is_active,
        email_verified=customer.email_verified,
        created_at=customer.created_at,
        updated_at=customer.updated_at,
    )


def generate_code() -> str:
    return f"{secrets.randbelow(10**6):06d}"


def display_name(customer: Customer) -> str:
    return f"{customer.first_name or ''} {customer.last_name or ''}".strip() or "Customer"


def _ensure_email_available(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    existing = queries.get_customer_by_email(db, email)
    if existing and existing.id != exclude_id:
        raise ConflictError("Customer with this email already exists")


def add_customer(db: Session, email: str, password: str, **profile) -> Customer:
    """Insert an unverified customer with a fresh verification code. Does not commit."""
    _ensure_email_available(db, email)
    return queries.insert_customer(
        db,
        email=email,
        password=hash_password(password),
        verification_code=generate_code(),
        verification_code_expires=utcnow() + VERIFICATION_CODE_TTL,
        **profile,
    )


def register_customer(db: Session, payload: CustomerRegister) -> CustomerOut:
    profile = payload.model_dump(exclude={"email", "password"})
    customer = add_customer(db, payload.email, payload.password, **profile)
    db.commit()
    db.refresh(customer)
    logger.info("customer_registered", extra={"customer_id": customer.id})

    notifications.send_customer_verification(
        display_name(customer), customer.email, customer.verification_code, customer.phone
    )
    return to_customer_out(customer)


def authenticate(db: Session, email: Optional[str], password: Optional[str]) -> Tuple[CustomerOut, str]:
    if not email or not password:
        raise BadRequestError("Email and password required")

    customer = queries.get_customer_by_email(db, email)
    if not customer or not customer.is_active or not verify_password(password, customer.password):
        logger.warning("customer_login_failed", extra={"email": email})
        raise UnauthorizedError("Invalid email or password")
    if not customer.email_verified:
        raise UnauthorizedError("Please verify your email before logging in")

    token = create_access_token(
        {
            "id": customer.id,
            "username": customer.email,
            "email": customer.email,
            "role": ROLE_CUSTOMER,
            "user_type": USER_TYPE_CUSTOMER,
        }
    )
    return to_customer_out(customer), token


def verify_email(db: Session, code: str) -> CustomerOut:
    customer = queries.get_customer_by_verification_code(db, code, utcnow())
    if not customer:
        raise BadRequestError("Invalid or expired verification code")
    customer.email_verified = True
    customer.verification_code = None
    customer.verification_code_expires = None
    db.commit()
    logger.info("customer_email_verified", extra={"customer_id": customer.id})
    return to_customer_out(customer)


def resend_verification(db: Session, email: str) -> str:
    customer = queries.get_customer_by_email(db, email)
    if not customer:
        raise NotFoundError("Customer not found")
    if customer.email_verified:
        raise BadRequestError("Email is already verified")
    customer.verification_code = generate_code()
    customer.verification_code_expires = utcnow() + VERIFICATION_CODE_TTL
    db.commit()
    notifications.send_customer_verification(display_name(customer), customer.email, customer.verification_code)
    return "Verification email sent successfully"


def request_password_reset(db: Session, email: str) -> str:
    customer = queries.get_customer_by_email(db, email)
    if not customer:
        return RESET_REQUESTED_MESSAGE
    customer.reset_code = generate_code()
    customer.reset_code_expires = utcnow() + RESET_CODE_TTL
    db.commit()
    notifications.send_password_reset(display_name(customer), customer.email, customer.reset_code)
    logger.info("customer_password_reset_requested", extra={"customer_id": customer.id})
    return RESET_REQUESTED_MESSAGE


def reset_password(db: Session, code: str, new_password: str) -> str:
    customer = queries.get_customer_by_reset_code(db, code, utcnow())
    if not customer:
        raise BadRequestError("Invalid or expired reset code")
    customer.password = hash_password(new_password)
    customer.reset_code = None
    customer.reset_code_expires = None
    db.commit()
    notifications.send_password_changed(display_name(customer), customer.email)
    return "Password reset successfully"


def list_customers(db: Session) -> List[CustomerOut]:
    return [to_customer_out(customer) for customer in queries.list_customers(db)]


def _ensure_self_or_admin(principal: Principal, customer_id: int, action: str) -> None:
    if principal.is_admin:
        return
    if principal.user_type == USER_TYPE_CUSTOMER and principal.id == customer_id:
        return
    raise ForbiddenError(f"Access denied. You can only {action} your own profile.")


def get_customer(db: Session, customer_id: int, principal: Principal) -> CustomerOut:
    _ensure_self_or_admin(principal, customer_id, "access")
    customer = queries.get_customer_by_id(db, customer_id)
    if not customer:
        raise NotFoundError("Customer not found")
    return to_customer_out(customer)


def update_customer(db: Session, customer_id: int, payload: CustomerUpdate, principal: Principal) -> CustomerOut:
    _ensure_self_or_admin(principal, customer_id, "update")
    customer = queries.get_customer_by_id(db, customer_id)
    if not customer:
        raise NotFoundError("Customer not found")

    changes = payload.changes()
    if "is_active" in changes and not principal.is_admin:
        raise ForbiddenError("Access denied. Only admins can change account status.")
    if changes.get("email") and changes["email"] != customer.email:
        _ensure_email_available(db, changes["email"], exclude_id=customer.id)
    if changes.get("password"):
        changes["password"] = hash_password(changes["password"])

    for field, value in changes.items():
        setattr(customer, field, value)
    db.commit()
    db.refresh(customer)
    logger.info("customer_updated", extra={"customer_id": customer.id, "fields": sorted(changes)})
    return to_customer_out(customer)


def delete_customer(db: Session, customer_id: int) -> CustomerOut:
    customer = queries.get_customer_by_id(db, customer_id)
    if not customer:
        raise NotFoundError("Customer not found")
    customer.mark_deleted()
    db.commit()
    logger.info("customer_deleted", extra={"customer_id": customer_id})
    return to_customer_out(customer)
