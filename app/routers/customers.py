from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_TYPE, Principal, get_current_principal
from app.core.routing import ApiRoute
from app.db.session import get_db
from app.schemas.common import MessageResponse
from app.schemas.customers import (
    CustomerDeletedResponse,
    CustomerLogin,
    CustomerLoginResponse,
    CustomerOut,
    CustomerRegister,
    CustomerUpdate,
    EmailRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from app.services import customers as service

router = APIRouter(prefix="/customers", tags=["Customers"], route_class=ApiRoute)


@router.post("/register", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def register(payload: CustomerRegister, db: Session = Depends(get_db)):
    return service.register_customer(db, payload)


@router.post("/login", response_model=CustomerLoginResponse)
def login(payload: Optional[CustomerLogin] = Body(default=None), db: Session = Depends(get_db)):
    payload = payload or CustomerLogin()
    customer, token = service.authenticate(db, payload.email, payload.password)
    return CustomerLoginResponse(customer=customer, token=token)


@router.post("/verify-email", response_model=CustomerOut)
def verify_email(payload: VerifyEmailRequest, db: Session = Depends(get_db)):
    return service.verify_email(db, payload.code)


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(payload: EmailRequest, db: Session = Depends(get_db)):
    return MessageResponse(message=service.resend_verification(db, payload.email))


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(payload: EmailRequest, db: Session = Depends(get_db)):
    return MessageResponse(message=service.request_password_reset(db, payload.email))


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    return MessageResponse(message=service.reset_password(db, payload.code, payload.password))


@router.get("", response_model=List[CustomerOut], dependencies=[Depends(ADMIN_TYPE)])
def list_customers(db: Session = Depends(get_db)):
    return service.list_customers(db)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(
    customer_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return service.get_customer(db, customer_id, principal)


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return service.update_customer(db, customer_id, payload, principal)


@router.delete("/{customer_id}", response_model=CustomerDeletedResponse, dependencies=[Depends(ADMIN_TYPE)])
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = service.delete_customer(db, customer_id)
    return CustomerDeletedResponse(message="Customer deleted", customer=customer)
