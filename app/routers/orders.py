from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES, AUTHENTICATED, Principal, get_optional_principal
from app.core.routing import ApiRoute
from app.core.validation import parse_query
from app.db.session import get_db
from app.schemas.orders import (
    OrderCreate,
    OrderCreatedOut,
    OrderFilters,
    OrderLimitQuery,
    OrderListResponse,
    OrderOut,
    OrderStats,
    OrderUpdate,
)
from app.services import orders as service

router = APIRouter(prefix="/orders", tags=["Orders"], route_class=ApiRoute)


@router.post("", response_model=OrderCreatedOut, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return service.create_order(db, payload, principal)


@router.get("", response_model=OrderListResponse)
def list_orders(request: Request, principal: Principal = Depends(ADMIN_ROLES), db: Session = Depends(get_db)):
    return service.list_orders(db, parse_query(OrderFilters, request.query_params), principal)


@router.get("/my-orders", response_model=List[OrderOut])
def my_orders(request: Request, principal: Principal = Depends(AUTHENTICATED), db: Session = Depends(get_db)):
    query = parse_query(OrderLimitQuery, request.query_params)
    return service.my_orders(db, principal, query.limit)


@router.get("/stats", response_model=OrderStats, dependencies=[Depends(ADMIN_ROLES)])
def order_stats(db: Session = Depends(get_db)):
    return service.order_stats(db)


@router.get("/status/{order_status}", response_model=List[OrderOut], dependencies=[Depends(ADMIN_ROLES)])
def orders_by_status(order_status: str, db: Session = Depends(get_db)):
    return service.orders_by_status(db, order_status)


@router.get(
    "/payment-status/{payment_status}",
    response_model=List[OrderOut],
    dependencies=[Depends(ADMIN_ROLES)],
)
def orders_by_payment_status(payment_status: str, db: Session = Depends(get_db)):
    return service.orders_by_payment_status(db, payment_status)


@router.get("/reference/{reference}", response_model=OrderOut)
def get_order_by_reference(reference: str, db: Session = Depends(get_db)):
    return service.get_order_by_reference(db, reference)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return service.get_order(db, order_id)


@router.put("/{order_id}", response_model=OrderOut, dependencies=[Depends(ADMIN_ROLES)])
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    return service.update_order(db, order_id, payload)


@router.patch("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(order_id: int, principal: Principal = Depends(AUTHENTICATED), db: Session = Depends(get_db)):
    return service.cancel_order(db, order_id, principal)
