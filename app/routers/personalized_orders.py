from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_TYPE
from app.core.routing import ApiRoute
from app.core.validation import parse_query
from app.db.session import get_db
from app.schemas.common import MessageResponse
from app.schemas.personalized_orders import (
    PersonalizedOrderCreate,
    PersonalizedOrderFilters,
    PersonalizedOrderListResponse,
    PersonalizedOrderOut,
    PersonalizedOrderUpdate,
)
from app.services import personalized_orders as service

router = APIRouter(prefix="/personalized-orders", tags=["Personalized Orders"], route_class=ApiRoute)


@router.post("", response_model=PersonalizedOrderOut, status_code=status.HTTP_201_CREATED)
def create_personalized_order(payload: PersonalizedOrderCreate, db: Session = Depends(get_db)):
    return service.create_personalized_order(db, payload)


@router.get("", response_model=PersonalizedOrderListResponse, dependencies=[Depends(ADMIN_TYPE)])
def list_personalized_orders(request: Request, db: Session = Depends(get_db)):
    filters = parse_query(PersonalizedOrderFilters, request.query_params)
    return service.list_personalized_orders(db, filters)


@router.get("/{order_id}", response_model=PersonalizedOrderOut, dependencies=[Depends(ADMIN_TYPE)])
def get_personalized_order(order_id: int, db: Session = Depends(get_db)):
    return service.get_personalized_order(db, order_id)


@router.put("/{order_id}", response_model=PersonalizedOrderOut, dependencies=[Depends(ADMIN_TYPE)])
def update_personalized_order(order_id: int, payload: PersonalizedOrderUpdate, db: Session = Depends(get_db)):
    return service.update_personalized_order(db, order_id, payload)


@router.delete("/{order_id}", response_model=MessageResponse, dependencies=[Depends(ADMIN_TYPE)])
def delete_personalized_order(order_id: int, db: Session = Depends(get_db)):
    service.delete_personalized_order(db, order_id)
    return MessageResponse(message="Personalized order deleted successfully")
