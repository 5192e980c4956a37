from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES
from app.core.routing import ApiRoute
from app.db.session import get_db
from app.schemas.delivery_options import (
    DeliveryOptionCreate,
    DeliveryOptionDeletedResponse,
    DeliveryOptionOut,
    DeliveryOptionUpdate,
)
from app.services import delivery_options as service

router = APIRouter(prefix="/delivery-options", tags=["Delivery Options"], route_class=ApiRoute)


@router.get("", response_model=List[DeliveryOptionOut])
def list_delivery_options(db: Session = Depends(get_db)):
    return service.list_delivery_options(db)


@router.post(
    "",
    response_model=DeliveryOptionOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def create_delivery_option(payload: DeliveryOptionCreate, db: Session = Depends(get_db)):
    return service.create_delivery_option(db, payload)


@router.get("/{option_id}", response_model=DeliveryOptionOut)
def get_delivery_option(option_id: int, db: Session = Depends(get_db)):
    return service.get_delivery_option(db, option_id)


@router.put("/{option_id}", response_model=DeliveryOptionOut, dependencies=[Depends(ADMIN_ROLES)])
def update_delivery_option(option_id: int, payload: DeliveryOptionUpdate, db: Session = Depends(get_db)):
    return service.update_delivery_option(db, option_id, payload)


@router.delete("/{option_id}", response_model=DeliveryOptionDeletedResponse, dependencies=[Depends(ADMIN_ROLES)])
def delete_delivery_option(option_id: int, db: Session = Depends(get_db)):
    option = service.delete_delivery_option(db, option_id)
    return DeliveryOptionDeletedResponse(message="Delivery option deleted", deliveryOption=option)
