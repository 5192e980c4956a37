from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES
from app.core.routing import ApiRoute
from app.db.session import get_db
from app.schemas.pricing_config import (
    PricingConfigCreate,
    PricingConfigDeletedResponse,
    PricingConfigOut,
    PricingConfigUpdate,
)
from app.services import pricing_config as service

router = APIRouter(prefix="/pricing-config", tags=["Pricing Config"], route_class=ApiRoute)


@router.get("", response_model=List[PricingConfigOut])
def list_pricing_configs(product_type_id: Optional[str] = None, db: Session = Depends(get_db)):
    return service.list_pricing_configs(db, service.parse_product_type_id(product_type_id))


@router.post(
    "",
    response_model=PricingConfigOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def create_pricing_config(payload: PricingConfigCreate, db: Session = Depends(get_db)):
    return service.create_pricing_config(db, payload)


@router.get("/{config_id}", response_model=PricingConfigOut)
def get_pricing_config(config_id: int, db: Session = Depends(get_db)):
    return service.get_pricing_config(db, config_id)


@router.put("/{config_id}", response_model=PricingConfigOut, dependencies=[Depends(ADMIN_ROLES)])
def update_pricing_config(config_id: int, payload: PricingConfigUpdate, db: Session = Depends(get_db)):
    return service.update_pricing_config(db, config_id, payload)


@router.delete("/{config_id}", response_model=PricingConfigDeletedResponse, dependencies=[Depends(ADMIN_ROLES)])
def delete_pricing_config(config_id: int, db: Session = Depends(get_db)):
    config = service.delete_pricing_config(db, config_id)
    return PricingConfigDeletedResponse(message="Pricing config deleted", pricingConfig=config)
