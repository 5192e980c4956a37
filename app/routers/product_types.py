from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES
from app.core.routing import ApiRoute
from app.core.validation import parse_query
from app.db.session import get_db
from app.schemas.product_types import (
    ProductTypeCreate,
    ProductTypeDeletedResponse,
    ProductTypeFilters,
    ProductTypeListResponse,
    ProductTypeOut,
    ProductTypeUpdate,
)
from app.services import product_types as service

router = APIRouter(prefix="/product-types", tags=["Product Types"], route_class=ApiRoute)


@router.get("", response_model=ProductTypeListResponse)
def list_product_types(request: Request, db: Session = Depends(get_db)):
    filters = parse_query(ProductTypeFilters, request.query_params)
    return service.list_product_types(db, filters)


@router.post(
    "",
    response_model=ProductTypeOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def create_product_type(payload: ProductTypeCreate, db: Session = Depends(get_db)):
    return service.create_product_type(db, payload)


@router.get("/{product_type_id}", response_model=ProductTypeOut)
def get_product_type(product_type_id: int, db: Session = Depends(get_db)):
    return service.get_product_type(db, product_type_id)


@router.put("/{product_type_id}", response_model=ProductTypeOut, dependencies=[Depends(ADMIN_ROLES)])
def update_product_type(product_type_id: int, payload: ProductTypeUpdate, db: Session = Depends(get_db)):
    return service.update_product_type(db, product_type_id, payload)


@router.delete("/{product_type_id}", response_model=ProductTypeDeletedResponse, dependencies=[Depends(ADMIN_ROLES)])
def delete_product_type(product_type_id: int, db: Session = Depends(get_db)):
    product_type = service.delete_product_type(db, product_type_id)
    return ProductTypeDeletedResponse(message="Product type deleted", productType=product_type)
