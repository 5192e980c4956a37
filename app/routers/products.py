from typing import List

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES, Principal
from app.core.routing import ApiRoute
from app.core.validation import parse_query
from app.db.session import get_db
from app.schemas.products import (
    AvailabilityResponse,
    BulkStockResult,
    BulkStockUpdate,
    FeaturedQuery,
    LowStockQuery,
    ProductCreate,
    ProductDeletedResponse,
    ProductFilters,
    ProductListResponse,
    ProductOut,
    ProductSearchQuery,
    ProductsByTypeQuery,
    ProductStats,
    ProductUpdate,
    SimilarProductsQuery,
    StockUpdate,
)
from app.services import products as service

router = APIRouter(prefix="/products", tags=["Products"], route_class=ApiRoute)


@router.get("", response_model=ProductListResponse)
def list_products(request: Request, db: Session = Depends(get_db)):
    return service.list_products(db, parse_query(ProductFilters, request.query_params))


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    principal: Principal = Depends(ADMIN_ROLES),
    db: Session = Depends(get_db),
):
    return service.create_product(db, payload, principal)


@router.get("/featured", response_model=List[ProductOut])
def featured_products(request: Request, db: Session = Depends(get_db)):
    query = parse_query(FeaturedQuery, request.query_params)
    return service.featured_products(db, query.limit)


@router.get("/search", response_model=ProductListResponse)
def search_products(request: Request, db: Session = Depends(get_db)):
    query = parse_query(ProductSearchQuery, request.query_params)
    return service.search_products(db, query.q, query)


@router.get("/low-stock", response_model=List[ProductOut], dependencies=[Depends(ADMIN_ROLES)])
def low_stock_products(request: Request, db: Session = Depends(get_db)):
    query = parse_query(LowStockQuery, request.query_params)
    return service.low_stock_products(db, query.threshold)


@router.get("/stats", response_model=ProductStats, dependencies=[Depends(ADMIN_ROLES)])
def product_stats(db: Session = Depends(get_db)):
    return service.product_stats(db)


@router.patch("/stock/bulk-update", response_model=BulkStockResult, dependencies=[Depends(ADMIN_ROLES)])
def bulk_update_stock(payload: BulkStockUpdate, db: Session = Depends(get_db)):
    return service.bulk_update_stock(db, payload.updates)


@router.get("/type/{product_type_id}", response_model=List[ProductOut])
def products_by_type(product_type_id: int, request: Request, db: Session = Depends(get_db)):
    query = parse_query(ProductsByTypeQuery, request.query_params)
    return service.products_by_type(db, product_type_id, query.limit)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return service.get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(ADMIN_ROLES)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return service.update_product(db, product_id, payload)


@router.patch("/{product_id}", response_model=ProductOut, dependencies=[Depends(ADMIN_ROLES)])
def patch_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return service.update_product(db, product_id, payload)


@router.delete("/{product_id}", response_model=ProductDeletedResponse, dependencies=[Depends(ADMIN_ROLES)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product = service.delete_product(db, product_id)
    return ProductDeletedResponse(message="Product deleted", product=product)


@router.get("/{product_id}/similar", response_model=List[ProductOut])
def similar_products(product_id: int, request: Request, db: Session = Depends(get_db)):
    query = parse_query(SimilarProductsQuery, request.query_params)
    return service.similar_products(db, product_id, query)


@router.get("/{product_id}/availability", response_model=AvailabilityResponse, response_model_exclude_none=True)
def check_availability(product_id: int, quantity: int = Query(default=1), db: Session = Depends(get_db)):
    return service.check_availability(db, product_id, quantity)


@router.patch("/{product_id}/stock", response_model=ProductOut, dependencies=[Depends(ADMIN_ROLES)])
def update_stock(product_id: int, payload: StockUpdate, db: Session = Depends(get_db)):
    return service.update_stock(db, product_id, payload.quantity, payload.operation)
