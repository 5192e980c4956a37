from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES
from app.core.routing import EnvelopeRoute
from app.core.validation import parse_query
from app.db.session import get_db
from app.schemas.bundles import (
    BundleBulkAdd,
    BundleCreate,
    BundleFilters,
    BundleItemIn,
    BundleOut,
    BundlePrice,
    BundleQuantityUpdate,
    BundleStats,
    BundleUpdate,
    SharedBundleProduct,
    SimilarQuery,
)
from app.schemas.common import Envelope, PaginatedEnvelope
from app.services import bundles as service

router = APIRouter(prefix="/bundles", tags=["Bundles"], route_class=EnvelopeRoute)


@router.post(
    "",
    response_model=Envelope[BundleOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def create_bundle(payload: BundleCreate, db: Session = Depends(get_db)):
    return Envelope(message="Bundle created successfully", data=service.create_bundle(db, payload))


@router.get("", response_model=PaginatedEnvelope[List[BundleOut]])
def list_bundles(request: Request, db: Session = Depends(get_db)):
    data, pagination = service.list_bundles(db, parse_query(BundleFilters, request.query_params))
    return PaginatedEnvelope(message="Bundles retrieved successfully", data=data, pagination=pagination)


@router.get("/stats/overview", response_model=Envelope[BundleStats])
def bundle_stats(db: Session = Depends(get_db)):
    return Envelope(message="Bundle statistics retrieved successfully", data=service.bundle_stats(db))


@router.get("/similar-products/{product_id}", response_model=Envelope[List[SharedBundleProduct]])
def similar_products(product_id: int, request: Request, db: Session = Depends(get_db)):
    query = parse_query(SimilarQuery, request.query_params)
    data = service.products_in_same_bundles(db, product_id, query.limit)
    return Envelope(message="Similar products retrieved successfully", data=data)


@router.get("/{bundle_id}", response_model=Envelope[BundleOut])
def get_bundle(bundle_id: int, db: Session = Depends(get_db)):
    return Envelope(message="Bundle retrieved successfully", data=service.get_bundle(db, bundle_id))


@router.put("/{bundle_id}", response_model=Envelope[BundleOut], dependencies=[Depends(ADMIN_ROLES)])
def update_bundle(bundle_id: int, payload: BundleUpdate, db: Session = Depends(get_db)):
    return Envelope(message="Bundle updated successfully", data=service.update_bundle(db, bundle_id, payload))


@router.delete("/{bundle_id}", response_model=Envelope[BundleOut], dependencies=[Depends(ADMIN_ROLES)])
def delete_bundle(bundle_id: int, db: Session = Depends(get_db)):
    return Envelope(message="Bundle deleted successfully", data=service.delete_bundle(db, bundle_id))


@router.get("/{bundle_id}/price", response_model=Envelope[BundlePrice])
def bundle_price(bundle_id: int, db: Session = Depends(get_db)):
    return Envelope(message="Bundle price calculated successfully", data=service.bundle_price(db, bundle_id))


@router.post(
    "/{bundle_id}/products",
    response_model=Envelope[BundleOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def add_product(bundle_id: int, payload: BundleItemIn, db: Session = Depends(get_db)):
    bundle = service.add_products(db, bundle_id, [payload])
    return Envelope(message="Product added to bundle successfully", data=bundle)


@router.post(
    "/{bundle_id}/products/bulk",
    response_model=Envelope[BundleOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def bulk_add_products(bundle_id: int, payload: BundleBulkAdd, db: Session = Depends(get_db)):
    bundle = service.add_products(db, bundle_id, payload.products)
    return Envelope(message="Products added to bundle successfully", data=bundle)


@router.put(
    "/{bundle_id}/products/{product_id}",
    response_model=Envelope[BundleOut],
    dependencies=[Depends(ADMIN_ROLES)],
)
def update_product_quantity(
    bundle_id: int, product_id: int, payload: BundleQuantityUpdate, db: Session = Depends(get_db)
):
    bundle = service.update_product_quantity(db, bundle_id, product_id, payload.quantity)
    return Envelope(message="Product quantity updated successfully", data=bundle)


@router.delete(
    "/{bundle_id}/products/{product_id}",
    response_model=Envelope[BundleOut],
    dependencies=[Depends(ADMIN_ROLES)],
)
def remove_product(bundle_id: int, product_id: int, db: Session = Depends(get_db)):
    bundle = service.remove_product(db, bundle_id, product_id)
    return Envelope(message="Product removed from bundle successfully", data=bundle)
