from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES
from app.core.routing import EnvelopeRoute
from app.core.validation import parse_query
from app.db.session import get_db
from app.schemas.collections import (
    CollectionBulkAdd,
    CollectionCreate,
    CollectionFilters,
    CollectionItemIn,
    CollectionOut,
    CollectionPositionUpdate,
    CollectionUpdate,
)
from app.schemas.common import Envelope, PaginatedEnvelope
from app.services import collections as service

router = APIRouter(prefix="/collections", tags=["Collections"], route_class=EnvelopeRoute)


@router.post(
    "",
    response_model=Envelope[CollectionOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def create_collection(payload: CollectionCreate, db: Session = Depends(get_db)):
    return Envelope(message="Collection created successfully", data=service.create_collection(db, payload))


@router.get("", response_model=PaginatedEnvelope[List[CollectionOut]])
def list_collections(request: Request, db: Session = Depends(get_db)):
    data, pagination = service.list_collections(db, parse_query(CollectionFilters, request.query_params))
    return PaginatedEnvelope(message="Collections retrieved successfully", data=data, pagination=pagination)


@router.get("/{collection_id}", response_model=Envelope[CollectionOut])
def get_collection(collection_id: int, db: Session = Depends(get_db)):
    return Envelope(message="Collection retrieved successfully", data=service.get_collection(db, collection_id))


@router.put("/{collection_id}", response_model=Envelope[CollectionOut], dependencies=[Depends(ADMIN_ROLES)])
def update_collection(collection_id: int, payload: CollectionUpdate, db: Session = Depends(get_db)):
    collection = service.update_collection(db, collection_id, payload)
    return Envelope(message="Collection updated successfully", data=collection)


@router.delete("/{collection_id}", response_model=Envelope[CollectionOut], dependencies=[Depends(ADMIN_ROLES)])
def delete_collection(collection_id: int, db: Session = Depends(get_db)):
    return Envelope(message="Collection deleted successfully", data=service.delete_collection(db, collection_id))


@router.post(
    "/{collection_id}/products",
    response_model=Envelope[CollectionOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def add_product(collection_id: int, payload: CollectionItemIn, db: Session = Depends(get_db)):
    collection = service.add_products(db, collection_id, [payload])
    return Envelope(message="Product added to collection successfully", data=collection)


@router.post(
    "/{collection_id}/products/bulk",
    response_model=Envelope[CollectionOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def bulk_add_products(collection_id: int, payload: CollectionBulkAdd, db: Session = Depends(get_db)):
    collection = service.add_products(db, collection_id, payload.products)
    return Envelope(message="Products added to collection successfully", data=collection)


@router.put(
    "/{collection_id}/products/{product_id}",
    response_model=Envelope[CollectionOut],
    dependencies=[Depends(ADMIN_ROLES)],
)
def update_product_position(
    collection_id: int, product_id: int, payload: CollectionPositionUpdate, db: Session = Depends(get_db)
):
    collection = service.update_product_position(db, collection_id, product_id, payload.position)
    return Envelope(message="Product position updated successfully", data=collection)


@router.delete(
    "/{collection_id}/products/{product_id}",
    response_model=Envelope[CollectionOut],
    dependencies=[Depends(ADMIN_ROLES)],
)
def remove_product(collection_id: int, product_id: int, db: Session = Depends(get_db)):
    collection = service.remove_product(db, collection_id, product_id)
    return Envelope(message="Product removed from collection successfully", data=collection)
