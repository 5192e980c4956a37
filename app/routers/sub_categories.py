from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES
from app.core.routing import ApiRoute
from app.core.validation import parse_query
from app.db.session import get_db
from app.schemas.sub_categories import (
    SubCategoryCreate,
    SubCategoryDeletedResponse,
    SubCategoryFilters,
    SubCategoryListResponse,
    SubCategoryOut,
    SubCategoryUpdate,
)
from app.services import sub_categories as service

router = APIRouter(prefix="/sub-categories", tags=["Sub-categories"], route_class=ApiRoute)


@router.get("", response_model=SubCategoryListResponse)
def list_sub_categories(request: Request, db: Session = Depends(get_db)):
    filters = parse_query(SubCategoryFilters, request.query_params)
    return service.list_sub_categories(db, filters)


@router.post(
    "",
    response_model=SubCategoryOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def create_sub_category(payload: SubCategoryCreate, db: Session = Depends(get_db)):
    return service.create_sub_category(db, payload)


@router.get("/{sub_category_id}", response_model=SubCategoryOut)
def get_sub_category(sub_category_id: int, db: Session = Depends(get_db)):
    return service.get_sub_category(db, sub_category_id)


@router.put("/{sub_category_id}", response_model=SubCategoryOut, dependencies=[Depends(ADMIN_ROLES)])
def update_sub_category(sub_category_id: int, payload: SubCategoryUpdate, db: Session = Depends(get_db)):
    return service.update_sub_category(db, sub_category_id, payload)


@router.delete("/{sub_category_id}", response_model=SubCategoryDeletedResponse, dependencies=[Depends(ADMIN_ROLES)])
def delete_sub_category(sub_category_id: int, db: Session = Depends(get_db)):
    sub_category = service.delete_sub_category(db, sub_category_id)
    return SubCategoryDeletedResponse(message="Sub-category deleted", subCategory=sub_category)
