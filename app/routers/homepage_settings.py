from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_ROLES
from app.core.routing import ApiRoute
from app.db.session import get_db
from app.schemas.homepage_settings import (
    HomepageSettingCreate,
    HomepageSettingDeletedResponse,
    HomepageSettingListResponse,
    HomepageSettingResponse,
    HomepageSettingUpdate,
)
from app.services import homepage_settings as service

router = APIRouter(prefix="/homepage-settings", tags=["Homepage Settings"], route_class=ApiRoute)


@router.get("", response_model=HomepageSettingListResponse)
def list_homepage_settings(is_active: Optional[bool] = None, db: Session = Depends(get_db)):
    return HomepageSettingListResponse(data=service.list_homepage_settings(db, is_active))


@router.post(
    "",
    response_model=HomepageSettingResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ADMIN_ROLES)],
)
def create_homepage_setting(payload: HomepageSettingCreate, db: Session = Depends(get_db)):
    return HomepageSettingResponse(data=service.create_homepage_setting(db, payload))


@router.get("/{setting_id}", response_model=HomepageSettingResponse)
def get_homepage_setting(setting_id: int, db: Session = Depends(get_db)):
    return HomepageSettingResponse(data=service.get_homepage_setting(db, setting_id))


@router.put("/{setting_id}", response_model=HomepageSettingResponse, dependencies=[Depends(ADMIN_ROLES)])
def update_homepage_setting(setting_id: int, payload: HomepageSettingUpdate, db: Session = Depends(get_db)):
    return HomepageSettingResponse(data=service.update_homepage_setting(db, setting_id, payload))


@router.delete(
    "/{setting_id}",
    response_model=HomepageSettingDeletedResponse,
    dependencies=[Depends(ADMIN_ROLES)],
)
def delete_homepage_setting(setting_id: int, db: Session = Depends(get_db)):
    deleted_id = service.delete_homepage_setting(db, setting_id)
    return HomepageSettingDeletedResponse(message="Homepage setting deleted", id=deleted_id)
