from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_TYPE, SUPER_ADMIN
from app.core.routing import ApiRoute
from app.db.session import get_db
from app.schemas.users import UserCreate, UserDeletedResponse, UserListItem, UserLogin, UserLoginResponse, UserOut
from app.services import users as service

router = APIRouter(prefix="/users", tags=["Users"], route_class=ApiRoute)


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(SUPER_ADMIN)],
)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return service.create_user(db, payload)


@router.post("/login", response_model=UserLoginResponse)
def login(payload: Optional[UserLogin] = Body(default=None), db: Session = Depends(get_db)):
    payload = payload or UserLogin()
    user, token = service.authenticate(db, payload.username, payload.password)
    return UserLoginResponse(user=user, token=token)


@router.get("", response_model=List[UserListItem], dependencies=[Depends(ADMIN_TYPE)])
def list_users(db: Session = Depends(get_db)):
    return service.list_users(db)


@router.get("/{user_id}", response_model=UserOut, dependencies=[Depends(ADMIN_TYPE)])
def get_user(user_id: int, db: Session = Depends(get_db)):
    return service.get_user(db, user_id)


@router.delete("/{user_id}", response_model=UserDeletedResponse, dependencies=[Depends(ADMIN_TYPE)])
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = service.delete_user(db, user_id)
    return UserDeletedResponse(message="User deleted", user=user)
