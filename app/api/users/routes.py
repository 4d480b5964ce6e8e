from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.common.schemas import PaginatedResponse, PaginationMetadata
from app.api.users import schemas
from app.api.users.crud import user as user_crud
from app.core.database import get_db
from app.core.security import TokenData, get_admin_user, get_current_user

auth_router = APIRouter()
router = APIRouter()


@auth_router.post(
    '/register', status_code=status.HTTP_201_CREATED, response_model=schemas.User
)
def register(
    data: schemas.UserRegister,
    db: Session = Depends(get_db),
):
    return user_crud.register(db=db, obj=data)


@auth_router.post('/login', response_model=schemas.LoginResponse)
def login(
    data: schemas.UserLogin,
    db: Session = Depends(get_db),
):
    user = user_crud.login(db=db, email=data.email, password=data.password)
    token = user.get_authorization()
    return schemas.LoginResponse(
        user=schemas.User.model_validate(user),
        access_token=token.access_token,
        token_type=token.token_type,
    )


@auth_router.get('/me', response_model=schemas.User)
def get_me(
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return user_crud.get(db=db, id=current_user.user_id, user=current_user)


@auth_router.put('/profile', response_model=schemas.User)
def update_profile(
    data: schemas.ProfileUpdate,
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return user_crud.update_profile(db=db, obj=data, user=current_user)


@router.get('/', response_model=PaginatedResponse[schemas.User])
def get_users(
    current_user: TokenData = Depends(get_admin_user),
    filters: schemas.UserFilter = Depends(),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=100),
    db: Session = Depends(get_db),
):
    users, total = user_crud.find_paginated(
        db=db, skip=skip, limit=limit, filters=filters
    )
    return PaginatedResponse(
        items=[schemas.User.model_validate(u) for u in users],
        pagination=PaginationMetadata(skip=skip, limit=limit, total=total),
    )


@router.put('/{user_id}/status', response_model=schemas.User)
def update_user_status(
    user_id: int,
    data: schemas.StatusUpdate,
    current_user: TokenData = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    return user_crud.update_status(
        db=db, user_id=user_id, new_status=data.status, user=current_user
    )
