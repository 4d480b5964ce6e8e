from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.notifications.crud import notification as notification_crud
from app.api.notifications.schemas import NotificationType
from app.api.users import models, schemas
from app.core.logger import logger
from app.core.roles import UserRole
from app.core.security import SYSTEM_TOKEN, TokenData, hash_password, verify_password
from app.core.utils import current_time


class CRUDUser(
    CRUDBase[models.User, schemas.InternalUserCreate, schemas.ProfileUpdate]
):
    def _check_permission(self, db_obj: models.User, user: TokenData) -> bool:
        return (
            user == SYSTEM_TOKEN
            or user.role == UserRole.ADMIN
            or db_obj.id == user.user_id
        )

    def get_by_email(self, db: Session, email: str) -> Optional[models.User]:
        email = email.strip().lower()
        return db.query(self.model).filter(self.model.email == email).first()

    def create(
        self,
        db: Session,
        obj: schemas.InternalUserCreate,
        user: Optional[TokenData] = None,
    ) -> models.User:
        to_create = obj.model_copy(update={'password': hash_password(obj.password)})
        return super().create(db, to_create)

    def register(self, db: Session, *, obj: schemas.UserRegister) -> models.User:
        if self.get_by_email(db, obj.email):
            logger.error('Registration attempt with existing email %s', obj.email)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='An account with this email already exists',
            )

        # Event managers wait for an administrator to approve them
        account_status = (
            schemas.AccountStatus.PENDING
            if obj.role == UserRole.EVENT_MANAGER
            else schemas.AccountStatus.ACTIVE
        )
        to_create = schemas.InternalUserCreate(
            **obj.model_dump(),
            status=account_status,
        )
        user = self.create(db, to_create)
        logger.info('User %s registered as %s (%s)', user.id, user.role, user.status)
        return user

    def login(self, db: Session, *, email: str, password: str) -> models.User:
        user = self.get_by_email(db, email)
        if not user or not verify_password(password, user.password):
            logger.error('Invalid login attempt for %s', email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail='Invalid email or password',
            )

        if user.status == schemas.AccountStatus.PENDING.value:
            logger.error('Login attempt for pending account %s', user.id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Your account is awaiting approval from an administrator',
            )
        if user.status == schemas.AccountStatus.SUSPENDED.value:
            logger.error('Login attempt for suspended account %s', user.id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Your account has been suspended. Please contact support.',
            )

        user.last_login = current_time()
        db.commit()
        db.refresh(user)
        return user

    def update_profile(
        self, db: Session, *, obj: schemas.ProfileUpdate, user: TokenData
    ) -> models.User:
        return self.update(db, user.user_id, obj, user)

    def find_paginated(
        self,
        db: Session,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[schemas.UserFilter] = None,
    ) -> tuple[List[models.User], int]:
        users = self.find(db, skip=skip, limit=limit, filters=filters)
        return users, self.count(db, filters)

    def update_status(
        self,
        db: Session,
        *,
        user_id: int,
        new_status: schemas.AccountStatus,
        user: TokenData,
    ) -> models.User:
        db_user = self.get(db, user_id, user)
        previous = db_user.status
        db_user.status = new_status.value
        db.commit()
        db.refresh(db_user)
        logger.info(
            'User %s status changed from %s to %s by %s',
            db_user.id,
            previous,
            new_status.value,
            user.user_id,
        )

        if previous != new_status.value:
            notification_crud.notify(
                db,
                user_id=db_user.id,
                type=NotificationType.ACCOUNT_STATUS,
                title='Account status updated',
                message=f'Your account is now {new_status.value}.',
            )
        return db_user


user = CRUDUser(models.User)
