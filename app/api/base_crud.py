from enum import Enum
from typing import Generic, List, Optional, Type, TypeVar

import psycopg2
from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.declarative import DeclarativeMeta
from sqlalchemy.orm import Query, Session

from app.core.logger import logger
from app.core.security import SYSTEM_TOKEN, TokenData

ModelType = TypeVar('ModelType', bound=DeclarativeMeta)
CreateSchemaType = TypeVar('CreateSchemaType', bound=BaseModel)
UpdateSchemaType = TypeVar('UpdateSchemaType', bound=BaseModel)


def _conflicting_keys(e: IntegrityError) -> Optional[str]:
    """Column names behind a unique violation, for PostgreSQL and SQLite."""
    orig = str(e.orig)
    if isinstance(e.orig, psycopg2.errors.UniqueViolation) and 'DETAIL: ' in orig:
        # DETAIL:  Key (event_id, user_id)=(1, 2) already exists.
        detail = orig.split('DETAIL: ', 1)[1]
        if '(' in detail and ')' in detail:
            return detail.split('(', 1)[1].split(')', 1)[0]
    if orig.startswith('UNIQUE constraint failed: '):
        # UNIQUE constraint failed: event_feedback.event_id, event_feedback.user_id
        columns = orig.split(': ', 1)[1].split(', ')
        return ', '.join(c.rsplit('.', 1)[-1] for c in columns)
    return None


def _is_foreign_key_violation(e: IntegrityError) -> bool:
    return isinstance(
        e.orig, psycopg2.errors.ForeignKeyViolation
    ) or 'FOREIGN KEY constraint failed' in str(e.orig)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    @property
    def resource(self) -> str:
        return self.model.__name__

    def _check_permission(self, db_obj: ModelType, user: TokenData) -> bool:
        """Override to let non-system users reach a record"""
        return user == SYSTEM_TOKEN

    def _apply_filters(self, query: Query, filters: Optional[BaseModel]) -> Query:
        if filters is None:
            return query
        for field, value in filters.model_dump(exclude_none=True).items():
            if not hasattr(self.model, field):
                continue
            if isinstance(value, Enum):
                value = value.value
            query = query.filter(getattr(self.model, field) == value)
        return query

    def create(
        self,
        db: Session,
        obj: CreateSchemaType,
        user: Optional[TokenData] = None,
    ) -> ModelType:
        columns = self.model.__table__.columns.keys()
        db_obj = self.model(
            **{k: v for k, v in obj.model_dump().items() if k in columns}
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            keys = _conflicting_keys(e)
            logger.error('Could not create %s: %s', self.resource, e.orig)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    f'It already exists a {self.resource} with this {keys}'
                    if keys
                    else 'Integrity error'
                ),
            )
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, id: int, user: TokenData) -> ModelType:
        obj = db.query(self.model).filter(self.model.id == id).first()
        if not obj:
            logger.error('%s %s not found', self.resource, id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f'{self.resource} not found',
            )
        if not self._check_permission(obj, user):
            logger.error('User %s may not access %s %s', user.user_id, self.resource, id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f'Not authorized to access this {self.resource}',
            )
        return obj

    def find(
        self,
        db: Session,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[BaseModel] = None,
        sort_by: str = 'created_at',
        sort_order: str = 'desc',
    ) -> List[ModelType]:
        if sort_by not in self.model.__table__.columns:
            logger.error('Invalid sort field %s for %s', sort_by, self.resource)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f'Invalid sort field: {sort_by}',
            )
        column = getattr(self.model, sort_by)
        query = self._apply_filters(db.query(self.model), filters)
        query = query.order_by(column.desc() if sort_order == 'desc' else column.asc())
        return query.offset(skip).limit(limit).all()

    def count(self, db: Session, filters: Optional[BaseModel] = None) -> int:
        return self._apply_filters(db.query(self.model), filters).count()

    def update(
        self,
        db: Session,
        id: int,
        obj: UpdateSchemaType,
        user: TokenData,
    ) -> ModelType:
        db_obj = self.get(db, id, user)
        for field, value in obj.model_dump(exclude_unset=True).items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, id: int, user: TokenData) -> ModelType:
        obj = self.get(db, id, user)
        db.delete(obj)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error('Could not delete %s %s: %s', self.resource, id, e.orig)
            if _is_foreign_key_violation(e):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f'{self.resource} is referenced by other records',
                )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Database integrity error occurred',
            )
        return obj
