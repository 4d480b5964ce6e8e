from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.events import models, schemas
from app.api.notifications.crud import notification as notification_crud
from app.api.notifications.schemas import NotificationType
from app.api.registrations.models import Registration
from app.api.users.models import User
from app.core.logger import logger
from app.core.security import TokenData


class CRUDEvent(CRUDBase[models.Event, schemas.InternalEventCreate, schemas.EventUpdate]):
    def _check_permission(self, db_obj: models.Event, user: TokenData) -> bool:
        # Events are public; mutations are role-gated at the route level
        return True

    def get(self, db: Session, id: int, user: Optional[TokenData] = None) -> models.Event:
        event = db.query(self.model).filter(self.model.id == id).first()
        if not event:
            logger.error('Event %s not found', id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Event not found',
            )
        return event

    def create_event(
        self, db: Session, obj: schemas.EventCreate, user: TokenData
    ) -> models.Event:
        to_create = schemas.InternalEventCreate(
            **obj.model_dump(),
            created_by=user.user_id,
        )
        event = self.create(db, to_create, user)
        logger.info('Event %s created by user %s', event.id, user.user_id)
        return event

    def update(
        self,
        db: Session,
        id: int,
        obj: schemas.EventUpdate,
        user: TokenData,
    ) -> models.Event:
        event = self.get(db, id, user)
        if obj.capacity is not None and obj.capacity < event.registered_count:
            logger.error(
                'Cannot set capacity of event %s to %s: %s already registered',
                id,
                obj.capacity,
                event.registered_count,
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Capacity cannot be lower than the number of registrations',
            )
        start_date = obj.start_date or event.start_date
        end_date = obj.end_date or event.end_date
        if end_date and end_date < start_date:
            logger.error('Event %s would end before it starts', id)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='end_date must be after start_date',
            )
        return super().update(db, id, obj, user)

    def update_status(
        self,
        db: Session,
        id: int,
        new_status: schemas.EventStatus,
        user: TokenData,
    ) -> models.Event:
        event = self.get(db, id, user)
        current_status = schemas.EventStatus(event.status)
        if new_status not in schemas.STATUS_TRANSITIONS[current_status]:
            logger.error(
                'Invalid status transition for event %s: %s -> %s',
                id,
                current_status.value,
                new_status.value,
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f'Cannot change event status from {current_status.value} to {new_status.value}',
            )

        event.status = new_status.value
        db.commit()
        db.refresh(event)
        logger.info(
            'Event %s moved to %s by user %s', id, new_status.value, user.user_id
        )

        if new_status == schemas.EventStatus.CANCELLED:
            notification_crud.notify_many(
                db,
                user_ids=[r.user_id for r in event.registrations],
                type=NotificationType.EVENT_CANCELLED,
                title='Event cancelled',
                message=f'{event.title} has been cancelled.',
                event_id=event.id,
            )
        return event

    def delete(self, db: Session, id: int, user: TokenData) -> models.Event:
        event = self.get(db, id, user)
        has_registrations = (
            db.query(Registration.id).filter(Registration.event_id == id).first()
        )
        if has_registrations:
            logger.error('Event %s has registrations and cannot be deleted', id)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail='Cannot delete an event with registrations. Cancel it instead.',
            )
        return super().delete(db, event.id, user)

    def get_registrants(
        self, db: Session, event_id: int
    ) -> List[schemas.EventRegistrant]:
        self.get(db, event_id)
        rows = (
            db.query(Registration, User)
            .join(User, Registration.user_id == User.id)
            .filter(Registration.event_id == event_id)
            .order_by(Registration.created_at.asc(), Registration.id.asc())
            .all()
        )
        return [
            schemas.EventRegistrant(
                registration_id=registration.id,
                user_id=user.id,
                name=user.name,
                email=user.email,
                student_id=user.student_id,
                faculty=user.faculty,
                status=registration.status,
                registered_at=registration.created_at,
            )
            for registration, user in rows
        ]


event = CRUDEvent(models.Event)
