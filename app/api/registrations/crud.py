from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.events.models import Event
from app.api.events.schemas import EventStatus
from app.api.registrations import models, schemas
from app.core.logger import logger
from app.core.qr import issue_check_in_payload
from app.core.security import SYSTEM_TOKEN, TokenData
from app.core.utils import create_check_in_token

EVENT_FULL = 'Event is full'
ALREADY_REGISTERED = 'Already registered for this event'


class CRUDRegistration(
    CRUDBase[models.Registration, schemas.Registration, schemas.Registration]
):
    def _check_permission(self, db_obj: models.Registration, user: TokenData) -> bool:
        return user == SYSTEM_TOKEN or user.is_staff or db_obj.user_id == user.user_id

    def get_by_token(self, db: Session, token: str) -> Optional[models.Registration]:
        return (
            db.query(self.model).filter(self.model.check_in_token == token).first()
        )

    def get_by_event_and_user(
        self, db: Session, event_id: int, user_id: int
    ) -> Optional[models.Registration]:
        return (
            db.query(self.model)
            .filter(self.model.event_id == event_id, self.model.user_id == user_id)
            .first()
        )

    def find_for_user(self, db: Session, user: TokenData) -> List[models.Registration]:
        return (
            db.query(self.model)
            .filter(self.model.user_id == user.user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .all()
        )

    def _event_full(self, event_id: int) -> HTTPException:
        logger.error('Event %s is full', event_id)
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EVENT_FULL)

    def _already_registered(self, event_id: int, user_id: int) -> HTTPException:
        logger.error('User %s already registered for event %s', user_id, event_id)
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=ALREADY_REGISTERED
        )

    def register(
        self, db: Session, *, event_id: int, user: TokenData
    ) -> schemas.RegistrationResponse:
        event = db.query(Event).filter(Event.id == event_id).first()
        if not event:
            logger.error('Event %s not found', event_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail='Event not found'
            )
        if event.status not in EventStatus.open_for_registration():
            logger.error('Event %s is %s', event_id, event.status)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Event is not open for registration',
            )
        if event.is_full:
            raise self._event_full(event_id)
        if self.get_by_event_and_user(db, event_id, user.user_id):
            raise self._already_registered(event_id, user.user_id)

        registration = self.model(
            event_id=event_id,
            user_id=user.user_id,
            check_in_token=create_check_in_token(),
            status=schemas.RegistrationStatus.REGISTERED.value,
        )
        db.add(registration)
        try:
            # The (event_id, user_id) unique constraint settles concurrent duplicates
            db.flush()
        except IntegrityError as e:
            db.rollback()
            logger.error('Integrity error registering user %s: %s', user.user_id, e)
            raise self._already_registered(event_id, user.user_id)

        # Capacity check and increment happen in a single conditional update
        result = db.execute(
            update(Event)
            .where(Event.id == event_id, Event.registered_count < Event.capacity)
            .values(registered_count=Event.registered_count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            raise self._event_full(event_id)

        db.commit()
        db.refresh(registration)
        logger.info(
            'User %s registered for event %s (registration %s)',
            user.user_id,
            event_id,
            registration.id,
        )
        return schemas.RegistrationResponse(
            message='Successfully registered for event',
            registration_id=registration.id,
            event_id=event_id,
            check_in_token=registration.check_in_token,
            qr_code=issue_check_in_payload(registration.check_in_token),
        )


registration = CRUDRegistration(models.Registration)
