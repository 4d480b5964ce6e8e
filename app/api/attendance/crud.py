from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.attendance import models, schemas
from app.api.base_crud import CRUDBase
from app.api.events.crud import event as event_crud
from app.api.registrations.crud import registration as registration_crud
from app.api.registrations.models import Registration
from app.api.registrations.schemas import RegistrationStatus
from app.api.users.models import User
from app.core.logger import logger
from app.core.qr import InvalidCheckInPayload, parse_check_in_payload
from app.core.security import TokenData
from app.core.utils import current_time

INVALID_QR_CODE = 'Invalid QR code'
ALREADY_CHECKED_IN = 'Already checked in'


class CRUDAttendance(
    CRUDBase[models.AttendanceRecord, schemas.CheckInRequest, schemas.CheckInRequest]
):
    def get_by_registration_id(
        self, db: Session, registration_id: int
    ) -> Optional[models.AttendanceRecord]:
        return (
            db.query(self.model)
            .filter(self.model.registration_id == registration_id)
            .first()
        )

    def _already_checked_in(self, registration_id: int) -> HTTPException:
        logger.error('Registration %s already checked in', registration_id)
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_CHECKED_IN
        )

    def check_in(
        self, db: Session, *, payload: str, user: TokenData
    ) -> schemas.CheckInResponse:
        try:
            token = parse_check_in_payload(payload)
        except InvalidCheckInPayload:
            logger.error('Malformed check-in payload %r from user %s', payload, user.user_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=INVALID_QR_CODE
            )

        registration = registration_crud.get_by_token(db, token)
        if not registration:
            logger.error('No registration found for check-in token %s', token)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=INVALID_QR_CODE
            )

        registration_id = registration.id
        if self.get_by_registration_id(db, registration_id):
            raise self._already_checked_in(registration_id)

        record = self.model(
            registration_id=registration_id,
            scanned_by=user.user_id,
            check_in_time=current_time(),
        )
        db.add(record)
        registration.status = RegistrationStatus.ATTENDED.value
        try:
            # A concurrent scan that passed the check above fails here on the
            # unique registration_id constraint
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error('Integrity error checking in %s: %s', registration_id, e)
            raise self._already_checked_in(registration_id)

        db.refresh(record)
        logger.info(
            'Registration %s (event %s, user %s) checked in by %s',
            registration.id,
            registration.event_id,
            registration.user_id,
            user.user_id,
        )
        return schemas.CheckInResponse(
            success=True,
            message='Check-in successful',
            registration_id=registration.id,
            event_id=registration.event_id,
            user_id=registration.user_id,
            check_in_time=record.check_in_time,
        )

    def find_by_event(
        self, db: Session, event_id: int
    ) -> List[schemas.AttendanceEntry]:
        event_crud.get(db, event_id)
        rows = (
            db.query(self.model, Registration, User)
            .join(Registration, self.model.registration_id == Registration.id)
            .join(User, Registration.user_id == User.id)
            .filter(Registration.event_id == event_id)
            .order_by(self.model.check_in_time.desc(), self.model.id.desc())
            .all()
        )
        return [
            schemas.AttendanceEntry(
                id=record.id,
                registration_id=record.registration_id,
                scanned_by=record.scanned_by,
                check_in_time=record.check_in_time,
                user_id=attendee.id,
                name=attendee.name,
                student_id=attendee.student_id,
            )
            for record, registration, attendee in rows
        ]


attendance = CRUDAttendance(models.AttendanceRecord)
