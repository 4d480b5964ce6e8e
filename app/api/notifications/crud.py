from typing import Iterable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.notifications import models, schemas
from app.core.logger import logger
from app.core.security import SYSTEM_TOKEN, TokenData

MAX_NOTIFICATIONS = 50


class CRUDNotification(
    CRUDBase[
        models.Notification,
        schemas.NotificationCreate,
        schemas.NotificationCreate,
    ]
):
    def _check_permission(self, db_obj: models.Notification, user: TokenData) -> bool:
        return user == SYSTEM_TOKEN or db_obj.user_id == user.user_id

    def notify(
        self,
        db: Session,
        *,
        user_id: int,
        type: schemas.NotificationType,
        title: str,
        message: str,
        event_id: Optional[int] = None,
    ) -> models.Notification:
        obj = schemas.NotificationCreate(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            event_id=event_id,
        )
        logger.info('Notifying user %s: %s', user_id, obj.type)
        return self.create(db, obj, SYSTEM_TOKEN)

    def notify_many(
        self,
        db: Session,
        *,
        user_ids: Iterable[int],
        type: schemas.NotificationType,
        title: str,
        message: str,
        event_id: Optional[int] = None,
    ) -> int:
        count = 0
        for user_id in user_ids:
            db.add(
                self.model(
                    user_id=user_id,
                    type=type.value,
                    title=title,
                    message=message,
                    event_id=event_id,
                )
            )
            count += 1
        db.commit()
        logger.info('Sent %s %s notifications', count, type.value)
        return count

    def find_for_user(self, db: Session, user: TokenData) -> List[models.Notification]:
        return (
            db.query(self.model)
            .filter(self.model.user_id == user.user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .limit(MAX_NOTIFICATIONS)
            .all()
        )

    def mark_as_read(
        self, db: Session, notification_id: int, user: TokenData
    ) -> models.Notification:
        notification = (
            db.query(self.model)
            .filter(
                self.model.id == notification_id,
                self.model.user_id == user.user_id,
            )
            .first()
        )
        if not notification:
            logger.error(
                'Notification %s not found for user %s', notification_id, user.user_id
            )
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Notification not found',
            )
        notification.is_read = True
        db.commit()
        db.refresh(notification)
        return notification

    def mark_all_as_read(self, db: Session, user: TokenData) -> int:
        updated = (
            db.query(self.model)
            .filter(self.model.user_id == user.user_id, self.model.is_read.is_(False))
            .update({self.model.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated


notification = CRUDNotification(models.Notification)
