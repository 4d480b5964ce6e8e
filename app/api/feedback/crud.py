from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.events.crud import event as event_crud
from app.api.feedback import models, schemas
from app.api.notifications.crud import notification as notification_crud
from app.api.notifications.schemas import NotificationType
from app.api.users.models import User
from app.core.logger import logger
from app.core.security import TokenData


class CRUDFeedback(
    CRUDBase[models.Feedback, schemas.InternalFeedbackCreate, schemas.FeedbackCreate]
):
    def submit(
        self,
        db: Session,
        *,
        event_id: int,
        obj: schemas.FeedbackCreate,
        user: TokenData,
    ) -> models.Feedback:
        event = event_crud.get(db, event_id)
        to_create = schemas.InternalFeedbackCreate(
            **obj.model_dump(),
            event_id=event_id,
            user_id=user.user_id,
        )
        feedback = self.create(db, to_create, user)
        logger.info(
            'Feedback %s (rating %s) submitted for event %s',
            feedback.id,
            feedback.rating,
            event_id,
        )

        if event.created_by and event.created_by != user.user_id:
            notification_crud.notify(
                db,
                user_id=event.created_by,
                type=NotificationType.FEEDBACK_RECEIVED,
                title='New feedback received',
                message=f'{event.title} received a {feedback.rating}-star review.',
                event_id=event_id,
            )
        return feedback

    def find_by_event(self, db: Session, event_id: int) -> List[schemas.Feedback]:
        event_crud.get(db, event_id)
        rows = (
            db.query(self.model, User.name)
            .join(User, self.model.user_id == User.id)
            .filter(self.model.event_id == event_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .all()
        )
        return [
            schemas.Feedback(
                id=feedback.id,
                event_id=feedback.event_id,
                user_name=None if feedback.is_anonymous else name,
                rating=feedback.rating,
                comment=feedback.comment,
                is_anonymous=feedback.is_anonymous,
                created_at=feedback.created_at,
            )
            for feedback, name in rows
        ]

    def get_stats(self, db: Session, event_id: int) -> schemas.FeedbackStats:
        event_crud.get(db, event_id)
        rows = (
            db.query(self.model.rating, func.count(self.model.id))
            .filter(self.model.event_id == event_id)
            .group_by(self.model.rating)
            .all()
        )
        distribution = {rating: 0 for rating in range(1, 6)}
        for rating, count in rows:
            distribution[rating] = count

        total = sum(distribution.values())
        average = (
            sum(rating * count for rating, count in distribution.items()) / total
            if total
            else 0.0
        )
        return schemas.FeedbackStats(
            event_id=event_id,
            average_rating=round(average, 2),
            total_reviews=total,
            rating_distribution=distribution,
        )


feedback = CRUDFeedback(models.Feedback)
