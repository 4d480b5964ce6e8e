from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.notifications import schemas
from app.api.notifications.crud import notification as notification_crud
from app.core.database import get_db
from app.core.security import TokenData, get_current_user

router = APIRouter()


@router.get('/', response_model=list[schemas.Notification])
def get_notifications(
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return notification_crud.find_for_user(db=db, user=current_user)


@router.put('/read-all', response_model=schemas.MarkedAsRead)
def mark_all_notifications_as_read(
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = notification_crud.mark_all_as_read(db=db, user=current_user)
    return schemas.MarkedAsRead(
        message='All notifications marked as read', updated=updated
    )


@router.put('/{notification_id}/read', response_model=schemas.Notification)
def mark_notification_as_read(
    notification_id: int,
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return notification_crud.mark_as_read(
        db=db, notification_id=notification_id, user=current_user
    )
