from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.feedback import schemas
from app.api.feedback.crud import feedback as feedback_crud
from app.core.database import get_db
from app.core.security import TokenData, get_current_user

router = APIRouter()


@router.post('/{event_id}/feedback', status_code=status.HTTP_201_CREATED)
def submit_feedback(
    event_id: int,
    data: schemas.FeedbackCreate,
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    feedback_crud.submit(db=db, event_id=event_id, obj=data, user=current_user)
    return {'message': 'Feedback submitted successfully'}


@router.get('/{event_id}/feedback', response_model=list[schemas.Feedback])
def get_event_feedback(
    event_id: int,
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return feedback_crud.find_by_event(db=db, event_id=event_id)


@router.get('/{event_id}/feedback/stats', response_model=schemas.FeedbackStats)
def get_event_feedback_stats(
    event_id: int,
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return feedback_crud.get_stats(db=db, event_id=event_id)
