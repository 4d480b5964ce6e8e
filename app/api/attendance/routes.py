from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.attendance import schemas
from app.api.attendance.crud import attendance as attendance_crud
from app.core.database import get_db
from app.core.security import TokenData, get_staff_user

router = APIRouter()


@router.post('/check-in', response_model=schemas.CheckInResponse)
def check_in(
    data: schemas.CheckInRequest,
    current_user: TokenData = Depends(get_staff_user),
    db: Session = Depends(get_db),
):
    return attendance_crud.check_in(db=db, payload=data.token, user=current_user)


@router.get('/event/{event_id}', response_model=list[schemas.AttendanceEntry])
def get_event_attendance(
    event_id: int,
    current_user: TokenData = Depends(get_staff_user),
    db: Session = Depends(get_db),
):
    return attendance_crud.find_by_event(db=db, event_id=event_id)
