from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.registrations import schemas
from app.api.registrations.crud import registration as registration_crud
from app.core.database import get_db
from app.core.qr import issue_check_in_payload, render_qr_png
from app.core.security import TokenData, get_current_user

router = APIRouter()


@router.get('/me', response_model=list[schemas.Registration])
def get_my_registrations(
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return registration_crud.find_for_user(db=db, user=current_user)


@router.get(
    '/{registration_id}/qr',
    response_class=Response,
    responses={200: {'content': {'image/png': {}}}},
)
def get_registration_qr(
    registration_id: int,
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    registration = registration_crud.get(db=db, id=registration_id, user=current_user)
    payload = issue_check_in_payload(registration.check_in_token)
    return Response(content=render_qr_png(payload), media_type='image/png')
