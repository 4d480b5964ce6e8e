from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.events import schemas
from app.api.events.crud import event as event_crud
from app.api.registrations.crud import registration as registration_crud
from app.api.registrations.schemas import RegistrationResponse
from app.core.database import get_db
from app.core.security import TokenData, get_current_user, get_staff_user

router = APIRouter()


@router.get('/', response_model=list[schemas.Event])
def get_events(
    filters: schemas.EventFilter = Depends(),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=100),
    sort_by: str = Query(default='start_date', description='Field to sort by'),
    sort_order: str = Query(default='asc', pattern='^(asc|desc)$'),
    db: Session = Depends(get_db),
):
    return event_crud.find(
        db=db,
        skip=skip,
        limit=limit,
        filters=filters,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get('/{event_id}', response_model=schemas.Event)
def get_event(
    event_id: int,
    db: Session = Depends(get_db),
):
    return event_crud.get(db=db, id=event_id)


@router.post('/', status_code=status.HTTP_201_CREATED, response_model=schemas.Event)
def create_event(
    event: schemas.EventCreate,
    current_user: TokenData = Depends(get_staff_user),
    db: Session = Depends(get_db),
):
    return event_crud.create_event(db=db, obj=event, user=current_user)


@router.put('/{event_id}', response_model=schemas.Event)
def update_event(
    event_id: int,
    event: schemas.EventUpdate,
    current_user: TokenData = Depends(get_staff_user),
    db: Session = Depends(get_db),
):
    return event_crud.update(db=db, id=event_id, obj=event, user=current_user)


@router.put('/{event_id}/status', response_model=schemas.Event)
def update_event_status(
    event_id: int,
    data: schemas.EventStatusUpdate,
    current_user: TokenData = Depends(get_staff_user),
    db: Session = Depends(get_db),
):
    return event_crud.update_status(
        db=db, id=event_id, new_status=data.status, user=current_user
    )


@router.delete('/{event_id}')
def delete_event(
    event_id: int,
    current_user: TokenData = Depends(get_staff_user),
    db: Session = Depends(get_db),
):
    event_crud.delete(db=db, id=event_id, user=current_user)
    return {'message': 'Event deleted successfully'}


@router.post(
    '/{event_id}/register',
    status_code=status.HTTP_201_CREATED,
    response_model=RegistrationResponse,
)
def register_for_event(
    event_id: int,
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return registration_crud.register(db=db, event_id=event_id, user=current_user)


@router.get(
    '/{event_id}/registrations', response_model=list[schemas.EventRegistrant]
)
def get_event_registrations(
    event_id: int,
    current_user: TokenData = Depends(get_staff_user),
    db: Session = Depends(get_db),
):
    return event_crud.get_registrants(db=db, event_id=event_id)
