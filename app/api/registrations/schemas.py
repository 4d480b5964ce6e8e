from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class RegistrationStatus(str, Enum):
    REGISTERED = 'registered'
    ATTENDED = 'attended'


class Registration(BaseModel):
    id: int
    event_id: int
    user_id: int
    check_in_token: str
    status: RegistrationStatus
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
    )


class RegistrationResponse(BaseModel):
    message: str
    registration_id: int
    event_id: int
    check_in_token: str
    qr_code: str
