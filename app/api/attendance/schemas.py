from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class CheckInRequest(BaseModel):
    token: str

    @field_validator('token')
    def validate_token(cls, v):
        if not v or not v.strip():
            raise ValueError('Token is required')
        return v.strip()


class CheckInResponse(BaseModel):
    success: bool
    message: str
    registration_id: int
    event_id: int
    user_id: int
    check_in_time: datetime


class AttendanceEntry(BaseModel):
    id: int
    registration_id: int
    scanned_by: int
    check_in_time: datetime
    user_id: int
    name: str
    student_id: Optional[str] = None
