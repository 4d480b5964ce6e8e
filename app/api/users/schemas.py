from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.roles import UserRole


class AccountStatus(str, Enum):
    PENDING = 'pending'
    ACTIVE = 'active'
    SUSPENDED = 'suspended'


class UserBase(BaseModel):
    email: str
    name: str
    student_id: Optional[str] = None
    faculty: Optional[str] = None
    phone: Optional[str] = None

    @field_validator('email')
    @classmethod
    def clean_email(cls, value: str) -> str:
        value = value.strip().lower()
        if '@' not in value:
            raise ValueError('Invalid email')
        return value


class UserRegister(UserBase):
    password: str = Field(min_length=6)
    role: UserRole = UserRole.STUDENT

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: UserRole) -> UserRole:
        if value == UserRole.ADMIN:
            raise ValueError('Admin accounts cannot be self-registered')
        return value


class InternalUserCreate(UserBase):
    password: str
    role: UserRole = UserRole.STUDENT
    status: AccountStatus = AccountStatus.ACTIVE
    email_verified: bool = False

    model_config = ConfigDict(
        use_enum_values=True,
    )


class UserLogin(BaseModel):
    email: str
    password: str

    model_config = ConfigDict(
        str_strip_whitespace=True,
    )


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    faculty: Optional[str] = None

    @field_validator('name')
    def validate_name(cls, v):
        if v is None or not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()


class StatusUpdate(BaseModel):
    status: AccountStatus


class User(UserBase):
    id: int
    role: UserRole
    status: AccountStatus
    email_verified: bool = False
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
    )


class UserFilter(BaseModel):
    role: Optional[UserRole] = None
    status: Optional[AccountStatus] = None


class LoginResponse(BaseModel):
    user: User
    access_token: str
    token_type: str
