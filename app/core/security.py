from datetime import timedelta
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from app.core.config import settings
from app.core.logger import logger
from app.core.roles import UserRole
from app.core.utils import current_time


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: int
    email: str
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.EVENT_MANAGER, UserRole.ADMIN)


ALGORITHM = 'HS256'

# System token used for internal service operations
# user_id=0 represents a system-level operation rather than a real user
SYSTEM_TOKEN = TokenData(user_id=0, email='', role=UserRole.ADMIN)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl='auth/login')


def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    password_bytes = password.encode('utf-8')[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({'exp': current_time() + expires_delta})

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


async def get_current_user(token: str = Depends(oauth2_scheme)) -> TokenData:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail='Could not validate credentials',
        headers={'WWW-Authenticate': 'Bearer'},
    )

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.error('Token has expired')
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Token has expired',
            headers={'WWW-Authenticate': 'Bearer'},
        )
    except JWTError as e:
        logger.error('Error decoding token: %s', str(e))
        raise credentials_exception

    user_id: int = payload.get('user_id')
    email: str = payload.get('email')
    role: str = payload.get('role')
    if user_id is None or email is None or role not in UserRole.all():
        logger.error('Invalid token payload: %s', payload)
        raise credentials_exception

    return TokenData(user_id=user_id, email=email, role=role)


def require_roles(*roles: UserRole):
    """Build a dependency that only lets through callers holding one of `roles`."""

    async def _check_role(
        current_user: TokenData = Depends(get_current_user),
    ) -> TokenData:
        if current_user.role not in roles:
            logger.error(
                'User %s with role %s tried to access a %s endpoint',
                current_user.user_id,
                current_user.role.value,
                '/'.join(r.value for r in roles),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Insufficient permissions',
            )
        return current_user

    return _check_role


get_staff_user = require_roles(UserRole.EVENT_MANAGER, UserRole.ADMIN)
get_admin_user = require_roles(UserRole.ADMIN)
