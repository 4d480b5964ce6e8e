from sqlalchemy.orm import Session

from app.api.users.crud import user as user_crud
from app.api.users.models import User
from app.api.users.schemas import AccountStatus, InternalUserCreate
from app.core.config import settings
from app.core.database import SessionLocal, create_db
from app.core.logger import logger
from app.core.roles import UserRole
from app.core.security import hash_password


def ensure_admin(db: Session, email: str, password: str, name: str) -> User:
    """Create the administrator account, or reset its password if it exists."""
    if not password:
        raise ValueError('ADMIN_PASSWORD must be set')

    admin = user_crud.get_by_email(db, email)
    if admin:
        logger.info('Admin user %s already exists, updating password...', email)
        admin.password = hash_password(password)
        admin.role = UserRole.ADMIN.value
        admin.status = AccountStatus.ACTIVE.value
        db.commit()
        db.refresh(admin)
        return admin

    logger.info('Creating admin user %s', email)
    return user_crud.create(
        db,
        InternalUserCreate(
            email=email,
            name=name,
            password=password,
            role=UserRole.ADMIN,
            status=AccountStatus.ACTIVE,
            email_verified=True,
        ),
    )


def main():
    create_db()
    with SessionLocal() as db:
        admin = ensure_admin(
            db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_NAME
        )
    logger.info('Admin user ready: %s', admin.email)
    logger.warning('Change the admin password after first login!')


if __name__ == '__main__':
    main()
