import os
from enum import Enum

from dotenv import load_dotenv

load_dotenv()


class Environment(str, Enum):
    TEST = 'test'
    PRODUCTION = 'production'
    DEVELOP = 'develop'


class Settings:
    ENVIRONMENT: Environment = Environment(os.getenv('ENVIRONMENT') or Environment.TEST)
    DB_USERNAME: str = os.getenv('DB_USERNAME')
    DB_PASSWORD: str = os.getenv('DB_PASSWORD')
    DB_HOST: str = os.getenv('DB_HOST')
    DB_PORT: str = os.getenv('DB_PORT')
    DB_NAME: str = os.getenv('DB_NAME')

    SQLALCHEMY_TEST_DATABASE_URL = 'sqlite:///:memory:'
    DATABASE_URL: str = (
        f'postgresql://{DB_USERNAME}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}'
        if ENVIRONMENT != Environment.TEST
        else SQLALCHEMY_TEST_DATABASE_URL
    )

    SECRET_KEY: str = os.getenv('SECRET_KEY', '')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', 7 * 24 * 60)
    )
    BCRYPT_ROUNDS: int = int(os.getenv('BCRYPT_ROUNDS', 12))

    # Changing the scheme invalidates every QR code already handed out
    CHECK_IN_SCHEME: str = os.getenv('CHECK_IN_SCHEME', 'ums-emas')

    ADMIN_EMAIL: str = os.getenv('ADMIN_EMAIL', 'admin@ums.edu.my')
    ADMIN_PASSWORD: str = os.getenv('ADMIN_PASSWORD')
    ADMIN_NAME: str = os.getenv('ADMIN_NAME', 'System Administrator')

    REMINDER_WINDOW_HOURS: int = int(os.getenv('REMINDER_WINDOW_HOURS', 24))

    SCANNER_API_URL: str = os.getenv('SCANNER_API_URL', 'http://localhost:8000')
    SCANNER_ACCESS_TOKEN: str = os.getenv('SCANNER_ACCESS_TOKEN')
    SCANNER_CAMERA_INDEX: int = int(os.getenv('SCANNER_CAMERA_INDEX', 0))
    SCANNER_INTERVAL_SECONDS: float = float(
        os.getenv('SCANNER_INTERVAL_SECONDS', 0.2)
    )


settings = Settings()
