from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy_utils import create_database, database_exists

from .config import settings
from .logger import logger

Base = declarative_base()


def _engine_options(url: str) -> dict:
    if url.startswith('sqlite'):
        return {'connect_args': {'check_same_thread': False}}
    return {'pool_pre_ping': True}


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_db():
    # Registers every table on Base.metadata
    from app.core import models  # noqa: F401

    if not database_exists(engine.url):
        logger.info('Database %s does not exist. Creating...', engine.url.database)
        create_database(engine.url)
        logger.info('Database created successfully!')

    Base.metadata.create_all(bind=engine)
    logger.info('Tables ready: %s', ', '.join(sorted(Base.metadata.tables)))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
