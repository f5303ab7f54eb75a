import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from config import DATABASE_URL

logger = logging.getLogger(__name__)

Base = declarative_base()
db_engine = None
SessionLocal = None


def init_db(database_url: str = None):
    """Create the engine and session factory, then the tables"""
    global db_engine, SessionLocal
    db_url = (database_url or DATABASE_URL).replace("postgres://", "postgresql://", 1)
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    db_engine = create_engine(db_url, connect_args=connect_args)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    # Register every table on Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=db_engine)
    logger.info("Database initialized (%s)", db_engine.url.get_backend_name())
    return db_engine


def get_db():
    """Request-scoped database session"""
    if SessionLocal is None:
        init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
