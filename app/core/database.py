from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import settings
import logging

# Configure logging
logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    """
    Creates a SQLAlchemy engine for the given URL.

    SQLite connections are shared across the request thread pool, so the
    same-thread check is disabled for them.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


# Log connection info (without credentials)
logger.info(f"Connecting to database: {settings.DATABASE_URL.split('@')[-1]}")

engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """
    Dependency for getting a database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
