import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Bound to an engine by init_engine() when the app starts
SessionLocal = sessionmaker(autocommit=False, autoflush=False)
Base = declarative_base()


def init_engine(database_url):
    """Create the engine for ``database_url`` and bind ``SessionLocal`` to it."""
    logger.info("Connecting to database at %s", _mask_password(database_url))

    if database_url.startswith("sqlite"):
        # In-memory SQLite must share a single connection across sessions
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url, pool_pre_ping=True)

    SessionLocal.configure(bind=engine)
    return engine


def _mask_password(database_url):
    if "@" not in database_url or "://" not in database_url:
        return database_url
    scheme, rest = database_url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"
