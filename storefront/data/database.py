# storefront/data/database.py
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from storefront.utils import settings
from storefront.utils.retry import db_startup_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def build_database_url() -> str | URL:
    if settings.DATABASE_URL:
        return settings.DATABASE_URL
    return URL.create(
        "postgresql+psycopg2",
        username=settings.DB_USER,
        password=settings.DB_PASSWORD or None,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
    )


def make_engine(url) -> Engine:
    url_str = str(url)
    if url_str.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url_str in ("sqlite://", "sqlite:///:memory:"):
            #one shared in-memory database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    #bounded pool, no overflow: callers queue up to pool_timeout instead of opening more connections
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=0,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
    )


engine = make_engine(build_database_url())
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    """
    FastAPI dependency: one session (and at most one pooled connection) per request.
    Rolled back on any error, always closed.
    """
    db: Session = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@db_startup_retry()
def wait_for_db() -> None:
    logger.info("checking_database_connectivity")
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
