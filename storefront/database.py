"""
Database engine, session factory and transaction helpers
"""
import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """Pool options for the configured backend"""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every checkout sees an empty database
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session

    The session never commits on its own: services decide where the
    transaction ends.
    """
    db = SessionLocal()
    try:
        yield db
    except OperationalError as e:
        db.rollback()
        if e.connection_invalidated:
            logger.error("Database connection lost, resetting connection pool", exc_info=True)
            engine.dispose()
        else:
            logger.error("Operational database error", exc_info=True)
        raise
    except SQLAlchemyError:
        logger.error("Unhandled SQLAlchemy error", exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Run a block as one transaction

    Commits when the block exits normally and rolls back on any exception,
    including domain errors raised to abort the block.
    """
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise


@retry(
    stop=stop_after_attempt(settings.DB_CONNECT_RETRIES),
    wait=wait_exponential(multiplier=settings.DB_RETRY_DELAY, min=1, max=10),
    retry=retry_if_exception_type(OperationalError),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True
)
def init_db() -> None:
    """Create every table; retried while the database is still starting"""
    # Register all models on Base before create_all
    from storefront.login_service.models import user  # noqa: F401
    from storefront.product_service.models import product  # noqa: F401
    from storefront.order_service.models import order  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema initialized")
