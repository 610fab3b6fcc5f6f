# storefront/data/database.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.domain.errors import InternalError, ServiceError
from storefront.utils.settings import DATABASE_URL, SQL_ECHO
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=SQL_ECHO, connect_args=connect_args)

SessionLocal = sessionmaker(bind=engine, autoflush=False)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    # models must be imported so they register in Base.metadata
    import storefront.data.models  # noqa: F401

    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Runs the block as one unit of work: commit on success, rollback on any error.

    Domain errors are re-raised unchanged, database errors are logged and
    re-raised as InternalError with a generic message.
    """
    try:
        yield db
        db.commit()
    except ServiceError as e:
        db.rollback()
        logger.warning(f"Transaction rolled back: {e.code} {e.message}")
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Transaction failed on a database error")
        raise InternalError("Unexpected database error, please retry") from e
    except Exception:
        db.rollback()
        logger.exception("Transaction failed")
        raise
