import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cueleague.core.config import settings
from cueleague.core.exceptions import InternalStoreError, LeagueError, StoreConflict

logger = logging.getLogger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync endpoints on a threadpool
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None) -> None:
    # Models must be imported so they register with Base.metadata
    import cueleague.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def check_connection(bind=None) -> None:
    """Fail fast if the store cannot be reached."""
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.exception("Database unreachable at startup")
        raise InternalStoreError(f"Database unreachable: {exc}") from exc


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Runs a block of writes as one unit: commit on success, rollback on any
    failure. Persistence failures surface as ``InternalStoreError``.
    """
    try:
        yield db
        db.commit()
    except LeagueError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Write rejected by a uniqueness constraint: %s", exc.orig)
        raise StoreConflict(f"Conflicting write: {exc.orig}") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store operation failed, transaction rolled back")
        raise InternalStoreError(f"Store operation failed: {exc}") from exc
