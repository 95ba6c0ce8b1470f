import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import errors

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode:
        return pgcode == UNIQUE_VIOLATION
    return "unique constraint" in str(exc).lower()


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode:
        return pgcode == FOREIGN_KEY_VIOLATION
    return "foreign key constraint" in str(exc).lower()


def translate_integrity_error(
    exc: IntegrityError,
    conflict_message: str = "Resource already exists",
) -> errors.AppError:
    if _is_unique_violation(exc):
        return errors.Conflict(conflict_message, detail=str(exc.orig))
    if _is_foreign_key_violation(exc):
        return errors.ValidationError("Referenced record does not exist", detail=str(exc.orig))
    return errors.InternalError("Database constraint violated", detail=str(exc.orig))


@contextmanager
def unit_of_work(db: Session, conflict_message: str = "Resource already exists") -> Iterator[Session]:
    """
    Run a block of reads and writes as one transaction.

    Commits when the block finishes, rolls back on any exception. Database
    errors leave as ``AppError`` subclasses; ``AppError`` raised inside the
    block propagates unchanged after the rollback.
    """
    try:
        yield db
        db.commit()
    except errors.AppError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        raise translate_integrity_error(exc, conflict_message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database error, transaction rolled back.")
        raise errors.InternalError("Database operation failed", detail=str(exc)) from exc
    except Exception:
        db.rollback()
        raise
