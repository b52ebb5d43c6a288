import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from identity_core.shared.errors import ConflictError, InternalError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def database_errors(conflict_message: str = "Resource already exists"):
    """
    Translate store errors raised inside the block into domain errors.

    A unique constraint violation becomes ConflictError; anything else the
    driver raises becomes InternalError. AppErrors pass through untouched.
    """
    try:
        yield
    except IntegrityError as exc:
        logger.warning(f"Integrity violation: {exc.orig}")
        raise ConflictError(conflict_message, reason=str(exc.orig))
    except SQLAlchemyError as exc:
        logger.error(f"Database error: {exc}")
        raise InternalError("Database error", reason=str(exc))
