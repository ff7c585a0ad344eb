import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from sqlmodel import Session

from ....exceptions import Unavailable

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str, session: Optional[Session] = None) -> Iterator[None]:
    """Translate connection loss and timeouts into Unavailable."""
    try:
        yield
    except (OperationalError, PoolTimeoutError) as e:
        _rollback(session)
        logger.error(f"Store unavailable during {operation}: {e}")
        raise Unavailable("Database unavailable") from e
    except DBAPIError as e:
        _rollback(session)
        if e.connection_invalidated:
            logger.error(f"Store connection lost during {operation}: {e}")
            raise Unavailable("Database unavailable") from e
        raise


def _rollback(session: Optional[Session]) -> None:
    if session is None:
        return
    try:
        session.rollback()
    except Exception as e:
        logger.warning(f"Rollback failed: {e}")
