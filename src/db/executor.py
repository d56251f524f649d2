"""Run a unit of database work against a pooled connection.

Every handler funnels its single statement through :func:`do_query`, which
is the one place driver and pool errors are logged and turned into
:class:`~core.exceptions.InternalError`.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session

from core.exceptions import InternalError

logger = logging.getLogger(__name__)

R = TypeVar("R")

Work = Callable[[Session], R]


def _query_error(err: Exception) -> InternalError:
    logger.error("error querying database: %r", err, exc_info=err)
    return InternalError(message=f"internal error: {err!r}")


async def do_query(session_maker: async_sessionmaker[AsyncSession], work: Work[R]) -> R:
    """Run ``work`` with exclusive use of one pooled connection.

    ``work`` is a plain synchronous callable receiving an ORM ``Session``; it is
    executed through ``AsyncSession.run_sync`` so driver I/O never blocks the
    event loop. The statement runs in its own transaction, committed on success;
    closing the session rolls back anything uncommitted and returns the
    connection to the pool.

    Raises:
        InternalError: the pool could not hand out a connection, or ``work``
            (or the commit) failed with a SQLAlchemy/driver error.
    """
    async with session_maker() as session:
        try:
            # Check out eagerly so acquisition failures are reported as such
            await session.connection()
        except (SQLAlchemyError, OSError) as err:
            logger.error("failed to get a db connection from the pool: %r", err, exc_info=err)
            raise InternalError(message=f"internal error: {err!r}") from err

        try:
            result = await session.run_sync(work)
            await session.commit()
        except SQLAlchemyError as err:
            raise _query_error(err) from err
        return result
