"""
Base service class.
Services contain business logic and coordinate repositories.
"""

from abc import ABC
from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class BaseService(ABC):
    """Base class for services that own a database session."""

    session: AsyncSession

    @asynccontextmanager
    async def unit_of_work(self, action: str) -> AsyncIterator[None]:
        """
        Run writes and commit them.

        Backend rejections raised while flushing or committing are rolled
        back and re-raised as PersistenceError, leaving prior state intact.

        Args:
            action: Short description used in messages, e.g. "create order"
        """
        try:
            yield
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.error(f"Failed to {action}: {e.orig}")
            raise PersistenceError(f"Failed to {action}: {e.orig}") from e
        except DBAPIError as e:
            await self.session.rollback()
            logger.error(f"Failed to {action}: {e.orig}")
            raise PersistenceError(f"Failed to {action}: {e.orig}", status_code=503) from e
