"""
Service-level exceptions, mapped to the JSON error envelope in backend.main
"""
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.utils.logger import get_logger

logger = get_logger(__name__)


class LeafServiceError(Exception):
    """Base class for errors raised by the service layer"""
    status_code = 500

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(LeafServiceError):
    """Missing or malformed required input"""
    status_code = 400


class NotFoundError(LeafServiceError):
    """No matching supplier or record"""
    status_code = 404


class PersistenceError(LeafServiceError):
    """Store unavailable or a query failed"""
    status_code = 500


@asynccontextmanager
async def store_guard(db: AsyncSession, operation: str):
    """Turn driver/ORM failures into PersistenceError after rolling back"""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(f"Database error while {operation}: {exc}")
        await db.rollback()
        raise PersistenceError(f"Database error while {operation}", detail=str(exc)) from exc
