"""Helpers that turn data-store failures into inline messages."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from familysync.domain.errors import DataFetchError, FamilySyncError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def surface_fetch_errors(message: str) -> Iterator[None]:
    """Re-raise unexpected data-store failures as DataFetchError."""
    try:
        yield
    except FamilySyncError:
        raise
    except Exception as exc:
        logger.exception(message)
        raise DataFetchError(message) from exc


def fetch_section(
    errors: list[str], message: str, fetch: Callable[[], list[T]]
) -> list[T]:
    """Run one screen section's query, recording a message instead of failing."""
    try:
        return fetch()
    except Exception:
        logger.exception(message)
        errors.append(message)
        return []


def collect_section(
    errors: list[str], message: str, result: list[T] | BaseException
) -> list[T]:
    """Unpack a section fetched with asyncio.gather(return_exceptions=True)."""
    if isinstance(result, BaseException):
        logger.error(message, exc_info=result)
        errors.append(message)
        return []
    return result
