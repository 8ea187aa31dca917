import typing as t

import structlog

from .exceptions import NotFoundError, PersistenceError

logger = structlog.get_logger(__name__)

T = t.TypeVar("T")


async def call_store(operation: str, call: t.Awaitable[T], **context: t.Any) -> T:
    """Await a store call, translating collaborator failures into `PersistenceError`.

    `NotFoundError` and `PersistenceError` raised by a store pass through unchanged; anything
    else, including other app exceptions, is wrapped. There is no retry: a failed call is
    terminal for that attempt.
    """
    try:
        return await call
    except (NotFoundError, PersistenceError):
        raise
    except Exception as exc:
        logger.warning("questionnaire_store_call_failed", operation=operation, error=repr(exc), **context)
        raise PersistenceError(f"Could not {operation} the questionnaire: {exc}", cause=exc) from exc
