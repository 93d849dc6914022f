"""Shared mutation flow for every write the client performs.

Fire the request; on success invalidate the affected cache keys and toast;
on failure toast the server's message and leave the cache untouched.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from politiquensemble_live.cache import QueryCache, QueryKey
from politiquensemble_live.errors import APIError, LiveCoverageError
from politiquensemble_live.notifications import Notifier, Toast, ToastVariant

logger = logging.getLogger(__name__)

T = TypeVar("T")

ERROR_TITLE = "Erreur"


def describe_error(exc: LiveCoverageError) -> str:
    """User-facing text for a failed request."""
    if isinstance(exc, APIError):
        return exc.message
    return str(exc)


async def run_mutation(
    action: Callable[[], Awaitable[T]],
    *,
    cache: QueryCache,
    notifier: Notifier,
    invalidate: Sequence[QueryKey],
    success: Toast,
    failure_prefix: str = "",
) -> T:
    """Run a write and reconcile the cache with the server.

    Args:
        action: The request to send.
        cache: Query cache whose keys are invalidated on success.
        notifier: Receives the success or error toast.
        invalidate: Keys made stale (and refetched if observed) on success.
        success: Toast shown on success.
        failure_prefix: Text placed before the server's error message.

    Returns:
        Whatever ``action`` returned.

    Raises:
        LiveCoverageError: The request failed; the error toast was already sent.
    """
    try:
        result = await action()
    except LiveCoverageError as exc:
        logger.warning("Mutation failed: %s", exc)
        notifier.notify(
            Toast(
                title=ERROR_TITLE,
                description=f"{failure_prefix}{describe_error(exc)}",
                variant=ToastVariant.DESTRUCTIVE,
            )
        )
        raise

    await cache.invalidate(*invalidate)
    notifier.notify(success)
    return result
