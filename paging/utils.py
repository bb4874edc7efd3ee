"""Helpers shared by paginated views.

- :func:`retry_async` re-runs a flaky coroutine factory with backoff.
- :func:`concat` and :func:`concat_distinct` are page merge policies.

Example::

    from functools import partial
    from operator import attrgetter

    merge = partial(concat_distinct, key=attrgetter("id"))
    merged = merge(old_page_items, new_page_items)
"""

import asyncio
from typing import Awaitable, Callable, Hashable, List, Optional, Sequence, TypeVar

from shared.logger import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    base_delay: float = 0.0,
    factor: float = 2.0,
) -> T:
    """Retry an async operation with exponential backoff.

    :param func: Zero-argument coroutine factory to call on each attempt. Using a
                 factory defers creation of the coroutine until it is awaited,
                 avoiding "already awaited" errors on retries.
    :param attempts: Total attempts including the first call (>= 1). Default 3.
    :param base_delay: Initial delay in seconds before the next attempt. Default 0.
    :param factor: Multiplicative backoff factor after each failure. Default 2.0.
    :returns: The value returned by the successful call to ``func``.
    :raises Exception: Re-raises the last exception encountered if all attempts fail.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")
    delay = base_delay
    last_error: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            return await func()
        except Exception as error:  # noqa: BLE001
            last_error = error
            if attempt >= attempts:
                break
            logger.warning(
                f"Retryable error on attempt {attempt}/{attempts}: {error}. Sleeping {delay:.1f}s"
            )
            await asyncio.sleep(delay)
            delay *= factor
    assert last_error is not None
    raise last_error


def concat(xs: Sequence[T], ys: Sequence[T]) -> List[T]:
    """Append a page to the accumulated list."""
    return [*xs, *ys]


def concat_distinct(
    xs: Sequence[T],
    ys: Sequence[T],
    key: Optional[Callable[[T], Hashable]] = None,
) -> List[T]:
    """Append a page, skipping items already present.

    Order of first appearance is kept. Without ``key`` items are compared with
    ``==``; with ``key`` two items are duplicates when their keys are equal.
    """
    out: List[T] = []
    if key is None:
        for item in (*xs, *ys):
            if item not in out:
                out.append(item)
        return out

    seen = set()
    for item in (*xs, *ys):
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        out.append(item)
    return out
