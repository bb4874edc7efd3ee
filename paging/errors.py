"""Error types reported by :class:`paging.paginator.ApiPaginator`."""

from enum import Enum
from typing import Any, Optional


class PaginationError(Exception):
    """Base class for pagination errors."""


class FetchFailed(PaginationError):
    """A page request failed after all retries.

    The original exception is chained as ``__cause__``.

    :ivar params: Params of the pagination session the request belonged to.
    :ivar more_path: Continuation path used, or ``None`` for a first page.
    :ivar page: 1-based page index that was being loaded.
    """

    def __init__(
        self,
        message: str,
        *,
        params: Any = None,
        more_path: Optional[str] = None,
        page: int = 1,
    ) -> None:
        super().__init__(message)
        self.params = params
        self.more_path = more_path
        self.page = page


class FetchOutcome(str, Enum):
    """What happened to a dispatched page request once it settled."""

    APPLIED = "applied"
    FAILED = "failed"
    # Response belonged to a session replaced by a later start-over; dropped
    SUPERSEDED = "superseded"
