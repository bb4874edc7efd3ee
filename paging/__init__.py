"""Generic incremental pagination for "load more" list views."""

from .errors import FetchFailed, FetchOutcome, PaginationError
from .paginator import ApiPaginator, PaginatorState
from .signals import BehaviorSignal, Debouncer, Signal, SignalStream, Subscription
from .utils import concat, concat_distinct, retry_async

__all__ = [
    "ApiPaginator",
    "BehaviorSignal",
    "Debouncer",
    "FetchFailed",
    "FetchOutcome",
    "PaginationError",
    "PaginatorState",
    "Signal",
    "SignalStream",
    "Subscription",
    "concat",
    "concat_distinct",
    "retry_async",
]
