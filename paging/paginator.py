"""Incremental pagination over a paged HTTP API.

:class:`ApiPaginator` turns two input signals into aggregated page data:

- ``start_over_with`` carries params; a value different from the current params
  discards the current session and loads page 1 through ``load_with_params``.
  Equal params are ignored while the session is loading or holds items.
- ``next_page`` asks for the following page, loaded through
  ``load_with_more_path`` with the continuation path of the last envelope.

State is mutated only from callbacks running on the event loop that owns the
paginator. Requests are the only suspension points: they run as tasks, and
their result is applied only when no start-over happened since dispatch.

Example::

    paginator = ApiPaginator(
        next_page=next_page,
        start_over_with=params,
        envelope_to_items=lambda env: env.projects,
        envelope_to_more_path=lambda env: env.urls.api.more_projects,
        load_with_params=client.fetch_projects,
        load_with_more_path=client.fetch_projects_at,
        clear_when_starting_over=True,
    )
    paginator.paginated_data.subscribe(render)
    params.emit(DiscoveryParams(sort=Sort.POPULAR))
"""

import asyncio
from dataclasses import dataclass, field
from typing import (
    Awaitable,
    Callable,
    Generic,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypeVar,
)

from shared.logger import get_logger

from .errors import FetchFailed, FetchOutcome
from .signals import BehaviorSignal, Signal
from .utils import concat, retry_async


logger = get_logger(__name__)

ItemT = TypeVar("ItemT")
EnvelopeT = TypeVar("EnvelopeT")
ParamsT = TypeVar("ParamsT")


@dataclass
class PaginatorState(Generic[ItemT, ParamsT]):
    """Mutable session state owned by one paginator.

    :ivar current_params: Params of the current session, ``None`` before the first start-over.
    :ivar more_path: Continuation path for the next page; ``None`` once exhausted.
    :ivar is_loading: Whether a request of the current session is in flight.
    :ivar items: Items accumulated since the last start-over.
    :ivar page: 1-based index of the latest page requested in this session.
    :ivar generation: Incremented on each start-over; stale responses carry an older one.
    """

    current_params: Optional[ParamsT] = None
    more_path: Optional[str] = None
    is_loading: bool = False
    items: List[ItemT] = field(default_factory=list)
    page: int = 1
    generation: int = 0


class ApiPaginator(Generic[ItemT, EnvelopeT, ParamsT]):
    """Drive "load more" pagination for one list view.

    :param next_page: Signal fired to request the next page (payload ignored).
    :param start_over_with: Signal of params; a changed value restarts pagination.
    :param envelope_to_items: Extract the page items from an envelope.
    :param envelope_to_more_path: Extract the continuation path, ``None`` on the last page.
    :param load_with_params: Coroutine function loading page 1 for params.
    :param load_with_more_path: Coroutine function loading a page from a continuation path.
    :param concater: Merge policy ``(accumulated, page) -> accumulated``.
    :param clear_when_starting_over: Emit an empty list as soon as params change
                                     instead of keeping old items until page 1 arrives.
    :param retries: Extra attempts per request before it is reported as failed.
    :param retry_delay: Delay before the first retry, doubled for each further one.
    """

    def __init__(
        self,
        *,
        next_page: Signal[None],
        start_over_with: Signal[ParamsT],
        envelope_to_items: Callable[[EnvelopeT], Sequence[ItemT]],
        envelope_to_more_path: Callable[[EnvelopeT], Optional[str]],
        load_with_params: Callable[[ParamsT], Awaitable[EnvelopeT]],
        load_with_more_path: Callable[[str], Awaitable[EnvelopeT]],
        concater: Callable[[Sequence[ItemT], Sequence[ItemT]], List[ItemT]] = concat,
        clear_when_starting_over: bool = False,
        retries: int = 2,
        retry_delay: float = 0.0,
    ) -> None:
        self._envelope_to_items = envelope_to_items
        self._envelope_to_more_path = envelope_to_more_path
        self._load_with_params = load_with_params
        self._load_with_more_path = load_with_more_path
        self._concater = concater
        self._clear_when_starting_over = clear_when_starting_over
        self._retries = retries
        self._retry_delay = retry_delay

        self._state: PaginatorState[ItemT, ParamsT] = PaginatorState()
        self._tasks: Set["asyncio.Task[FetchOutcome]"] = set()

        self.paginated_data: Signal[List[ItemT]] = Signal("paginated_data")
        self.loading_page: Signal[int] = Signal("loading_page")
        self.is_fetching: BehaviorSignal[bool] = BehaviorSignal("is_fetching", False)
        self.errors: Signal[FetchFailed] = Signal("errors")

        self._subscriptions = [
            start_over_with.subscribe(self._start_over),
            next_page.subscribe(lambda _: self._next_page()),
        ]

    @property
    def state(self) -> PaginatorState[ItemT, ParamsT]:
        """Current session state. Treat as read-only."""
        return self._state

    def close(self) -> None:
        """Detach from the input signals. In-flight results are ignored afterwards."""
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []
        self._state.generation += 1
        self._state.is_loading = False

    async def wait_until_idle(self) -> None:
        """Wait until every dispatched request has settled, superseded ones included."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _start_over(self, params: ParamsT) -> None:
        state = self._state
        if params == state.current_params and (state.is_loading or state.items):
            logger.debug(f"Params unchanged ({params!r}); keeping the current session")
            return

        state.generation += 1
        state.current_params = params
        state.more_path = None
        state.page = 1
        state.items = []
        logger.debug(f"Starting over (generation {state.generation}) with {params!r}")

        if self._clear_when_starting_over:
            self.paginated_data.emit([])

        self._dispatch(lambda: self._load_with_params(params), more_path=None)

    def _next_page(self) -> None:
        state = self._state
        if state.current_params is None:
            logger.debug("Next page requested before any params; ignoring")
            return
        if state.is_loading:
            logger.debug(f"Next page dropped: page {state.page} still loading")
            return
        if state.more_path is None:
            logger.debug("Next page dropped: no more pages")
            return

        state.page += 1
        more_path = state.more_path
        self._dispatch(lambda: self._load_with_more_path(more_path), more_path=more_path)

    def _dispatch(
        self, request: Callable[[], Awaitable[EnvelopeT]], *, more_path: Optional[str]
    ) -> None:
        state = self._state
        state.is_loading = True
        self.is_fetching.emit(True)
        self.loading_page.emit(state.page)

        task = asyncio.get_running_loop().create_task(
            self._load(request, state.generation, state.page, more_path)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _load(
        self,
        request: Callable[[], Awaitable[EnvelopeT]],
        generation: int,
        page: int,
        more_path: Optional[str],
    ) -> FetchOutcome:
        try:
            envelope = await retry_async(
                request, attempts=self._retries + 1, base_delay=self._retry_delay
            )
        except Exception as error:  # noqa: BLE001
            return self._fail(error, generation, page, more_path)

        if generation != self._state.generation:
            logger.debug(f"Dropping superseded page {page} (generation {generation})")
            return FetchOutcome.SUPERSEDED

        try:
            new_items, next_path, merged = self._extract(envelope)
        except (AttributeError, LookupError, TypeError, ValueError) as error:
            return self._fail(error, generation, page, more_path)
        finally:
            self._release(generation)
        return self._apply(new_items, next_path, merged, page)

    def _extract(
        self, envelope: EnvelopeT
    ) -> Tuple[List[ItemT], Optional[str], List[ItemT]]:
        new_items = list(self._envelope_to_items(envelope))
        # An empty page ends pagination even if the envelope links further
        next_path = self._envelope_to_more_path(envelope) if new_items else None
        return new_items, next_path, self._concater(self._state.items, new_items)

    def _release(self, generation: int) -> None:
        """Clear the loading flag of session ``generation`` if it still holds it."""
        state = self._state
        if generation == state.generation and state.is_loading:
            state.is_loading = False
            self.is_fetching.emit(False)

    def _apply(
        self,
        new_items: List[ItemT],
        next_path: Optional[str],
        merged: List[ItemT],
        page: int,
    ) -> FetchOutcome:
        state = self._state
        state.more_path = next_path
        state.items = merged
        logger.debug(
            f"Page {page} applied: +{len(new_items)} items, {len(state.items)} total, "
            f"more={'yes' if state.more_path else 'no'}"
        )
        self.paginated_data.emit(list(state.items))
        return FetchOutcome.APPLIED

    def _fail(
        self, error: Exception, generation: int, page: int, more_path: Optional[str]
    ) -> FetchOutcome:
        state = self._state
        if generation != state.generation:
            logger.debug(f"Dropping failure of superseded page {page}: {error}")
            return FetchOutcome.SUPERSEDED

        self._release(generation)
        logger.warning(f"Failed to load page {page}: {error}")
        failure = FetchFailed(
            f"Failed to load page {page}: {error}",
            params=state.current_params,
            more_path=more_path,
            page=page,
        )
        failure.__cause__ = error
        self.errors.emit(failure)
        return FetchOutcome.FAILED
