"""Search screen pipeline: debounced query text to paginated project lists.

Typed text is split into two params streams feeding one shared
:class:`paging.ApiPaginator`:

- non-blank text, once it has been stable for the debounce window, becomes
  ``DiscoveryParams(term=text)``;
- blank text (and :meth:`SearchViewModel.start`) becomes the default popular
  params.

Pages are routed by the params of the session that produced them: popular
sessions publish on ``popular_projects``, term sessions on ``search_projects``.
A selected project is paired with a :class:`discovery.models.RefTag` that
depends on the query text and on whether it heads the current list.

Example::

    vm = SearchViewModel(client=ApiClient())
    vm.search_projects.subscribe(render)
    vm.start()
    vm.search("kick")
"""

from functools import partial
from operator import attrgetter
from typing import Awaitable, List, Optional, Protocol, Tuple

from paging import ApiPaginator, BehaviorSignal, Debouncer, Signal, concat_distinct
from shared.logger import get_logger
from shared.scheduler import LoopScheduler, Scheduler

from .models import DiscoverEnvelope, DiscoveryParams, Project, RefTag, Sort
from .tracking import SearchTracker


logger = get_logger(__name__)

DEFAULT_SORT = Sort.POPULAR
DEFAULT_PARAMS = DiscoveryParams(sort=DEFAULT_SORT)
SEARCH_DEBOUNCE = 0.3


class ProjectsApi(Protocol):
    def fetch_projects(self, params: DiscoveryParams) -> Awaitable[DiscoverEnvelope]: ...

    def fetch_projects_at(self, path: str) -> Awaitable[DiscoverEnvelope]: ...


def ref_tag_for(query: str, project: Project, projects: List[Project]) -> RefTag:
    """Pick the referrer tag for a project selected from ``projects``.

    The first-position check uses identity, so a project equal in value to the
    head of the list but held elsewhere does not count as featured.

    A whitespace-only query counts as empty and gets the popular tags, the same
    way it keeps the popular list on screen.
    """
    featured = bool(projects) and project is projects[0]
    if not query.strip():
        return RefTag.SEARCH_POPULAR_FEATURED if featured else RefTag.SEARCH_POPULAR
    return RefTag.SEARCH_FEATURED if featured else RefTag.SEARCH


class SearchViewModel:
    """Inputs, outputs and wiring of the project search screen.

    :param client: Source of discover envelopes (see :class:`ProjectsApi`).
    :param scheduler: Time source for the search debounce; defaults to the running loop.
    :param tracker: Telemetry facade; defaults to logging events.
    :param debounce: Debounce window in seconds for typed terms.
    :param retries: Retries per page request.
    """

    def __init__(
        self,
        *,
        client: ProjectsApi,
        scheduler: Optional[Scheduler] = None,
        tracker: Optional[SearchTracker] = None,
        debounce: float = SEARCH_DEBOUNCE,
        retries: int = 2,
    ) -> None:
        self.tracker = tracker or SearchTracker()

        # Inputs
        self._search: Signal[str] = Signal("search")
        self._next_page: Signal[None] = Signal("next_page")
        self._project_clicked: Signal[Project] = Signal("project_clicked")

        # Outputs
        self.popular_projects: BehaviorSignal[List[Project]] = BehaviorSignal(
            "popular_projects"
        )
        self.search_projects: BehaviorSignal[List[Project]] = BehaviorSignal(
            "search_projects"
        )
        self.go_to_project: BehaviorSignal[Tuple[Project, RefTag]] = BehaviorSignal(
            "go_to_project"
        )

        self._query = ""
        self._projects: List[Project] = []

        self._params: Signal[DiscoveryParams] = Signal("params")

        self._term_debouncer: Debouncer[str] = Debouncer(
            debounce, scheduler or LoopScheduler(), name="search_term"
        )
        self._term_debouncer.output.subscribe(
            lambda term: self._params.emit(DiscoveryParams(term=term))
        )

        self.paginator: ApiPaginator[Project, DiscoverEnvelope, DiscoveryParams] = (
            ApiPaginator(
                next_page=self._next_page,
                start_over_with=self._params,
                envelope_to_items=attrgetter("projects"),
                envelope_to_more_path=attrgetter("more_projects_url"),
                load_with_params=client.fetch_projects,
                load_with_more_path=client.fetch_projects_at,
                concater=partial(concat_distinct, key=attrgetter("id")),
                clear_when_starting_over=True,
                retries=retries,
            )
        )
        self.errors = self.paginator.errors
        self.loading_page = self.paginator.loading_page
        self.is_fetching = self.paginator.is_fetching

        self._search.subscribe(self._on_search)
        self._project_clicked.subscribe(self._on_project_clicked)
        self.paginator.paginated_data.subscribe(self._route)
        self.paginator.loading_page.subscribe(self._track_page)

    # Inputs

    def search(self, text: str) -> None:
        """Call when the text in the search box changes."""
        self._search.emit(text)

    def next_page(self) -> None:
        """Call when the list is scrolled near its end."""
        self._next_page.emit(None)

    def project_clicked(self, project: Project) -> None:
        """Call when a project in the results is tapped."""
        self._project_clicked.emit(project)

    # Lifecycle

    def start(self) -> None:
        """Track the screen view and load the popular projects."""
        self.tracker.track_search_view()
        self._params.emit(DEFAULT_PARAMS)

    def close(self) -> None:
        self._term_debouncer.cancel()
        self.paginator.close()

    @property
    def query(self) -> str:
        return self._query

    @property
    def projects(self) -> List[Project]:
        """Latest list delivered by the paginator, whichever output it went to."""
        return self._projects

    # Wiring

    def _on_search(self, text: str) -> None:
        self._query = text
        term = text.strip()
        if term:
            self._term_debouncer.push(term)
            return

        self._term_debouncer.cancel()
        self.search_projects.emit([])
        self.tracker.track_cleared_search_term()
        self._params.emit(DEFAULT_PARAMS)

    def _route(self, projects: List[Project]) -> None:
        self._projects = projects
        params = self.paginator.state.current_params
        if params is not None and params.sort == DEFAULT_SORT:
            self.popular_projects.emit(projects)
        else:
            self.search_projects.emit(projects)

    def _track_page(self, page: int) -> None:
        params = self.paginator.state.current_params
        if params is not None and params.term:
            self.tracker.track_search_results(params.term, page)

    def _on_project_clicked(self, project: Project) -> None:
        projects = self._projects
        if not projects:
            logger.debug(f"Ignoring click on project {project.id}: no projects listed")
            return
        self.go_to_project.emit((project, ref_tag_for(self._query, project, projects)))
