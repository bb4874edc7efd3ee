"""FastAPI application hosting project search sessions.

Each session owns one :class:`discovery.search.SearchViewModel` (and so one
paginator); sessions share nothing but the HTTP client settings.
Sessions idle for longer than ``session_ttl`` are dropped, and creating a
session beyond ``max_sessions`` evicts the least recently used one.

- ``GET /healthz``: liveness probe
- ``POST /v1/search/sessions``: create a session and load popular projects
- ``GET /v1/search/sessions/{id}``: snapshot of the session outputs
- ``POST /v1/search/sessions/{id}/query``: forward typed text
- ``POST /v1/search/sessions/{id}/next``: request the next page
- ``POST /v1/search/sessions/{id}/select``: resolve the referrer tag of a project
- ``DELETE /v1/search/sessions/{id}``: discard a session

See also: :mod:`discovery.search`, :mod:`paging.paginator`.
"""

import time
import uuid
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Callable, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from discovery.client import ApiClient
from discovery.models import Project, RefTag
from discovery.search import ProjectsApi, SearchViewModel
from discovery.tracking import SearchTracker
from paging.errors import FetchFailed
from shared.logger import get_logger
from shared.scheduler import LoopScheduler, Scheduler
from shared.settings import Settings, get_settings


logger = get_logger(__name__)

MAX_ERRORS = 20


class QueryRequest(BaseModel):
    """Text currently typed in the search box (may be empty)."""

    text: str = Field(default="", max_length=256)


class SelectRequest(BaseModel):
    """Project tapped by the user, identified among the listed projects."""

    project_id: int


class SessionCreated(BaseModel):
    session_id: str


class Selection(BaseModel):
    """Selected project and the referrer tag to open it with."""

    project: Project
    ref_tag: RefTag


class SessionSnapshot(BaseModel):
    """Current outputs of a search session.

    :ivar query: Latest typed text.
    :ivar popular_projects: Latest popular list, ``None`` before the first page.
    :ivar search_projects: Latest search list, ``None`` before any search.
    :ivar loading_page: Latest page index dispatched.
    :ivar is_fetching: Whether a request is in flight.
    :ivar has_more: Whether a further page can be requested.
    :ivar errors: Most recent fetch failures, oldest first.
    """

    session_id: str
    query: str
    popular_projects: Optional[List[Project]]
    search_projects: Optional[List[Project]]
    loading_page: int
    is_fetching: bool
    has_more: bool
    errors: List[str]


@dataclass
class SearchSession:
    """One search view model plus the outputs the API reports."""

    session_id: str
    view_model: SearchViewModel
    errors: List[str] = field(default_factory=list)
    last_seen: float = 0.0

    def __post_init__(self) -> None:
        self.view_model.errors.subscribe(self._record_error)

    def _record_error(self, error: FetchFailed) -> None:
        self.errors.append(str(error))
        del self.errors[:-MAX_ERRORS]

    def snapshot(self) -> SessionSnapshot:
        vm = self.view_model
        state = vm.paginator.state
        return SessionSnapshot(
            session_id=self.session_id,
            query=vm.query,
            popular_projects=vm.popular_projects.get(),
            search_projects=vm.search_projects.get(),
            loading_page=state.page,
            is_fetching=vm.is_fetching.value,
            has_more=state.more_path is not None,
            errors=list(self.errors),
        )


def create_app(
    settings: Optional[Settings] = None,
    client_factory: Optional[Callable[[Settings], ProjectsApi]] = None,
    scheduler_factory: Callable[[], Scheduler] = LoopScheduler,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    """Build the API.

    :param settings: Settings; defaults to :func:`shared.settings.get_settings`.
    :param client_factory: Builds the discover client for a session.
    :param scheduler_factory: Builds the debounce time source for a session.
    :param clock: Monotonic time source used to expire idle sessions.
    """
    app = FastAPI(title="Discovery Search API", version="0.1.0")
    sessions: Dict[str, SearchSession] = {}
    app.state.sessions = sessions

    def _settings() -> Settings:
        return settings or get_settings()

    def _client(s: Settings) -> ProjectsApi:
        return client_factory(s) if client_factory else ApiClient(s)

    def _discard(session_id: str, reason: str) -> None:
        session = sessions.pop(session_id)
        session.view_model.close()
        logger.info(f"Search session {session_id} {reason}")

    def _expire_idle() -> None:
        ttl = _settings().session_ttl
        now = clock()
        for session_id, session in list(sessions.items()):
            if now - session.last_seen > ttl:
                _discard(session_id, "expired")

    def _session(session_id: str) -> SearchSession:
        _expire_idle()
        session = sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Unknown search session")
        session.last_seen = clock()
        return session

    @app.get("/healthz")
    async def health() -> dict[str, str]:
        """Liveness probe endpoint."""
        return {"status": "ok"}

    @app.post("/v1/search/sessions", response_model=SessionCreated, status_code=201)
    async def create_session() -> SessionCreated:
        s = _settings()
        _expire_idle()
        while len(sessions) >= s.max_sessions:
            oldest = min(sessions.values(), key=attrgetter("last_seen"))
            _discard(oldest.session_id, "evicted")

        session_id = uuid.uuid4().hex
        view_model = SearchViewModel(
            client=_client(s),
            scheduler=scheduler_factory(),
            tracker=SearchTracker(),
            debounce=s.search_debounce,
            retries=s.fetch_retries,
        )
        session = SearchSession(
            session_id=session_id, view_model=view_model, last_seen=clock()
        )
        sessions[session_id] = session
        view_model.start()
        logger.info(f"Search session {session_id} started")
        return SessionCreated(session_id=session_id)

    @app.get("/v1/search/sessions/{session_id}", response_model=SessionSnapshot)
    async def get_session(session_id: str, wait: bool = False) -> SessionSnapshot:
        """Return the session outputs.

        :param wait: Wait for in-flight page requests to settle first.
        """
        session = _session(session_id)
        if wait:
            await session.view_model.paginator.wait_until_idle()
        return session.snapshot()

    @app.post("/v1/search/sessions/{session_id}/query", response_model=SessionSnapshot)
    async def query(session_id: str, body: QueryRequest) -> SessionSnapshot:
        session = _session(session_id)
        session.view_model.search(body.text)
        return session.snapshot()

    @app.post("/v1/search/sessions/{session_id}/next", response_model=SessionSnapshot)
    async def next_page(session_id: str) -> SessionSnapshot:
        session = _session(session_id)
        session.view_model.next_page()
        return session.snapshot()

    @app.post("/v1/search/sessions/{session_id}/select", response_model=Selection)
    async def select(session_id: str, body: SelectRequest) -> Selection:
        """Resolve the referrer tag for a listed project.

        :raises fastapi.HTTPException: ``404`` if no listed project has that id.
        """
        session = _session(session_id)
        vm = session.view_model
        project = next((p for p in vm.projects if p.id == body.project_id), None)
        if project is None:
            raise HTTPException(status_code=404, detail="Project is not listed")

        vm.project_clicked(project)
        selected, ref_tag = vm.go_to_project.value
        return Selection(project=selected, ref_tag=ref_tag)

    @app.delete("/v1/search/sessions/{session_id}", status_code=204)
    async def delete_session(session_id: str) -> None:
        _session(session_id)
        _discard(session_id, "closed")

    return app


app = create_app()
