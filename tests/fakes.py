"""Test doubles shared by the test modules."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from discovery.models import ApiUrls, DiscoverEnvelope, EnvelopeUrls, Project
from discovery.tracking import Event


async def settle(rounds: int = 10) -> None:
    """Let scheduled tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@dataclass
class Page:
    """Minimal envelope for engine tests."""

    items: List[Any]
    more: Optional[str] = None


class ScriptedApi:
    """Fake API whose requests stay pending until the test resolves them.

    Every call is recorded in ``calls`` as ``("params", params)`` or
    ``("path", path)`` and gets a future in ``pending`` (same index).
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.pending: List["asyncio.Future[Any]"] = []

    async def _request(self, call: Tuple[str, Any]) -> Any:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(call)
        self.pending.append(future)
        return await future

    async def load_with_params(self, params: Any) -> Any:
        return await self._request(("params", params))

    async def load_with_more_path(self, path: str) -> Any:
        return await self._request(("path", path))

    # Same coroutines under the discover client names
    fetch_projects = load_with_params
    fetch_projects_at = load_with_more_path

    @property
    def in_flight(self) -> int:
        return sum(1 for f in self.pending if not f.done())

    def respond(self, envelope: Any, index: int = -1) -> None:
        self.pending[index].set_result(envelope)

    def fail(self, error: Exception, index: int = -1) -> None:
        self.pending[index].set_exception(error)


def project(pid: int, name: Optional[str] = None) -> Project:
    return Project(id=pid, name=name or f"Project {pid}")


def envelope(projects: List[Project], more: Optional[str] = None) -> DiscoverEnvelope:
    return DiscoverEnvelope(
        projects=projects, urls=EnvelopeUrls(api=ApiUrls(more_projects=more))
    )


@dataclass
class RecordingTracker:
    """Tracking client keeping events for assertions."""

    events: List[Event] = field(default_factory=list)

    def track(self, event: Event) -> None:
        self.events.append(event)

    def names(self) -> List[str]:
        return [e.event_type.value for e in self.events]
