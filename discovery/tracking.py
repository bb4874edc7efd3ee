"""Telemetry events emitted by the search screen.

The delivery of events is left to a :class:`TrackingClient`; the default
:class:`LoggingTrackingClient` writes them to the log.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from shared.logger import get_logger

logger = get_logger(__name__)


class EventType(Enum):
    """Event names reported by search."""

    SEARCH_VIEW = "Discover Search"
    SEARCH_RESULTS = "Discover Search Results"
    SEARCH_RESULTS_LOAD_MORE = "Discover Search Results Load More"
    CLEARED_SEARCH_TERM = "Discover Search Cleared"


@dataclass
class Event:
    """Tracked event record.

    :ivar event_type: Category of the event.
    :ivar data: Optional payload with event-specific fields.
    :ivar created_at: Creation timestamp.
    """

    event_type: EventType
    data: Optional[Dict[str, Any]] = None
    created_at: datetime = field(default_factory=datetime.now)


class TrackingClient(Protocol):
    def track(self, event: Event) -> None: ...


class LoggingTrackingClient:
    """Write events to the application log."""

    def track(self, event: Event) -> None:
        payload = event.data or {}
        logger.info(f"track {event.event_type.value} {payload}")


class SearchTracker:
    """Search-specific facade over a :class:`TrackingClient`."""

    def __init__(self, client: Optional[TrackingClient] = None) -> None:
        self.client = client or LoggingTrackingClient()

    def track_search_view(self) -> None:
        self.client.track(Event(EventType.SEARCH_VIEW))

    def track_cleared_search_term(self) -> None:
        self.client.track(Event(EventType.CLEARED_SEARCH_TERM))

    def track_search_results(self, term: str, page_count: int) -> None:
        """Report that ``page_count`` pages are being loaded for ``term``."""
        event_type = (
            EventType.SEARCH_RESULTS
            if page_count == 1
            else EventType.SEARCH_RESULTS_LOAD_MORE
        )
        self.client.track(
            Event(event_type, {"search_term": term, "page_count": page_count})
        )
