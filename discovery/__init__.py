"""Project discovery: models, HTTP client, telemetry and the search pipeline."""

from .client import ApiClient
from .models import DiscoverEnvelope, DiscoveryParams, Project, RefTag, Sort
from .search import DEFAULT_PARAMS, SearchViewModel, ref_tag_for
from .tracking import SearchTracker

__all__ = [
    "ApiClient",
    "DEFAULT_PARAMS",
    "DiscoverEnvelope",
    "DiscoveryParams",
    "Project",
    "RefTag",
    "SearchTracker",
    "SearchViewModel",
    "Sort",
    "ref_tag_for",
]
