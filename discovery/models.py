"""Typed models for project discovery and search.

This module defines Pydantic models for request params, projects and the
paged discover envelope, plus the referrer tags attached to selections.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Sort(str, Enum):
    """Sort orders accepted by the discover endpoint."""

    MAGIC = "magic"
    POPULAR = "popularity"
    NEWEST = "newest"
    END_DATE = "end_date"
    MOST_FUNDED = "most_funded"


class RefTag(str, Enum):
    """Referrer tags describing where a project was selected from."""

    SEARCH = "search"
    SEARCH_FEATURED = "search-featured"
    SEARCH_POPULAR = "search-popular"
    SEARCH_POPULAR_FEATURED = "search-popular-featured"


class DiscoveryParams(BaseModel):
    """What to fetch from the discover endpoint.

    Instances are immutable and compare by value.

    Parameters
    ----------
    term:
        Free-text search term.
    sort:
        Sort order. ``Sort.POPULAR`` marks the default, non-search listing.
    category_id:
        Optional category filter.
    staff_picks, starred, backed:
        Optional boolean filters.
    per_page:
        Optional page size; the client falls back to its configured default.

    Examples
    --------
    .. code-block:: python

        DiscoveryParams(term="kick").query_params()  # {'term': 'kick'}
    """

    model_config = ConfigDict(frozen=True)

    term: Optional[str] = None
    sort: Optional[Sort] = None
    category_id: Optional[int] = None
    staff_picks: Optional[bool] = None
    starred: Optional[bool] = None
    backed: Optional[bool] = None
    per_page: Optional[int] = Field(default=None, ge=1, le=100)

    def query_params(self) -> Dict[str, Any]:
        """Return the HTTP query parameters for these params."""
        params: Dict[str, Any] = {}
        if self.term:
            params["term"] = self.term
        if self.sort is not None:
            params["sort"] = self.sort.value
        if self.category_id is not None:
            params["category_id"] = self.category_id
        for flag in ("staff_picks", "starred", "backed"):
            value = getattr(self, flag)
            if value is not None:
                params[flag] = int(value)
        if self.per_page is not None:
            params["per_page"] = self.per_page
        return params


class Project(BaseModel):
    """A project as listed by the discover endpoint.

    Notes
    -----
    ``id`` is the stable identity used to de-duplicate projects across pages.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    blurb: Optional[str] = None
    slug: Optional[str] = None
    state: Optional[str] = None
    goal: Optional[float] = None
    pledged: Optional[float] = None
    backers_count: Optional[int] = None


class ApiUrls(BaseModel):
    more_projects: Optional[str] = None


class EnvelopeUrls(BaseModel):
    api: ApiUrls = Field(default_factory=ApiUrls)


class DiscoverEnvelope(BaseModel):
    """One page of discover results.

    ``urls.api.more_projects`` is the continuation URL of the next page and is
    absent on the last page.
    """

    projects: List[Project] = Field(default_factory=list)
    urls: EnvelopeUrls = Field(default_factory=EnvelopeUrls)

    @property
    def more_projects_url(self) -> Optional[str]:
        return self.urls.api.more_projects or None
