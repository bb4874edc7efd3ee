"""HTTP client for the discover endpoint.

Respects ``DISCOVERY_API_TOKEN`` (through :class:`shared.settings.Settings`) to
authenticate requests. Page 1 is requested from params; later pages follow the
``more_projects`` URL returned by the previous page.

The HTTP calls are synchronous ``requests`` calls run in a worker thread so
that the event loop driving pagination stays responsive.
"""

import asyncio
from typing import Any, Dict, Optional

import requests

from shared.logger import get_logger
from shared.settings import Settings, get_settings

from .models import DiscoverEnvelope, DiscoveryParams


logger = get_logger(__name__)


class ApiClient:
    """Client for project discovery.

    :param settings: Settings to use; defaults to :func:`shared.settings.get_settings`.
    """

    discover_path: str = "/v1/discover"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    @property
    def discover_url(self) -> str:
        return f"{self.settings.api_base_url}{self.discover_path}"

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if self.settings.api_token:
            headers["Authorization"] = f"Bearer {self.settings.api_token}"
        return headers

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> DiscoverEnvelope:
        logger.debug(f"GET {url} params={params}")
        resp = requests.get(
            url,
            params=params,
            headers=self._headers(),
            timeout=self.settings.request_timeout,
        )
        resp.raise_for_status()
        envelope = DiscoverEnvelope.model_validate(resp.json())
        logger.debug(
            f"GET {url} -> {len(envelope.projects)} projects, more={envelope.more_projects_url}"
        )
        return envelope

    def discover(self, params: DiscoveryParams) -> DiscoverEnvelope:
        """Fetch the first page of projects matching ``params``.

        :param params: Discovery params; ``per_page`` falls back to settings.
        :returns: Parsed envelope.
        :raises requests.HTTPError: On a non-2xx response.
        :raises pydantic.ValidationError: If the payload is not a discover envelope.
        """
        query = params.query_params()
        query.setdefault("per_page", self.settings.per_page)
        return self._get(self.discover_url, query)

    def discover_at(self, path: str) -> DiscoverEnvelope:
        """Fetch a continuation page from a ``more_projects`` URL.

        Relative paths are resolved against the configured base URL.
        """
        url = path if path.startswith(("http://", "https://")) else (
            f"{self.settings.api_base_url}/{path.lstrip('/')}"
        )
        return self._get(url)

    async def fetch_projects(self, params: DiscoveryParams) -> DiscoverEnvelope:
        """Async variant of :meth:`discover`."""
        return await asyncio.to_thread(self.discover, params)

    async def fetch_projects_at(self, path: str) -> DiscoverEnvelope:
        """Async variant of :meth:`discover_at`."""
        return await asyncio.to_thread(self.discover_at, path)
