"""
HTTP client for the Flowise REST API.

Each request opens its own httpx.AsyncClient: there is no connection pool
or other state shared between calls beyond the immutable settings.
"""

import json
import logging
from typing import Any

import httpx

from flowise_mcp.api.base import ApiClient, HttpMethod
from flowise_mcp.api.models import FlowiseApiError
from flowise_mcp.config.settings import Settings

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class FlowiseApiClient(ApiClient):
    """
    Flowise API client backed by httpx.

    Args:
        settings: Application settings (base_url, api_key, timeout)
        transport: Optional httpx transport, e.g. httpx.MockTransport in tests
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = settings.base_url
        self._api_key = settings.api_key
        self._timeout = settings.timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def request(
        self,
        method: HttpMethod,
        endpoint: str,
        body: Any = None,
    ) -> Any:
        """Send one request to {base_url}/api/v1{endpoint} and return the parsed JSON."""
        url = f"{self._base_url}{API_PREFIX}{endpoint}"
        content = json.dumps(body) if body is not None else None

        logger.debug(f"{method} {url}")
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as http:
            response = await http.request(
                method, url, headers=self._headers(), content=content
            )

        if not response.is_success:
            raise FlowiseApiError(response.status_code, response.text)

        return response.json()
