"""
Base classes for Flowise API clients.

The tool handlers depend only on these interfaces, so the HTTP-backed
implementations can be swapped for test doubles.
"""

from abc import ABC, abstractmethod
from typing import Any, Literal

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]


class ApiClient(ABC):
    """
    Abstract base class for direct Flowise REST API access.

    One call performs exactly one HTTP exchange against the API root
    (``{base_url}/api/v1``).
    """

    @abstractmethod
    async def request(
        self,
        method: HttpMethod,
        endpoint: str,
        body: Any = None,
    ) -> Any:
        """
        Send a request to the Flowise API.

        Args:
            method: HTTP method
            endpoint: Path below /api/v1, starting with "/" (e.g. "/chatflows/123")
            body: JSON-serializable request body, or None to send no body

        Returns:
            The parsed JSON response body, unmodified

        Raises:
            FlowiseApiError: If the API answers with a non-success status
        """
        pass


class PredictionClient(ABC):
    """Abstract base class for running chatflow predictions."""

    @abstractmethod
    async def create_prediction(self, params: dict[str, Any]) -> Any:
        """
        Run a chatflow once and return its result.

        Args:
            params: Prediction parameters. Must contain ``chatflowId`` and
                ``question``; may contain ``chatId``, ``overrideConfig``,
                ``history``, ``uploads``, ``leadEmail`` and ``streaming``.

        Returns:
            The raw prediction result from Flowise
        """
        pass
