"""
Prediction execution client.

Runs a chatflow through Flowise's prediction endpoint
(POST /api/v1/prediction/{chatflowId}) using the same transport,
headers, and error handling as the rest of the API.
"""

import logging
from typing import Any

from flowise_mcp.api.base import ApiClient, PredictionClient

logger = logging.getLogger(__name__)


class FlowisePredictionClient(PredictionClient):
    """
    Prediction client layered over an ApiClient.

    The chatflow ID selects the endpoint; every other parameter whose value
    is not None becomes part of the JSON body.

    Args:
        api: Transport used for the HTTP exchange
    """

    def __init__(self, api: ApiClient):
        self._api = api

    async def create_prediction(self, params: dict[str, Any]) -> Any:
        chatflow_id = params["chatflowId"]
        payload = {
            key: value
            for key, value in params.items()
            if key != "chatflowId" and value is not None
        }
        logger.debug(f"Running prediction on chatflow {chatflow_id}")
        return await self._api.request("POST", f"/prediction/{chatflow_id}", payload)
