"""
Tool handlers for Flowise MCP operations.

Each handler receives parameters that the MCP runtime has already validated,
performs at most one downstream call, and turns the outcome into a
CallToolResult. Handlers never raise: every failure becomes an error result
whose text reads "Error <doing> <thing>: <cause>", so the calling LLM always
gets a well-formed answer it can reason about.

Data flow:
    MCP tool call → FlowiseToolHandlers.<tool>() → ApiClient / PredictionClient
                                                        ↓
                                  success() / failure() → CallToolResult
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

from mcp.types import CallToolResult, TextContent

from flowise_mcp.api.base import ApiClient, PredictionClient

logger = logging.getLogger(__name__)

DEFAULT_CHATFLOW_TYPE = "CHATFLOW"

# Characters JavaScript's encodeURIComponent leaves alone besides [A-Za-z0-9_.-~]
_URI_COMPONENT_SAFE = "!*'()"


def success(data: Any) -> CallToolResult:
    """Wrap data as pretty-printed JSON in a single text content item."""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    return CallToolResult(content=[TextContent(type="text", text=text)])


def failure(message: str) -> CallToolResult:
    """Wrap an error message in a single text content item flagged as an error."""
    return CallToolResult(
        content=[TextContent(type="text", text=message)],
        isError=True,
    )


def encode_path_segment(value: str) -> str:
    """Percent-encode a value for use as one URL path segment."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def _describe(error: Exception) -> str:
    # Some httpx errors (e.g. timeouts) stringify to ""
    return str(error) or type(error).__name__


class FlowiseToolHandlers:
    """
    The set of Flowise tool handlers, one method per MCP tool.

    Args:
        api: Client for direct REST calls (chatflows, nodes)
        predictions: Client used to run chatflows
    """

    def __init__(self, api: ApiClient, predictions: PredictionClient):
        self._api = api
        self._predictions = predictions

    async def _run(
        self,
        error_prefix: str,
        operation: Callable[[], Awaitable[Any]],
    ) -> CallToolResult:
        try:
            return success(await operation())
        except Exception as e:
            message = f"{error_prefix}: {_describe(e)}"
            logger.warning(message)
            return failure(message)

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    async def _predict(self, params: dict[str, Any]) -> CallToolResult:
        """
        Run a prediction with streaming forced off.

        MCP tool results are a single payload, so incremental delivery is
        never requested whatever the caller passed. Parameters left as None
        are not forwarded.
        """
        request = {key: value for key, value in params.items() if value is not None}
        request["streaming"] = False
        logger.info(f"Running chatflow {request['chatflowId']}")

        async def operation():
            return await self._predictions.create_prediction(request)

        return await self._run("Error running chatflow", operation)

    async def create_prediction(
        self,
        chatflow_id: str,
        question: str,
        chat_id: str | None = None,
        override_config: dict[str, Any] | None = None,
    ) -> CallToolResult:
        return await self._predict({
            "chatflowId": chatflow_id,
            "question": question,
            "chatId": chat_id,
            "overrideConfig": override_config,
        })

    async def create_prediction_with_history(
        self,
        chatflow_id: str,
        question: str,
        history: list[dict[str, Any]],
        chat_id: str | None = None,
        override_config: dict[str, Any] | None = None,
    ) -> CallToolResult:
        return await self._predict({
            "chatflowId": chatflow_id,
            "question": question,
            "history": history,
            "chatId": chat_id,
            "overrideConfig": override_config,
        })

    async def create_prediction_with_files(
        self,
        chatflow_id: str,
        question: str,
        uploads: list[dict[str, Any]],
        chat_id: str | None = None,
        override_config: dict[str, Any] | None = None,
    ) -> CallToolResult:
        return await self._predict({
            "chatflowId": chatflow_id,
            "question": question,
            "uploads": uploads,
            "chatId": chat_id,
            "overrideConfig": override_config,
        })

    async def create_prediction_with_lead(
        self,
        chatflow_id: str,
        question: str,
        lead_email: str,
        chat_id: str | None = None,
        override_config: dict[str, Any] | None = None,
    ) -> CallToolResult:
        return await self._predict({
            "chatflowId": chatflow_id,
            "question": question,
            "leadEmail": lead_email,
            "chatId": chat_id,
            "overrideConfig": override_config,
        })

    # ------------------------------------------------------------------
    # Chatflow management
    # ------------------------------------------------------------------

    async def list_chatflows(self) -> CallToolResult:
        logger.info("Listing chatflows")
        return await self._run(
            "Error listing chatflows",
            lambda: self._api.request("GET", "/chatflows"),
        )

    async def get_chatflow(self, chatflow_id: str) -> CallToolResult:
        logger.info(f"Getting chatflow {chatflow_id}")
        return await self._run(
            "Error getting chatflow",
            lambda: self._api.request("GET", f"/chatflows/{chatflow_id}"),
        )

    async def create_chatflow(
        self,
        name: str,
        flow_data: dict[str, Any],
        type: str | None = None,
        chatbot_config: dict[str, Any] | None = None,
    ) -> CallToolResult:
        """
        Create a chatflow.

        Flowise stores flowData and chatbotConfig as JSON strings, so both are
        serialized here; chatbotConfig is left out entirely when not given.
        """
        logger.info(f"Creating chatflow {name!r}")

        async def operation():
            payload = {
                "name": name,
                "flowData": json.dumps(flow_data),
                "type": type or DEFAULT_CHATFLOW_TYPE,
            }
            if chatbot_config is not None:
                payload["chatbotConfig"] = json.dumps(chatbot_config)
            return await self._api.request("POST", "/chatflows", payload)

        return await self._run("Error creating chatflow", operation)

    async def update_chatflow(
        self,
        chatflow_id: str,
        name: str | None = None,
        flow_data: dict[str, Any] | None = None,
        chatbot_config: dict[str, Any] | None = None,
    ) -> CallToolResult:
        """
        Update a chatflow with only the fields the caller supplied.

        A field counts as supplied when it is not None, so an empty name is
        still sent. Supplying nothing sends an empty object.
        """
        logger.info(f"Updating chatflow {chatflow_id}")

        async def operation():
            payload: dict[str, Any] = {}
            if name is not None:
                payload["name"] = name
            if flow_data is not None:
                payload["flowData"] = json.dumps(flow_data)
            if chatbot_config is not None:
                payload["chatbotConfig"] = json.dumps(chatbot_config)
            return await self._api.request("PUT", f"/chatflows/{chatflow_id}", payload)

        return await self._run("Error updating chatflow", operation)

    async def delete_chatflow(self, chatflow_id: str) -> CallToolResult:
        logger.info(f"Deleting chatflow {chatflow_id}")

        async def operation():
            result = await self._api.request("DELETE", f"/chatflows/{chatflow_id}")
            return {"success": True, "deleted": chatflow_id, "result": result}

        return await self._run("Error deleting chatflow", operation)

    # ------------------------------------------------------------------
    # Node discovery
    # ------------------------------------------------------------------

    async def list_nodes(self) -> CallToolResult:
        logger.info("Listing nodes")
        return await self._run(
            "Error listing nodes",
            lambda: self._api.request("GET", "/nodes"),
        )

    async def get_nodes_by_category(self, category: str) -> CallToolResult:
        # Category names contain spaces and "&" (e.g. "Tools & Utilities")
        logger.info(f"Getting nodes in category {category!r}")
        return await self._run(
            "Error getting nodes by category",
            lambda: self._api.request(
                "GET", f"/nodes/category/{encode_path_segment(category)}"
            ),
        )

    async def get_node(self, node_name: str) -> CallToolResult:
        logger.info(f"Getting node {node_name!r}")
        return await self._run(
            "Error getting node",
            lambda: self._api.request("GET", f"/nodes/{encode_path_segment(node_name)}"),
        )
