"""
Unit tests for FlowiseToolHandlers.

Tests cover:
- success()/failure() result shapes
- Prediction variants (parameter pass-through, streaming forced off)
- Chatflow CRUD payload shaping
- Node discovery path encoding
- Error normalization: no handler ever raises
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from flowise_mcp.api.base import ApiClient, PredictionClient
from flowise_mcp.api.models import FlowiseApiError
from flowise_mcp.tools.handlers import (
    FlowiseToolHandlers,
    encode_path_segment,
    failure,
    success,
)

FLOW_DATA = {
    "nodes": [{"id": "chatOpenAI_0", "position": {"x": 0, "y": 0}, "type": "customNode", "data": {}}],
    "edges": [],
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def api():
    mock = AsyncMock(spec=ApiClient)
    mock.request.return_value = {}
    return mock


@pytest.fixture
def predictions():
    mock = AsyncMock(spec=PredictionClient)
    mock.create_prediction.return_value = {"text": "hello"}
    return mock


@pytest.fixture
def handlers(api, predictions):
    return FlowiseToolHandlers(api, predictions)


def _text(result) -> str:
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    return result.content[0].text


def _sent_body(api):
    """Return the body passed to the last api.request call."""
    args = api.request.await_args.args
    return args[2] if len(args) > 2 else None


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

class TestResponseHelpers:

    def test_success_pretty_prints_json(self):
        data = {"id": "1", "tags": ["a", "b"]}
        result = success(data)

        assert _text(result) == json.dumps(data, indent=2)
        assert not result.isError

    def test_success_omits_error_flag_when_dumped(self):
        dumped = success([1, 2]).model_dump(exclude_defaults=True)

        assert "isError" not in dumped
        assert dumped["content"][0]["text"] == "[\n  1,\n  2\n]"

    def test_success_keeps_non_ascii(self):
        assert _text(success({"name": "Café"})) == '{\n  "name": "Café"\n}'

    def test_failure_is_plain_text_with_error_flag(self):
        result = failure("Error listing chatflows: boom")

        assert _text(result) == "Error listing chatflows: boom"
        assert result.isError is True


class TestEncodePathSegment:

    @pytest.mark.parametrize("raw, encoded", [
        ("Tools & Utilities", "Tools%20%26%20Utilities"),
        ("custom/node", "custom%2Fnode"),
        ("Chat Models", "Chat%20Models"),
        ("chatOpenAI", "chatOpenAI"),
        ("a?b#c", "a%3Fb%23c"),
        # Left alone by encodeURIComponent as well
        ("it's(ok)!*~-_.", "it's(ok)!*~-_."),
    ])
    def test_matches_uri_component_encoding(self, raw, encoded):
        assert encode_path_segment(raw) == encoded


# ---------------------------------------------------------------------------
# Predictions
# ---------------------------------------------------------------------------

class TestPredictions:

    @pytest.mark.asyncio
    async def test_create_prediction_end_to_end(self, handlers, predictions):
        """Only supplied fields plus streaming=False reach the prediction client."""
        result = await handlers.create_prediction("abc", "hi")

        predictions.create_prediction.assert_awaited_once_with(
            {"chatflowId": "abc", "question": "hi", "streaming": False}
        )
        assert not result.isError
        assert "hello" in _text(result)
        assert json.loads(_text(result)) == {"text": "hello"}

    @pytest.mark.asyncio
    async def test_create_prediction_passes_optional_fields(self, handlers, predictions):
        await handlers.create_prediction(
            "abc", "hi", chat_id="session-1", override_config={"temperature": 0}
        )

        predictions.create_prediction.assert_awaited_once_with({
            "chatflowId": "abc",
            "question": "hi",
            "chatId": "session-1",
            "overrideConfig": {"temperature": 0},
            "streaming": False,
        })

    @pytest.mark.asyncio
    async def test_with_history(self, handlers, predictions):
        history = [
            {"message": "Hello", "type": "userMessage"},
            {"message": "Hi! How can I help?", "type": "apiMessage"},
        ]

        await handlers.create_prediction_with_history("abc", "And then?", history)

        params = predictions.create_prediction.await_args.args[0]
        assert params == {
            "chatflowId": "abc",
            "question": "And then?",
            "history": history,
            "streaming": False,
        }

    @pytest.mark.asyncio
    async def test_with_files(self, handlers, predictions):
        uploads = [{"data": "data:image/png;base64,iVBOR", "type": "file", "name": "a.png", "mime": "image/png"}]

        await handlers.create_prediction_with_files("abc", "What is this?", uploads, chat_id="c1")

        params = predictions.create_prediction.await_args.args[0]
        assert params["uploads"] == uploads
        assert params["chatId"] == "c1"
        assert params["streaming"] is False

    @pytest.mark.asyncio
    async def test_with_lead(self, handlers, predictions):
        await handlers.create_prediction_with_lead("abc", "hi", "lead@example.com")

        params = predictions.create_prediction.await_args.args[0]
        assert params["leadEmail"] == "lead@example.com"
        assert params["streaming"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("variant, extra", [
        ("create_prediction", ()),
        ("create_prediction_with_history", ([],)),
        ("create_prediction_with_files", ([],)),
        ("create_prediction_with_lead", ("lead@example.com",)),
    ])
    async def test_every_variant_forces_streaming_off(self, handlers, predictions, variant, extra):
        await getattr(handlers, variant)("abc", "hi", *extra)

        assert predictions.create_prediction.await_args.args[0]["streaming"] is False

    @pytest.mark.asyncio
    async def test_prediction_failure_is_wrapped(self, handlers, predictions):
        predictions.create_prediction.side_effect = RuntimeError("Network unreachable")

        result = await handlers.create_prediction("abc", "hi")

        assert result.isError is True
        assert _text(result) == "Error running chatflow: Network unreachable"

    @pytest.mark.asyncio
    async def test_empty_error_message_falls_back_to_type_name(self, handlers, predictions):
        predictions.create_prediction.side_effect = httpx.ReadTimeout("")

        result = await handlers.create_prediction("abc", "hi")

        assert _text(result) == "Error running chatflow: ReadTimeout"


# ---------------------------------------------------------------------------
# Chatflows
# ---------------------------------------------------------------------------

class TestListAndGetChatflows:

    @pytest.mark.asyncio
    async def test_list_chatflows_end_to_end(self, handlers, api):
        chatflows = [{"id": "1", "name": "Flow 1"}]
        api.request.return_value = chatflows

        result = await handlers.list_chatflows()

        api.request.assert_awaited_once_with("GET", "/chatflows")
        assert _text(result) == json.dumps(chatflows, indent=2)
        assert not result.isError

    @pytest.mark.asyncio
    async def test_get_chatflow(self, handlers, api):
        api.request.return_value = {"id": "123", "name": "Test Flow"}

        result = await handlers.get_chatflow("123")

        api.request.assert_awaited_once_with("GET", "/chatflows/123")
        assert json.loads(_text(result))["name"] == "Test Flow"

    @pytest.mark.asyncio
    async def test_get_chatflow_error(self, handlers, api):
        api.request.side_effect = FlowiseApiError(404, "Chatflow 999 not found")

        result = await handlers.get_chatflow("999")

        assert result.isError is True
        assert _text(result) == "Error getting chatflow: Flowise API error (404): Chatflow 999 not found"


class TestCreateChatflow:

    @pytest.mark.asyncio
    async def test_flow_data_is_stringified_and_type_defaults(self, handlers, api):
        api.request.return_value = {"id": "new-id", "name": "My Flow"}

        result = await handlers.create_chatflow("My Flow", FLOW_DATA)

        api.request.assert_awaited_once_with("POST", "/chatflows", {
            "name": "My Flow",
            "flowData": json.dumps(FLOW_DATA),
            "type": "CHATFLOW",
        })
        assert json.loads(_text(result))["id"] == "new-id"

    @pytest.mark.asyncio
    async def test_chatbot_config_omitted_when_not_provided(self, handlers, api):
        await handlers.create_chatflow("My Flow", FLOW_DATA)

        assert "chatbotConfig" not in _sent_body(api)

    @pytest.mark.asyncio
    async def test_explicit_type_and_chatbot_config(self, handlers, api):
        config = {"welcomeMessage": "Hi there"}

        await handlers.create_chatflow("Agent", FLOW_DATA, type="AGENTFLOW", chatbot_config=config)

        body = _sent_body(api)
        assert body["type"] == "AGENTFLOW"
        assert body["chatbotConfig"] == json.dumps(config)
        assert json.loads(body["flowData"]) == FLOW_DATA

    @pytest.mark.asyncio
    async def test_create_error(self, handlers, api):
        api.request.side_effect = FlowiseApiError(400, "Invalid flowData")

        result = await handlers.create_chatflow("Bad", FLOW_DATA)

        assert result.isError is True
        assert _text(result).startswith("Error creating chatflow: ")
        assert "Invalid flowData" in _text(result)


class TestUpdateChatflow:

    @pytest.mark.asyncio
    async def test_only_name(self, handlers, api):
        await handlers.update_chatflow("123", name="Renamed")

        api.request.assert_awaited_once_with("PUT", "/chatflows/123", {"name": "Renamed"})

    @pytest.mark.asyncio
    async def test_structured_fields_are_stringified(self, handlers, api):
        config = {"starterPrompts": {"0": {"prompt": "Hello"}}}

        await handlers.update_chatflow("123", flow_data=FLOW_DATA, chatbot_config=config)

        assert _sent_body(api) == {
            "flowData": json.dumps(FLOW_DATA),
            "chatbotConfig": json.dumps(config),
        }

    @pytest.mark.asyncio
    async def test_nothing_supplied_sends_empty_payload(self, handlers, api):
        await handlers.update_chatflow("123")

        api.request.assert_awaited_once_with("PUT", "/chatflows/123", {})

    @pytest.mark.asyncio
    async def test_empty_name_is_still_sent(self, handlers, api):
        """Presence is "not None", so falsy values like "" are kept."""
        await handlers.update_chatflow("123", name="")

        assert _sent_body(api) == {"name": ""}

    @pytest.mark.asyncio
    async def test_update_error(self, handlers, api):
        api.request.side_effect = FlowiseApiError(500, "Internal Server Error")

        result = await handlers.update_chatflow("123", name="x")

        assert result.isError is True
        assert _text(result) == "Error updating chatflow: Flowise API error (500): Internal Server Error"


class TestDeleteChatflow:

    @pytest.mark.asyncio
    async def test_delete_synthesizes_response(self, handlers, api):
        api.request.return_value = {"affected": 1, "raw": []}

        result = await handlers.delete_chatflow("123")

        api.request.assert_awaited_once_with("DELETE", "/chatflows/123")
        text = _text(result)
        assert '"success": true' in text
        assert '"deleted": "123"' in text
        assert json.loads(text) == {
            "success": True,
            "deleted": "123",
            "result": {"affected": 1, "raw": []},
        }

    @pytest.mark.asyncio
    async def test_delete_error(self, handlers, api):
        api.request.side_effect = FlowiseApiError(404, "Not found")

        result = await handlers.delete_chatflow("123")

        assert result.isError is True
        assert _text(result) == "Error deleting chatflow: Flowise API error (404): Not found"


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class TestNodes:

    @pytest.mark.asyncio
    async def test_list_nodes(self, handlers, api):
        nodes = [{"name": "chatOpenAI", "category": "Chat Models"}]
        api.request.return_value = nodes

        result = await handlers.list_nodes()

        api.request.assert_awaited_once_with("GET", "/nodes")
        assert json.loads(_text(result)) == nodes

    @pytest.mark.asyncio
    async def test_category_is_percent_encoded(self, handlers, api):
        await handlers.get_nodes_by_category("Tools & Utilities")

        api.request.assert_awaited_once_with("GET", "/nodes/category/Tools%20%26%20Utilities")

    @pytest.mark.asyncio
    async def test_node_name_is_percent_encoded(self, handlers, api):
        await handlers.get_node("custom/node")

        api.request.assert_awaited_once_with("GET", "/nodes/custom%2Fnode")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, args, prefix", [
        ("list_nodes", (), "Error listing nodes: "),
        ("get_nodes_by_category", ("Agents",), "Error getting nodes by category: "),
        ("get_node", ("chatOpenAI",), "Error getting node: "),
    ])
    async def test_node_errors(self, handlers, api, method, args, prefix):
        api.request.side_effect = FlowiseApiError(503, "Service Unavailable")

        result = await getattr(handlers, method)(*args)

        assert result.isError is True
        assert _text(result).startswith(prefix)
        assert "Service Unavailable" in _text(result)


class TestErrorBoundary:
    """No exception of any kind escapes a handler."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, args, prefix", [
        ("list_chatflows", (), "Error listing chatflows"),
        ("get_chatflow", ("1",), "Error getting chatflow"),
        ("create_chatflow", ("n", FLOW_DATA), "Error creating chatflow"),
        ("update_chatflow", ("1",), "Error updating chatflow"),
        ("delete_chatflow", ("1",), "Error deleting chatflow"),
        ("list_nodes", (), "Error listing nodes"),
        ("get_nodes_by_category", ("c",), "Error getting nodes by category"),
        ("get_node", ("n",), "Error getting node"),
    ])
    async def test_network_errors_become_error_results(self, handlers, api, method, args, prefix):
        api.request.side_effect = httpx.ConnectError("Connection refused")

        result = await getattr(handlers, method)(*args)

        assert result.isError is True
        assert _text(result) == f"{prefix}: Connection refused"
