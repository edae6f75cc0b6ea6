"""
FastMCP tool server: the registration table for all Flowise tools.

Each tool declares its parameters with type hints and pydantic Field
descriptions. FastMCP turns those into the JSON schema MCP clients see and
validates incoming calls against it, so handlers only ever receive
well-formed arguments. The tool functions themselves are thin: they convert
protocol names (camelCase) and pydantic models into plain values and hand
off to FlowiseToolHandlers.

Tool naming follows the Flowise API:
    - create_prediction*  → run a chatflow (four variants)
    - *_chatflow(s)       → chatflow CRUD
    - *_node(s)*          → node catalog discovery (read-only)
"""

from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, ToolAnnotations
from pydantic import EmailStr, Field

from flowise_mcp.api.base import ApiClient, PredictionClient
from flowise_mcp.api.client import FlowiseApiClient
from flowise_mcp.api.models import ChatflowType, FileUpload, FlowData, HistoryMessage
from flowise_mcp.api.prediction import FlowisePredictionClient
from flowise_mcp.config.settings import Settings
from flowise_mcp.tools.handlers import FlowiseToolHandlers

SERVER_NAME = "flowise-mcp"

# Shared parameter declarations
ChatflowId = Annotated[str, Field(description="The ID of the chatflow to run")]
Question = Annotated[str, Field(description="The question or prompt to send to the chatflow")]
ChatId = Annotated[
    str | None,
    Field(description="Optional session ID for conversation continuity"),
]
OverrideConfig = Annotated[
    dict[str, Any] | None,
    Field(description="Optional configuration overrides for the chatflow"),
]

_READ_ONLY = ToolAnnotations(readOnlyHint=True, openWorldHint=True)
_DESTRUCTIVE = ToolAnnotations(destructiveHint=True, openWorldHint=True)


def build_server(
    settings: Settings,
    api: ApiClient | None = None,
    predictions: PredictionClient | None = None,
) -> FastMCP:
    """
    Build the MCP server with every Flowise tool registered.

    Args:
        settings: Application settings, used to build default clients
        api: REST client override (defaults to FlowiseApiClient)
        predictions: Prediction client override (defaults to
            FlowisePredictionClient over ``api``)

    Returns:
        A FastMCP server ready to run
    """
    if api is None:
        api = FlowiseApiClient(settings)
    if predictions is None:
        predictions = FlowisePredictionClient(api)
    handlers = FlowiseToolHandlers(api, predictions)

    server = FastMCP(SERVER_NAME)

    # -- Predictions ------------------------------------------------------

    @server.tool(
        name="create_prediction",
        description="Run a Flowise chatflow with a question and get a response. "
                    "Use this to interact with AI workflows configured in Flowise.",
        structured_output=False,
    )
    async def create_prediction(
        chatflowId: ChatflowId,
        question: Question,
        chatId: ChatId = None,
        overrideConfig: OverrideConfig = None,
    ) -> CallToolResult:
        return await handlers.create_prediction(
            chatflowId, question, chat_id=chatId, override_config=overrideConfig
        )

    @server.tool(
        name="create_prediction_with_history",
        description="Run a Flowise chatflow with conversation history for "
                    "context-aware responses.",
        structured_output=False,
    )
    async def create_prediction_with_history(
        chatflowId: ChatflowId,
        question: Question,
        history: Annotated[
            list[HistoryMessage],
            Field(description="Previous messages in the conversation"),
        ],
        chatId: ChatId = None,
        overrideConfig: OverrideConfig = None,
    ) -> CallToolResult:
        return await handlers.create_prediction_with_history(
            chatflowId,
            question,
            [message.model_dump() for message in history],
            chat_id=chatId,
            override_config=overrideConfig,
        )

    @server.tool(
        name="create_prediction_with_files",
        description="Run a Flowise chatflow with file attachments (images, documents, etc.).",
        structured_output=False,
    )
    async def create_prediction_with_files(
        chatflowId: ChatflowId,
        question: Question,
        uploads: Annotated[
            list[FileUpload],
            Field(description="Files to upload with the request"),
        ],
        chatId: ChatId = None,
        overrideConfig: OverrideConfig = None,
    ) -> CallToolResult:
        return await handlers.create_prediction_with_files(
            chatflowId,
            question,
            [upload.model_dump(exclude_none=True) for upload in uploads],
            chat_id=chatId,
            override_config=overrideConfig,
        )

    @server.tool(
        name="create_prediction_with_lead",
        description="Run a Flowise chatflow and capture a lead email for the conversation.",
        structured_output=False,
    )
    async def create_prediction_with_lead(
        chatflowId: ChatflowId,
        question: Question,
        leadEmail: Annotated[EmailStr, Field(description="Email address of the lead/user")],
        chatId: ChatId = None,
        overrideConfig: OverrideConfig = None,
    ) -> CallToolResult:
        return await handlers.create_prediction_with_lead(
            chatflowId,
            question,
            str(leadEmail),
            chat_id=chatId,
            override_config=overrideConfig,
        )

    # -- Chatflows --------------------------------------------------------

    @server.tool(
        name="list_chatflows",
        description="List all chatflows available in Flowise. "
                    "Returns chatflow IDs, names, and metadata.",
        annotations=_READ_ONLY,
        structured_output=False,
    )
    async def list_chatflows() -> CallToolResult:
        return await handlers.list_chatflows()

    @server.tool(
        name="get_chatflow",
        description="Get a specific chatflow by ID, including its full "
                    "configuration with nodes and edges.",
        annotations=_READ_ONLY,
        structured_output=False,
    )
    async def get_chatflow(
        chatflowId: Annotated[str, Field(description="The ID of the chatflow to retrieve")],
    ) -> CallToolResult:
        return await handlers.get_chatflow(chatflowId)

    @server.tool(
        name="create_chatflow",
        description="Create a new chatflow in Flowise with specified nodes "
                    "and edges configuration.",
        structured_output=False,
    )
    async def create_chatflow(
        name: Annotated[str, Field(description="Name of the chatflow")],
        flowData: Annotated[
            FlowData,
            Field(description="The flow configuration with nodes and edges"),
        ],
        type: Annotated[
            ChatflowType,
            Field(description="Type of chatflow"),
        ] = ChatflowType.CHATFLOW,
        chatbotConfig: Annotated[
            dict[str, Any] | None,
            Field(description="Optional chatbot configuration"),
        ] = None,
    ) -> CallToolResult:
        return await handlers.create_chatflow(
            name,
            flowData.model_dump(),
            type=ChatflowType(type).value,
            chatbot_config=chatbotConfig,
        )

    @server.tool(
        name="update_chatflow",
        description="Update an existing chatflow's configuration, nodes, edges, or metadata.",
        structured_output=False,
    )
    async def update_chatflow(
        chatflowId: Annotated[str, Field(description="The ID of the chatflow to update")],
        name: Annotated[str | None, Field(description="New name for the chatflow")] = None,
        flowData: Annotated[
            FlowData | None,
            Field(description="Updated flow configuration"),
        ] = None,
        chatbotConfig: Annotated[
            dict[str, Any] | None,
            Field(description="Updated chatbot configuration"),
        ] = None,
    ) -> CallToolResult:
        return await handlers.update_chatflow(
            chatflowId,
            name=name,
            flow_data=flowData.model_dump() if flowData is not None else None,
            chatbot_config=chatbotConfig,
        )

    @server.tool(
        name="delete_chatflow",
        description="Delete a chatflow from Flowise. This action is irreversible.",
        annotations=_DESTRUCTIVE,
        structured_output=False,
    )
    async def delete_chatflow(
        chatflowId: Annotated[str, Field(description="The ID of the chatflow to delete")],
    ) -> CallToolResult:
        return await handlers.delete_chatflow(chatflowId)

    # -- Nodes ------------------------------------------------------------

    @server.tool(
        name="list_nodes",
        description="List all available node types in Flowise that can be "
                    "used to build chatflows.",
        annotations=_READ_ONLY,
        structured_output=False,
    )
    async def list_nodes() -> CallToolResult:
        return await handlers.list_nodes()

    @server.tool(
        name="get_nodes_by_category",
        description="Get all nodes in a specific category "
                    "(e.g., 'Chat Models', 'Agents', 'Memory', 'Tools').",
        annotations=_READ_ONLY,
        structured_output=False,
    )
    async def get_nodes_by_category(
        category: Annotated[
            str,
            Field(description="The category name (e.g., 'Chat Models', 'Agents', "
                              "'Memory', 'Chains', 'Tools')"),
        ],
    ) -> CallToolResult:
        return await handlers.get_nodes_by_category(category)

    @server.tool(
        name="get_node",
        description="Get detailed information about a specific node type by its name.",
        annotations=_READ_ONLY,
        structured_output=False,
    )
    async def get_node(
        nodeName: Annotated[
            str,
            Field(description="The name of the node (e.g., 'chatOpenAI', 'conversationalAgent')"),
        ],
    ) -> CallToolResult:
        return await handlers.get_node(nodeName)

    return server
