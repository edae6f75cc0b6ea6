"""
Data models and errors for the Flowise API layer.

The pydantic models describe the structured tool parameters; their JSON
schemas are what MCP clients see, and the MCP runtime validates calls
against them before any handler runs.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class FlowiseApiError(Exception):
    """Raised when the Flowise API answers with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Flowise API error ({status_code}): {body}")


class ChatflowType(str, Enum):
    """Kinds of flow that Flowise can store."""

    CHATFLOW = "CHATFLOW"
    AGENTFLOW = "AGENTFLOW"
    MULTIAGENT = "MULTIAGENT"
    ASSISTANT = "ASSISTANT"


class FlowData(BaseModel):
    """A chatflow graph. Node and edge contents are opaque to this server."""

    # Flowise also stores keys such as "viewport" alongside nodes/edges
    model_config = ConfigDict(extra="allow")

    nodes: list[Any] = Field(description="Array of node objects with id, position, type, and data")
    edges: list[Any] = Field(description="Array of edge objects connecting nodes")


class HistoryMessage(BaseModel):
    """One earlier turn of a conversation."""

    message: str
    type: Literal["apiMessage", "userMessage"]


class FileUpload(BaseModel):
    """A file attached to a prediction request."""

    data: str | None = Field(default=None, description="Base64 encoded file data")
    type: str = Field(description="File type (e.g., 'file', 'url')")
    name: str = Field(description="File name")
    mime: str = Field(description="MIME type (e.g., 'image/png', 'application/pdf')")
