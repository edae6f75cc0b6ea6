"""
Flowise API Layer.

Provides the HTTP transport for the Flowise REST API and the prediction
client used to run chatflows, behind small abstract interfaces.
"""

from flowise_mcp.api.base import ApiClient, HttpMethod, PredictionClient
from flowise_mcp.api.client import FlowiseApiClient
from flowise_mcp.api.models import (
    ChatflowType,
    FileUpload,
    FlowData,
    FlowiseApiError,
    HistoryMessage,
)
from flowise_mcp.api.prediction import FlowisePredictionClient

__all__ = [
    "ApiClient",
    "ChatflowType",
    "FileUpload",
    "FlowData",
    "FlowiseApiClient",
    "FlowiseApiError",
    "FlowisePredictionClient",
    "HistoryMessage",
    "HttpMethod",
    "PredictionClient",
]
