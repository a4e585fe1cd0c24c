"""
Models module - Pydantic schemas for data validation.

This module defines:
- Request models: Input validation for API endpoints
- Response models: Output formatting for API responses
"""
from channelsite.models.common import (
    HealthResponse,
    ReadinessResponse,
    ProviderStatus,
    ProvidersStatusResponse,
    ErrorResponse,
)
from channelsite.models.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectListResponse,
    ProjectLimits,
    HistoryMessage,
    HistoryResponse,
)
from channelsite.models.chat import ChatRequest, ChatResponse
from channelsite.models.generation import (
    GenerateRequest,
    GenerateResponse,
    TargetedPromptRequest,
    TargetedPromptResponse,
)
from channelsite.models.channel import ChannelRequest, ChannelResponse, ChannelModel, VideoModel
from channelsite.models.sync import SyncRequest, SyncResponse, SyncStatusResponse, FileSyncResult
from channelsite.models.deploy import DeployRequest, DeployResponse

__all__ = [
    "HealthResponse",
    "ReadinessResponse",
    "ProviderStatus",
    "ProvidersStatusResponse",
    "ErrorResponse",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectListResponse",
    "ProjectLimits",
    "HistoryMessage",
    "HistoryResponse",
    "ChatRequest",
    "ChatResponse",
    "GenerateRequest",
    "GenerateResponse",
    "TargetedPromptRequest",
    "TargetedPromptResponse",
    "ChannelRequest",
    "ChannelResponse",
    "ChannelModel",
    "VideoModel",
    "SyncRequest",
    "SyncResponse",
    "SyncStatusResponse",
    "FileSyncResult",
    "DeployRequest",
    "DeployResponse",
]
