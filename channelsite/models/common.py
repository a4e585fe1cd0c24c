"""
Shared response models: health, readiness, provider status and errors.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ReadinessResponse(BaseModel):
    """Response model for /health/ready."""
    status: str
    database: str
    providers: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ProviderStatus(BaseModel):
    name: str
    configured: bool


class ProvidersStatusResponse(BaseModel):
    """Which LLM providers have a key, in fallback order."""
    providers: List[ProviderStatus]
    available: List[str]


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
