"""
Request and Response models for website generation and targeted edits.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """
    Request model for POST /projects/{id}/generate.

    channel_data and current_code default to the project's stored values.
    """
    user_request: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        examples=["Make the subscribe button bigger and red"]
    )
    preserve_design: bool = True
    channel_data: Optional[Dict[str, Any]] = None
    current_code: Optional[str] = None


class GenerateResponse(BaseModel):
    success: bool = True
    generated_code: str
    reply: str
    provider: str
    code_quality: str = Field(..., description="high, good or standard")
    targeted: bool = False
    target_component: Optional[str] = None
    change_scope: Optional[str] = None
    valid: bool = True
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class TargetedPromptRequest(BaseModel):
    user_request: str = Field(..., min_length=1, max_length=4000)


class TargetedPromptResponse(BaseModel):
    """The prompt a targeted edit would send, without calling a provider."""
    prompt: str
    preservation_rules: List[str]
    target_component: str
    change_scope: str
    component_map: Dict[str, Dict[str, str]]
