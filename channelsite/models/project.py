"""
Request and Response models for the Projects API.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

# Columns that are NOT NULL in the projects table
NON_NULLABLE_UPDATES = ("name", "status", "verified")


def strip_text(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class ProjectCreate(BaseModel):
    """
    Request model for POST /projects.

    When youtube_url is given (and a YouTube key is configured) the
    channel is fetched and stored with the project.
    """
    name: str = Field(..., min_length=1, max_length=255, examples=["My Cooking Channel"])
    description: Optional[str] = Field(default=None, max_length=2000)
    youtube_url: Optional[str] = Field(
        default=None,
        max_length=500,
        examples=["https://www.youtube.com/@mkbhd"]
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        # Before the length check, so "   " is rejected
        return strip_text(value)


class ProjectUpdate(BaseModel):
    """Request model for PATCH /projects/{id}; unset fields are left alone."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    youtube_url: Optional[str] = Field(default=None, max_length=500)
    source_code: Optional[str] = None
    status: Optional[str] = Field(default=None, pattern="^(active|archived)$")
    verified: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return strip_text(value)

    @field_validator(*NON_NULLABLE_UPDATES)
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    youtube_url: Optional[str] = None
    channel_data: Optional[Dict[str, Any]] = None
    source_code: Optional[str] = None
    status: str
    github_url: Optional[str] = None
    netlify_url: Optional[str] = None
    verified: bool = False
    created_at: datetime
    updated_at: datetime


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
    count: int


class ProjectLimits(BaseModel):
    """Per-user project quota."""
    count: int
    max_projects: int
    remaining: int
    can_create: bool
    usage_percentage: float


class HistoryMessage(BaseModel):
    role: str
    content: str
    timestamp: datetime
    metadata: Dict[str, Any] = Field(default_factory=dict)


class HistoryResponse(BaseModel):
    project_id: str
    messages: List[HistoryMessage]
    count: int
