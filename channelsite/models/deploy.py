"""
Request and Response models for Netlify deploys.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class DeployRequest(BaseModel):
    """
    Request model for POST /projects/{id}/deploy/netlify.

    site_name only applies when a new site is created.
    """
    site_name: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=63,
        pattern=r"^[a-z0-9][a-z0-9-]*$",
        examples=["test-kitchen-site"]
    )
    create_site: bool = False


class DeployResponse(BaseModel):
    success: bool
    site_url: str
    site_id: str
    deploy_id: str
    state: str
    created_site: bool
    deployed_files: int
    message: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
