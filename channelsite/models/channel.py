"""
Request and Response models for the YouTube channel lookup.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator


class ChannelRequest(BaseModel):
    """Either a channel URL or a bare identifier (UC id, handle, name)."""
    url: Optional[str] = Field(default=None, examples=["https://www.youtube.com/@mkbhd"])
    identifier: Optional[str] = Field(default=None, examples=["UCBJycsmduvYEL83R_U4JriQ"])
    fetch_videos: bool = True
    max_results: int = Field(default=12, ge=1, le=50)

    @model_validator(mode="after")
    def _require_source(self):
        if not self.url and not self.identifier:
            raise ValueError("Provide either url or identifier")
        return self


class VideoModel(BaseModel):
    id: str
    title: str
    description: str = ""
    thumbnail: str = ""
    published_at: str = ""
    view_count: int = 0
    duration: str = "PT0M0S"
    embed_url: str = ""


class ChannelModel(BaseModel):
    id: str
    title: str
    description: str = ""
    thumbnail: str = ""
    subscriber_count: int = 0
    video_count: int = 0
    view_count: int = 0
    custom_url: str = ""
    videos: List[VideoModel] = Field(default_factory=list)


class ChannelResponse(BaseModel):
    channel: ChannelModel
