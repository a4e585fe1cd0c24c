"""
Request and Response models for the project Chat API.

These Pydantic models define the contract between client and server.
"""
from datetime import datetime
from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """
    Request model for POST /projects/{id}/chat.

    Attributes:
        message: What the user said to the website assistant.
    """
    message: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        description="The user's message",
        examples=["How can I show my latest videos on the home page?"]
    )


class ChatResponse(BaseModel):
    """Assistant reply plus the feature category the message was about."""
    reply: str = Field(..., description="The assistant's response")
    feature: str = Field(
        default="",
        description="Detected feature: video, branding, audience, mobile or empty"
    )
    provider: str = Field(..., description="LLM provider that answered")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
