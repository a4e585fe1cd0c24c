"""
Chat Routes - The website assistant for a project.

Rate limited per user; the X-RateLimit-* headers report the window.
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from channelsite.api.dependencies import CurrentUser, rate_limited_user, valid_project_id
from channelsite.core.exceptions import ValidationError
from channelsite.core.logging_config import get_logger
from channelsite.core.validators import validate_message
from channelsite.models.chat import ChatRequest, ChatResponse
from channelsite.models.common import ErrorResponse
from channelsite.services.chat_service import get_chat_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/projects",
    tags=["Chat"],
    responses={
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        503: {"model": ErrorResponse, "description": "All LLM providers failed"},
    }
)


@router.post(
    "/{project_id}/chat",
    response_model=ChatResponse,
    summary="Send a message to the website assistant",
    description="""
    Ask the assistant about the project's website. The last four messages
    of the project chat are sent as context, and both messages are stored.

    The response includes the detected feature category
    (video, branding, audience, mobile or empty).
    """
)
def send_message(
    request: ChatRequest,
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(rate_limited_user)
) -> ChatResponse:
    is_valid, sanitized_message, error = validate_message(request.message)
    if not is_valid:
        raise ValidationError(error, field="message")

    logger.info(f"Chat request: project={project_id[:8]}..., message={sanitized_message[:50]}...")

    result = get_chat_service().process_message(project_id, user.id, sanitized_message)

    return ChatResponse(
        reply=result.reply,
        feature=result.feature,
        provider=result.provider,
        timestamp=datetime.utcnow()
    )
