"""
Generation Routes - Full website generation and targeted edits.
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from channelsite.api.dependencies import (
    CurrentUser,
    get_current_user,
    rate_limited_user,
    valid_project_id,
)
from channelsite.core.exceptions import ValidationError
from channelsite.core.logging_config import get_logger
from channelsite.core.validators import validate_message
from channelsite.models.common import ErrorResponse
from channelsite.models.generation import (
    GenerateRequest,
    GenerateResponse,
    TargetedPromptRequest,
    TargetedPromptResponse,
)
from channelsite.services.generation_service import get_generation_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/projects",
    tags=["Generation"],
    responses={
        404: {"model": ErrorResponse, "description": "Project not found"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    }
)


def _sanitized(user_request: str) -> str:
    is_valid, sanitized, error = validate_message(user_request)
    if not is_valid:
        raise ValidationError(error, field="user_request")
    return sanitized


@router.post(
    "/{project_id}/generate",
    response_model=GenerateResponse,
    summary="Generate or edit the project's website",
    description="""
    Runs the provider chain (Groq, then OpenRouter, then Together).

    - Existing page + identifiable component: targeted edit of that
      component only. Edits that change too much of the page are returned
      with valid=false and are NOT saved.
    - Otherwise: full page generation.
    - All providers down: a static template built from the channel data
      (provider="fallback", code_quality="standard").
    """
)
def generate_website(
    request: GenerateRequest,
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(rate_limited_user)
) -> GenerateResponse:
    user_request = _sanitized(request.user_request)

    result = get_generation_service().generate(
        project_id=project_id,
        user_id=user.id,
        user_request=user_request,
        channel=request.channel_data,
        current_code=request.current_code,
        preserve_design=request.preserve_design,
    )

    return GenerateResponse(
        success=True,
        generated_code=result.code,
        reply=result.reply,
        provider=result.provider,
        code_quality=result.code_quality,
        targeted=result.targeted,
        target_component=result.target_component,
        change_scope=result.change_scope,
        valid=result.valid,
        timestamp=datetime.utcnow()
    )


@router.post(
    "/{project_id}/targeted-prompt",
    response_model=TargetedPromptResponse,
    summary="Preview the targeted-edit prompt",
    description="Builds the component-level prompt for a request without calling any provider.",
    responses={422: {"model": ErrorResponse, "description": "No target component identified"}}
)
def targeted_prompt(
    request: TargetedPromptRequest,
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> TargetedPromptResponse:
    change = get_generation_service().preview_targeted_change(
        project_id, user.id, _sanitized(request.user_request)
    )
    return TargetedPromptResponse(
        prompt=change.prompt,
        preservation_rules=change.preservation_rules,
        target_component=change.target_component,
        change_scope=change.change_scope,
        component_map=change.component_map,
    )
