"""
Project Routes - CRUD, live preview and chat history for projects.
"""
import html

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse

from channelsite.api.dependencies import CurrentUser, get_current_user, valid_project_id
from channelsite.core.logging_config import get_logger
from channelsite.memory import get_memory_manager
from channelsite.models.common import ErrorResponse
from channelsite.models.project import (
    HistoryMessage,
    HistoryResponse,
    ProjectCreate,
    ProjectLimits,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from channelsite.services.chat_service import get_chat_service
from channelsite.services.project_service import get_project_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/projects",
    tags=["Projects"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing user identity"},
        404: {"model": ErrorResponse, "description": "Project not found"},
    }
)

PLACEHOLDER_PAGE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>{name}</title></head>
<body style="font-family: system-ui, sans-serif; display: flex; align-items: center; justify-content: center; height: 100vh; margin: 0; color: #666;">
    <div style="text-align: center;">
        <h1>{name}</h1>
        <p>No website generated yet. Describe your site in the chat to get started.</p>
    </div>
</body>
</html>"""


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=201,
    summary="Create a project",
    description="""
    Create a website project. Free users can own up to FREE_PROJECT_LIMIT
    projects, admins up to ADMIN_PROJECT_LIMIT.

    With a youtube_url (and a configured YouTube key) the channel data is
    fetched and stored with the project.
    """
)
def create_project(
    request: ProjectCreate,
    user: CurrentUser = Depends(get_current_user)
) -> ProjectResponse:
    project = get_project_service().create_project(user.id, user.role, request)
    return ProjectResponse.model_validate(project)


@router.get("", response_model=ProjectListResponse, summary="List the caller's projects")
def list_projects(user: CurrentUser = Depends(get_current_user)) -> ProjectListResponse:
    projects = get_project_service().list_projects(user.id)
    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(p) for p in projects],
        count=len(projects),
    )


@router.get("/limits", response_model=ProjectLimits, summary="Project quota for the caller")
def project_limits(user: CurrentUser = Depends(get_current_user)) -> ProjectLimits:
    return ProjectLimits(**get_project_service().get_limits(user.id, user.role))


@router.get("/{project_id}", response_model=ProjectResponse, summary="Get a project")
def get_project(
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> ProjectResponse:
    return ProjectResponse.model_validate(get_project_service().get_project(project_id, user.id))


@router.patch("/{project_id}", response_model=ProjectResponse, summary="Update a project")
def update_project(
    request: ProjectUpdate,
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> ProjectResponse:
    project = get_project_service().update_project(project_id, user.id, request)
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", status_code=204, summary="Delete a project and its history")
def delete_project(
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> Response:
    get_project_service().delete_project(project_id, user.id)
    get_memory_manager().forget(project_id)
    return Response(status_code=204)


@router.get(
    "/{project_id}/preview",
    response_class=HTMLResponse,
    summary="Live preview of the generated website"
)
def preview_project(
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> HTMLResponse:
    project = get_project_service().get_project(project_id, user.id)
    if project.source_code:
        return HTMLResponse(project.source_code)
    return HTMLResponse(PLACEHOLDER_PAGE.format(name=html.escape(project.name)))


@router.get("/{project_id}/history", response_model=HistoryResponse, summary="Project chat history")
def get_history(
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> HistoryResponse:
    messages = get_chat_service().get_history(project_id, user.id)
    return HistoryResponse(
        project_id=project_id,
        messages=[
            HistoryMessage(
                role=m.role,
                content=m.content,
                timestamp=m.timestamp,
                metadata=m.metadata,
            )
            for m in messages
        ],
        count=len(messages),
    )


@router.delete("/{project_id}/history", summary="Clear project chat history")
def clear_history(
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> dict:
    cleared = get_chat_service().clear_history(project_id, user.id)
    logger.info(f"History cleared: project={project_id}, had_messages={cleared}")
    return {"project_id": project_id, "cleared": cleared}
