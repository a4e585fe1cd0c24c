"""
Sync Routes - Push projects to GitHub and read the last sync status.
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from channelsite.api.dependencies import CurrentUser, get_current_user, valid_project_id
from channelsite.core.logging_config import get_logger
from channelsite.models.common import ErrorResponse
from channelsite.models.sync import (
    FileSyncResult,
    SyncRequest,
    SyncResponse,
    SyncStatusResponse,
)
from channelsite.services.sync_service import get_sync_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/projects",
    tags=["GitHub Sync"],
    responses={
        400: {"model": ErrorResponse, "description": "GitHub not configured"},
        502: {"model": ErrorResponse, "description": "GitHub API error"},
    }
)


@router.post(
    "/{project_id}/sync/github",
    response_model=SyncResponse,
    summary="Sync a project to GitHub",
    description="""
    Pushes index.html and README.md (or the given files) to the project's
    repository, creating the repository first when the project has none or
    create_repo is set. Files are pushed independently; the status is
    success, partial or error.
    """
)
def sync_to_github(
    request: SyncRequest,
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> SyncResponse:
    result = get_sync_service().sync_project(
        project_id=project_id,
        user_id=user.id,
        files=request.files,
        commit_message=request.commit_message,
        create_repo=request.create_repo,
    )

    return SyncResponse(
        success=result.success,
        sync_status=result.sync_status,
        repository_url=result.repository_url,
        synced_files=result.synced_files,
        failed_files=result.failed_files,
        total_files=result.total_files,
        commit_hash=result.commit_hash,
        results=[
            FileSyncResult(path=r.path, success=r.success, sha=r.sha, error=r.error)
            for r in result.results
        ],
        message=result.message,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/{project_id}/sync/github",
    response_model=SyncStatusResponse,
    summary="Last GitHub sync status"
)
def sync_status(
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> SyncStatusResponse:
    status = get_sync_service().get_status(project_id, user.id)
    if status is None:
        return SyncStatusResponse(project_id=project_id, sync_status="never")
    return SyncStatusResponse(**status)
