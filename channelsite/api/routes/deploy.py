"""
Deploy Routes - Publish projects on Netlify.
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from channelsite.api.dependencies import CurrentUser, get_current_user, valid_project_id
from channelsite.core.logging_config import get_logger
from channelsite.models.common import ErrorResponse
from channelsite.models.deploy import DeployRequest, DeployResponse
from channelsite.services.deploy_service import get_deploy_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/projects",
    tags=["Netlify Deploy"],
    responses={
        400: {"model": ErrorResponse, "description": "Netlify not configured or nothing to deploy"},
        502: {"model": ErrorResponse, "description": "Netlify API error"},
    }
)


@router.post(
    "/{project_id}/deploy/netlify",
    response_model=DeployResponse,
    summary="Deploy a project to Netlify",
    description="""
    Publishes the project's page with robots.txt and a sitemap. The first
    deploy (or create_site=true) creates a Netlify site and stores its URL
    on the project; later deploys update that site.
    """
)
def deploy_to_netlify(
    request: DeployRequest,
    project_id: str = Depends(valid_project_id),
    user: CurrentUser = Depends(get_current_user)
) -> DeployResponse:
    result = get_deploy_service().deploy_project(
        project_id=project_id,
        user_id=user.id,
        site_name=request.site_name,
        create_site=request.create_site,
    )

    if result.ready:
        message = f"Your website is live at {result.site_url}"
    else:
        message = f"Deploy uploaded, Netlify is still processing it ({result.state})"

    return DeployResponse(
        success=True,
        site_url=result.site_url,
        site_id=result.site_id,
        deploy_id=result.deploy_id,
        state=result.state,
        created_site=result.created_site,
        deployed_files=result.deployed_files,
        message=message,
        timestamp=datetime.utcnow()
    )
