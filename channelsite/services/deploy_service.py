"""
Deploy Service - Publishes a project's website on Netlify.

Token lookup order: the user's newest active Netlify deployment token,
then NETLIFY_TOKEN. The first deploy creates a site and stores its URL
as the project's netlify_url; later deploys go to that same site.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from channelsite.core.config import get_settings
from channelsite.core.exceptions import NetlifyNotConfiguredError, ValidationError
from channelsite.core.logging_config import get_logger
from channelsite.database.connection import get_database
from channelsite.database.models import DeploymentToken
from channelsite.integrations.netlify import NetlifyDeploy, site_id_from_url, site_name_for
from channelsite.services.project_service import ProjectService, get_project_service

logger = get_logger(__name__)

ROBOTS_TXT = "User-agent: *\nAllow: /\n"


def sitemap_xml(site_url: str, lastmod: Optional[datetime] = None) -> str:
    """One-page sitemap for the site root."""
    lastmod = lastmod or datetime.utcnow()
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url>
    <loc>{site_url}</loc>
    <lastmod>{lastmod.strftime("%Y-%m-%d")}</lastmod>
    <changefreq>weekly</changefreq>
    <priority>1.0</priority>
  </url>
</urlset>
"""


def deploy_files(source_code: str, site_url: str) -> Dict[str, str]:
    """Files published for a site: the page, robots.txt and a sitemap."""
    files = {"index.html": source_code, "robots.txt": ROBOTS_TXT}
    if site_url:
        files["sitemap.xml"] = sitemap_xml(site_url)
    return files


@dataclass
class DeployResult:
    site_url: str
    site_id: str
    deploy_id: str
    state: str
    created_site: bool
    deployed_files: int

    @property
    def ready(self) -> bool:
        return self.state == "ready"


class DeployService:
    """
    Service for Netlify deploys of projects.

    Example:
        >>> result = DeployService().deploy_project(project_id, user_id)
        >>> result.site_url
        'https://test-kitchen-site.netlify.app'
    """

    def __init__(
        self,
        project_service: Optional[ProjectService] = None,
        netlify_factory: Optional[Callable[[str], NetlifyDeploy]] = None
    ):
        self.settings = get_settings()
        self.db = get_database()
        self.project_service = project_service or get_project_service()
        self.netlify_factory = netlify_factory or NetlifyDeploy

    def get_token(self, user_id: str) -> str:
        """
        Raises:
            NetlifyNotConfiguredError: If neither a stored token nor NETLIFY_TOKEN exists
        """
        with self.db.get_session() as session:
            row = session.query(DeploymentToken).filter(
                DeploymentToken.user_id == user_id,
                DeploymentToken.provider == "netlify",
                DeploymentToken.is_active.is_(True),
            ).order_by(DeploymentToken.updated_at.desc()).first()
            if row:
                return row.token_value

        if self.settings.netlify_token:
            return self.settings.netlify_token

        raise NetlifyNotConfiguredError()

    def deploy_project(
        self,
        project_id: str,
        user_id: str,
        site_name: Optional[str] = None,
        create_site: bool = False
    ) -> DeployResult:
        """
        Deploy the project's current page.

        Raises:
            ValidationError: If the project has no generated page yet
            NetlifyNotConfiguredError: If no token is available
            NetlifyDeployError: If a Netlify call fails or the deploy errors
        """
        project = self.project_service.get_project(project_id, user_id)
        if not (project.source_code or "").strip():
            raise ValidationError("Generate the website before deploying it", field="source_code")

        netlify = self.netlify_factory(self.get_token(user_id))

        created = not project.netlify_url or create_site
        if created:
            site = netlify.create_site(site_name or site_name_for(project.name))
            site_id, site_url = site["site_id"], site["url"]
        else:
            site_url = project.netlify_url
            site_id = site_id_from_url(site_url)

        files = deploy_files(project.source_code, site_url)
        logger.info(f"Deploy started: project={project_id}, site={site_id}, new_site={created}")

        deploy = netlify.deploy_files(site_id, files)
        deploy_id = deploy.get("id", "")
        state = deploy.get("state", "uploaded")

        attempts = self.settings.netlify_deploy_poll_attempts
        if deploy_id and attempts > 0 and state != "ready":
            state = netlify.wait_for_deploy(deploy_id, attempts=attempts)

        site_url = site_url or deploy.get("ssl_url") or deploy.get("url") or ""
        if site_url and site_url != project.netlify_url:
            self.project_service.set_netlify_url(project_id, user_id, site_url)

        logger.info(f"Netlify deploy {deploy_id} for project {project_id}: {state} at {site_url}")

        return DeployResult(
            site_url=site_url,
            site_id=site_id,
            deploy_id=deploy_id,
            state=state,
            created_site=created,
            deployed_files=len(files),
        )


_deploy_service: Optional[DeployService] = None


def get_deploy_service() -> DeployService:
    """Get or create the deploy service singleton."""
    global _deploy_service
    if _deploy_service is None:
        _deploy_service = DeployService()
    return _deploy_service


def reset_deploy_service() -> None:
    """Reset the deploy service (for testing)."""
    global _deploy_service
    _deploy_service = None
