"""
Project Service - CRUD for generated websites with per-user limits.

Every read and write is scoped to the calling user: a project that
exists but belongs to someone else is reported as not found.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Generator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from channelsite.core.config import get_settings
from channelsite.core.exceptions import (
    ChannelNotFoundError,
    DatabaseError,
    ProjectLimitExceeded,
    ProjectNotFoundError,
    YouTubeError,
)
from channelsite.core.logging_config import get_logger
from channelsite.database.connection import get_database
from channelsite.database.models import Project
from channelsite.integrations.youtube import YouTubeClient, extract_channel_identifier
from channelsite.models.project import ProjectCreate, ProjectUpdate
from channelsite.services.readme import generate_readme

logger = get_logger(__name__)

ADMIN_ROLE = "admin"


class ProjectService:
    """
    Service for project CRUD.

    Example:
        >>> service = ProjectService()
        >>> project = service.create_project("user-1", "user", ProjectCreate(name="My Site"))
        >>> service.get_limits("user-1", "user")["remaining"]
        4
    """

    def __init__(self, youtube_client: Optional[YouTubeClient] = None):
        self.settings = get_settings()
        self.db = get_database()
        self.youtube_client = youtube_client

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        """Database session whose driver errors surface as DatabaseError."""
        try:
            with self.db.get_session() as session:
                yield session
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database operation failed: {e.__class__.__name__}") from e

    def _load(self, session: Session, project_id: str, user_id: str) -> Project:
        project = session.query(Project).filter(
            Project.id == project_id,
            Project.user_id == user_id,
        ).first()
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def max_projects_for(self, role: Optional[str]) -> int:
        if (role or "").lower() == ADMIN_ROLE:
            return self.settings.admin_project_limit
        return self.settings.free_project_limit

    def count_projects(self, user_id: str) -> int:
        with self._session() as session:
            return session.query(Project).filter(Project.user_id == user_id).count()

    def get_limits(self, user_id: str, role: Optional[str] = None) -> Dict:
        count = self.count_projects(user_id)
        max_projects = self.max_projects_for(role)
        remaining = max(0, max_projects - count)

        return {
            "count": count,
            "max_projects": max_projects,
            "remaining": remaining,
            "can_create": count < max_projects,
            "usage_percentage": round(min(100.0, count / max_projects * 100), 1) if max_projects else 100.0,
        }

    def create_project(self, user_id: str, role: Optional[str], data: ProjectCreate) -> Project:
        """
        Create a project for a user.

        Raises:
            ProjectLimitExceeded: If the user is at their project limit
        """
        limit = self.max_projects_for(role)
        if self.count_projects(user_id) >= limit:
            logger.warning(f"Project limit reached: user={user_id}, limit={limit}")
            raise ProjectLimitExceeded(limit)

        channel_data = self._fetch_channel_data(data.youtube_url) if data.youtube_url else None

        project = Project(
            user_id=user_id,
            name=data.name,
            description=data.description,
            youtube_url=data.youtube_url,
            channel_data=channel_data,
        )
        with self._session() as session:
            session.add(project)

        logger.info(
            f"Project created: id={project.id}, user={user_id}, "
            f"channel={'yes' if channel_data else 'no'}"
        )
        return project

    def _fetch_channel_data(self, youtube_url: str) -> Optional[Dict]:
        """Channel snapshot for a new project; failures only log."""
        if not self.settings.youtube_api_key and self.youtube_client is None:
            logger.debug("YouTube key not configured, skipping channel fetch")
            return None

        identifier = extract_channel_identifier(youtube_url)
        if not identifier:
            logger.warning(f"Could not extract channel identifier from {youtube_url}")
            return None

        client = self.youtube_client or YouTubeClient()
        try:
            return client.fetch_channel(identifier).to_dict()
        except (YouTubeError, ChannelNotFoundError) as e:
            logger.warning(f"Channel fetch failed, creating project without it: {e.message}")
            return None

    def get_project(self, project_id: str, user_id: str) -> Project:
        with self._session() as session:
            return self._load(session, project_id, user_id)

    def list_projects(self, user_id: str) -> List[Project]:
        with self._session() as session:
            return session.query(Project).filter(
                Project.user_id == user_id
            ).order_by(Project.updated_at.desc()).all()

    def update_project(self, project_id: str, user_id: str, data: ProjectUpdate) -> Project:
        changes = data.model_dump(exclude_unset=True)

        with self._session() as session:
            project = self._load(session, project_id, user_id)
            for field_name, value in changes.items():
                setattr(project, field_name, value)
            project.updated_at = datetime.utcnow()

        logger.info(f"Project updated: id={project_id}, fields={list(changes)}")
        return project

    def save_source_code(self, project_id: str, user_id: str, source_code: str) -> Project:
        with self._session() as session:
            project = self._load(session, project_id, user_id)
            project.source_code = source_code
            project.updated_at = datetime.utcnow()
        return project

    def set_github_url(self, project_id: str, user_id: str, github_url: str) -> Project:
        with self._session() as session:
            project = self._load(session, project_id, user_id)
            project.github_url = github_url
            project.updated_at = datetime.utcnow()
        return project

    def set_netlify_url(self, project_id: str, user_id: str, netlify_url: str) -> Project:
        with self._session() as session:
            project = self._load(session, project_id, user_id)
            project.netlify_url = netlify_url
            project.updated_at = datetime.utcnow()
        return project

    def delete_project(self, project_id: str, user_id: str) -> None:
        with self._session() as session:
            project = self._load(session, project_id, user_id)
            session.delete(project)

        logger.info(f"Project deleted: id={project_id}, user={user_id}")

    def project_files(self, project: Project) -> Dict[str, str]:
        """Files pushed to GitHub for a project."""
        return {
            "index.html": project.source_code or "",
            "README.md": generate_readme(
                title=project.name,
                description=project.description,
                channel=project.channel_data,
                code=project.source_code,
                github_url=project.github_url,
                netlify_url=project.netlify_url,
                last_modified=project.updated_at,
            ),
        }


_project_service: Optional[ProjectService] = None


def get_project_service() -> ProjectService:
    """Get or create the project service singleton."""
    global _project_service
    if _project_service is None:
        _project_service = ProjectService()
    return _project_service


def reset_project_service() -> None:
    """Reset the project service (for testing)."""
    global _project_service
    _project_service = None
