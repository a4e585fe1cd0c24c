"""
Sync Service - Pushes a project's files to GitHub.

Token lookup order: the user's newest active GitHub deployment token,
then GITHUB_TOKEN. Each file is pushed independently; the overall
outcome (success / partial / error) is stored in git_sync_status.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from channelsite.core.config import get_settings
from channelsite.core.exceptions import GitHubNotConfiguredError, GitHubSyncError
from channelsite.core.logging_config import get_logger
from channelsite.database.connection import get_database
from channelsite.database.models import DeploymentToken, GitSyncStatus
from channelsite.integrations.github import GitHubSync, parse_repo_url, repo_name_for
from channelsite.services.project_service import ProjectService, get_project_service

logger = get_logger(__name__)


@dataclass
class FileResult:
    path: str
    success: bool
    sha: Optional[str] = None
    error: Optional[str] = None


@dataclass
class SyncResult:
    success: bool
    sync_status: str
    repository_url: str
    synced_files: int
    failed_files: int
    total_files: int
    commit_hash: str = ""
    results: List[FileResult] = field(default_factory=list)
    message: str = ""


def final_status(synced: int, failed: int) -> str:
    if failed == 0:
        return "success"
    return "partial" if synced > 0 else "error"


class SyncService:
    """
    Service for GitHub sync of projects.

    Example:
        >>> result = SyncService().sync_project(project_id, user_id, create_repo=True)
        >>> result.sync_status
        'success'
    """

    def __init__(
        self,
        project_service: Optional[ProjectService] = None,
        github_factory: Optional[Callable[[str], GitHubSync]] = None
    ):
        self.settings = get_settings()
        self.db = get_database()
        self.project_service = project_service or get_project_service()
        self.github_factory = github_factory or GitHubSync

    def get_token(self, user_id: str) -> str:
        """
        Raises:
            GitHubNotConfiguredError: If neither a stored token nor GITHUB_TOKEN exists
        """
        with self.db.get_session() as session:
            row = session.query(DeploymentToken).filter(
                DeploymentToken.user_id == user_id,
                DeploymentToken.provider == "github",
                DeploymentToken.is_active.is_(True),
            ).order_by(DeploymentToken.updated_at.desc()).first()
            if row:
                return row.token_value

        if self.settings.github_token:
            return self.settings.github_token

        raise GitHubNotConfiguredError()

    def sync_project(
        self,
        project_id: str,
        user_id: str,
        files: Optional[Dict[str, str]] = None,
        commit_message: str = "AI Website Update",
        create_repo: bool = False
    ) -> SyncResult:
        project = self.project_service.get_project(project_id, user_id)
        token = self.get_token(user_id)
        github = self.github_factory(token)

        files = files or self.project_service.project_files(project)
        logger.info(f"Sync started: project={project_id}, files={len(files)}, create_repo={create_repo}")

        try:
            repo_url = project.github_url
            if not repo_url or create_repo:
                repo_name = repo_name_for(project.name)
                owner = github.get_user_login()
                repo_url = github.create_repository(
                    repo_name,
                    project.description or f"AI-generated website for {project.name}",
                )
                self.project_service.set_github_url(project_id, user_id, repo_url)
            else:
                owner, repo_name = parse_repo_url(repo_url)
        except GitHubSyncError as e:
            self.record_status(user_id, project_id, "error", 0, error_message=e.message)
            raise

        self.record_status(user_id, project_id, "syncing", 0)

        results: List[FileResult] = []
        for path, content in files.items():
            try:
                response = github.put_file(owner, repo_name, path, content, commit_message)
                sha = (response.get("content") or {}).get("sha")
                results.append(FileResult(path=path, success=True, sha=sha))
            except GitHubSyncError as e:
                logger.error(f"Failed to sync file {path}: {e.message}")
                results.append(FileResult(path=path, success=False, error=e.message))

        synced = sum(1 for r in results if r.success)
        failed = len(results) - synced
        commit_hash = github.latest_commit_hash(owner, repo_name) if synced else ""
        status = final_status(synced, failed)

        self.record_status(
            user_id,
            project_id,
            status,
            synced,
            commit_hash=commit_hash,
            error_message=None if failed == 0 else f"{failed} file(s) failed",
        )

        if failed == 0:
            message = f"Successfully synced all {synced} files to GitHub"
        else:
            message = f"Synced {synced} files successfully, {failed} failed"

        logger.info(f"GitHub sync completed: {synced} synced, {failed} failed")

        return SyncResult(
            success=status != "error",
            sync_status=status,
            repository_url=repo_url,
            synced_files=synced,
            failed_files=failed,
            total_files=len(files),
            commit_hash=commit_hash,
            results=results,
            message=message,
        )

    def record_status(
        self,
        user_id: str,
        project_id: str,
        status: str,
        files_synced: int,
        commit_hash: str = "",
        error_message: Optional[str] = None
    ) -> None:
        """Upsert the git_sync_status row for user + project."""
        now = datetime.utcnow()
        try:
            with self.db.get_session() as session:
                row = session.query(GitSyncStatus).filter(
                    GitSyncStatus.user_id == user_id,
                    GitSyncStatus.project_id == project_id,
                ).first()
                if row is None:
                    row = GitSyncStatus(user_id=user_id, project_id=project_id)
                    session.add(row)

                row.sync_status = status
                row.files_synced = files_synced
                row.commit_hash = commit_hash or None
                row.error_message = error_message
                row.last_sync_at = now if status == "success" else row.last_sync_at
                row.updated_at = now
        except SQLAlchemyError as e:
            # The sync itself already happened; the status row is bookkeeping
            logger.error(f"Failed to update git sync status: {e}")

    def get_status(self, project_id: str, user_id: str) -> Optional[Dict]:
        self.project_service.get_project(project_id, user_id)
        with self.db.get_session() as session:
            row = session.query(GitSyncStatus).filter(
                GitSyncStatus.user_id == user_id,
                GitSyncStatus.project_id == project_id,
            ).first()
            return row.to_dict() if row else None


_sync_service: Optional[SyncService] = None


def get_sync_service() -> SyncService:
    """Get or create the sync service singleton."""
    global _sync_service
    if _sync_service is None:
        _sync_service = SyncService()
    return _sync_service


def reset_sync_service() -> None:
    """Reset the sync service (for testing)."""
    global _sync_service
    _sync_service = None
