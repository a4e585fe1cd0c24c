"""
GitHub REST v3 client for pushing generated sites.

Files are written one at a time through the contents API, so a failed
file does not stop the others. Commit messages get " - Update <path>"
appended per file.
"""
import base64
import re
from typing import Dict, Optional, Tuple

import requests

from channelsite.core.config import get_settings
from channelsite.core.exceptions import GitHubSyncError
from channelsite.core.logging_config import LoggerMixin

USER_AGENT = "ChannelSite-Website-Builder"

_REPO_URL_RE = re.compile(r"github\.com[/:]([^/]+)/([^/#?]+?)(?:\.git)?/?$")


def repo_name_for(project_name: str) -> str:
    """Repository name derived from a project name."""
    return re.sub(r"[^a-zA-Z0-9-_]", "-", project_name).lower()


def parse_repo_url(url: str) -> Tuple[str, str]:
    """
    Split a repository URL into (owner, name).

    Raises:
        GitHubSyncError: If the URL is not a GitHub repository URL
    """
    match = _REPO_URL_RE.search((url or "").strip())
    if not match:
        raise GitHubSyncError(f"Not a GitHub repository URL: {url}")
    return match.group(1), match.group(2)


class GitHubSync(LoggerMixin):
    """
    Thin wrapper over the GitHub REST API.

    Example:
        >>> gh = GitHubSync(token)
        >>> owner = gh.get_user_login()
        >>> url = gh.create_repository("my-channel-site", "AI-generated website")
        >>> gh.put_file(owner, "my-channel-site", "index.html", html, "AI Website Update")
    """

    def __init__(
        self,
        token: str,
        api_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 30
    ):
        self.api_url = (api_url or get_settings().github_api_url).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        })

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(
                method,
                f"{self.api_url}{path}",
                timeout=self.timeout,
                **kwargs
            )
        except requests.RequestException as e:
            self.logger.error(f"GitHub {method} {path} failed: {e}")
            raise GitHubSyncError(f"GitHub request failed: {e}")

    def get_user_login(self) -> str:
        response = self._request("GET", "/user")
        if not response.ok:
            raise GitHubSyncError(f"Failed to get GitHub user info: {response.status_code}")
        return response.json()["login"]

    def create_repository(self, name: str, description: str) -> str:
        """Create a public, auto-initialized repository; returns its html_url."""
        response = self._request("POST", "/user/repos", json={
            "name": name,
            "description": description,
            "private": False,
            "auto_init": True,
        })
        if not response.ok:
            raise GitHubSyncError(
                f"Failed to create repository: {response.status_code} - {response.text[:200]}"
            )

        repo_url = response.json()["html_url"]
        self.logger.info(f"Repository created: {repo_url}")
        return repo_url

    def get_file_sha(self, owner: str, repo: str, path: str) -> Optional[str]:
        """sha of an existing file, or None when it doesn't exist yet."""
        response = self._request("GET", f"/repos/{owner}/{repo}/contents/{path}")
        if response.ok:
            return response.json().get("sha")
        return None

    def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str
    ) -> Dict:
        """Create or update one file."""
        payload = {
            "message": f"{message} - Update {path}",
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }

        sha = self.get_file_sha(owner, repo, path)
        if sha:
            payload["sha"] = sha
            self.logger.debug(f"Updating existing file {path}")
        else:
            self.logger.debug(f"Creating new file {path}")

        response = self._request("PUT", f"/repos/{owner}/{repo}/contents/{path}", json=payload)
        if not response.ok:
            raise GitHubSyncError(
                f"Failed to update file {path}: {response.status_code} - {response.text[:200]}"
            )
        return response.json()

    def latest_commit_hash(self, owner: str, repo: str) -> str:
        """Short (7 char) sha of the newest commit, "" when unavailable."""
        try:
            response = self._request("GET", f"/repos/{owner}/{repo}/commits")
        except GitHubSyncError as e:
            self.logger.warning(f"Could not get commit hash: {e}")
            return ""

        if not response.ok:
            return ""

        commits = response.json()
        if commits:
            return commits[0]["sha"][:7]
        return ""
