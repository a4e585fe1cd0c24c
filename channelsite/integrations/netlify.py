"""
Netlify API client for publishing generated sites.

A deploy uploads every file in one zip archive. Netlify processes the
upload asynchronously, so the deploy state is polled until it is ready.
"""
import io
import re
import time
import zipfile
from typing import Callable, Dict, Optional
from urllib.parse import urlparse

import requests

from channelsite.core.config import get_settings
from channelsite.core.exceptions import NetlifyDeployError
from channelsite.core.logging_config import LoggerMixin
from channelsite.integrations.github import USER_AGENT


def site_name_for(project_name: str) -> str:
    """Netlify subdomain derived from a project name."""
    return re.sub(r"-{2,}", "-", re.sub(r"[^a-z0-9-]", "-", project_name.lower())).strip("-")


def site_id_from_url(url: str) -> str:
    """
    Site identifier for an existing site URL.

    The API accepts a site's domain wherever it takes a site id, so
    https://my-site.netlify.app becomes my-site.netlify.app.

    Raises:
        NetlifyDeployError: If the URL has no host
    """
    host = urlparse((url or "").strip()).hostname
    if not host:
        raise NetlifyDeployError(f"Not a site URL: {url}")
    return host


def build_zip(files: Dict[str, str]) -> bytes:
    """Zip archive holding the given path -> text content files."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for path, content in files.items():
            archive.writestr(path.lstrip("/"), content)
    return buffer.getvalue()


class NetlifyDeploy(LoggerMixin):
    """
    Thin wrapper over the Netlify REST API.

    Example:
        >>> netlify = NetlifyDeploy(token)
        >>> site = netlify.create_site("my-channel-site")
        >>> deploy = netlify.deploy_files(site["site_id"], {"index.html": html})
        >>> netlify.wait_for_deploy(deploy["id"])
        'ready'
    """

    def __init__(
        self,
        token: str,
        api_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 60,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.api_url = (api_url or get_settings().netlify_api_url).rstrip("/")
        self.timeout = timeout
        self.sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
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
            self.logger.error(f"Netlify {method} {path} failed: {e}")
            raise NetlifyDeployError(f"Netlify request failed: {e}")

    def create_site(self, name: str) -> Dict[str, str]:
        """Create a site; returns its site_id and public url (https when available)."""
        response = self._request("POST", "/sites", json={"name": name})
        if not response.ok:
            raise NetlifyDeployError(
                f"Failed to create site: {response.status_code} - {response.text[:200]}"
            )

        data = response.json()
        site = {
            "site_id": data.get("site_id") or data["id"],
            "url": data.get("ssl_url") or data.get("url") or "",
        }
        self.logger.info(f"Netlify site created: {site['url']}")
        return site

    def deploy_files(self, site_id: str, files: Dict[str, str]) -> Dict:
        """Upload a new production deploy of the given files."""
        response = self._request(
            "POST",
            f"/sites/{site_id}/deploys",
            data=build_zip(files),
            headers={"Content-Type": "application/zip"},
        )
        if not response.ok:
            raise NetlifyDeployError(
                f"Failed to deploy: {response.status_code} - {response.text[:200]}"
            )

        deploy = response.json()
        self.logger.info(f"Deploy {deploy.get('id')} uploaded to site {site_id}: {len(files)} files")
        return deploy

    def get_deploy(self, deploy_id: str) -> Dict:
        response = self._request("GET", f"/deploys/{deploy_id}")
        if not response.ok:
            raise NetlifyDeployError(f"Failed to read deploy {deploy_id}: {response.status_code}")
        return response.json()

    def wait_for_deploy(self, deploy_id: str, attempts: int = 30, interval: float = 2.0) -> str:
        """
        Poll a deploy until it is ready.

        Returns the last state seen, which is not final when the attempts
        run out ("processing", "uploaded", ...). Failed reads count as an
        attempt.

        Raises:
            NetlifyDeployError: If Netlify reports the deploy as failed
        """
        state = "unknown"
        for attempt in range(attempts):
            try:
                state = self.get_deploy(deploy_id).get("state", state)
            except NetlifyDeployError as e:
                self.logger.warning(f"Deploy check {attempt + 1}/{attempts} failed: {e.message}")

            if state == "error":
                raise NetlifyDeployError(f"Netlify deploy {deploy_id} failed")
            if state == "ready":
                return state
            if attempt < attempts - 1:
                self.sleep(interval)

        self.logger.warning(f"Deploy {deploy_id} not ready after {attempts} checks: {state}")
        return state
