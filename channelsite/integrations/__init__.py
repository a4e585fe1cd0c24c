"""
Integrations - Third-party HTTP APIs.

- youtube: YouTube Data API v3 (channel + latest videos)
- github: GitHub REST v3 (repositories and file contents)
- netlify: Netlify API (sites and zip deploys)
"""
from channelsite.integrations.youtube import (
    ChannelInfo,
    VideoInfo,
    YouTubeClient,
    extract_channel_identifier,
)
from channelsite.integrations.github import GitHubSync, parse_repo_url, repo_name_for
from channelsite.integrations.netlify import NetlifyDeploy, site_id_from_url, site_name_for

__all__ = [
    "ChannelInfo",
    "VideoInfo",
    "YouTubeClient",
    "extract_channel_identifier",
    "GitHubSync",
    "parse_repo_url",
    "repo_name_for",
    "NetlifyDeploy",
    "site_id_from_url",
    "site_name_for",
]
