"""
YouTube Data API v3 client.

Fetches the channel snapshot a website is generated from: title,
description, thumbnail, statistics and the latest videos with their
view counts and durations.

Video lookups are best effort: if they fail the channel is still
returned with an empty video list.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests

from channelsite.core.config import get_settings
from channelsite.core.exceptions import ChannelNotFoundError, YouTubeError
from channelsite.core.logging_config import get_logger
from channelsite.core.validators import YOUTUBE_HOSTS

logger = get_logger(__name__)

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"
EMBED_URL = "https://www.youtube.com/embed/{video_id}"
DEFAULT_DURATION = "PT0M0S"

# Path prefixes that are never channel names
_RESERVED_PATHS = {"watch", "shorts", "playlist", "results", "embed", "feed"}


@dataclass
class VideoInfo:
    id: str
    title: str
    description: str = ""
    thumbnail: str = ""
    published_at: str = ""
    view_count: int = 0
    duration: str = DEFAULT_DURATION
    embed_url: str = ""


@dataclass
class ChannelInfo:
    id: str
    title: str
    description: str = ""
    thumbnail: str = ""
    subscriber_count: int = 0
    video_count: int = 0
    view_count: int = 0
    custom_url: str = ""
    videos: List[VideoInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def extract_channel_identifier(url: str) -> Optional[str]:
    """
    Get the channel id, handle or name from a YouTube URL.

    Supported forms:
        https://www.youtube.com/channel/UCxxxx
        https://www.youtube.com/c/Name
        https://www.youtube.com/user/Name
        https://www.youtube.com/@handle
        https://www.youtube.com/Name

    A value without a scheme is treated as an identifier already.
    Returns None for other hosts and unparseable input.
    """
    if not url or not url.strip():
        return None

    url = url.strip()
    if "://" not in url:
        if url.split("/")[0].lower() not in YOUTUBE_HOSTS:
            return None if "/" in url else url.lstrip("@")
        url = f"https://{url}"

    parsed = urlparse(url)
    if parsed.netloc.lower() not in YOUTUBE_HOSTS:
        return None

    parts = [p for p in parsed.path.split("/") if p]
    if not parts:
        return None

    if parts[0] in ("channel", "c", "user"):
        return parts[1] if len(parts) > 1 else None

    if parts[0].startswith("@"):
        return parts[0][1:] or None

    if parts[0] in _RESERVED_PATHS:
        return None

    return parts[0]


def _thumbnail(snippet: Dict[str, Any], *sizes: str) -> str:
    thumbnails = snippet.get("thumbnails") or {}
    for size in sizes:
        if size in thumbnails and thumbnails[size].get("url"):
            return thumbnails[size]["url"]
    return ""


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class YouTubeClient:
    """
    Minimal YouTube Data API client on top of requests.

    Example:
        >>> client = YouTubeClient()
        >>> channel = client.fetch_channel("@mkbhd", max_results=6)
        >>> channel.title
        'Marques Brownlee'
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 15
    ):
        self.api_key = api_key if api_key is not None else get_settings().youtube_api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, endpoint: str, **params) -> Dict[str, Any]:
        if not self.api_key:
            raise YouTubeError("YouTube API key not configured")

        params["key"] = self.api_key
        try:
            response = self.session.get(
                f"{YOUTUBE_API_URL}/{endpoint}",
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"YouTube API {endpoint} failed: {e}")
            raise YouTubeError(f"YouTube API error: {e}")

    def resolve_channel_id(self, identifier: str) -> str:
        """Turn a handle or name into a UC... channel id."""
        if identifier.startswith("UC"):
            return identifier

        try:
            data = self._get("search", part="snippet", type="channel", q=identifier)
        except YouTubeError as e:
            if not self.api_key:
                raise
            logger.warning(f"Channel search failed for '{identifier}', using it as id: {e}")
            return identifier

        items = data.get("items") or []
        if items:
            return items[0]["snippet"]["channelId"]
        return identifier

    def fetch_channel(
        self,
        identifier: str,
        fetch_videos: bool = True,
        max_results: Optional[int] = None
    ) -> ChannelInfo:
        """
        Fetch channel details and (optionally) its latest videos.

        Raises:
            YouTubeError: If the key is missing or the channel call fails
            ChannelNotFoundError: If no channel matches
        """
        if not self.api_key:
            raise YouTubeError("YouTube API key not configured")

        max_results = max_results or get_settings().youtube_max_videos
        channel_id = self.resolve_channel_id(identifier)

        data = self._get(
            "channels",
            part="snippet,statistics,brandingSettings",
            id=channel_id,
        )
        items = data.get("items") or []
        if not items:
            raise ChannelNotFoundError(identifier)

        item = items[0]
        snippet = item.get("snippet", {})
        stats = item.get("statistics", {})

        channel = ChannelInfo(
            id=item["id"],
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            thumbnail=_thumbnail(snippet, "high", "default"),
            subscriber_count=_to_int(stats.get("subscriberCount")),
            video_count=_to_int(stats.get("videoCount")),
            view_count=_to_int(stats.get("viewCount")),
            custom_url=snippet.get("customUrl", ""),
        )

        if fetch_videos:
            try:
                channel.videos = self.fetch_latest_videos(channel.id, max_results)
            except YouTubeError as e:
                logger.warning(f"Video fetch failed for {channel.id}, continuing without videos: {e}")

        logger.info(f"YouTube data fetched: channel={channel.title}, videos={len(channel.videos)}")
        return channel

    def fetch_latest_videos(self, channel_id: str, max_results: int) -> List[VideoInfo]:
        """Latest uploads, newest first, with view counts and durations."""
        data = self._get(
            "search",
            part="snippet",
            channelId=channel_id,
            type="video",
            order="date",
            maxResults=max_results,
        )
        items = [i for i in data.get("items") or [] if i.get("id", {}).get("videoId")]
        if not items:
            return []

        video_ids = [i["id"]["videoId"] for i in items]
        stats_by_id = self._fetch_video_stats(video_ids)

        videos = []
        for item in items:
            video_id = item["id"]["videoId"]
            snippet = item.get("snippet", {})
            stats = stats_by_id.get(video_id, {})
            videos.append(VideoInfo(
                id=video_id,
                title=snippet.get("title", ""),
                description=snippet.get("description", ""),
                thumbnail=_thumbnail(snippet, "high", "medium"),
                published_at=snippet.get("publishedAt", ""),
                view_count=stats.get("view_count", 0),
                duration=stats.get("duration", DEFAULT_DURATION),
                embed_url=EMBED_URL.format(video_id=video_id),
            ))
        return videos

    def _fetch_video_stats(self, video_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        try:
            data = self._get(
                "videos",
                part="statistics,contentDetails",
                id=",".join(video_ids),
            )
        except YouTubeError as e:
            logger.warning(f"Video statistics unavailable: {e}")
            return {}

        return {
            item["id"]: {
                "view_count": _to_int(item.get("statistics", {}).get("viewCount")),
                "duration": item.get("contentDetails", {}).get("duration") or DEFAULT_DURATION,
            }
            for item in data.get("items") or []
        }
