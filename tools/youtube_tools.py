"""
YouTube Data API v3 client for channel lookup and recent uploads.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from config.settings import Settings, get_settings
from models.channel import ChannelDetails
from models.video import Video, VideoStats, parse_duration
from utils import safe_log_text

# Setup logging
logger = logging.getLogger(__name__)


# Custom exceptions
class YouTubeAPIError(Exception):
    """Base YouTube API error."""
    pass

class YouTubeQuotaExceededError(YouTubeAPIError):
    """YouTube API quota exceeded."""
    pass

class YouTubeRateLimitError(YouTubeAPIError):
    """YouTube API rate limit exceeded."""
    pass

class YouTubeChannelNotFoundError(YouTubeAPIError):
    """YouTube channel not found."""
    pass


class YouTubeAPIClient:
    """
    Async YouTube Data API v3 client.

    ``get_*`` methods raise ``YouTubeAPIError`` subclasses. The
    ``lookup_channel_by_handle`` and ``list_recent_uploads`` wrappers are
    the provider contract used by the channel store: they never raise and
    fall back to ``None`` / ``[]``.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self.base_url = "https://www.googleapis.com/youtube/v3"
        self.transport = transport
        self.last_request_time = None
        self.request_count = 0

    async def _rate_limit_check(self) -> None:
        """Space requests out to the configured requests per minute."""
        min_interval = timedelta(seconds=60 / self.settings.youtube_requests_per_minute)
        if self.last_request_time:
            time_since_last = datetime.utcnow() - self.last_request_time
            if time_since_last < min_interval:
                await asyncio.sleep((min_interval - time_since_last).total_seconds())

        self.last_request_time = datetime.utcnow()

    async def _make_request(self, endpoint: str, params: Dict[str, Any], api_key: str) -> Dict[str, Any]:
        """Make authenticated request to YouTube API."""
        await self._rate_limit_check()

        params = {**params, "key": api_key}

        async with httpx.AsyncClient(timeout=30.0, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/{endpoint}", params=params)
            except httpx.RequestError as e:
                logger.error(f"HTTP request failed: {e}")
                raise YouTubeAPIError(f"Request failed: {e}")

        self.request_count += 1

        if response.status_code == 200:
            try:
                return response.json()
            except ValueError as e:
                raise YouTubeAPIError(f"Malformed response from {endpoint}: {e}")

        if response.status_code == 403:
            try:
                error_data = response.json()
                error_reason = error_data.get("error", {}).get("errors", [{}])[0].get("reason", "")
            except (ValueError, AttributeError, IndexError):
                error_reason = ""

            if "quotaExceeded" in error_reason:
                logger.error("YouTube API quota exceeded")
                raise YouTubeQuotaExceededError("Daily quota limit reached")
            if "rateLimitExceeded" in error_reason:
                raise YouTubeRateLimitError("YouTube API rate limit exceeded")
            raise YouTubeAPIError(f"API access forbidden: {error_reason}")

        if response.status_code == 404:
            raise YouTubeChannelNotFoundError("Channel or playlist not found")

        if response.status_code == 429:
            raise YouTubeRateLimitError("Too many requests")

        raise YouTubeAPIError(f"Unexpected status {response.status_code} from {endpoint}")

    async def get_channel_by_handle(self, handle: str, api_key: str) -> ChannelDetails:
        """Resolve a channel handle to its details."""
        params = {
            "part": "snippet,contentDetails,statistics",
            "forHandle": handle
        }

        response = await self._make_request("channels", params, api_key)

        if not response.get("items"):
            raise YouTubeChannelNotFoundError(f"Channel {handle} not found")

        item = response["items"][0]
        try:
            return ChannelDetails(
                id=item["id"],
                title=item["snippet"]["title"],
                description=item["snippet"].get("description", ""),
                custom_url=item["snippet"].get("customUrl", ""),
                thumbnail_url=item["snippet"].get("thumbnails", {}).get("default", {}).get("url", ""),
                uploads_playlist_id=item["contentDetails"]["relatedPlaylists"]["uploads"],
                subscriber_count=item.get("statistics", {}).get("subscriberCount", "0"),
                video_count=item.get("statistics", {}).get("videoCount", "0")
            )
        except (KeyError, TypeError, ValidationError) as e:
            raise YouTubeAPIError(f"Malformed channel response for {handle}: {e}")

    async def get_playlist_video_ids(self, playlist_id: str, api_key: str, max_results: int = 50) -> List[str]:
        """Get the most recent video IDs of a playlist."""
        params = {
            "part": "snippet",
            "playlistId": playlist_id,
            "maxResults": min(max_results, 50)  # YouTube API limit
        }

        response = await self._make_request("playlistItems", params, api_key)

        return [
            item["snippet"]["resourceId"]["videoId"]
            for item in response.get("items", [])
            if item.get("snippet", {}).get("resourceId", {}).get("videoId")
        ]

    async def get_video_details(self, video_ids: List[str], api_key: str) -> List[Video]:
        """Get statistics, snippet and duration for specific videos."""
        if not video_ids:
            return []

        params = {
            "part": "statistics,snippet,contentDetails",
            "id": ",".join(video_ids)
        }

        response = await self._make_request("videos", params, api_key)

        videos = []
        for item in response.get("items", []):
            try:
                videos.append(self._parse_video(item))
            except (KeyError, TypeError, ValidationError) as e:
                logger.warning(f"Failed to parse video {item.get('id')}: {e}")
        return videos

    @staticmethod
    def _parse_video(item: Dict[str, Any]) -> Video:
        snippet = item["snippet"]
        thumbnails = snippet.get("thumbnails", {})
        statistics = item.get("statistics", {})

        return Video(
            id=item["id"],
            title=snippet["title"],
            description=snippet.get("description", ""),
            published_at=snippet["publishedAt"],
            thumbnail_url=(thumbnails.get("medium") or thumbnails.get("default") or {}).get("url", ""),
            channel_title=snippet.get("channelTitle", ""),
            url=f"https://www.youtube.com/watch?v={item['id']}",
            duration_seconds=parse_duration(item.get("contentDetails", {}).get("duration", "")),
            stats=VideoStats(
                view_count=statistics.get("viewCount", "0"),
                like_count=statistics.get("likeCount", "0"),
                comment_count=statistics.get("commentCount", "0")
            )
        )

    async def lookup_channel_by_handle(self, handle: str, api_key: str) -> Optional[ChannelDetails]:
        """Channel details for ``handle``, or ``None`` on any failure."""
        try:
            logger.info(f"Looking up channel handle {safe_log_text(handle)}")
            return await self.get_channel_by_handle(handle, api_key)
        except YouTubeAPIError as e:
            logger.error(f"Error fetching channel {safe_log_text(handle)}: {e}")
            return None

    async def list_recent_uploads(self, uploads_playlist_id: str, api_key: str, max_results: int = 50) -> List[Video]:
        """Recent uploads with statistics, or ``[]`` on any failure."""
        try:
            video_ids = await self.get_playlist_video_ids(uploads_playlist_id, api_key, max_results)
            videos = await self.get_video_details(video_ids, api_key)
            logger.info(f"Fetched {len(videos)} videos from {uploads_playlist_id}")
            return videos
        except YouTubeAPIError as e:
            logger.error(f"Error fetching videos for {uploads_playlist_id}: {e}")
            return []
