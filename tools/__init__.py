"""
YouTube API client and aggregation functions.
"""

from .youtube_tools import YouTubeAPIClient
from .aggregation_tools import build_dashboard_view, build_channel_view, sort_videos

__all__ = [
    "YouTubeAPIClient",
    "build_dashboard_view",
    "build_channel_view",
    "sort_videos"
]
