"""
Shared fixtures for the dashboard test suite.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from config.settings import Settings
from models.channel import ChannelData, ChannelDetails
from models.video import Video, VideoStats
from storage.database import DatabaseManager
from storage.local_storage import LocalStorage


NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        youtube_api_key=None,
        gemini_api_key="test-gemini-key",
        database_url="sqlite://",
        youtube_requests_per_minute=600000,
        log_file="./logs/test.log"
    )


@pytest.fixture
def db(settings):
    manager = DatabaseManager(settings.database_url)
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def storage(db):
    return LocalStorage(db)


@pytest.fixture
def make_video():
    def _make_video(
        video_id: str = "vid00000001",
        title: str = "Test Video",
        days_ago: float = 1,
        duration_seconds: int = 300,
        views: Optional[str] = "1000",
        likes: Optional[str] = "50",
        comments: Optional[str] = "10",
        channel_title: str = "Test Channel",
        with_stats: bool = True
    ) -> Video:
        return Video(
            id=video_id,
            title=title,
            description="Test video description",
            published_at=NOW - timedelta(days=days_ago),
            thumbnail_url="https://i.ytimg.com/vi/test/mqdefault.jpg",
            channel_title=channel_title,
            duration_seconds=duration_seconds,
            stats=VideoStats(view_count=views, like_count=likes, comment_count=comments) if with_stats else None
        )
    return _make_video


@pytest.fixture
def make_details():
    def _make_details(channel_id: str = "UC1234567890123456789012", title: str = "Test Channel") -> ChannelDetails:
        return ChannelDetails(
            id=channel_id,
            title=title,
            description="A channel used in tests",
            custom_url="@testchannel",
            thumbnail_url="https://yt3.ggpht.com/test.jpg",
            uploads_playlist_id="UU" + channel_id[2:],
            subscriber_count="12000",
            video_count="321"
        )
    return _make_details


@pytest.fixture
def make_channel(make_details):
    def _make_channel(channel_id: str = "UC1234567890123456789012", videos=None, group_id: Optional[str] = None, title: str = "Test Channel") -> ChannelData:
        return ChannelData(details=make_details(channel_id, title), videos=videos or [], group_id=group_id)
    return _make_channel


@pytest.fixture
def provider(make_details, make_video):
    """Channel provider stub that resolves any handle to one test channel."""
    stub = AsyncMock()
    stub.lookup_channel_by_handle = AsyncMock(return_value=make_details())
    stub.list_recent_uploads = AsyncMock(return_value=[make_video("vid00000001"), make_video("vid00000002", days_ago=3)])
    return stub
