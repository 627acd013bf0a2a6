"""
Video metadata and engagement statistics models.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, validator


SHORTS_MAX_SECONDS = 60

_DURATION_PATTERN = re.compile(r'PT(\d+H)?(\d+M)?(\d+S)?')


class VideoTypeFilter(str, Enum):
    """Video type filter applied to every derived view."""
    ALL = "all"
    SHORTS = "shorts"
    LONG = "long"


class SortField(str, Enum):
    """Fields a video listing can be sorted by."""
    PUBLISHED_AT = "published_at"
    VIEW_COUNT = "view_count"
    LIKE_COUNT = "like_count"
    COMMENT_COUNT = "comment_count"


class SortOrder(str, Enum):
    """Sort direction."""
    ASC = "asc"
    DESC = "desc"


def parse_duration(duration: Optional[str]) -> int:
    """
    Convert an ISO 8601 duration (PT1H2M10S) to whole seconds.

    Every component is optional; anything that does not look like a
    PT duration yields 0.
    """
    if not duration:
        return 0

    match = _DURATION_PATTERN.search(duration)
    if not match:
        return 0

    hours = int((match.group(1) or '0H')[:-1])
    minutes = int((match.group(2) or '0M')[:-1])
    seconds = int((match.group(3) or '0S')[:-1])

    return hours * 3600 + minutes * 60 + seconds


def parse_count(value: Optional[str]) -> int:
    """Parse a numeric string statistic, treating absent or junk values as 0."""
    if value is None:
        return 0
    match = re.match(r'\s*([+-]?\d+)', str(value))
    if not match:
        return 0
    return int(match.group(1))


class VideoStats(BaseModel):
    """Engagement snapshot attached to a video at fetch time."""

    view_count: Optional[str] = None
    like_count: Optional[str] = None
    comment_count: Optional[str] = None

    @property
    def views(self) -> int:
        return parse_count(self.view_count)

    @property
    def likes(self) -> int:
        return parse_count(self.like_count)

    @property
    def comments(self) -> int:
        return parse_count(self.comment_count)

    class Config:
        frozen = True


class Video(BaseModel):
    """YouTube upload with optional engagement statistics."""

    id: str = Field(..., description="YouTube video ID")
    title: str = Field(..., description="Video title")
    description: str = Field("", description="Video description")
    published_at: datetime = Field(..., description="Video publication timestamp")
    thumbnail_url: str = Field("", description="Video thumbnail URL")
    channel_title: str = Field("", description="Title of the owning channel")
    url: str = Field("", description="Canonical watch URL")
    duration_seconds: int = Field(0, ge=0, description="Duration in seconds, 0 if unknown")
    stats: Optional[VideoStats] = None

    @validator('url', always=True)
    def default_url(cls, v, values):
        """Fill in the watch URL when the provider did not give one."""
        if not v and values.get('id'):
            return f"https://www.youtube.com/watch?v={values['id']}"
        return v

    @property
    def views(self) -> int:
        return self.stats.views if self.stats else 0

    @property
    def likes(self) -> int:
        return self.stats.likes if self.stats else 0

    @property
    def comments(self) -> int:
        return self.stats.comments if self.stats else 0

    @property
    def is_short(self) -> bool:
        return 0 < self.duration_seconds <= SHORTS_MAX_SECONDS

    @property
    def is_long(self) -> bool:
        return self.duration_seconds > SHORTS_MAX_SECONDS

    class Config:
        frozen = True
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }
