"""
Channel, channel data and channel group models.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from .video import Video


class ChannelDetails(BaseModel):
    """Immutable channel snapshot returned by the YouTube API."""

    id: str = Field(..., description="YouTube channel ID")
    title: str = Field(..., description="Channel title")
    description: str = ""
    custom_url: str = Field("", description="Channel vanity handle")
    thumbnail_url: str = ""
    uploads_playlist_id: str = Field(..., description="Uploads playlist ID")
    subscriber_count: str = "0"
    video_count: str = "0"

    @validator('id')
    def validate_id(cls, v):
        """Validate channel ID is present."""
        if not v.strip():
            raise ValueError('Channel ID cannot be empty')
        return v

    class Config:
        frozen = True


class ChannelData(BaseModel):
    """A tracked channel with its latest uploads and optional group."""

    details: ChannelDetails
    videos: List[Video] = Field(default_factory=list)
    group_id: Optional[str] = None

    @validator('group_id')
    def normalize_group_id(cls, v):
        """An empty group ID means ungrouped."""
        return v or None

    @property
    def id(self) -> str:
        return self.details.id

    @property
    def title(self) -> str:
        return self.details.title


def new_group_id() -> str:
    """Generate an opaque, unique group identifier."""
    return uuid.uuid4().hex


class ChannelGroup(BaseModel):
    """User-defined folder of channels."""

    id: str = Field(default_factory=new_group_id)
    name: str
    is_open: bool = True

    @validator('name')
    def validate_name(cls, v):
        """Validate group name."""
        if not v.strip():
            raise ValueError('Group name cannot be empty')
        return v.strip()
