"""
Pydantic models for data validation and structure.
"""

from .channel import ChannelData, ChannelDetails, ChannelGroup
from .video import SortField, SortOrder, Video, VideoStats, VideoTypeFilter
from .view_state import ViewMode, ViewState

__all__ = [
    "ChannelData",
    "ChannelDetails",
    "ChannelGroup",
    "SortField",
    "SortOrder",
    "Video",
    "VideoStats",
    "VideoTypeFilter",
    "ViewMode",
    "ViewState"
]
