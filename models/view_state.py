"""
Selection and filter state for the dashboard views.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .video import VideoTypeFilter


class ViewMode(str, Enum):
    """Which detail view is active."""
    DASHBOARD = "dashboard"
    GROUP = "group"
    CHANNEL = "channel"


class ViewState(BaseModel):
    """
    Active selection plus the process-wide video type filter.

    At most one of ``selected_channel_id`` and ``selected_group_id`` is set.
    Transitions go through the ``select_*`` methods, which keep the two
    mutually exclusive. The filter is independent of selection.
    """

    selected_channel_id: Optional[str] = None
    selected_group_id: Optional[str] = None
    video_filter: VideoTypeFilter = VideoTypeFilter.ALL

    @property
    def mode(self) -> ViewMode:
        if self.selected_channel_id:
            return ViewMode.CHANNEL
        if self.selected_group_id:
            return ViewMode.GROUP
        return ViewMode.DASHBOARD

    def select_channel(self, channel_id: str) -> None:
        self.selected_channel_id = channel_id
        self.selected_group_id = None

    def select_group(self, group_id: str) -> None:
        self.selected_group_id = group_id
        self.selected_channel_id = None

    def select_dashboard(self) -> None:
        self.selected_channel_id = None
        self.selected_group_id = None

    def set_video_filter(self, video_filter: VideoTypeFilter) -> None:
        self.video_filter = VideoTypeFilter(video_filter)

    def clear_if_channel(self, channel_id: str) -> bool:
        """Drop the channel selection if it points at ``channel_id``."""
        if self.selected_channel_id == channel_id:
            self.selected_channel_id = None
            return True
        return False

    def clear_if_group(self, group_id: str) -> bool:
        """Drop the group selection if it points at ``group_id``."""
        if self.selected_group_id == group_id:
            self.selected_group_id = None
            return True
        return False
