"""
Dashboard agent: tracked channels, selection, derived views and reports.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from config.settings import Settings, get_settings
from models.channel import ChannelData, ChannelGroup
from models.video import VideoTypeFilter
from models.view_state import ViewMode, ViewState
from storage.channel_store import (
    ChannelFetchError,
    ChannelNotFoundError,
    ChannelProvider,
    ChannelStore,
    DuplicateChannelError,
    InvalidGroupNameError
)
from storage.database import DatabaseManager
from storage.local_storage import LocalStorage
from tools.aggregation_tools import (
    DASHBOARD_CHART_LIMIT,
    ChannelView,
    ChartRow,
    DashboardView,
    build_channel_view,
    build_chart_rows,
    build_dashboard_view
)
from tools.youtube_tools import YouTubeAPIClient
from agents.narrative_agent import NarrativeOrchestrator, Summarizer
from agents.summarizer_agent import SummarizerAgent
from utils import create_result_dict, safe_log_text

# Setup logging
logger = logging.getLogger(__name__)

MISSING_API_KEY_MESSAGE = "Please enter your YouTube API key first."
EMPTY_HANDLE_MESSAGE = "Please enter a channel handle."
BUSY_MESSAGE = "A channel is already being added."
NOT_FOUND_MESSAGE = "Channel not found. Please check the handle."
DUPLICATE_MESSAGE = "This channel has already been added."
FETCH_FAILED_MESSAGE = "Failed to fetch channel information."


class YouTubeTrackerAgent:
    """
    Session state of the dashboard.

    Holds the channel store, the active selection and filter, and the
    narrative orchestrator. User actions come in through the methods
    below; recoverable failures come back as result dictionaries with
    user-facing messages instead of exceptions.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[LocalStorage] = None,
        provider: Optional[ChannelProvider] = None,
        summarizer: Optional[Summarizer] = None
    ):
        self.settings = settings or get_settings()
        self.storage = storage or LocalStorage(DatabaseManager(self.settings.database_url))
        self.store = ChannelStore(
            self.storage,
            provider or YouTubeAPIClient(self.settings),
            max_results=self.settings.max_results_per_fetch
        )
        if summarizer is None:
            summarizer = SummarizerAgent(self.settings).analyze_channel_performance
        self.narratives = NarrativeOrchestrator(summarizer)
        self.view_state = ViewState()

        self.api_key: Optional[str] = None
        self.loading = False
        self.error: Optional[str] = None

    def load(self) -> None:
        """Restore the API key, channels and groups from local storage."""
        self.api_key = self.storage.load_api_key() or self.settings.youtube_api_key
        self.store.load()

    @property
    def needs_api_key(self) -> bool:
        return not self.api_key

    @property
    def channels(self) -> List[ChannelData]:
        return self.store.channels

    @property
    def groups(self) -> List[ChannelGroup]:
        return self.store.groups

    @property
    def narrative(self) -> Optional[str]:
        return self.narratives.narrative

    @property
    def analyzing(self) -> bool:
        return self.narratives.pending

    def save_api_key(self, api_key: str) -> Dict[str, Any]:
        api_key = (api_key or "").strip()
        if not api_key:
            return create_result_dict(False, [MISSING_API_KEY_MESSAGE])

        self.api_key = api_key
        self.storage.save_api_key(api_key)
        return create_result_dict(True)

    # Channels

    async def add_channel(self, handle: str, target_group_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Add a channel by handle.

        Returns:
            Result dictionary; ``channel`` holds the new ChannelData on success.
        """
        if self.loading:
            logger.info("Ignoring add-channel request while another is in progress")
            return create_result_dict(False, [BUSY_MESSAGE])

        if not self.api_key:
            self.error = MISSING_API_KEY_MESSAGE
            return create_result_dict(False, [self.error])

        if not (handle or "").strip():
            return create_result_dict(False, [EMPTY_HANDLE_MESSAGE])

        self.loading = True
        self.error = None
        try:
            channel = await self.store.add_channel(handle, self.api_key, target_group_id or None)
            return create_result_dict(True, channel=channel)
        except ChannelNotFoundError as e:
            logger.warning(f"Channel not found for {safe_log_text(handle)}: {e}")
            self.error = NOT_FOUND_MESSAGE
        except DuplicateChannelError as e:
            logger.info(str(e))
            self.error = DUPLICATE_MESSAGE
        except ChannelFetchError as e:
            logger.error(f"Failed to add channel {safe_log_text(handle)}: {e}")
            self.error = FETCH_FAILED_MESSAGE
        finally:
            self.loading = False

        return create_result_dict(False, [self.error])

    def remove_channel(self, channel_id: str) -> Dict[str, Any]:
        removed = self.store.remove_channel(channel_id)
        if self.view_state.clear_if_channel(channel_id):
            self.narratives.clear()
        return create_result_dict(removed, [] if removed else [f"Channel {channel_id} is not tracked"])

    def move_channel(self, channel_id: str, group_id: Optional[str] = None) -> Dict[str, Any]:
        """Put a channel into a group, or ungroup it when ``group_id`` is None."""
        moved = self.store.reassign_channel_group(channel_id, group_id)
        return create_result_dict(moved, [] if moved else [f"Channel {channel_id} is not tracked"])

    # Groups

    def add_group(self, name: str) -> Dict[str, Any]:
        try:
            group = self.store.add_group(name)
        except InvalidGroupNameError as e:
            return create_result_dict(False, [str(e)])
        return create_result_dict(True, group=group)

    def rename_group(self, group_id: str, name: str) -> Dict[str, Any]:
        try:
            group = self.store.rename_group(group_id, name)
        except InvalidGroupNameError as e:
            return create_result_dict(False, [str(e)])
        if group is None:
            return create_result_dict(False, [f"Group {group_id} does not exist"])
        return create_result_dict(True, group=group)

    def delete_group(self, group_id: str) -> Dict[str, Any]:
        deleted = self.store.delete_group(group_id)
        if self.view_state.clear_if_group(group_id):
            self.narratives.clear()
        return create_result_dict(deleted, [] if deleted else [f"Group {group_id} does not exist"])

    def toggle_group(self, group_id: str) -> Optional[bool]:
        return self.store.toggle_group_open(group_id)

    # Selection and filter

    def select_channel(self, channel_id: str) -> None:
        self.view_state.select_channel(channel_id)
        self.narratives.clear()

    def select_group(self, group_id: str) -> None:
        self.view_state.select_group(group_id)
        self.narratives.clear()

    def select_dashboard(self) -> None:
        self.view_state.select_dashboard()
        self.narratives.clear()

    def set_video_filter(self, video_filter: VideoTypeFilter) -> None:
        self.view_state.set_video_filter(video_filter)

    # Derived views

    @staticmethod
    def _now(now: Optional[datetime]) -> datetime:
        return now or datetime.now(timezone.utc)

    def dashboard_view(self, now: Optional[datetime] = None) -> DashboardView:
        return build_dashboard_view(self.store.channels, self.view_state, self._now(now))

    def channel_view(self, now: Optional[datetime] = None) -> ChannelView:
        return build_channel_view(self.store.channels, self.view_state, self._now(now))

    def chart_rows(self, now: Optional[datetime] = None) -> List[ChartRow]:
        """Chart data for the active view: all channel videos, or the dashboard's newest ten."""
        if self.view_state.mode == ViewMode.CHANNEL:
            return build_chart_rows(self.channel_view(now).videos)
        return build_chart_rows(self.dashboard_view(now).videos, DASHBOARD_CHART_LIMIT)

    async def generate_narrative(self, now: Optional[datetime] = None) -> Optional[str]:
        """Request a report for the current selection; None if one is already running."""
        return await self.narratives.generate(
            self.store.channels,
            self.store.groups,
            self.view_state,
            self._now(now)
        )

    def get_status(self) -> Dict[str, Any]:
        return {
            "channels": len(self.store.channels),
            "groups": len(self.store.groups),
            "mode": self.view_state.mode.value,
            "video_filter": self.view_state.video_filter.value,
            "has_api_key": not self.needs_api_key,
            "loading": self.loading,
            "analyzing": self.analyzing
        }
