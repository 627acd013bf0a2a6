"""
Pure derivations over tracked channels: weekly windows, type filters,
sorting, engagement totals and chart rows.

Every function here depends only on its arguments. ``now`` is always
passed in so that results can be recomputed (or cached) per evaluation.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel

from models.channel import ChannelData, ChannelGroup
from models.video import SortField, SortOrder, Video, VideoTypeFilter
from models.view_state import ViewMode, ViewState


RECENT_WINDOW = timedelta(days=7)
DASHBOARD_CHART_LIMIT = 10
NARRATIVE_VIDEO_LIMIT = 15
CHART_LABEL_LENGTH = 15

ALL_CHANNELS_LABEL = "All tracked channels"
WEEKLY_OVERVIEW_SUFFIX = "(weekly overview)"


class EngagementTotals(BaseModel):
    """Counts over a filtered video set."""

    video_count: int = 0
    total_likes: int = 0
    total_comments: int = 0


class DashboardView(BaseModel):
    """Aggregate over all channels or the selected group."""

    videos: List[Video]
    channel_count: int
    totals: EngagementTotals


class ChannelView(BaseModel):
    """Filtered uploads of the selected channel."""

    channel: Optional[ChannelData] = None
    videos: List[Video]
    totals: EngagementTotals


class ChartRow(BaseModel):
    """One bar group of the recent performance chart."""

    name: str
    full_title: str
    views: int
    likes: int
    comments: int


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with API timestamps."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def filter_recent_videos(videos: Sequence[Video], now: datetime) -> List[Video]:
    """Videos published within the last seven days, boundary included."""
    cutoff = _as_utc(now) - RECENT_WINDOW
    return [v for v in videos if _as_utc(v.published_at) >= cutoff]


def filter_by_type(videos: Sequence[Video], video_filter: VideoTypeFilter) -> List[Video]:
    """Keep shorts, long-form or everything. Unknown durations only pass ALL."""
    video_filter = VideoTypeFilter(video_filter)
    if video_filter == VideoTypeFilter.SHORTS:
        return [v for v in videos if v.is_short]
    if video_filter == VideoTypeFilter.LONG:
        return [v for v in videos if v.is_long]
    return list(videos)


def filter_videos(videos: Sequence[Video], video_filter: VideoTypeFilter, now: datetime) -> List[Video]:
    """Apply the weekly window, then the type filter."""
    return filter_by_type(filter_recent_videos(videos, now), video_filter)


def resolve_scope(channels: Sequence[ChannelData], view_state: ViewState) -> List[ChannelData]:
    """Channels the current selection covers."""
    mode = view_state.mode
    if mode == ViewMode.CHANNEL:
        return [c for c in channels if c.id == view_state.selected_channel_id]
    if mode == ViewMode.GROUP:
        return [c for c in channels if c.group_id == view_state.selected_group_id]
    return list(channels)


def _sort_value(video: Video, field: SortField):
    if field == SortField.VIEW_COUNT:
        return video.views
    if field == SortField.LIKE_COUNT:
        return video.likes
    if field == SortField.COMMENT_COUNT:
        return video.comments
    return _as_utc(video.published_at)


def sort_videos(
    videos: Sequence[Video],
    field: SortField = SortField.PUBLISHED_AT,
    order: SortOrder = SortOrder.DESC
) -> List[Video]:
    """Stable sort by publish date or an engagement count (missing = 0)."""
    field = SortField(field)
    return sorted(
        videos,
        key=lambda v: _sort_value(v, field),
        reverse=SortOrder(order) == SortOrder.DESC
    )


def next_sort(current_field: SortField, current_order: SortOrder, clicked_field: SortField) -> Tuple[SortField, SortOrder]:
    """
    Column header toggle: the active column flips direction, any other
    column becomes active in descending order.
    """
    if SortField(clicked_field) == SortField(current_field):
        flipped = SortOrder.ASC if SortOrder(current_order) == SortOrder.DESC else SortOrder.DESC
        return SortField(current_field), flipped
    return SortField(clicked_field), SortOrder.DESC


def summarize_videos(videos: Sequence[Video]) -> EngagementTotals:
    return EngagementTotals(
        video_count=len(videos),
        total_likes=sum(v.likes for v in videos),
        total_comments=sum(v.comments for v in videos)
    )


def build_dashboard_view(channels: Sequence[ChannelData], view_state: ViewState, now: datetime) -> DashboardView:
    """
    Weekly aggregate for the selected group, or for every channel when no
    group is selected. Videos come back newest first.
    """
    if view_state.selected_group_id:
        scope = [c for c in channels if c.group_id == view_state.selected_group_id]
    else:
        scope = list(channels)

    videos = []
    for channel in scope:
        videos.extend(filter_videos(channel.videos, view_state.video_filter, now))

    videos = sort_videos(videos, SortField.PUBLISHED_AT, SortOrder.DESC)

    return DashboardView(
        videos=videos,
        channel_count=len(scope),
        totals=summarize_videos(videos)
    )


def build_channel_view(channels: Sequence[ChannelData], view_state: ViewState, now: datetime) -> ChannelView:
    """Weekly, type-filtered uploads of the selected channel."""
    channel = None
    if view_state.selected_channel_id:
        channel = next((c for c in channels if c.id == view_state.selected_channel_id), None)

    if channel is None:
        return ChannelView(channel=None, videos=[], totals=EngagementTotals())

    videos = filter_videos(channel.videos, view_state.video_filter, now)
    return ChannelView(channel=channel, videos=videos, totals=summarize_videos(videos))


def build_chart_rows(videos: Sequence[Video], limit: Optional[int] = None) -> List[ChartRow]:
    """
    Chart data from a newest-first list: the first ``limit`` videos,
    reordered oldest first.
    """
    selected = list(videos) if limit is None else list(videos)[:limit]

    rows = []
    for video in reversed(selected):
        name = video.title
        if len(name) > CHART_LABEL_LENGTH:
            name = name[:CHART_LABEL_LENGTH] + "..."
        rows.append(ChartRow(
            name=name,
            full_title=video.title,
            views=video.views,
            likes=video.likes,
            comments=video.comments
        ))
    return rows


def narrative_label(groups: Sequence[ChannelGroup], view_state: ViewState) -> str:
    """Label for a dashboard or group narrative."""
    group = None
    if view_state.selected_group_id:
        group = next((g for g in groups if g.id == view_state.selected_group_id), None)

    context_name = f'Group "{group.name}"' if group else ALL_CHANNELS_LABEL
    return f"{context_name} {WEEKLY_OVERVIEW_SUFFIX}"


def select_narrative_input(
    channels: Sequence[ChannelData],
    groups: Sequence[ChannelGroup],
    view_state: ViewState,
    now: datetime
) -> Tuple[str, List[Video]]:
    """
    Label and videos to hand to the summarizer.

    A selected channel contributes its whole filtered set; otherwise the
    dashboard aggregate is cut to its newest ``NARRATIVE_VIDEO_LIMIT``.
    """
    channel_view = build_channel_view(channels, view_state, now)
    if channel_view.channel is not None:
        return channel_view.channel.title, channel_view.videos

    dashboard = build_dashboard_view(channels, view_state, now)
    return narrative_label(groups, view_state), dashboard.videos[:NARRATIVE_VIDEO_LIMIT]
