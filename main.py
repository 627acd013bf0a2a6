"""
CLI interface for the YouTube channel dashboard.
"""

import asyncio
import argparse
import sys
import logging
from typing import List, Optional

from agents.youtube_tracker import YouTubeTrackerAgent
from config.settings import get_settings
from models.video import SortField, SortOrder, Video, VideoTypeFilter, parse_count
from tools.aggregation_tools import EngagementTotals, sort_videos
from utils import format_compact

# Setup logging
logger = logging.getLogger(__name__)


def print_success(message: str) -> None:
    """Print success message."""
    print(f"[SUCCESS] {message}")


def print_error(message: str) -> None:
    """Print error message."""
    print(f"[ERROR] {message}")


def print_info(message: str) -> None:
    """Print info message."""
    print(f"[INFO] {message}")


def print_warning(message: str) -> None:
    """Print warning message."""
    print(f"[WARNING] {message}")


def create_agent() -> YouTubeTrackerAgent:
    """Create the dashboard agent with state restored from local storage."""
    agent = YouTubeTrackerAgent(get_settings())
    agent.load()
    return agent


def print_result(result: dict, success_message: str) -> None:
    if result["success"]:
        print_success(success_message)
    else:
        for error in result["errors"]:
            print_error(error)


def apply_selection(
    agent: YouTubeTrackerAgent,
    group_id: Optional[str],
    channel_id: Optional[str],
    video_filter: str
) -> bool:
    """Select the requested view; returns False if the target is unknown."""
    if channel_id:
        if not agent.store.get_channel(channel_id):
            print_error(f"Channel {channel_id} is not tracked")
            return False
        agent.select_channel(channel_id)
    elif group_id:
        if not agent.store.get_group(group_id):
            print_error(f"Group {group_id} does not exist")
            return False
        agent.select_group(group_id)
    else:
        agent.select_dashboard()

    agent.set_video_filter(VideoTypeFilter(video_filter))
    return True


def print_totals(totals: EngagementTotals, channel_count: Optional[int] = None) -> None:
    if channel_count is not None:
        print(f"  Channels: {channel_count}")
    print(f"  Videos this week: {totals.video_count}")
    print(f"  Likes: {format_compact(totals.total_likes)}")
    print(f"  Comments: {format_compact(totals.total_comments)}")


def print_videos(videos: List[Video]) -> None:
    if not videos:
        print_info("No videos published in the last 7 days for this filter")
        return

    print(f"  {'Date':<10}  {'Views':>7}  {'Likes':>7}  {'Comments':>8}  Title")
    for video in videos:
        kind = "short" if video.is_short else "long" if video.is_long else "?"
        print(
            f"  {video.published_at.strftime('%Y-%m-%d'):<10}  "
            f"{format_compact(video.views):>7}  "
            f"{format_compact(video.likes):>7}  "
            f"{format_compact(video.comments):>8}  "
            f"[{kind}] {video.title} ({video.channel_title})"
        )


async def set_key_command(api_key: str) -> None:
    agent = create_agent()
    print_result(agent.save_api_key(api_key), "YouTube API key saved")


async def add_channel_command(handle: str, group_id: Optional[str] = None) -> None:
    """Add a channel by handle."""
    agent = create_agent()
    if agent.needs_api_key:
        print_warning("No YouTube API key saved. Run: python main.py set-key <key>")

    print_info(f"Fetching channel information for {handle}...")
    result = await agent.add_channel(handle, group_id)

    if result["success"]:
        channel = result["channel"]
        print_success(f"Added {channel.title} ({channel.id}) with {len(channel.videos)} recent videos")
        if not channel.videos:
            print_warning("No recent uploads could be fetched for this channel")
    else:
        for error in result["errors"]:
            print_error(error)


async def remove_channel_command(channel_id: str) -> None:
    agent = create_agent()
    print_result(agent.remove_channel(channel_id), f"Removed channel {channel_id}")


async def add_group_command(name: str) -> None:
    agent = create_agent()
    result = agent.add_group(name)
    if result["success"]:
        print_success(f"Created group {result['group'].name} ({result['group'].id})")
    else:
        for error in result["errors"]:
            print_error(error)


async def rename_group_command(group_id: str, name: str) -> None:
    agent = create_agent()
    print_result(agent.rename_group(group_id, name), f"Renamed group {group_id}")


async def delete_group_command(group_id: str) -> None:
    agent = create_agent()
    print_result(agent.delete_group(group_id), f"Deleted group {group_id}; its channels are now ungrouped")


async def toggle_group_command(group_id: str) -> None:
    agent = create_agent()
    is_open = agent.toggle_group(group_id)
    if is_open is None:
        print_error(f"Group {group_id} does not exist")
    else:
        print_success(f"Group {group_id} is now {'open' if is_open else 'collapsed'}")


async def move_command(channel_id: str, group_id: Optional[str]) -> None:
    agent = create_agent()
    target = group_id or "ungrouped"
    print_result(agent.move_channel(channel_id, group_id), f"Moved {channel_id} to {target}")


async def list_command() -> None:
    """Show groups and channels as a folder tree."""
    agent = create_agent()

    if not agent.channels and not agent.groups:
        print_info("No channels tracked yet. Add one with: python main.py add-channel <handle>")
        return

    for group in agent.groups:
        members = agent.store.channels_in_group(group.id)
        marker = "v" if group.is_open else ">"
        print(f"{marker} {group.name} [{group.id}] ({len(members)})")
        if group.is_open:
            for channel in members:
                print(f"    {channel.title} [{channel.id}] subscribers={format_compact(parse_count(channel.details.subscriber_count))}")

    ungrouped = agent.store.ungrouped_channels()
    if ungrouped:
        print(f"- Ungrouped ({len(ungrouped)})")
        for channel in ungrouped:
            print(f"    {channel.title} [{channel.id}] subscribers={format_compact(parse_count(channel.details.subscriber_count))}")


async def dashboard_command(
    group_id: Optional[str],
    channel_id: Optional[str],
    video_filter: str,
    sort_field: str,
    sort_order: str
) -> None:
    """Print the weekly dashboard, group or channel view."""
    agent = create_agent()
    if not apply_selection(agent, group_id, channel_id, video_filter):
        return

    if channel_id:
        view = agent.channel_view()
        print_info(f"{view.channel.title}: last 7 days ({video_filter})")
        print_totals(view.totals)
        videos = view.videos
    else:
        view = agent.dashboard_view()
        scope = agent.store.get_group(group_id).name if group_id else "All channels"
        print_info(f"{scope}: last 7 days ({video_filter})")
        print_totals(view.totals, view.channel_count)
        videos = view.videos

    print_videos(sort_videos(videos, SortField(sort_field), SortOrder(sort_order)))


async def analyze_command(group_id: Optional[str], channel_id: Optional[str], video_filter: str) -> None:
    """Generate an AI performance report for the selected view."""
    agent = create_agent()
    if not apply_selection(agent, group_id, channel_id, video_filter):
        return

    print_info("Generating performance report...")
    report = await agent.generate_narrative()
    print(report)


async def status_command() -> None:
    agent = create_agent()
    for key, value in agent.get_status().items():
        print(f"  {key}: {value}")


def add_view_arguments(parser: argparse.ArgumentParser) -> None:
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument("--group", dest="group_id", help="Only channels in this group")
    scope.add_argument("--channel", dest="channel_id", help="A single channel")
    parser.add_argument(
        "--filter",
        dest="video_filter",
        choices=[f.value for f in VideoTypeFilter],
        default=VideoTypeFilter.ALL.value,
        help="Video type filter (default: all)"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="YouTube Channel Dashboard CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py set-key AIza...                     # Save YouTube API key
  python main.py add-group "Tech"                    # Create a group
  python main.py add-channel google --group <id>     # Track a channel by handle
  python main.py move UC123... --group <id>          # Move channel into a group
  python main.py move UC123...                       # Ungroup a channel
  python main.py list                                # Show groups and channels
  python main.py dashboard --filter shorts           # Weekly shorts across all channels
  python main.py dashboard --channel UC123... --sort view_count
  python main.py analyze --group <id>                # AI report for a group
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    key_parser = subparsers.add_parser("set-key", help="Save the YouTube API key")
    key_parser.add_argument("api_key", help="YouTube Data API v3 key")

    add_parser = subparsers.add_parser("add-channel", help="Track a channel by handle")
    add_parser.add_argument("handle", help="Channel handle, e.g. google or @google")
    add_parser.add_argument("--group", dest="group_id", help="Group to put the channel in")

    remove_parser = subparsers.add_parser("remove-channel", help="Stop tracking a channel")
    remove_parser.add_argument("channel_id", help="YouTube channel ID")

    group_parser = subparsers.add_parser("add-group", help="Create a group")
    group_parser.add_argument("name", help="Group name")

    rename_parser = subparsers.add_parser("rename-group", help="Rename a group")
    rename_parser.add_argument("group_id", help="Group ID")
    rename_parser.add_argument("name", help="New group name")

    delete_parser = subparsers.add_parser("delete-group", help="Delete a group (channels are kept)")
    delete_parser.add_argument("group_id", help="Group ID")

    toggle_parser = subparsers.add_parser("toggle-group", help="Open or collapse a group")
    toggle_parser.add_argument("group_id", help="Group ID")

    move_parser = subparsers.add_parser("move", help="Move a channel to a group")
    move_parser.add_argument("channel_id", help="YouTube channel ID")
    move_parser.add_argument("--group", dest="group_id", help="Target group (omit to ungroup)")

    subparsers.add_parser("list", help="List groups and channels")

    dashboard_parser = subparsers.add_parser("dashboard", help="Show weekly statistics")
    add_view_arguments(dashboard_parser)
    dashboard_parser.add_argument(
        "--sort",
        dest="sort_field",
        choices=[f.value for f in SortField],
        default=SortField.PUBLISHED_AT.value,
        help="Sort column (default: published_at)"
    )
    dashboard_parser.add_argument(
        "--order",
        dest="sort_order",
        choices=[o.value for o in SortOrder],
        default=SortOrder.DESC.value,
        help="Sort order (default: desc)"
    )

    analyze_parser = subparsers.add_parser("analyze", help="Generate an AI performance report")
    add_view_arguments(analyze_parser)

    subparsers.add_parser("status", help="Show dashboard status")

    return parser


async def main() -> None:
    """Main CLI function."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    try:
        if args.command == "set-key":
            await set_key_command(args.api_key)

        elif args.command == "add-channel":
            await add_channel_command(args.handle, args.group_id)

        elif args.command == "remove-channel":
            await remove_channel_command(args.channel_id)

        elif args.command == "add-group":
            await add_group_command(args.name)

        elif args.command == "rename-group":
            await rename_group_command(args.group_id, args.name)

        elif args.command == "delete-group":
            await delete_group_command(args.group_id)

        elif args.command == "toggle-group":
            await toggle_group_command(args.group_id)

        elif args.command == "move":
            await move_command(args.channel_id, args.group_id)

        elif args.command == "list":
            await list_command()

        elif args.command == "dashboard":
            await dashboard_command(
                group_id=args.group_id,
                channel_id=args.channel_id,
                video_filter=args.video_filter,
                sort_field=args.sort_field,
                sort_order=args.sort_order
            )

        elif args.command == "analyze":
            await analyze_command(args.group_id, args.channel_id, args.video_filter)

        elif args.command == "status":
            await status_command()

        else:
            print_error(f"Unknown command: {args.command}")
            parser.print_help()

    except KeyboardInterrupt:
        print_info("\nOperation cancelled by user")
    except Exception as e:
        logger.exception("Unexpected CLI error")
        print_error(f"Unexpected error: {e}")
        sys.exit(1)


def cli() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print_info("\nGoodbye!")


if __name__ == "__main__":
    cli()
