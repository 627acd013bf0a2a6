"""
Canonical channel and group collections with write-through persistence.
"""

import logging
from typing import Dict, List, Optional, Protocol

from models.channel import ChannelData, ChannelDetails, ChannelGroup
from models.video import Video
from utils import safe_log_text
from .local_storage import LocalStorage

logger = logging.getLogger(__name__)


# Custom exceptions
class ChannelStoreError(Exception):
    """Base channel store error."""
    pass

class ChannelNotFoundError(ChannelStoreError):
    """The handle did not resolve to a channel."""
    pass

class DuplicateChannelError(ChannelStoreError):
    """The channel is already tracked."""
    pass

class ChannelFetchError(ChannelStoreError):
    """Transport or parse failure while fetching a channel."""
    pass

class InvalidGroupNameError(ChannelStoreError):
    """Group name is empty."""
    pass


class ChannelProvider(Protocol):
    """Channel data source used when adding channels."""

    async def lookup_channel_by_handle(self, handle: str, api_key: str) -> Optional[ChannelDetails]:
        ...

    async def list_recent_uploads(self, uploads_playlist_id: str, api_key: str, max_results: int = 50) -> List[Video]:
        ...


class ChannelStore:
    """
    Owns the tracked channels and channel groups.

    Records are kept in insertion order and addressed by their stable IDs.
    Every mutation is written through to ``LocalStorage`` before it
    returns; empty collections are left unwritten.
    """

    def __init__(self, storage: LocalStorage, provider: Optional[ChannelProvider] = None, max_results: int = 50):
        self.storage = storage
        self.provider = provider
        self.max_results = max_results
        self._channels: Dict[str, ChannelData] = {}
        self._groups: Dict[str, ChannelGroup] = {}

    # Loading

    def load(self) -> None:
        """Replace in-memory state with what durable storage holds."""
        self._channels = {}
        for channel in self.storage.load_channels():
            if channel.id in self._channels:
                logger.warning(f"Dropping duplicate stored channel {channel.id}")
                continue
            self._channels[channel.id] = channel

        self._groups = {group.id: group for group in self.storage.load_groups()}

        for channel in self._channels.values():
            if channel.group_id and channel.group_id not in self._groups:
                logger.warning(f"Channel {channel.id} references unknown group {channel.group_id}, ungrouping")
                self._channels[channel.id] = channel.model_copy(update={"group_id": None})

        logger.info(f"Loaded {len(self._channels)} channels and {len(self._groups)} groups")

    # Queries

    @property
    def channels(self) -> List[ChannelData]:
        return list(self._channels.values())

    @property
    def groups(self) -> List[ChannelGroup]:
        return list(self._groups.values())

    def get_channel(self, channel_id: str) -> Optional[ChannelData]:
        return self._channels.get(channel_id)

    def get_group(self, group_id: str) -> Optional[ChannelGroup]:
        return self._groups.get(group_id)

    def channels_in_group(self, group_id: str) -> List[ChannelData]:
        return [c for c in self._channels.values() if c.group_id == group_id]

    def ungrouped_channels(self) -> List[ChannelData]:
        return [c for c in self._channels.values() if not c.group_id]

    # Channel mutations

    async def add_channel(self, handle: str, api_key: str, target_group_id: Optional[str] = None) -> ChannelData:
        """
        Look up ``handle`` and start tracking it.

        Raises:
            ChannelNotFoundError: the provider returned nothing.
            DuplicateChannelError: the channel is already tracked.
            ChannelFetchError: the provider failed unexpectedly.

        A failed uploads fetch after a successful lookup still adds the
        channel, with no videos.
        """
        handle = (handle or "").strip()
        if not handle:
            raise ChannelNotFoundError("Channel handle is empty")
        if self.provider is None:
            raise ChannelFetchError("No channel provider configured")

        try:
            details = await self.provider.lookup_channel_by_handle(handle, api_key)
        except Exception as e:
            logger.error(f"Channel lookup for {safe_log_text(handle)} failed: {e}")
            raise ChannelFetchError(f"Failed to fetch channel {handle}: {e}")

        if details is None:
            raise ChannelNotFoundError(f"Channel {handle} not found")
        if details.id in self._channels:
            raise DuplicateChannelError(f"Channel {details.id} is already tracked")

        try:
            videos = await self.provider.list_recent_uploads(details.uploads_playlist_id, api_key, self.max_results)
        except Exception as e:
            logger.error(f"Upload listing for {details.id} failed, adding without videos: {e}")
            videos = []

        # Re-check: another add may have landed while we were awaiting
        if details.id in self._channels:
            raise DuplicateChannelError(f"Channel {details.id} is already tracked")

        if target_group_id and target_group_id not in self._groups:
            logger.warning(f"Target group {target_group_id} does not exist, adding {details.id} ungrouped")
            target_group_id = None

        channel = ChannelData(details=details, videos=list(videos), group_id=target_group_id)
        self._channels[channel.id] = channel
        self._persist_channels()

        logger.info(f"Added channel {safe_log_text(details.title)} ({details.id}) with {len(channel.videos)} videos")
        return channel

    def remove_channel(self, channel_id: str) -> bool:
        """Stop tracking a channel. Returns False if it was not tracked."""
        if self._channels.pop(channel_id, None) is None:
            return False

        self._persist_channels()
        logger.info(f"Removed channel {channel_id}")
        return True

    def reassign_channel_group(self, channel_id: str, group_id: Optional[str] = None) -> bool:
        """Move a channel into ``group_id``, or out of any group when None."""
        channel = self._channels.get(channel_id)
        if channel is None:
            logger.warning(f"Cannot move unknown channel {channel_id}")
            return False

        if group_id and group_id not in self._groups:
            logger.warning(f"Moving channel {channel_id} to unknown group {group_id}")

        self._channels[channel_id] = channel.model_copy(update={"group_id": group_id or None})
        self._persist_channels()
        return True

    # Group mutations

    def add_group(self, name: str) -> ChannelGroup:
        """Create an open group. Raises InvalidGroupNameError for a blank name."""
        if not name or not name.strip():
            raise InvalidGroupNameError("Group name cannot be empty")

        group = ChannelGroup(name=name)
        while group.id in self._groups:
            group = ChannelGroup(name=name)

        self._groups[group.id] = group
        self._persist_groups()

        logger.info(f"Created group {safe_log_text(group.name)} ({group.id})")
        return group

    def rename_group(self, group_id: str, name: str) -> Optional[ChannelGroup]:
        if not name or not name.strip():
            raise InvalidGroupNameError("Group name cannot be empty")

        group = self._groups.get(group_id)
        if group is None:
            return None

        group = group.model_copy(update={"name": name.strip()})
        self._groups[group_id] = group
        self._persist_groups()
        return group

    def delete_group(self, group_id: str) -> bool:
        """Delete a group, moving its channels to ungrouped."""
        if group_id not in self._groups:
            return False

        members = [c for c in self._channels.values() if c.group_id == group_id]
        for channel in members:
            self._channels[channel.id] = channel.model_copy(update={"group_id": None})

        del self._groups[group_id]

        self._persist_channels()
        self._persist_groups()

        logger.info(f"Deleted group {group_id}, ungrouped {len(members)} channels")
        return True

    def toggle_group_open(self, group_id: str) -> Optional[bool]:
        """Flip a group's open flag; returns the new value."""
        group = self._groups.get(group_id)
        if group is None:
            return None

        group = group.model_copy(update={"is_open": not group.is_open})
        self._groups[group_id] = group
        self._persist_groups()
        return group.is_open

    # Persistence

    def _persist_channels(self) -> None:
        self.storage.save_channels(self.channels)

    def _persist_groups(self) -> None:
        self.storage.save_groups(self.groups)
