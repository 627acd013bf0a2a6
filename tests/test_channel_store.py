"""
Tests for channel store mutations, invariants and write-through persistence.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json
from unittest.mock import AsyncMock

import pytest

from storage.channel_store import (
    ChannelFetchError,
    ChannelNotFoundError,
    ChannelStore,
    DuplicateChannelError,
    InvalidGroupNameError
)
from storage.local_storage import CHANNELS_KEY, GROUPS_KEY


class TestAddChannel:
    """Adding channels through the provider."""

    async def test_add_channel_success(self, storage, provider):
        store = ChannelStore(storage, provider)

        channel = await store.add_channel("testchannel", "api-key")

        assert channel.id == "UC1234567890123456789012"
        assert len(channel.videos) == 2
        assert channel.group_id is None
        assert store.channels == [channel]
        provider.lookup_channel_by_handle.assert_awaited_once_with("testchannel", "api-key")
        provider.list_recent_uploads.assert_awaited_once_with("UU1234567890123456789012", "api-key", 50)

    async def test_add_channel_into_group(self, storage, provider):
        store = ChannelStore(storage, provider)
        group = store.add_group("Tech")

        channel = await store.add_channel("testchannel", "api-key", group.id)

        assert channel.group_id == group.id
        assert store.channels_in_group(group.id) == [channel]

    async def test_add_channel_unknown_group_is_ungrouped(self, storage, provider):
        store = ChannelStore(storage, provider)

        channel = await store.add_channel("testchannel", "api-key", "missing-group")

        assert channel.group_id is None

    async def test_duplicate_leaves_collection_unchanged(self, storage, provider):
        store = ChannelStore(storage, provider)
        await store.add_channel("testchannel", "api-key")
        before = store.channels

        with pytest.raises(DuplicateChannelError):
            await store.add_channel("other-handle-same-channel", "api-key")

        assert store.channels == before
        # Uploads are only listed for the first, successful add
        assert provider.list_recent_uploads.await_count == 1

    async def test_not_found(self, storage, provider):
        provider.lookup_channel_by_handle = AsyncMock(return_value=None)
        store = ChannelStore(storage, provider)

        with pytest.raises(ChannelNotFoundError):
            await store.add_channel("nobody", "api-key")

        assert store.channels == []
        provider.list_recent_uploads.assert_not_awaited()

    async def test_blank_handle_does_not_call_provider(self, storage, provider):
        store = ChannelStore(storage, provider)

        with pytest.raises(ChannelNotFoundError):
            await store.add_channel("   ", "api-key")

        provider.lookup_channel_by_handle.assert_not_awaited()

    async def test_lookup_exception_is_fetch_error(self, storage, provider):
        provider.lookup_channel_by_handle = AsyncMock(side_effect=RuntimeError("connection reset"))
        store = ChannelStore(storage, provider)

        with pytest.raises(ChannelFetchError):
            await store.add_channel("testchannel", "api-key")

        assert store.channels == []

    async def test_uploads_failure_keeps_channel_without_videos(self, storage, provider):
        provider.list_recent_uploads = AsyncMock(side_effect=RuntimeError("boom"))
        store = ChannelStore(storage, provider)

        channel = await store.add_channel("testchannel", "api-key")

        assert channel.videos == []
        assert store.get_channel(channel.id) is not None

    async def test_add_persists(self, storage, provider):
        store = ChannelStore(storage, provider)
        await store.add_channel("testchannel", "api-key")

        assert [c.id for c in storage.load_channels()] == ["UC1234567890123456789012"]


class TestRemoveAndMove:
    """Removing and regrouping channels."""

    async def test_remove_channel(self, storage, provider):
        store = ChannelStore(storage, provider)
        channel = await store.add_channel("testchannel", "api-key")

        assert store.remove_channel(channel.id) is True
        assert store.channels == []

    def test_remove_absent_is_noop(self, storage):
        store = ChannelStore(storage)
        assert store.remove_channel("UCmissing") is False

    async def test_reassign_and_clear_group(self, storage, provider):
        store = ChannelStore(storage, provider)
        group = store.add_group("Music")
        channel = await store.add_channel("testchannel", "api-key")

        assert store.reassign_channel_group(channel.id, group.id) is True
        assert store.get_channel(channel.id).group_id == group.id
        assert storage.load_channels()[0].group_id == group.id

        store.reassign_channel_group(channel.id, None)
        assert store.get_channel(channel.id).group_id is None
        assert store.ungrouped_channels()[0].id == channel.id

    def test_reassign_unknown_channel(self, storage):
        store = ChannelStore(storage)
        assert store.reassign_channel_group("UCmissing", None) is False


class TestGroups:
    """Group lifecycle."""

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_blank_group_name_rejected(self, storage, name):
        store = ChannelStore(storage)

        with pytest.raises(InvalidGroupNameError):
            store.add_group(name)

        assert store.groups == []
        assert storage.db.get_item(GROUPS_KEY) is None

    def test_add_group_defaults(self, storage):
        store = ChannelStore(storage)

        group = store.add_group("  Gaming  ")

        assert group.name == "Gaming"
        assert group.is_open is True
        assert group.id

    def test_group_ids_are_unique(self, storage):
        store = ChannelStore(storage)
        ids = {store.add_group(f"Group {i}").id for i in range(20)}
        assert len(ids) == 20

    def test_toggle_group_open(self, storage):
        store = ChannelStore(storage)
        group = store.add_group("News")

        assert store.toggle_group_open(group.id) is False
        assert store.toggle_group_open(group.id) is True
        assert store.get_group(group.id).name == "News"
        assert store.toggle_group_open("missing") is None

    def test_rename_group(self, storage):
        store = ChannelStore(storage)
        group = store.add_group("Old")

        renamed = store.rename_group(group.id, "New")

        assert renamed.name == "New"
        assert storage.load_groups()[0].name == "New"
        with pytest.raises(InvalidGroupNameError):
            store.rename_group(group.id, " ")

    def test_delete_group_ungroups_members(self, storage, make_channel):
        store = ChannelStore(storage)
        group = store.add_group("G1")
        other = store.add_group("G2")
        store._channels = {
            "A": make_channel("A", group_id=group.id),
            "B": make_channel("B", group_id=other.id)
        }

        assert store.delete_group(group.id) is True

        assert store.get_channel("A").group_id is None
        assert store.get_channel("B").group_id == other.id
        assert [g.id for g in store.groups] == [other.id]
        assert all(c.group_id != group.id for c in storage.load_channels())

    def test_delete_only_group_scenario(self, storage, make_channel):
        store = ChannelStore(storage)
        group = store.add_group("G1")
        store._channels = {"A": make_channel("A", group_id=group.id)}

        store.delete_group(group.id)

        assert store.get_channel("A").group_id is None
        assert store.groups == []

    def test_delete_missing_group_is_noop(self, storage, make_channel):
        store = ChannelStore(storage)
        store._channels = {"A": make_channel("A")}

        assert store.delete_group("missing") is False
        assert store.get_channel("A").group_id is None


class TestPersistence:
    """Loading and write-through."""

    async def test_round_trip(self, storage, provider):
        store = ChannelStore(storage, provider)
        group = store.add_group("Tech")
        await store.add_channel("testchannel", "api-key", group.id)

        reloaded = ChannelStore(storage)
        reloaded.load()

        assert reloaded.channels == store.channels
        assert reloaded.groups == store.groups
        assert [v.id for v in reloaded.channels[0].videos] == ["vid00000001", "vid00000002"]

    async def test_empty_collections_are_not_written(self, storage, provider):
        store = ChannelStore(storage, provider)
        channel = await store.add_channel("testchannel", "api-key")

        store.remove_channel(channel.id)

        # The last channel's removal leaves the previous record in place
        assert [c.id for c in storage.load_channels()] == [channel.id]

    def test_corrupt_storage_starts_empty(self, storage):
        storage.db.set_item(CHANNELS_KEY, "{not json")
        storage.db.set_item(GROUPS_KEY, json.dumps({"not": "a list"}))
        store = ChannelStore(storage)

        store.load()

        assert store.channels == []
        assert store.groups == []

    def test_malformed_entries_are_skipped(self, storage, make_channel):
        good = make_channel("UCgood").model_dump(mode="json")
        storage.db.set_item(CHANNELS_KEY, json.dumps([good, {"details": {"title": "no id"}}]))
        store = ChannelStore(storage)

        store.load()

        assert [c.id for c in store.channels] == ["UCgood"]

    def test_load_repairs_dangling_group_references(self, storage, make_channel):
        storage.save_channels([make_channel("UCorphan", group_id="gone")])
        store = ChannelStore(storage)

        store.load()

        assert store.get_channel("UCorphan").group_id is None
