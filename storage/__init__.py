"""
Durable storage and the channel store.
"""

from .database import DatabaseManager, StoredRecord
from .local_storage import LocalStorage
from .channel_store import (
    ChannelStore,
    ChannelStoreError,
    ChannelNotFoundError,
    DuplicateChannelError,
    ChannelFetchError,
    InvalidGroupNameError
)

__all__ = [
    "DatabaseManager",
    "StoredRecord",
    "LocalStorage",
    "ChannelStore",
    "ChannelStoreError",
    "ChannelNotFoundError",
    "DuplicateChannelError",
    "ChannelFetchError",
    "InvalidGroupNameError"
]
