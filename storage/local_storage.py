"""
Load and save of the dashboard's three top-level records.
"""

import json
import logging
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models.channel import ChannelData, ChannelGroup
from .database import DatabaseManager

logger = logging.getLogger(__name__)

API_KEY_KEY = "yt_api_key"
CHANNELS_KEY = "yt_channels"
GROUPS_KEY = "yt_groups"

ModelT = TypeVar("ModelT", bound=BaseModel)


class LocalStorage:
    """
    Persistence adapter over the durable key-value store.

    Malformed channel or group records are logged and discarded so the
    caller always gets a usable (possibly empty) collection. Empty
    collections are never written, which keeps an in-progress startup
    from overwriting what is already on disk.
    """

    def __init__(self, db: DatabaseManager):
        self.db = db

    def load_api_key(self) -> Optional[str]:
        return self.db.get_item(API_KEY_KEY) or None

    def save_api_key(self, api_key: str) -> None:
        self.db.set_item(API_KEY_KEY, api_key)
        logger.info("Saved YouTube API key")

    def load_channels(self) -> List[ChannelData]:
        return self._load_list(CHANNELS_KEY, ChannelData)

    def load_groups(self) -> List[ChannelGroup]:
        return self._load_list(GROUPS_KEY, ChannelGroup)

    def save_channels(self, channels: List[ChannelData]) -> bool:
        """Persist channels; returns False when skipped because empty."""
        return self._save_list(CHANNELS_KEY, channels)

    def save_groups(self, groups: List[ChannelGroup]) -> bool:
        """Persist groups; returns False when skipped because empty."""
        return self._save_list(GROUPS_KEY, groups)

    def _save_list(self, key: str, items: List[BaseModel]) -> bool:
        if not items:
            logger.debug(f"Skipping write of empty {key}")
            return False

        payload = json.dumps([item.model_dump(mode="json") for item in items], ensure_ascii=False)
        self.db.set_item(key, payload)
        logger.debug(f"Persisted {len(items)} records to {key}")
        return True

    def _load_list(self, key: str, model: Type[ModelT]) -> List[ModelT]:
        raw = self.db.get_item(key)
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error(f"Failed to parse {key}, starting empty: {e}")
            return []

        if not isinstance(data, list):
            logger.error(f"Stored {key} is not a list, starting empty")
            return []

        items = []
        for entry in data:
            try:
                items.append(model.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping malformed entry in {key}: {e}")
        return items
