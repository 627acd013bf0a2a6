"""
Single-flight orchestration of narrative performance reports.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Sequence

from models.channel import ChannelData, ChannelGroup
from models.video import Video
from models.view_state import ViewState
from tools.aggregation_tools import select_narrative_input
from utils import safe_log_text

logger = logging.getLogger(__name__)

NO_VIDEOS_MESSAGE = "There are no videos matching the selected filters to analyze."
FAILURE_MESSAGE = "Failed to generate the analysis. Please check your API settings."

Summarizer = Callable[[str, List[Video]], Awaitable[str]]


class NarrativeOrchestrator:
    """
    Runs at most one narrative request at a time.

    A request made while another is pending is ignored. Whatever the
    pending request settles with (report text, the empty-input message or
    the failure message) becomes the displayed narrative.
    """

    def __init__(self, summarizer: Summarizer):
        self.summarizer = summarizer
        self.pending = False
        self.narrative: Optional[str] = None

    def clear(self) -> None:
        """Drop the displayed narrative. Does not cancel a pending request."""
        self.narrative = None

    async def generate(
        self,
        channels: Sequence[ChannelData],
        groups: Sequence[ChannelGroup],
        view_state: ViewState,
        now: datetime
    ) -> Optional[str]:
        """Produce a narrative for the current selection, or None if busy."""
        if self.pending:
            logger.info("Narrative request already in progress, ignoring")
            return None

        self.pending = True
        self.narrative = None
        try:
            label, videos = select_narrative_input(channels, groups, view_state, now)

            if not videos:
                logger.info(f"No videos to analyze for {safe_log_text(label)}")
                result = NO_VIDEOS_MESSAGE
            else:
                result = await self.summarizer(label, videos)
        except Exception as e:
            logger.error(f"Narrative generation failed: {e}")
            result = FAILURE_MESSAGE
        finally:
            self.pending = False

        self.narrative = result
        return result
