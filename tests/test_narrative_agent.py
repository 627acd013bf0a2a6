"""
Tests for single-flight narrative generation.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from unittest.mock import AsyncMock

from agents.narrative_agent import FAILURE_MESSAGE, NO_VIDEOS_MESSAGE, NarrativeOrchestrator
from models.channel import ChannelGroup
from models.view_state import ViewState


class TestNarrativeOrchestrator:
    """Narrative request lifecycle."""

    async def test_success_stores_text(self, make_channel, make_video, now):
        summarizer = AsyncMock(return_value="## Report")
        orchestrator = NarrativeOrchestrator(summarizer)
        channels = [make_channel(videos=[make_video("a")])]

        result = await orchestrator.generate(channels, [], ViewState(), now)

        assert result == "## Report"
        assert orchestrator.narrative == "## Report"
        assert orchestrator.pending is False
        label, videos = summarizer.await_args.args
        assert label == "All tracked channels (weekly overview)"
        assert [v.id for v in videos] == ["a"]

    async def test_empty_input_short_circuits(self, make_channel, make_video, now):
        summarizer = AsyncMock(return_value="unused")
        orchestrator = NarrativeOrchestrator(summarizer)
        channels = [make_channel(videos=[make_video("old", days_ago=30)])]

        result = await orchestrator.generate(channels, [], ViewState(), now)

        assert result == NO_VIDEOS_MESSAGE
        summarizer.assert_not_awaited()

    async def test_empty_channel_selection_short_circuits(self, make_channel, now):
        summarizer = AsyncMock(return_value="unused")
        orchestrator = NarrativeOrchestrator(summarizer)
        channels = [make_channel()]
        state = ViewState()
        state.select_channel(channels[0].id)

        assert await orchestrator.generate(channels, [], state, now) == NO_VIDEOS_MESSAGE
        summarizer.assert_not_awaited()

    async def test_failure_becomes_fixed_message(self, make_channel, make_video, now):
        orchestrator = NarrativeOrchestrator(AsyncMock(side_effect=RuntimeError("quota")))
        channels = [make_channel(videos=[make_video("a")])]

        result = await orchestrator.generate(channels, [], ViewState(), now)

        assert result == FAILURE_MESSAGE
        assert orchestrator.narrative == FAILURE_MESSAGE
        assert orchestrator.pending is False

    async def test_new_result_replaces_previous(self, make_channel, make_video, now):
        summarizer = AsyncMock(side_effect=["first", "second"])
        orchestrator = NarrativeOrchestrator(summarizer)
        channels = [make_channel(videos=[make_video("a")])]

        await orchestrator.generate(channels, [], ViewState(), now)
        await orchestrator.generate(channels, [], ViewState(), now)

        assert orchestrator.narrative == "second"

    async def test_request_while_pending_is_ignored(self, make_channel, make_video, now):
        release = asyncio.Event()
        calls = []

        async def slow_summarizer(label, videos):
            calls.append(label)
            await release.wait()
            return "original result"

        orchestrator = NarrativeOrchestrator(slow_summarizer)
        channels = [make_channel(videos=[make_video("a")])]

        first = asyncio.create_task(orchestrator.generate(channels, [], ViewState(), now))
        await asyncio.sleep(0)
        assert orchestrator.pending is True

        second = await orchestrator.generate(channels, [], ViewState(), now)
        assert second is None

        release.set()
        assert await first == "original result"
        assert calls == ["All tracked channels (weekly overview)"]
        assert orchestrator.narrative == "original result"

    async def test_group_label_passed_to_summarizer(self, make_channel, make_video, now):
        summarizer = AsyncMock(return_value="ok")
        orchestrator = NarrativeOrchestrator(summarizer)
        group = ChannelGroup(id="g1", name="Cooking")
        channels = [make_channel(group_id="g1", videos=[make_video("a")])]
        state = ViewState()
        state.select_group("g1")

        await orchestrator.generate(channels, [group], state, now)

        assert summarizer.await_args.args[0] == 'Group "Cooking" (weekly overview)'

    def test_clear(self):
        orchestrator = NarrativeOrchestrator(AsyncMock())
        orchestrator.narrative = "stale"

        orchestrator.clear()

        assert orchestrator.narrative is None
