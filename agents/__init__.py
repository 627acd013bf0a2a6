"""
Agents for the YouTube channel dashboard.
"""

from .summarizer_agent import SummarizerAgent
from .narrative_agent import NarrativeOrchestrator
from .youtube_tracker import YouTubeTrackerAgent

__all__ = [
    "SummarizerAgent",
    "NarrativeOrchestrator",
    "YouTubeTrackerAgent"
]
