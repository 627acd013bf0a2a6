"""
Channel performance reports using LLM providers.
"""

import logging
from datetime import datetime
from typing import List, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from config.settings import Settings, get_settings
from models.video import Video
from utils import safe_log_text

# Setup logging
logger = logging.getLogger(__name__)

# Custom exceptions
class SummarizationError(Exception):
    """Base summarization error."""
    pass

class LLMProviderError(SummarizationError):
    """LLM provider error."""
    pass


class SummarizerAgent:
    """Writes markdown performance reports for a set of recent videos."""

    def __init__(self, settings: Optional[Settings] = None, llm=None):
        self.settings = settings or get_settings()
        self._llm = llm
        self.request_count = 0
        self.last_request_time = None

    @property
    def llm(self):
        if self._llm is None:
            self._llm = self._initialize_llm()
        return self._llm

    def _initialize_llm(self):
        """Initialize LLM based on provider setting."""
        try:
            self.settings.validate_api_keys()

            if self.settings.llm_provider == "openai":
                from langchain_openai import ChatOpenAI

                return ChatOpenAI(
                    api_key=self.settings.openai_api_key,
                    model=self.settings.llm_model,
                    temperature=0.3,
                    timeout=60.0
                )

            elif self.settings.llm_provider == "anthropic":
                # Import here to avoid dependency issues if not using Anthropic
                try:
                    from langchain_anthropic import ChatAnthropic
                except ImportError:
                    raise ImportError("langchain-anthropic not installed. Run: pip install langchain-anthropic")

                return ChatAnthropic(
                    api_key=self.settings.anthropic_api_key,
                    model=self.settings.llm_model,
                    temperature=0.3,
                    max_tokens=1500,
                    timeout=60.0
                )

            elif self.settings.llm_provider == "gemini":
                from langchain_google_genai import ChatGoogleGenerativeAI

                return ChatGoogleGenerativeAI(
                    google_api_key=self.settings.gemini_api_key,
                    model=self.settings.llm_model,
                    temperature=0.3,
                    max_retries=0,
                )

            else:
                raise ValueError(f"Unsupported LLM provider: {self.settings.llm_provider}")

        except Exception as e:
            logger.error(f"Failed to initialize LLM provider {self.settings.llm_provider}: {e}")
            raise LLMProviderError(f"LLM initialization failed: {e}")

    @staticmethod
    def format_video_line(video: Video) -> str:
        stats = video.stats
        views = stats.view_count if stats else None
        likes = stats.like_count if stats else None
        comments = stats.comment_count if stats else None
        return (
            f'- Title: "{video.title}" | Views: {views} | Likes: {likes} '
            f'| Comments: {comments} | Date: {video.published_at.strftime("%Y-%m-%d")}'
        )

    def create_report_messages(self, label: str, videos: List[Video]) -> list:
        """Build the chat messages for a performance report."""
        video_data = "\n".join(self.format_video_line(v) for v in videos)

        prompt = f"""Here is recent video performance data for "{label}".

Data:
{video_data}

Based on this data, write a concise insight report in {self.settings.report_language}, formatted as markdown, covering:
1. **Overall performance trend**: are recent views rising or falling?
2. **Best-performing content**: judging by views and engagement (likes/comments), which topics or styles land best?
3. **Engagement analysis**: anything notable in the like or comment counts?
4. **Actionable advice**: one concrete suggestion for the creator.

Keep the tone professional but encouraging. Use bullet points for readability."""

        return [
            SystemMessage(content="You are a YouTube analytics expert."),
            HumanMessage(content=prompt)
        ]

    async def analyze_channel_performance(self, label: str, videos: List[Video]) -> str:
        """
        Generate a markdown report for ``videos`` under ``label``.

        One call, no retries. Raises SummarizationError on any failure.
        """
        start_time = datetime.utcnow()
        self.last_request_time = start_time
        self.request_count += 1

        try:
            logger.info(f"Generating report for {safe_log_text(label)} over {len(videos)} videos")

            response = await self.llm.ainvoke(self.create_report_messages(label, videos))
            content = response.content
            if isinstance(content, list):
                content = "".join(
                    part.get("text", "") if isinstance(part, dict) else str(part) for part in content
                )
            report = (content or "").strip()

            if not report:
                raise SummarizationError("Empty response from LLM")

            processing_time = (datetime.utcnow() - start_time).total_seconds()
            logger.info(f"Report for {safe_log_text(label)} ready in {processing_time:.2f}s ({len(report)} chars)")
            return report

        except SummarizationError:
            raise
        except Exception as e:
            logger.error(f"Failed to generate report for {safe_log_text(label)}: {e}")
            raise SummarizationError(f"Report generation failed: {e}")

    def get_stats(self) -> dict:
        """Get summarizer statistics."""
        return {
            "provider": self.settings.llm_provider,
            "model": self.settings.llm_model,
            "requests_made": self.request_count,
            "last_request_time": self.last_request_time.isoformat() if self.last_request_time else None
        }

