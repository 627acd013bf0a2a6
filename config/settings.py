"""
Configuration management using Pydantic Settings.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with validation."""

    # YouTube Data API v3 (the key saved in local storage takes precedence)
    youtube_api_key: Optional[str] = Field(None, description="YouTube Data API v3 key")

    # LLM Provider
    openai_api_key: Optional[str] = Field(None, description="OpenAI API key")
    anthropic_api_key: Optional[str] = Field(None, description="Anthropic API key")
    gemini_api_key: Optional[str] = Field(None, description="Google Gemini API key")
    llm_provider: str = Field("gemini", description="LLM provider to use: openai, anthropic, or gemini")
    llm_model: str = Field("gemini-2.5-flash", description="LLM model to use for performance reports")
    report_language: str = Field("English", description="Language the performance report is written in")

    # Local storage
    database_url: str = Field(
        "sqlite:///./youtube_dashboard.db",
        description="Local storage database URL"
    )

    # Logging Configuration
    log_level: str = Field("INFO", description="Logging level")
    log_file: str = Field("./logs/youtube_dashboard.log", description="Log file path")

    # Environment
    environment: str = Field("development", description="Environment: development, production")

    # Rate Limiting
    youtube_requests_per_minute: int = Field(50, description="YouTube API requests per minute")

    # Video fetching
    max_results_per_fetch: int = Field(50, ge=1, le=50, description="Uploads fetched per channel")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @validator('llm_provider')
    def validate_llm_provider(cls, v):
        """Validate LLM provider."""
        if v not in ['openai', 'anthropic', 'gemini']:
            raise ValueError('llm_provider must be one of: "openai", "anthropic", or "gemini"')
        return v

    @validator('log_level')
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('youtube_requests_per_minute')
    def validate_requests_per_minute(cls, v):
        """Validate request rate is positive."""
        if v <= 0:
            raise ValueError('youtube_requests_per_minute must be positive')
        return v

    def validate_api_keys(self) -> None:
        """Validate that the LLM key for the configured provider is present."""
        if self.llm_provider == "openai" and not self.openai_api_key:
            raise ValueError("openai_api_key is required when using OpenAI provider")
        if self.llm_provider == "anthropic" and not self.anthropic_api_key:
            raise ValueError("anthropic_api_key is required when using Anthropic provider")
        if self.llm_provider == "gemini" and not self.gemini_api_key:
            raise ValueError("gemini_api_key is required when using Gemini provider")

    def setup_logging(self) -> None:
        """Setup logging configuration."""
        # Create logs directory if it doesn't exist
        log_path = Path(self.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(self.log_file, encoding='utf-8'),
                logging.StreamHandler()
            ]
        )

        # Set specific logger levels
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    settings.setup_logging()
    return settings
