"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock mode for video processing enables local development without FFmpeg.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    (SLACK_BOT_TOKEN, FRAME_INTERVAL, MAX_FRAMES, PORT, ...).
    """

    # Service identity
    service_name: str = Field(
        default="video-extractor",
        description="Name reported by the health endpoint"
    )

    # Slack Configuration
    slack_bot_token: str = Field(
        default="",
        description="Bot token (xoxb-...). Authenticates Web API calls and file downloads."
    )
    slack_app_token: str = Field(
        default="",
        description="App-level token (xapp-...). Authenticates the Socket Mode connection."
    )
    slack_signing_secret: str = Field(
        default="",
        description="Signing secret. Only checked when events arrive over HTTP instead of Socket Mode."
    )

    # Frame Sampling
    frame_interval: int = Field(
        default=3,
        ge=1,
        description="Seconds between extracted frames. Widened for long videos to respect max_frames."
    )
    max_frames: int = Field(
        default=10,
        ge=1,
        description="Maximum frames extracted per video."
    )
    frame_quality: int = Field(
        default=2,
        ge=2,
        le=31,
        description="FFmpeg JPEG quality (-q:v). 2 is the highest quality."
    )
    upload_delay_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Pause between frame uploads. Keeps us under Slack's file upload rate limits."
    )

    # Timeouts and limits
    download_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Upper bound for streaming a video from Slack."
    )
    probe_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for ffprobe."
    )
    extraction_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Upper bound for ffmpeg frame extraction."
    )
    max_video_size_mb: int = Field(
        default=0,
        ge=0,
        description="Abort downloads larger than this. 0 disables the check."
    )

    # Video processing
    ffmpeg_path: str = Field(default="ffmpeg", description="Path to the ffmpeg binary")
    ffprobe_path: str = Field(default="ffprobe", description="Path to the ffprobe binary")
    temp_dir: Optional[str] = Field(
        default=None,
        description="Parent directory for per-event workspaces. System temp dir when unset."
    )
    video_mock_mode: bool = Field(
        default=False,
        description="Use placeholder frames instead of FFmpeg. Enables local dev without FFmpeg."
    )

    # HTTP (health check)
    host: str = Field(default="0.0.0.0", description="Bind address for the health endpoint")
    port: int = Field(default=8080, description="Port for the health endpoint")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def max_video_size_bytes(self) -> Optional[int]:
        """Download cap in bytes, or None when disabled."""
        if not self.max_video_size_mb:
            return None
        return self.max_video_size_mb * 1024 * 1024

    def validate_required_fields(self) -> list[str]:
        """
        Return the environment variables that must be set but aren't.

        The signing secret is not required: Socket Mode authenticates
        with the app-level token instead.
        """
        missing = []

        if not self.slack_bot_token:
            missing.append("SLACK_BOT_TOKEN")
        if not self.slack_app_token:
            missing.append("SLACK_APP_TOKEN")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
