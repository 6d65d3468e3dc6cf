"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Engine settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SDUI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Rendering
    action_prop_prefix: str = Field(
        default="on", min_length=1, description="Prefix that marks a prop as an event handler"
    )

    # Payload limits
    max_payload_size: int = Field(default=512 * 1024, gt=0, description="Max payload size (bytes)")
    max_payload_depth: int = Field(default=40, gt=0, description="Max payload nesting depth")

    # Monitoring
    enable_metrics: bool = Field(default=True, description="Record Prometheus metrics")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
