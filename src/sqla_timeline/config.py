"""Timeline configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqla_timeline.constants import DEFAULT_TABLE_NAME


class TimelineSettings(BaseSettings):
    """Timeline settings loaded from ``TIMELINE_``-prefixed environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIMELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Recording
    enabled: bool = True
    default_table_name: str = DEFAULT_TABLE_NAME

    # Request context: names of the request.state attributes holding
    # the current actor and the client address
    actor_attribute: str = "user"
    origin_attribute: str = "client_ip"

    middleware_exclude_paths: list[str] = [
        "/health/live",
        "/health/ready",
        "/docs",
        "/redoc",
        "/openapi.json",
    ]

    @field_validator("actor_attribute", "origin_attribute")
    @classmethod
    def validate_attribute_name(cls, v: str) -> str:
        """Validate that a request.state attribute name is a Python identifier.

        Args:
            v: The attribute name

        Returns:
            The validated attribute name

        Raises:
            ValueError: If the name is not a valid identifier
        """
        if not v.isidentifier():
            raise ValueError(f"{v!r} is not a valid attribute name")
        return v


@lru_cache
def get_settings() -> TimelineSettings:
    """Get cached settings instance."""
    return TimelineSettings()


# Global settings instance
settings = get_settings()
