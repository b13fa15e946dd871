"""Configuration system for the memory bridge."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Memory bridge configuration.

    Values come from constructor arguments first, then ``CLAUDE_MEM_*``
    environment variables, then ``.env``, then the defaults below.
    """

    # Worker service
    host: str = Field(
        default="127.0.0.1",
        description="Host of the memory worker service",
    )
    port: int = Field(
        default=37777,
        ge=1,
        le=65535,
        description="Port of the memory worker service",
    )

    # Timeouts
    readiness_timeout: float = Field(
        default=5.0,
        gt=0.0,
        le=5.0,
        description="Deadline in seconds for the liveness probe",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Deadline in seconds for every dispatch and query call",
    )

    # Session defaults
    default_project: str = Field(
        default="unknown",
        min_length=1,
        description="Project name used when the host does not provide one",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit structured JSON log lines",
    )

    model_config = {
        "env_prefix": "CLAUDE_MEM_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def base_url(self) -> str:
        """Root URL of the worker service, without trailing slash."""
        return f"http://{self.host}:{self.port}"


# Settings singleton with dependency injection support
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings instance (lazy-loaded singleton).

    Returns:
        The Settings instance.

    Example:
        from mem_bridge.config import get_settings
        settings = get_settings()
        print(settings.base_url)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override the settings instance (for testing).

    Args:
        new_settings: The new Settings instance to use.
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to None (forces reload on next get_settings call)."""
    global _settings
    _settings = None

