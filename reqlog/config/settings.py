"""
Logging configuration for reqlog

Single source of truth for logger construction using pydantic-settings.

ARCHITECTURAL PRINCIPLES:
- Settings are resolved once, when a Logger is built
- Per-call environment reads (bypass toggle, service name) are configured here
  by variable name; their values are looked up fresh on every log call
- Type-safe validation with automatic conversion
"""

from enum import Enum
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from reqlog.exceptions import ConfigurationException


# =============================================================================
# LOGGING ENUMS
# =============================================================================

class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    DPANIC = "DPANIC"
    PANIC = "PANIC"
    FATAL = "FATAL"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


# =============================================================================
# SETTINGS
# =============================================================================

class LoggingSettings(BaseSettings):
    """Structured engine and environment-lookup configuration"""
    level: LogLevel = Field(default=LogLevel.INFO, alias="LOG_LEVEL")
    format: LogFormat = Field(default=LogFormat.JSON, alias="LOG_FORMAT")
    message_key: str = Field(default="message", alias="LOG_MESSAGE_KEY")
    development: bool = Field(default=False, alias="LOG_DEVELOPMENT")

    # Names of the variables read on every call
    service_name_var: str = Field(default="SERVICE_NAME", alias="REQLOG_SERVICE_NAME_VAR")
    debug_bypass_var: str = Field(default="REQLOG_DEBUG", alias="REQLOG_DEBUG_BYPASS_VAR")

    model_config = {"env_prefix": "", "extra": "ignore", "populate_by_name": True}

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            if v == "WARNING":
                return LogLevel.WARN
        return v

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("message_key", "service_name_var", "debug_bypass_var")
    @classmethod
    def require_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must be a non-empty name")
        return v.strip()


_settings_instance: Optional[LoggingSettings] = None


def get_settings() -> LoggingSettings:
    """
    Get global logging settings instance (singleton pattern).

    Loads a ``.env`` file found from the working directory without overriding variables already
    set in the process environment.

    Raises:
        ConfigurationException: If settings validation fails
    """
    global _settings_instance
    if _settings_instance is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        try:
            _settings_instance = LoggingSettings()
        except ValidationError as e:
            raise ConfigurationException(
                f"Logging settings initialization failed: {e}",
                details={"errors": e.errors(include_url=False)},
            ) from e
    return _settings_instance


def reset_settings() -> None:
    """
    Reset settings instance (primarily for testing).

    Forces recreation of settings on next get_settings() call.
    """
    global _settings_instance
    _settings_instance = None
