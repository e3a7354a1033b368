"""Environment configuration for the menu service.

Settings are read from the process environment once at startup. Values arrive
as strings and are parsed strictly: anything unrecognised is a configuration
error rather than a silent default.
"""

import math
import os
from collections.abc import Mapping
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class Environment(str, Enum):
    """Deployment environments the service accepts."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


class ConfigurationError(Exception):
    """Raised when the environment does not describe a valid configuration."""

    def __init__(self, issues: list[str]) -> None:
        super().__init__("Environment variables failed validation: " + "; ".join(issues))
        self.issues = issues


def parse_boolean(value: str) -> bool:
    """Parse a strict boolean flag.

    Only "true" and "false" are accepted, ignoring case and surrounding
    whitespace.

    Raises:
        ValueError: If the value is any other string
    """
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValueError(f"Expected 'true' or 'false', received {value!r}")


def parse_port(value: str) -> int:
    """Parse a TCP port number in the range 0-65535.

    Raises:
        ValueError: If the value is empty, not an integer, or out of range
    """
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Port must not be empty")

    try:
        number = float(trimmed)
    except ValueError:
        raise ValueError(f"Port must be a number, received {value!r}") from None

    if not math.isfinite(number) or not number.is_integer():
        raise ValueError(f"Port must be an integer, received {value!r}")

    port = int(number)
    if port < 0 or port > 65535:
        raise ValueError(f"Port must be between 0 and 65535, received {port}")
    return port


LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseModel):
    """Validated service settings."""

    model_config = ConfigDict(frozen=True)

    ENVIRONMENT: Environment = Field(Environment.DEVELOPMENT, description="Deployment environment")
    PORT: int = Field(8001, description="Port the HTTP server listens on")
    HOST: str = Field("0.0.0.0", description="Interface the HTTP server binds to")
    DEBUG: bool = Field(False, description="Enable debug logging")
    LOG_LEVEL: LogLevel = Field("INFO", description="Root log level when DEBUG is off")

    @field_validator("PORT", mode="before")
    @classmethod
    def validate_port(cls, v: object) -> object:
        """Parse PORT from its environment string form."""
        if isinstance(v, str):
            return parse_port(v)
        return v

    @field_validator("DEBUG", mode="before")
    @classmethod
    def validate_debug(cls, v: object) -> object:
        """Parse DEBUG from its environment string form."""
        if isinstance(v, str):
            return parse_boolean(v)
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: object) -> object:
        """Normalize LOG_LEVEL to an upper-case logging level name."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT is Environment.PRODUCTION

    @property
    def effective_log_level(self) -> str:
        """Log level to configure, forced to DEBUG when DEBUG is on."""
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Load and validate settings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If any variable fails validation
    """
    source = os.environ if environ is None else environ
    raw = {name: source[name] for name in Settings.model_fields if name in source}

    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        issues = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ConfigurationError(issues) from e
