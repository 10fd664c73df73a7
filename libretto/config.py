"""
Settings for the libretto library.

Values come from keyword overrides, then LIBRETTO_* environment variables,
then an optional .env file, then the defaults below.
"""

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from libretto.exceptions import ConfigurationError


class LibrettoSettings(BaseSettings):
    """
    Tunable constants for classification, resolution and estimation.

    Attributes:
        document_version: Version string written into generated documents
        min_segment_weight: Weight floor for zero-word, direction and interlude segments
        recitative_weight_factor: Multiplier applied to segments in a recitative range
        anchor_prefix_chars: Normalized characters compared by the prefix matcher
        log_level: Default log level used by the CLI
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRETTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    document_version: str = Field(
        default="1.0",
        description="Version string written into generated documents",
    )
    min_segment_weight: float = Field(
        default=0.5,
        description="Weight floor for zero-word, direction and interlude segments",
        gt=0.0,
    )
    recitative_weight_factor: float = Field(
        default=0.5,
        description="Multiplier applied to segments inside a recitative range",
        gt=0.0,
        le=1.0,
    )
    anchor_prefix_chars: int = Field(
        default=15,
        description="Number of normalized characters compared by the prefix matcher",
        ge=1,
    )
    log_level: str = Field(
        default="INFO",
        description="Default log level used by the command-line interface",
    )


_settings: LibrettoSettings | None = None


def get_settings() -> LibrettoSettings:
    """
    Get the active settings, creating them from the environment on first use.

    Returns:
        The shared LibrettoSettings instance
    """
    global _settings
    if _settings is None:
        _settings = _build_settings()
    return _settings


def configure(**overrides: Any) -> LibrettoSettings:
    """
    Replace the active settings.

    Args:
        **overrides: Field values taking precedence over the environment

    Returns:
        The new active settings

    Raises:
        ConfigurationError: If an override is unknown or invalid
    """
    global _settings
    unknown = [k for k in overrides if k not in LibrettoSettings.model_fields]
    if unknown:
        raise ConfigurationError(
            f"Unknown setting: {unknown[0]}", setting_name=unknown[0]
        )
    _settings = _build_settings(**overrides)
    return _settings


def reset_settings() -> None:
    """Drop the active settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None


def _build_settings(**overrides: Any) -> LibrettoSettings:
    try:
        return LibrettoSettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        name = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Invalid setting: {first.get('msg', 'invalid value')}",
            setting_name=name,
        ) from e
