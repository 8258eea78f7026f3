"""Response builder configuration.

Flask-style config classes feed ``app.config``; ``BuilderConfig`` turns the
``RESPONSE_BUILDER_*`` keys into an immutable snapshot that is built once at
startup and handed to the registry and the envelope builder.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from response_builder.domain.exceptions import ConfigurationError

CONFIG_PREFIX = "RESPONSE_BUILDER_"

RESERVED_MIN_API_CODE = 0
RESERVED_MAX_API_CODE = 19


class BuilderConfig(BaseModel):
    """Validated, read-only response builder settings."""

    model_config = ConfigDict(frozen=True)

    min_code: int = Field(default=100)
    max_code: int = Field(default=1024)
    code_map: dict[int, str] = Field(default_factory=dict)
    # Kept raw: the registry reports malformed overrides on lookup.
    response_key_map: Any = Field(default=None)
    debug_trace_enabled: bool = Field(default=False)
    debug_key: Any = Field(default="debug")
    trace_key: Any = Field(default="trace")
    default_locale: str = Field(default="en", min_length=1)
    messages: dict[str, dict[str, str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_code_range(self) -> "BuilderConfig":
        """Keep the application range clear of the reserved range."""
        if self.min_code <= RESERVED_MAX_API_CODE:
            msg = (
                f"min_code ({self.min_code}) overlaps the reserved range "
                f"{RESERVED_MIN_API_CODE}-{RESERVED_MAX_API_CODE}."
            )
            raise ValueError(msg)
        if self.max_code <= self.min_code:
            msg = f"max_code ({self.max_code}) must be greater than min_code ({self.min_code})."
            raise ValueError(msg)

        for code, key in self.code_map.items():
            if not self.min_code <= code <= self.max_code:
                msg = (
                    f"Mapped API code {code} is outside the allowed range "
                    f"{self.min_code}-{self.max_code}."
                )
                raise ValueError(msg)
            if not key:
                msg = f"API code {code} is mapped to an empty message key."
                raise ValueError(msg)

        return self

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "BuilderConfig":
        """Build a config from prefixed keys (e.g. a Flask ``app.config``).

        Raises:
            ConfigurationError: if any value fails validation.
        """
        fields = {
            "min_code": "MIN_CODE",
            "max_code": "MAX_CODE",
            "code_map": "MAP",
            "response_key_map": "RESPONSE_KEY_MAP",
            "debug_trace_enabled": "DEBUG_TRACE_ENABLED",
            "debug_key": "DEBUG_KEY",
            "trace_key": "TRACE_KEY",
            "default_locale": "DEFAULT_LOCALE",
            "messages": "MESSAGES",
        }
        values = {
            name: mapping[CONFIG_PREFIX + key]
            for name, key in fields.items()
            if CONFIG_PREFIX + key in mapping
        }
        try:
            return cls(**values)
        except ValidationError as err:
            raise ConfigurationError(f"Invalid response builder configuration: {err}") from err


class BaseConfig:
    """Base configuration shared across all environments."""

    RESTX_MASK_SWAGGER = False

    RESPONSE_BUILDER_MIN_CODE = 100
    RESPONSE_BUILDER_MAX_CODE = 1024
    RESPONSE_BUILDER_MAP: dict[int, str] = {}
    RESPONSE_BUILDER_DEBUG_TRACE_ENABLED = False
    RESPONSE_BUILDER_DEFAULT_LOCALE = "en"


class DevelopmentConfig(BaseConfig):
    """Development configuration, traces are attached to error responses."""

    DEBUG = True
    RESPONSE_BUILDER_DEBUG_TRACE_ENABLED = True


class TestingConfig(BaseConfig):
    """Testing configuration."""

    TESTING = True


class ProductionConfig(BaseConfig):
    """Production configuration, never leak traces."""

    DEBUG = False


CONFIG_MAP = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
