"""Configuration system for the voice-stress analyzer.

- Declarative field definitions with type, range and choice validation
- Environment variable overrides
"""

from .base import (
    BaseConfig,
    ConfigError,
    FieldDefinition,
    LoggingConfig,
    RequiredFieldError,
    ValidationError,
)

__all__ = [
    "BaseConfig",
    "ConfigError",
    "FieldDefinition",
    "LoggingConfig",
    "RequiredFieldError",
    "ValidationError",
]
