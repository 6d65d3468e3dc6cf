"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    ValidationError,
    ValidationResult,
    PayloadValidator,
    check_payload,
)
from .logging_config import configure_logging, configure_from_settings, get_logger, LogContext
from .json import (
    parse_json,
    parse_json_object,
    safe_json_dumps,
    JSONParseError,
    validate_json_size,
    validate_json_depth,
)


def create_container(*args, **kwargs):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(*args, **kwargs)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Validation
    "ValidationError",
    "ValidationResult",
    "PayloadValidator",
    "check_payload",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "LogContext",
    # JSON
    "parse_json",
    "parse_json_object",
    "safe_json_dumps",
    "JSONParseError",
    "validate_json_size",
    "validate_json_depth",
    # DI
    "create_container",
]
