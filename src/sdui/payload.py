"""Payload Loader - server JSON to descriptors with validation."""

from typing import Any, TypeVar

from pydantic import ValidationError as ModelValidationError
from returns.result import Failure, Result, Success

from core import JSONParseError, PayloadValidator, ValidationError, ValidationResult, get_logger, get_settings
from core.json import parse_json

from .models import ComponentDescriptor, Descriptor, ScreenDescriptor, SectionDescriptor

logger = get_logger(__name__)

D = TypeVar("D", bound=Descriptor)


def _default_validator() -> PayloadValidator:
    settings = get_settings()
    return PayloadValidator(max_size=settings.max_payload_size, max_depth=settings.max_payload_depth)


def _load(
    text: str | bytes,
    model: type[D],
    required: tuple[str, ...],
    validator: PayloadValidator | None,
) -> D:
    validator = validator or _default_validator()
    name = model.__name__

    validator.check_raw(text, name)
    try:
        data: Any = parse_json(text)
    except JSONParseError as e:
        logger.error("json_parse_failed", model=name, error=str(e))
        raise ValidationError(f"Invalid JSON: {e}") from e

    validator.check_decoded(data, required)

    try:
        return model.model_validate(data)
    except ModelValidationError as e:
        logger.error("payload_invalid", model=name, errors=e.error_count())
        raise ValidationError(f"Invalid {name}: {e}") from e


def parse_component(text: str | bytes, validator: PayloadValidator | None = None) -> ComponentDescriptor:
    """
    Parse a single component payload.

    Raises:
        ValidationError: On invalid JSON, exceeded limits or schema mismatch
    """
    return _load(text, ComponentDescriptor, ("type",), validator)


def parse_section(text: str | bytes, validator: PayloadValidator | None = None) -> SectionDescriptor:
    """Parse a section payload (requires id and components)."""
    return _load(text, SectionDescriptor, ("id", "components"), validator)


def parse_screen(text: str | bytes, validator: PayloadValidator | None = None) -> ScreenDescriptor:
    """Parse a screen payload (requires id and sections)."""
    screen = _load(text, ScreenDescriptor, ("id", "sections"), validator)
    logger.debug("screen_parsed", screen_id=screen.id, sections=len(screen.sections))
    return screen


def load_screen(
    text: str | bytes, validator: PayloadValidator | None = None
) -> Result[ScreenDescriptor, ValidationResult]:
    """
    Parse a screen payload (Result pattern version).

    Returns:
        Success with the descriptor, or Failure with the reason
    """
    try:
        return Success(parse_screen(text, validator))
    except ValidationError as e:
        return Failure(ValidationResult(str(e)))
