"""Payload validation with Result-returning variants."""

from dataclasses import dataclass
from typing import Any
from returns.result import Result, Success, Failure

from .json import JSONParseError, validate_json_depth, validate_json_size


# Validation limits
MAX_PAYLOAD_SIZE = 512 * 1024  # 512KB
MAX_PAYLOAD_DEPTH = 40


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class PayloadValidator:
    """Structural checks on decoded server payloads before model validation."""

    def __init__(self, max_size: int = MAX_PAYLOAD_SIZE, max_depth: int = MAX_PAYLOAD_DEPTH) -> None:
        self.max_size = max_size
        self.max_depth = max_depth

    def check_raw(self, text: str | bytes, name: str = "payload") -> None:
        """Size check on the undecoded document."""
        try:
            validate_json_size(text, self.max_size, name)
        except JSONParseError as e:
            raise ValidationError(str(e)) from e

    def check_decoded(self, data: Any, required: tuple[str, ...] = ()) -> None:
        """
        Depth and required-field checks on a decoded document.

        Raises:
            ValidationError: If validation fails
        """
        try:
            validate_json_depth(data, self.max_depth)
        except JSONParseError as e:
            raise ValidationError(str(e)) from e

        if not isinstance(data, dict):
            raise ValidationError(f"Expected JSON object, got {type(data).__name__}")

        for field in required:
            if field not in data:
                raise ValidationError(f"Payload missing required '{field}' field")

        for field in ("components", "sections", "children"):
            if data.get(field) is not None and not isinstance(data[field], list):
                raise ValidationError(f"Payload '{field}' must be a list")


def check_payload(
    validator: PayloadValidator, data: Any, required: tuple[str, ...] = ()
) -> Result[None, ValidationResult]:
    """Result-pattern version of PayloadValidator.check_decoded."""
    try:
        validator.check_decoded(data, required)
        return Success(None)
    except ValidationError as e:
        return Failure(ValidationResult(str(e)))
