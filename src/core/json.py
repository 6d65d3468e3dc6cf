"""Fast JSON decoding and encoding for server payloads."""

from typing import Any
import sys

import orjson


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def parse_json(data: str | bytes) -> Any:
    """
    Decode a JSON document.

    Args:
        data: JSON text or UTF-8 bytes

    Returns:
        Decoded value

    Raises:
        JSONParseError: If the document is not valid JSON
    """
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise JSONParseError(f"Invalid JSON: {e}", e) from e


def parse_json_object(data: str | bytes) -> dict[str, Any]:
    """Decode a JSON document that must be an object."""
    result = parse_json(data)
    if not isinstance(result, dict):
        raise JSONParseError(f"Expected object, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, indent: int = 0) -> str:
    """
    Encode object to JSON string.

    Args:
        obj: Object to encode
        indent: 2 for pretty output, 0 for compact

    Returns:
        JSON string
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(obj, option=option, default=str).decode("utf-8")


def validate_json_size(data: str | bytes, max_size: int, name: str = "JSON") -> None:
    """
    Validate JSON size before decoding.

    Raises:
        JSONParseError: If size exceeds limit
    """
    size = len(data) if isinstance(data, bytes) else sys.getsizeof(data)
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = 20, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth so recursive rendering stays bounded.

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
