"""ID Generation System.

ULID-based identifiers for dispatch chains and render passes.

Features:
- ULIDs: Lexicographically sortable, timestamp-based
- Type-safe: NewType wrappers for different ID categories
- Prefixed: Type-specific prefixes for debugging (dsp_*, rnd_*)
- Injectable: components take an IDGenerator, tests swap in SequentialGenerator
"""

import threading
from datetime import datetime
from typing import NewType, Protocol
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

DispatchID = NewType("DispatchID", str)
"""Top-level action dispatch identifier"""

RenderID = NewType("RenderID", str)
"""Screen render pass identifier"""

# ============================================================================
# ID Prefixes (for debugging and type identification)
# ============================================================================


class Prefix:
    """ID prefix constants."""

    DISPATCH = "dsp"
    RENDER = "rnd"


# ============================================================================
# Generators
# ============================================================================


class IDGenerator(Protocol):
    """Anything that can mint prefixed identifiers."""

    def generate_with_prefix(self, prefix: str) -> str:
        ...


class Generator:
    """ULID generator.

    Monotonic within same millisecond, safe to share between threads.
    """

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"

    def timestamp(self, id_str: str) -> int:
        """Extract timestamp (milliseconds) from ULID."""
        try:
            ulid_str = id_str.split("_")[1] if "_" in id_str else id_str
            ulid = ULID.from_str(ulid_str)
            return int(ulid.timestamp * 1000)
        except (ValueError, IndexError):
            return 0


class SequentialGenerator:
    """Deterministic counter-based generator with resettable state.

    Each instance owns its counter, so tests never depend on ordering
    across other tests.
    """

    def __init__(self, start: int = 0) -> None:
        self._start = start
        self._next = start
        self._lock = threading.Lock()

    def generate(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return str(value)

    def generate_with_prefix(self, prefix: str) -> str:
        return f"{prefix}_{self.generate()}"

    def reset(self) -> None:
        """Restart the sequence from its initial value."""
        with self._lock:
            self._next = self._start


# Singleton instance
_generator = Generator()


def default_generator() -> Generator:
    """Process-wide ULID generator."""
    return _generator


# ============================================================================
# Typed ID Generators
# ============================================================================


def new_dispatch_id(generator: IDGenerator | None = None) -> DispatchID:
    """Generate new dispatch ID."""
    return DispatchID((generator or _generator).generate_with_prefix(Prefix.DISPATCH))


def new_render_id(generator: IDGenerator | None = None) -> RenderID:
    """Generate new render pass ID."""
    return RenderID((generator or _generator).generate_with_prefix(Prefix.RENDER))


# ============================================================================
# Validation and Parsing
# ============================================================================


def is_valid(id_str: str) -> bool:
    """Check if string is a valid (optionally prefixed) ULID."""
    try:
        ulid_part = id_str.split("_")[1] if "_" in id_str else id_str

        # ULID is 26 characters
        if len(ulid_part) != 26:
            return False

        ULID.from_str(ulid_part)
        return True
    except (ValueError, IndexError):
        return False


def extract_timestamp(id_str: str) -> datetime | None:
    """Extract timestamp from ULID, None if invalid."""
    timestamp_ms = _generator.timestamp(id_str)
    return datetime.fromtimestamp(timestamp_ms / 1000.0) if timestamp_ms > 0 else None


def extract_prefix(id_str: str) -> str | None:
    """Extract prefix from prefixed ID."""
    parts = id_str.split("_")
    return parts[0] if len(parts) == 2 else None
