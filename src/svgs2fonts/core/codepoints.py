"""Stable code point assignment for icon names.

Each icon name hashes (DJB2 over its UTF-16 code units) to a slot in the
configured range. Collisions probe upward and wrap to the range start.
Code points that cannot appear in an XML character reference (C0
controls, surrogates, U+FFFE and U+FFFF) are never assigned.
"""

from collections.abc import Mapping
from types import MappingProxyType

import structlog

from svgs2fonts.exceptions import CodePointRangeExhaustedError

logger = structlog.get_logger(__name__)

DJB2_SEED = 5381
HASH_MASK = 0x7FFFFFFF

# Half-open [low, high) intervals, sorted and non-overlapping
EXCLUDED_RANGES: tuple[tuple[int, int], ...] = (
    (0x0000, 0x0020),
    (0xD800, 0xE000),
    (0xFFFE, 0x10000),
)


def djb2_hash(text: str) -> int:
    """DJB2 hash of the UTF-16 code units of ``text``, masked to 31 bits."""
    data = text.encode("utf-16-le")
    value = DJB2_SEED
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = ((value << 5) + value + unit) & HASH_MASK
    return value


class CodePointAssigner:
    """Maps icon names into a code point range without collisions.

    The range ``[start, maximum)`` minus the excluded code points is
    treated as an ordered list of slots.

    Example:
        assigner = CodePointAssigner(0xE000, 0xF900)
        used: set[int] = set()
        assigner.assign("home", used)
    """

    def __init__(self, start: int, maximum: int) -> None:
        if start < 0 or maximum <= start:
            raise ValueError(f"Invalid code point range: {start:#x}-{maximum:#x}")
        self._start = start
        self._maximum = maximum
        self._capacity = (maximum - start) - sum(
            max(0, min(high, maximum) - max(low, start)) for low, high in EXCLUDED_RANGES
        )

    @property
    def start(self) -> int:
        return self._start

    @property
    def maximum(self) -> int:
        return self._maximum

    @property
    def capacity(self) -> int:
        """Number of assignable code points in the range."""
        return self._capacity

    def codepoint_at(self, slot: int) -> int:
        """Return the code point of a slot index."""
        codepoint = self._start + slot
        for low, high in EXCLUDED_RANGES:
            low = max(low, self._start)
            if high <= low:
                continue
            if codepoint >= low:
                codepoint += high - low
        return codepoint

    def preferred_slot(self, name: str) -> int:
        return djb2_hash(name) % self._capacity

    def assign(self, name: str, used: set[int]) -> int | None:
        """Assign a code point to ``name`` and record it in ``used``.

        Args:
            name: Icon name
            used: Code points already bound in this build (mutated)

        Returns:
            The assigned code point, or None for an empty name

        Raises:
            CodePointRangeExhaustedError: If every slot is taken
        """
        if not name:
            return None
        if self._capacity == 0:
            raise CodePointRangeExhaustedError(self._start, self._maximum, 0)

        first = self.preferred_slot(name)
        for offset in range(self._capacity):
            codepoint = self.codepoint_at((first + offset) % self._capacity)
            if codepoint not in used:
                used.add(codepoint)
                return codepoint

        raise CodePointRangeExhaustedError(self._start, self._maximum, self._capacity)


CodePointAssignment = Mapping[str, int]


class CodePointContext:
    """Per-build code point state.

    Owns the set of used code points and the name to code point map for
    one pipeline run. Sibling pipelines never share a context.
    """

    def __init__(self, start: int, maximum: int) -> None:
        self._assigner = CodePointAssigner(start, maximum)
        self._used: set[int] = set()
        self._assigned: dict[str, int] = {}

    @property
    def assigner(self) -> CodePointAssigner:
        return self._assigner

    @property
    def capacity(self) -> int:
        return self._assigner.capacity

    @property
    def used(self) -> frozenset[int]:
        return frozenset(self._used)

    def __contains__(self, name: object) -> bool:
        return name in self._assigned

    def __len__(self) -> int:
        return len(self._assigned)

    def assign(self, name: str) -> int | None:
        """Assign (or return the existing) code point for an icon name."""
        existing = self._assigned.get(name)
        if existing is not None:
            return existing

        codepoint = self._assigner.assign(name, self._used)
        if codepoint is not None:
            self._assigned[name] = codepoint
            logger.debug("Code point assigned", icon=name, codepoint=f"{codepoint:#x}")
        return codepoint

    def freeze(self) -> CodePointAssignment:
        """Read-only snapshot of the current assignment."""
        return MappingProxyType(dict(self._assigned))

    def clear(self) -> None:
        self._used.clear()
        self._assigned.clear()
