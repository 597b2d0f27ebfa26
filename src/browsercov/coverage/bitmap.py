"""Per-character coverage bitmap built from overlapping execution ranges."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from browsercov.models.coverage import CoverageRange

_SET = 1


def build_bitmap(source_length: int, ranges: Iterable[CoverageRange]) -> bytearray:
    """Mark every offset covered by an executed range.

    Each position of the returned array is ``1`` when at least one range with
    a positive execution count spans it, ``0`` otherwise. Overlapping ranges
    union. Offsets are clamped to ``[0, source_length)``; empty, inverted and
    never-executed ranges contribute nothing.
    """
    length = max(source_length, 0)
    bits = bytearray(length)
    for r in ranges:
        if not r.is_covered:
            continue
        lo = max(0, r.start)
        hi = min(length, r.end)
        if lo >= hi:
            continue
        bits[lo:hi] = b"\x01" * (hi - lo)
    return bits


def covered_count(bits: bytearray) -> int:
    """Return the number of covered positions in *bits*."""
    return bits.count(_SET)


def is_span_covered(bits: bytearray, start: int, end: int) -> bool:
    """Return True if any position in ``[start, end)`` is covered."""
    lo = max(0, start)
    hi = min(len(bits), end)
    if lo >= hi:
        return False
    return bits.find(_SET, lo, hi) != -1
