"""Small numeric and string helpers shared across the engine."""

from __future__ import annotations

__all__ = [
    "align_up",
    "align_down",
    "kib_to_bytes",
    "mib_to_bytes",
    "hash_combine",
    "escape_str",
]

_U64_MASK = (1 << 64) - 1
_HASH_MAGIC = 0x9E3779B9

_ESCAPES = {
    "'": "\\'",
    '"': '\\"',
    "?": "\\?",
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _check_alignment(alignment: int) -> None:
    if alignment < 1:
        raise ValueError(f"alignment must be positive, got {alignment}")


def align_up(size: int, alignment: int) -> int:
    """Round ``size`` up to the next multiple of a power-of-two ``alignment``."""
    _check_alignment(alignment)
    return ((size + alignment - 1) & ~(alignment - 1)) & _U64_MASK


def align_down(size: int, alignment: int) -> int:
    """Round ``size`` down to a multiple of a power-of-two ``alignment``."""
    _check_alignment(alignment)
    return (size & ~(alignment - 1)) & _U64_MASK


def kib_to_bytes(x: int) -> int:
    """Convert kibibytes to bytes."""
    return x << 10


def mib_to_bytes(x: int) -> int:
    """Convert mebibytes to bytes."""
    return x << 20


def hash_combine(seed: int, value: int) -> int:
    """Mix ``value`` into ``seed`` and return the new 64-bit seed."""
    seed &= _U64_MASK
    mixed = (value + _HASH_MAGIC + (seed << 6) + (seed >> 2)) & _U64_MASK
    return seed ^ mixed


def escape_str(text: str) -> str:
    """Escape quotes, backslashes and control characters as C escape sequences."""
    return "".join(_ESCAPES.get(ch, ch) for ch in text)