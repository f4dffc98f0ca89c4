"""Optional values that use an in-band sentinel to mean "empty"."""

from __future__ import annotations

import struct
from enum import Enum
from typing import Any, Union

__all__ = ["OptionKind", "OptionFlag", "sentinel_for"]


class OptionKind(Enum):
    """Scalar kinds that have a reserved sentinel value."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    USIZE = "usize"
    F32 = "f32"
    F64 = "f64"


_INT_BITS = {
    OptionKind.U8: 8,
    OptionKind.U16: 16,
    OptionKind.U32: 32,
    OptionKind.USIZE: 64,
}


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", float(value)))[0]


_FLOAT_SENTINELS = {
    OptionKind.F32: _to_f32(float(0x7FEDB6DB)),
    OptionKind.F64: float(0x7FFDB6DB6DB6DB6D),
}

Kind = Union[OptionKind, type]


def sentinel_for(kind: Kind) -> Any:
    """Return the value that marks an option of ``kind`` as empty.

    ``kind`` is an :class:`OptionKind` or an enum class with an ``Invalid`` member.
    """
    if isinstance(kind, OptionKind):
        bits = _INT_BITS.get(kind)
        if bits is not None:
            return (1 << bits) - 1
        return _FLOAT_SENTINELS[kind]
    if isinstance(kind, type) and issubclass(kind, Enum):
        try:
            return kind["Invalid"]
        except KeyError:
            raise TypeError(f"enum {kind.__name__} has no Invalid member") from None
    raise TypeError(f"no sentinel defined for {kind!r}")


def _coerce(kind: Kind, value: Any) -> Any:
    if isinstance(kind, OptionKind):
        bits = _INT_BITS.get(kind)
        if bits is not None:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{kind.value} option needs an int, got {value!r}")
            if not 0 <= value < (1 << bits):
                raise ValueError(f"{value} does not fit in {kind.value}")
            return value
        if kind is OptionKind.F32:
            return _to_f32(value)
        return float(value)
    if not isinstance(value, kind):
        raise TypeError(f"expected a {kind.__name__}, got {value!r}")
    return value


class OptionFlag:
    """An optional scalar whose emptiness is stored as a sentinel value."""

    __slots__ = ("_kind", "_sentinel", "_value")

    def __init__(self, kind: Kind, value: Any = None) -> None:
        self._kind = kind
        self._sentinel = sentinel_for(kind)
        self._value = self._sentinel
        if value is not None:
            self.set(value)

    @property
    def kind(self) -> Kind:
        return self._kind

    def has_value(self) -> bool:
        return self._value != self._sentinel

    def reset(self) -> None:
        self._value = self._sentinel

    def value(self) -> Any:
        """Return the held value or raise ``ValueError`` when empty."""
        if not self.has_value():
            raise ValueError("option has no value")
        return self._value

    def value_or(self, default: Any) -> Any:
        if self.has_value():
            return self._value
        return _coerce(self._kind, default)

    def set(self, value: Any) -> None:
        """Store ``value``; ``None`` empties the option."""
        if value is None:
            self.reset()
        else:
            self._value = _coerce(self._kind, value)

    def swap(self, other: OptionFlag) -> None:
        if other._kind != self._kind:
            raise ValueError("cannot swap options of different kinds")
        self._value, other._value = other._value, self._value

    def __bool__(self) -> bool:
        return self.has_value()

    def _operand(self, other: Any) -> tuple[bool, Any]:
        if isinstance(other, OptionFlag):
            return other.has_value(), other._value
        return True, other

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, OptionFlag):
            if not self.has_value() and not other.has_value():
                return True
        ok, rhs = self._operand(other)
        return self.has_value() and ok and self._value == rhs

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __lt__(self, other: Any) -> bool:
        ok, rhs = self._operand(other)
        return self.has_value() and ok and self._value < rhs

    def __le__(self, other: Any) -> bool:
        ok, rhs = self._operand(other)
        return self.has_value() and ok and self._value <= rhs

    def __gt__(self, other: Any) -> bool:
        ok, rhs = self._operand(other)
        return self.has_value() and ok and self._value > rhs

    def __ge__(self, other: Any) -> bool:
        ok, rhs = self._operand(other)
        return self.has_value() and ok and self._value >= rhs

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        kind = self._kind.value if isinstance(self._kind, OptionKind) else self._kind.__name__
        if self.has_value():
            return f"OptionFlag({kind}, {self._value!r})"
        return f"OptionFlag({kind}, empty)"