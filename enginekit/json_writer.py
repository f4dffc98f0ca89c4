"""Incremental, indented JSON text writer."""

from __future__ import annotations

import io
from typing import Any, Iterable, Sequence

from enginekit.util import escape_str

__all__ = ["JsonWriter"]

_INDENT = "  "
_COMPONENT_NAMES = ("x", "y", "z", "w")


def _format_number(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(value, "g")
    raise TypeError(f"cannot write {value!r} as a JSON value")


class JsonWriter:
    """Builds JSON text one token at a time, two spaces per nesting level."""

    def __init__(self) -> None:
        self._stream = io.StringIO()
        self._depth = 0
        self._first_element = True
        self._has_key = False

    @property
    def depth(self) -> int:
        return self._depth

    def _indent(self) -> None:
        self._stream.write(_INDENT * self._depth)

    def _new_element(self) -> None:
        if self._has_key:
            self._has_key = False
            return
        if not self._first_element:
            self._stream.write(",")
        if self._depth > 0:
            self._stream.write("\n")
            self._indent()
        self._first_element = False

    def key(self, name: str) -> JsonWriter:
        """Write an object key; the next value written belongs to it."""
        self._new_element()
        self._stream.write(f'"{name}": ')
        self._has_key = True
        return self

    def __getitem__(self, name: str) -> JsonWriter:
        return self.key(name)

    def begin_obj(self) -> None:
        self._new_element()
        self._stream.write("{")
        self._depth += 1
        self._first_element = True

    def _close(self, bracket: str) -> None:
        if self._depth == 0:
            raise ValueError(f"unbalanced {bracket!r}: nothing is open")
        self._depth -= 1
        if not self._first_element:
            self._stream.write("\n")
            self._indent()
        self._stream.write(bracket)
        self._first_element = False

    def end_obj(self) -> None:
        self._close("}")

    def begin_array(self) -> None:
        self._new_element()
        self._stream.write("[")
        self._depth += 1
        self._first_element = True

    def end_array(self) -> None:
        self._close("]")

    def string(self, value: str) -> JsonWriter:
        """Write a quoted string with C-style escapes."""
        self._new_element()
        self._stream.write(f'"{escape_str(value)}"')
        return self

    def value(self, value: Any) -> JsonWriter:
        """Write a number, bool, ``None`` (as null) or string."""
        if isinstance(value, str):
            return self.string(value)
        text = "null" if value is None else _format_number(value)
        self._new_element()
        self._stream.write(text)
        return self

    def vec(self, components: Sequence[float]) -> JsonWriter:
        """Write a 1-4 component vector or quaternion as ``{"x": .., "y": ..}``."""
        comps = [float(c) for c in components]
        if not 1 <= len(comps) <= len(_COMPONENT_NAMES):
            raise ValueError(f"vectors have 1 to 4 components, got {len(comps)}")
        self.begin_obj()
        for name, comp in zip(_COMPONENT_NAMES, comps):
            self.key(name)
            self.value(comp)
        self.end_obj()
        return self

    def array(self, values: Iterable[Any]) -> JsonWriter:
        """Write ``values`` as a JSON array."""
        self.begin_array()
        for item in values:
            self.value(item)
        self.end_array()
        return self

    def getvalue(self) -> str:
        """The text written so far."""
        return self._stream.getvalue()