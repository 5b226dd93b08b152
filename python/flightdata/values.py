"""Scalar readings tagged with their value kind."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

from .config import ValueKind

_UNSIGNED = (ValueKind.UINT8, ValueKind.UINT16, ValueKind.UINT32, ValueKind.UINT64)


def int_range(kind: ValueKind) -> tuple[int, int]:
    """Inclusive (min, max) of an integer kind."""
    bits = kind.width * 8
    if kind in _UNSIGNED:
        return 0, (1 << bits) - 1
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


@dataclass(frozen=True)
class TypedValue:
    """A decoded scalar together with the kind it was decoded as.

    Values of the same kind are totally ordered; for float kinds NaN sorts
    above every other value.  Comparing values of different kinds raises
    TypeError, since a column never mixes kinds.
    """
    kind: ValueKind
    value: int | float

    @classmethod
    def of(cls, kind: ValueKind, raw: int | float) -> TypedValue:
        """Coerce a Python number into the domain of ``kind``."""
        if kind.is_float:
            value = float(raw)
            if kind == ValueKind.FLOAT32 and math.isfinite(value):
                try:
                    value = struct.unpack("<f", struct.pack("<f", value))[0]
                except OverflowError:
                    raise ValueError(f"{raw!r} out of range for {kind.name}") from None
            return cls(kind, value)

        if isinstance(raw, float) and not raw.is_integer():
            raise ValueError(f"{raw!r} is not an integer ({kind.name})")
        value = int(raw)
        lo, hi = int_range(kind)
        if not lo <= value <= hi:
            raise ValueError(f"{value} out of range for {kind.name} [{lo}, {hi}]")
        return cls(kind, value)

    def __str__(self) -> str:
        if self.kind.is_float:
            if math.isnan(self.value):
                return "NaN"
            return f"{self.value:.8f}"
        return str(self.value)

    def _key(self, other: object) -> tuple[tuple, tuple]:
        if not isinstance(other, TypedValue):
            raise TypeError(f"cannot compare TypedValue with {type(other).__name__}")
        if other.kind != self.kind:
            raise TypeError(f"cannot compare {self.kind.name} with {other.kind.name}")
        return _sort_key(self), _sort_key(other)

    def __lt__(self, other: TypedValue) -> bool:
        a, b = self._key(other)
        return a < b

    def __le__(self, other: TypedValue) -> bool:
        a, b = self._key(other)
        return a <= b

    def __gt__(self, other: TypedValue) -> bool:
        a, b = self._key(other)
        return a > b

    def __ge__(self, other: TypedValue) -> bool:
        a, b = self._key(other)
        return a >= b


def _sort_key(tv: TypedValue) -> tuple:
    if tv.kind.is_float and math.isnan(tv.value):
        return (1, 0.0)
    return (0, tv.value)
