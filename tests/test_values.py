"""Test TypedValue formatting and ordering.

    python3 tests/test_values.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import math

from flightdata.config import ValueKind
from flightdata.values import TypedValue, int_range


def test_format_integers():
    print("test_format_integers...", end="")

    assert str(TypedValue(ValueKind.INT8, 42)) == "42"
    assert str(TypedValue(ValueKind.INT8, -128)) == "-128"
    assert str(TypedValue(ValueKind.UINT64, 2**64 - 1)) == "18446744073709551615"
    assert str(TypedValue(ValueKind.INT16, 7)) == "7"

    print(" OK")


def test_format_floats():
    """Floats always carry 8 decimal places."""
    print("test_format_floats...", end="")

    assert str(TypedValue(ValueKind.FLOAT32, 1.0)) == "1.00000000"
    assert str(TypedValue.of(ValueKind.FLOAT32, 42.42)) == "42.41999817"
    assert str(TypedValue(ValueKind.FLOAT64, 42.42)) == "42.42000000"
    assert str(TypedValue(ValueKind.FLOAT64, -0.5)) == "-0.50000000"
    assert str(TypedValue(ValueKind.FLOAT64, math.nan)) == "NaN"
    assert str(TypedValue(ValueKind.FLOAT32, math.nan)) == "NaN"
    assert str(TypedValue(ValueKind.FLOAT64, math.inf)) == "inf"
    assert str(TypedValue(ValueKind.FLOAT64, -math.inf)) == "-inf"

    print(" OK")


def test_of_coerces():
    print("test_of_coerces...", end="")

    assert TypedValue.of(ValueKind.UINT8, 255).value == 255
    assert TypedValue.of(ValueKind.INT32, 3.0) == TypedValue(ValueKind.INT32, 3)
    assert TypedValue.of(ValueKind.FLOAT32, 1) == TypedValue(ValueKind.FLOAT32, 1.0)
    assert math.isinf(TypedValue.of(ValueKind.FLOAT32, math.inf).value)

    for kind, raw in [(ValueKind.UINT8, 256), (ValueKind.INT8, -129),
                      (ValueKind.UINT16, -1), (ValueKind.INT32, 1.5),
                      (ValueKind.FLOAT32, 1e300)]:
        try:
            TypedValue.of(kind, raw)
        except ValueError:
            continue
        raise AssertionError(f"accepted {raw!r} as {kind.name}")

    assert int_range(ValueKind.INT16) == (-32768, 32767)
    assert int_range(ValueKind.UINT32) == (0, 2**32 - 1)

    print(" OK")


def test_ordering_within_kind():
    print("test_ordering_within_kind...", end="")

    a = TypedValue(ValueKind.INT16, -5)
    b = TypedValue(ValueKind.INT16, 3)
    assert a < b and a <= b and b > a and b >= a
    assert min(b, a) is a
    assert max(a, b) is b

    nan = TypedValue(ValueKind.FLOAT64, math.nan)
    inf = TypedValue(ValueKind.FLOAT64, math.inf)
    one = TypedValue(ValueKind.FLOAT64, 1.0)
    assert one < inf < nan
    ordered = sorted([nan, one, inf])
    assert ordered[0] is one and ordered[1] is inf and ordered[2] is nan
    assert max([one, nan, inf]) is nan
    assert min([nan, inf, one]) is one

    print(" OK")


def test_cross_kind_comparison():
    print("test_cross_kind_comparison...", end="")

    a = TypedValue(ValueKind.INT32, 1)
    b = TypedValue(ValueKind.INT64, 2)
    try:
        a < b
    except TypeError:
        pass
    else:
        raise AssertionError("expected TypeError")
    assert a != TypedValue(ValueKind.UINT32, 1)

    print(" OK")


if __name__ == "__main__":
    print("flightdata value tests")
    print("======================\n")

    test_format_integers()
    test_format_floats()
    test_of_coerces()
    test_ordering_within_kind()
    test_cross_kind_comparison()

    print("\nAll tests passed.")
