import ctypes
import math
import os
import sys

# Add the parent directory to sys.path so we can import u16view modules
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from u16view.buffers import units_from_str
from u16view.numeric import INTEGER_RANGES, parse_integer
from u16view.stringview import Utf16View


def view_of(text):
    return Utf16View(units_from_str(text))


class TestParseInteger:
    def test_decimal(self):
        assert parse_integer("42", 10) == 42
        assert parse_integer("-42", 10) == -42
        assert parse_integer("+7", 10) == 7

    def test_prefix_detection(self):
        assert parse_integer("0x1f", 0) == 31
        assert parse_integer("0X1F", 0) == 31
        assert parse_integer("017", 0) == 15
        assert parse_integer("0b101", 0) == 5
        assert parse_integer("0", 0) == 0
        assert parse_integer("-0x10", 0) == -16

    def test_explicit_base(self):
        assert parse_integer("ff", 16) == 255
        assert parse_integer("0xff", 16) == 255
        assert parse_integer("z", 36) == 35
        assert parse_integer("101", 2) == 5

    def test_rejects_malformed(self):
        for text, base in (("", 10), ("-", 10), ("12a", 10), ("1_000", 10), ("1 2", 10),
                           ("0x", 0), ("9", 8), ("10", 1), ("10", 37)):
            assert parse_integer(text, base) is None, (text, base)


class TestIntegerConversions:
    def test_basic(self):
        assert view_of("42").to_int() == (42, True)
        assert view_of(" -17 ").to_int() == (-17, True)
        assert view_of("ff").to_int(16) == (255, True)
        assert view_of("0x1f").to_long(0) == (31, True)

    def test_failures_give_zero(self):
        assert view_of("abc").to_int() == (0, False)
        assert view_of("").to_int() == (0, False)
        assert Utf16View().to_int() == (0, False)

    def test_short_range(self):
        assert view_of("32767").to_short() == (32767, True)
        assert view_of("-32768").to_short() == (-32768, True)
        assert view_of("32768").to_short() == (0, False)
        assert view_of("65535").to_ushort() == (65535, True)
        assert view_of("65536").to_ushort() == (0, False)

    def test_unsigned_rejects_minus(self):
        assert view_of("-1").to_ushort() == (0, False)
        assert view_of("-0").to_uint() == (0, False)
        assert view_of("-5").to_ulonglong() == (0, False)

    def test_int_range(self):
        assert view_of("2147483647").to_int() == (2147483647, True)
        assert view_of("2147483648").to_int() == (0, False)
        assert view_of("4294967295").to_uint() == (4294967295, True)
        assert view_of("4294967296").to_uint() == (0, False)

    def test_longlong_range(self):
        assert view_of("9223372036854775807").to_longlong() == (9223372036854775807, True)
        assert view_of("9223372036854775808").to_longlong() == (0, False)
        assert view_of("18446744073709551615").to_ulonglong() == (18446744073709551615, True)

    def test_long_follows_platform(self):
        low, high = INTEGER_RANGES["long"]
        assert high == (1 << (8 * ctypes.sizeof(ctypes.c_long) - 1)) - 1
        assert view_of(str(high)).to_long() == (high, True)
        assert view_of(str(high + 1)).to_long() == (0, False)
        assert view_of(str(low)).to_long() == (low, True)


class TestFloatingConversions:
    def test_double(self):
        assert view_of("3.5").to_double() == (3.5, True)
        assert view_of(" 1e3 ").to_double() == (1000.0, True)
        assert view_of("-.5").to_double() == (-0.5, True)
        assert view_of("0.0").to_double() == (0.0, True)

    def test_double_special_values(self):
        assert view_of("inf").to_double() == (math.inf, True)
        assert view_of("-INF").to_double() == (-math.inf, True)
        value, ok = view_of("nan").to_double()
        assert ok and math.isnan(value)

    def test_double_overflow_and_underflow(self):
        assert view_of("1e400").to_double() == (math.inf, False)
        assert view_of("-1e400").to_double() == (-math.inf, False)
        assert view_of("1e-400").to_double() == (0.0, False)

    def test_double_rejects_malformed(self):
        for text in ("abc", "", "1e", "1.2.3", "0x10", "1,5"):
            assert view_of(text).to_double() == (0.0, False), text
        assert Utf16View().to_double() == (0.0, False)

    def test_float(self):
        assert view_of("1.5").to_float() == (1.5, True)
        value, ok = view_of("0.1").to_float()
        assert ok
        assert value == ctypes.c_float(0.1).value

    def test_float_range(self):
        assert view_of("1e39").to_float() == (math.inf, False)
        assert view_of("-1e39").to_float() == (-math.inf, False)
        assert view_of("1e-50").to_float() == (0.0, False)
        assert view_of("inf").to_float() == (math.inf, True)
