"""Lexical number parsing for spans of code units, in the C locale.

Every parser returns a ``(value, ok)`` tuple. A failed parse never raises:
the value is 0 (or an infinity when a floating point literal overflows) and
ok is False.
"""

import ctypes
import math
import re
from typing import Dict, Optional, Tuple

from u16view.algorithms import trimmed_positions
from u16view.unicode_utils import decode_units

_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'

_FLOAT_RE = re.compile(
    r'[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|nan)\Z',
    re.IGNORECASE | re.ASCII,
)

_FLT_MAX = 3.4028234663852886e38


def _signed_range(ctype) -> Tuple[int, int]:
    bits = 8 * ctypes.sizeof(ctype)
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def _unsigned_range(ctype) -> Tuple[int, int]:
    return 0, (1 << (8 * ctypes.sizeof(ctype))) - 1


# Ranges follow the platform's C types, so 'long' differs between platforms
INTEGER_RANGES: Dict[str, Tuple[int, int]] = {
    'short': _signed_range(ctypes.c_short),
    'ushort': _unsigned_range(ctypes.c_ushort),
    'int': _signed_range(ctypes.c_int),
    'uint': _unsigned_range(ctypes.c_uint),
    'long': _signed_range(ctypes.c_long),
    'ulong': _unsigned_range(ctypes.c_ulong),
    'longlong': _signed_range(ctypes.c_longlong),
    'ulonglong': _unsigned_range(ctypes.c_ulonglong),
}


def _trimmed_text(span: Optional[memoryview]) -> str:
    if span is None:
        return ''
    begin, end = trimmed_positions(span)
    return decode_units(span[begin:end])


def parse_integer(text: str, base: int) -> Optional[int]:
    """Parse text as an integer in base (0 means detect from the prefix).

    Returns None when text is not a complete, well formed number.
    """
    if base != 0 and not 2 <= base <= 36:
        return None
    negative = False
    if text and text[0] in '+-':
        negative = text[0] == '-'
        text = text[1:]

    prefix = text[:2].lower()
    if base == 0:
        if prefix == '0x':
            base, text = 16, text[2:]
        elif prefix == '0b':
            base, text = 2, text[2:]
        elif len(text) > 1 and text[0] == '0':
            base, text = 8, text[1:]
        else:
            base = 10
    elif (base == 16 and prefix == '0x') or (base == 2 and prefix == '0b'):
        text = text[2:]

    if not text:
        return None
    allowed = _DIGITS[:base]
    if any(ch not in allowed for ch in text.lower()):
        return None
    value = int(text, base)
    return -value if negative else value


def to_integer(span: Optional[memoryview], base: int, kind: str) -> Tuple[int, bool]:
    """Parse span as the C integer type named by kind (see INTEGER_RANGES)."""
    low, high = INTEGER_RANGES[kind]
    text = _trimmed_text(span)
    if low == 0 and text.startswith('-'):
        return 0, False
    value = parse_integer(text, base)
    if value is None or not low <= value <= high:
        return 0, False
    return value, True


def to_double(span: Optional[memoryview]) -> Tuple[float, bool]:
    text = _trimmed_text(span)
    if not _FLOAT_RE.match(text):
        return 0.0, False
    value = float(text)
    if math.isinf(value) and 'inf' not in text.lower():
        return value, False
    if value == 0.0 and re.search(r'[1-9]', re.split(r'[eE]', text)[0]):
        return 0.0, False
    return value, True


def to_float(span: Optional[memoryview]) -> Tuple[float, bool]:
    value, ok = to_double(span)
    if not ok or math.isinf(value) or math.isnan(value):
        return value, ok
    if abs(value) > _FLT_MAX:
        return math.copysign(math.inf, value), False
    narrowed = ctypes.c_float(value).value
    if value != 0.0 and narrowed == 0.0:
        return 0.0, False
    return narrowed, True
