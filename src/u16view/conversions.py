"""Encoders turning a span of code units into other representations.

All of these copy: they produce new bytes, str or lists from the span.
"""

import ctypes
import locale
from typing import List, Optional

from u16view.unicode_utils import decode_units

_QUESTION_MARK = 0x3F


def to_string(span: Optional[memoryview]) -> str:
    """Decode to str, keeping lone surrogates as they are."""
    return decode_units(span)


def to_latin1(span: Optional[memoryview]) -> bytes:
    """One byte per code unit; units above U+00FF become '?'."""
    if span is None:
        return b''
    return bytes(unit if unit < 0x100 else _QUESTION_MARK for unit in span)


def to_utf8(span: Optional[memoryview]) -> bytes:
    """UTF-8 with lone surrogates replaced by U+FFFD."""
    return decode_units(span, 'replace').encode('utf-8')


def to_local8bit(span: Optional[memoryview]) -> bytes:
    """Encode for the locale; characters it cannot represent become '?'."""
    encoding = locale.getpreferredencoding(False)
    return decode_units(span, 'replace').encode(encoding, 'replace')


def to_ucs4(span: Optional[memoryview]) -> List[int]:
    """Code points, combining pairs and replacing lone surrogates by U+FFFD."""
    return [ord(ch) for ch in decode_units(span, 'replace')]


def to_wchar_array(span: Optional[memoryview], array) -> int:
    """Copy into a ctypes c_wchar array and return the number of elements written.

    A 16-bit wchar_t receives the code units unchanged, a 32-bit one receives
    code points. The array must be large enough.
    """
    if ctypes.sizeof(ctypes.c_wchar) == 2:
        values = [] if span is None else span.tolist()
    else:
        values = to_ucs4(span)
    for i, value in enumerate(values):
        array[i] = chr(value)
    return len(values)
