"""Unicode helper functions shared by the view and its algorithms.

These work on single code units or code points and on memoryview spans of
units. Decoding goes through Python's UTF-16 codec with ``surrogatepass`` so
well-formed pairs are combined and lone surrogates survive as themselves.
"""

import unicodedata
from array import array
from functools import lru_cache
from typing import Optional

from u16view.buffers import NATIVE_UTF16

HIGH_SURROGATE_FIRST = 0xD800
LOW_SURROGATE_FIRST = 0xDC00
SURROGATE_LAST = 0xDFFF

# Code points the owning string type treats as whitespace below U+0100
_LATIN1_SPACES = frozenset({0x09, 0x0A, 0x0B, 0x0C, 0x0D, 0x20, 0x85, 0xA0})
_SPACE_CATEGORIES = frozenset({'Zs', 'Zl', 'Zp'})


def is_high_surrogate(unit: int) -> bool:
    return 0xD800 <= unit <= 0xDBFF


def is_low_surrogate(unit: int) -> bool:
    return 0xDC00 <= unit <= 0xDFFF


def is_surrogate(unit: int) -> bool:
    return 0xD800 <= unit <= 0xDFFF


def requires_surrogates(code_point: int) -> bool:
    return code_point >= 0x10000


def surrogate_to_ucs4(high: int, low: int) -> int:
    return ((high - HIGH_SURROGATE_FIRST) << 10) + (low - LOW_SURROGATE_FIRST) + 0x10000


def high_surrogate(code_point: int) -> int:
    return HIGH_SURROGATE_FIRST + ((code_point - 0x10000) >> 10)


def low_surrogate(code_point: int) -> int:
    return LOW_SURROGATE_FIRST + ((code_point - 0x10000) & 0x3FF)


@lru_cache(maxsize=None)
def is_space(code_point: int) -> bool:
    """Whitespace test matching the owning string type's notion of space."""
    if code_point < 0x100:
        return code_point in _LATIN1_SPACES
    if is_surrogate(code_point):
        return False
    return unicodedata.category(chr(code_point)) in _SPACE_CATEGORIES


@lru_cache(maxsize=None)
def fold_char(ch: str) -> str:
    """Simple (length preserving) case folding of one character.

    Full folding can expand a character (U+00DF folds to "ss"); when that
    happens the lowercase mapping is used instead, and the character itself
    when neither keeps the code unit count.
    """
    for candidate in (ch.casefold(), ch.lower()):
        if len(candidate) == 1 and requires_surrogates(ord(candidate)) == requires_surrogates(ord(ch)):
            return candidate
    return ch


def fold_unit(unit: int) -> int:
    """Fold a single BMP code unit. Surrogates fold to themselves."""
    if is_surrogate(unit):
        return unit
    return ord(fold_char(chr(unit)))


def decode_units(span: Optional[memoryview], errors: str = 'surrogatepass') -> str:
    """Decode a span of units to a Python str. A null span decodes to ''."""
    if span is None or not len(span):
        return ''
    return str(span.cast('B'), NATIVE_UTF16, errors)


def encode_units(text: str) -> memoryview:
    """Encode text into a new native-order unit buffer."""
    return memoryview(text.encode(NATIVE_UTF16, 'surrogatepass')).cast('H')


def folded_units(span: memoryview) -> memoryview:
    """Case folded copy of span with exactly the same number of units."""
    return encode_units(''.join(map(fold_char, decode_units(span))))


def single_unit(unit: int) -> memoryview:
    """One-unit buffer holding unit, for using a character as a needle."""
    return memoryview(array('H', [unit]))


def iter_code_points(span: Optional[memoryview]):
    """Yield code points, combining well-formed surrogate pairs."""
    for ch in decode_units(span):
        yield ord(ch)


def from_ucs4_units(code_point: int) -> array:
    """Units encoding code_point: a surrogate pair above the BMP, else one unit."""
    if requires_surrogates(code_point):
        return array('H', [high_surrogate(code_point), low_surrogate(code_point)])
    return array('H', [code_point])
