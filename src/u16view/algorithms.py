"""Buffer-level string algorithms over spans of 16-bit code units.

A span is a one-dimensional memoryview with format 'H', or None for a null
string. None of these functions know who owns the buffer.

Case sensitive searching runs StringZilla over the raw bytes of the span.
A byte-level match is only a real match when it starts on a code unit
boundary, so odd byte offsets are skipped and the search resumed. Case
insensitive searching folds both sides once (folding never changes the
number of units) and then searches the folded copies the same way.
"""

import unicodedata
from array import array
from typing import List, Optional, Tuple

import stringzilla as sz

from u16view.buffers import NATIVE_UTF16
from u16view.flags import CaseSensitivity, SplitBehavior
from u16view.unicode_utils import decode_units, fold_unit, folded_units, is_space, single_unit

NOT_FOUND = -1

_EMPTY = memoryview(array('H'))

# Bidi classes that open and close a directional isolate
_ISOLATE_OPENERS = frozenset({'RLI', 'LRI', 'FSI'})
_RTL_CLASSES = frozenset({'R', 'AL'})


def _length(span: Optional[memoryview]) -> int:
    return 0 if span is None else len(span)


def _lencmp(lhs: int, rhs: int) -> int:
    return -1 if lhs < rhs else (1 if lhs > rhs else 0)


def searchable(span: Optional[memoryview], cs: CaseSensitivity) -> memoryview:
    """Return the form of span that case sensitive matching should run on."""
    if span is None:
        return _EMPTY
    if cs is CaseSensitivity.CASE_INSENSITIVE:
        return folded_units(span)
    return span


def _find_aligned(haystack: memoryview, needle: memoryview, start: int) -> int:
    """First unit offset >= start where needle occurs in haystack, or -1."""
    if len(haystack) - start < len(needle):
        return NOT_FOUND
    hay_bytes = sz.Str(haystack.cast('B'))
    needle_bytes = sz.Str(needle.cast('B'))
    pos = start * 2
    while True:
        pos = hay_bytes.find(needle_bytes, pos)
        if pos == -1:
            return NOT_FOUND
        if pos % 2 == 0:
            return pos // 2
        pos += 1


def _rfind_aligned(haystack: memoryview, needle: memoryview, last_start: int) -> int:
    """Last unit offset <= last_start where needle occurs in haystack, or -1."""
    if len(haystack) < len(needle):
        return NOT_FOUND
    hay_bytes = sz.Str(haystack.cast('B'))
    needle_bytes = sz.Str(needle.cast('B'))
    end = min(last_start + len(needle), len(haystack)) * 2
    while True:
        pos = hay_bytes.rfind(needle_bytes, 0, end)
        if pos == -1:
            return NOT_FOUND
        if pos % 2 == 0:
            return pos // 2
        end = pos + len(needle_bytes) - 1


def ustrlen(units: memoryview, offset: int = 0) -> int:
    """Count units from offset up to the 0 terminator or the buffer end."""
    remaining = units[offset:]
    pos = _find_aligned(remaining, single_unit(0), 0)
    return len(remaining) if pos == NOT_FOUND else pos


def compare_strings(lhs: Optional[memoryview], rhs: Optional[memoryview],
                    cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
    """Three-way comparison.

    Returns the difference of the first pair of differing (folded) units, or
    -1/0/1 from the lengths when one is a prefix of the other.
    """
    lhs = searchable(lhs, cs)
    rhs = searchable(rhs, cs)
    common = min(len(lhs), len(rhs))
    if lhs[:common] != rhs[:common]:
        for a, b in zip(lhs[:common], rhs[:common]):
            if a != b:
                return a - b
    return _lencmp(len(lhs), len(rhs))


def starts_with(haystack: Optional[memoryview], needle: Optional[memoryview],
                cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> bool:
    if haystack is None:
        return needle is None
    needle_len = _length(needle)
    if not len(haystack):
        return needle_len == 0
    if needle_len > len(haystack):
        return False
    return compare_strings(haystack[:needle_len], needle, cs) == 0


def ends_with(haystack: Optional[memoryview], needle: Optional[memoryview],
              cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> bool:
    if haystack is None:
        return needle is None
    needle_len = _length(needle)
    if not len(haystack):
        return needle_len == 0
    if needle_len > len(haystack):
        return False
    return compare_strings(haystack[len(haystack) - needle_len:], needle, cs) == 0


def find_char(haystack: Optional[memoryview], unit: int, from_: int = 0,
              cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
    size = _length(haystack)
    if from_ < 0:
        from_ = max(from_ + size, 0)
    if from_ >= size:
        return NOT_FOUND
    if cs is CaseSensitivity.CASE_INSENSITIVE:
        unit = fold_unit(unit)
    return _find_aligned(searchable(haystack, cs), single_unit(unit), from_)


def find_string(haystack: Optional[memoryview], from_: int, needle: Optional[memoryview],
                cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
    """Offset of the first needle at or after from_, or -1.

    A negative from_ counts back from the end; an empty needle matches at
    from_ itself when that is within [0, size].
    """
    size = _length(haystack)
    needle_len = _length(needle)
    if from_ < 0:
        from_ += size
    if from_ < 0 or from_ + needle_len > size:
        return NOT_FOUND
    if not needle_len:
        return from_
    if needle_len == 1:
        return find_char(haystack, needle[0], from_, cs)
    return _find_aligned(searchable(haystack, cs), searchable(needle, cs), from_)


def last_index_of_char(haystack: Optional[memoryview], unit: int, from_: int = -1,
                       cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
    size = _length(haystack)
    if from_ < 0:
        from_ += size
    elif from_ >= size:
        from_ = size - 1
    if from_ < 0:
        return NOT_FOUND
    if cs is CaseSensitivity.CASE_INSENSITIVE:
        unit = fold_unit(unit)
    return _rfind_aligned(searchable(haystack, cs), single_unit(unit), from_)


def last_index_of(haystack: Optional[memoryview], from_: int, needle: Optional[memoryview],
                  cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
    """Offset of the last needle starting at or before from_, or -1."""
    needle_len = _length(needle)
    if needle_len == 1:
        return last_index_of_char(haystack, needle[0], from_, cs)
    size = _length(haystack)
    if from_ < 0:
        from_ += size
    if from_ == size and needle_len == 0:
        return from_
    delta = size - needle_len
    if from_ < 0 or from_ >= size or delta < 0:
        return NOT_FOUND
    if from_ > delta:
        from_ = delta
    if not needle_len:
        return from_
    return _rfind_aligned(searchable(haystack, cs), searchable(needle, cs), from_)


def count_string(haystack: Optional[memoryview], needle: Optional[memoryview],
                 cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
    """Number of non-overlapping occurrences of needle."""
    needle_len = _length(needle)
    if not needle_len:
        return _length(haystack) + 1
    hay = searchable(haystack, cs)
    pattern = searchable(needle, cs)
    num = 0
    pos = _find_aligned(hay, pattern, 0)
    while pos != NOT_FOUND:
        num += 1
        pos = _find_aligned(hay, pattern, pos + needle_len)
    return num


def count_char(haystack: Optional[memoryview], unit: int,
               cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
    if cs is CaseSensitivity.CASE_INSENSITIVE:
        unit = fold_unit(unit)
    return searchable(haystack, cs).tolist().count(unit)


def is_right_to_left(span: Optional[memoryview]) -> bool:
    """True if the first strong character outside any isolate is R or AL."""
    isolate_level = 0
    # Lone surrogates decode to U+FFFD, which is neutral
    for ch in decode_units(span, 'replace'):
        direction = unicodedata.bidirectional(ch)
        if direction in _ISOLATE_OPENERS:
            isolate_level += 1
        elif direction == 'PDI':
            if isolate_level:
                isolate_level -= 1
        elif isolate_level:
            continue
        elif direction == 'L':
            return False
        elif direction in _RTL_CLASSES:
            return True
    return False


def is_valid_utf16(span: Optional[memoryview]) -> bool:
    """True unless a surrogate is lone or the pair is in the wrong order."""
    if not _length(span):
        return True
    try:
        str(span.cast('B'), NATIVE_UTF16, 'strict')
    except UnicodeDecodeError:
        return False
    return True


def trimmed_positions(span: Optional[memoryview]) -> Tuple[int, int]:
    """Begin and end offsets of span with surrounding whitespace removed."""
    begin, end = 0, _length(span)
    while begin < end and is_space(span[begin]):
        begin += 1
    while begin < end and is_space(span[end - 1]):
        end -= 1
    return begin, end


def split_positions(haystack: Optional[memoryview], separator: Optional[memoryview],
                    behavior: SplitBehavior = SplitBehavior.KEEP_EMPTY_PARTS,
                    cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> List[Tuple[int, int]]:
    """(start, length) of every part of haystack between separators."""
    size = _length(haystack)
    sep_len = _length(separator)
    keep_empty = behavior is SplitBehavior.KEEP_EMPTY_PARTS
    # Fold once up front rather than on every find
    hay = searchable(haystack, cs)
    sep = searchable(separator, cs)

    parts = []
    start = 0
    extra = 0
    while True:
        end = find_string(hay, start + extra, sep)
        if end == NOT_FOUND:
            break
        if start != end or keep_empty:
            parts.append((start, end - start))
        start = end + sep_len
        extra = 1 if sep_len == 0 else 0
    if start != size or keep_empty:
        parts.append((start, size - start))
    return parts
