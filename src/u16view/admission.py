"""Decide whether an argument can be viewed as 16-bit code units without copying.

Each admission rule is a named predicate so it can be checked on its own:

* ``is_compatible_pointer``   - a Utf16Pointer or a ctypes pointer to a
  compatible character type
* ``is_compatible_array``     - a ctypes array of a compatible character type
* ``is_compatible_string_like`` - an owning string exposing data(), size()
  and is_null()
* ``is_compatible_container`` - anything else exporting a flat buffer of
  compatible characters that also has a length and can be iterated

``classify`` runs all four and returns the single rule that matched.
"""

import ctypes
import sys
from collections.abc import Iterable, Sized
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from u16view.buffers import Utf16Pointer

# Format characters of 16-bit unsigned storage and of the platform wide char
_UNIT_FORMATS = frozenset({'H', 'u'})
_NATIVE_PREFIXES = frozenset({'', '@', '=', '<' if sys.byteorder == 'little' else '>'})
_UNIT_SIZE = 2


class Admission(Enum):
    POINTER = 'pointer'
    ARRAY = 'array'
    STRING_LIKE = 'string_like'
    CONTAINER = 'container'


@runtime_checkable
class StringLike(Protocol):
    """Owning string that can hand out its buffer.

    data() returns a Utf16Pointer (or a buffer of compatible units), and is
    only meaningful while is_null() is false.
    """

    def data(self): ...

    def size(self) -> int: ...

    def is_null(self) -> bool: ...


def _format_size(code: str) -> int:
    if code == 'u':
        return ctypes.sizeof(ctypes.c_wchar)
    return ctypes.sizeof(ctypes.c_ushort)


def is_compatible_char_type(char_type) -> bool:
    """Is char_type a 16-bit character type?

    char_type is either a ctypes simple type (c_uint16, c_ushort, c_wchar) or
    a struct/buffer format string such as 'H' or '<H'. The wide character
    only qualifies on platforms where it is 16 bits wide.
    """
    if isinstance(char_type, str):
        prefix, code = char_type[:-1], char_type[-1:]
        if prefix not in _NATIVE_PREFIXES or code not in _UNIT_FORMATS:
            return False
        return _format_size(code) == _UNIT_SIZE
    code = getattr(char_type, '_type_', None)
    if not isinstance(code, str) or code not in _UNIT_FORMATS:
        return False
    return ctypes.sizeof(char_type) == _UNIT_SIZE


def is_compatible_pointer(obj) -> bool:
    if isinstance(obj, Utf16Pointer):
        return True
    if isinstance(obj, ctypes._Pointer):
        return is_compatible_char_type(type(obj)._type_)
    return False


def is_compatible_array(obj) -> bool:
    if isinstance(obj, ctypes.Array):
        return is_compatible_char_type(type(obj)._type_)
    return False


def _is_view(obj) -> bool:
    from u16view.stringview import Utf16View
    return isinstance(obj, Utf16View)


def is_compatible_string_like(obj) -> bool:
    return isinstance(obj, StringLike) and not _is_view(obj)


def _exports_compatible_buffer(obj) -> bool:
    try:
        mv = memoryview(obj)
    except TypeError:
        return False
    with mv:
        return (mv.ndim == 1 and mv.c_contiguous
                and mv.itemsize == _UNIT_SIZE and is_compatible_char_type(mv.format))


def is_compatible_container(obj) -> bool:
    """Generic container of compatible characters.

    Views, owning strings, ctypes arrays and pointers have their own rules
    and are excluded here.
    """
    if _is_view(obj) or is_compatible_string_like(obj):
        return False
    if is_compatible_array(obj) or is_compatible_pointer(obj):
        return False
    if not isinstance(obj, Sized) or not isinstance(obj, Iterable):
        return False
    return _exports_compatible_buffer(obj)


_ADMISSION_RULES = (
    (Admission.POINTER, is_compatible_pointer),
    (Admission.ARRAY, is_compatible_array),
    (Admission.STRING_LIKE, is_compatible_string_like),
    (Admission.CONTAINER, is_compatible_container),
)


def classify(obj) -> Optional[Admission]:
    """Return the admission rule obj satisfies, or None."""
    matches = [kind for kind, predicate in _ADMISSION_RULES if predicate(obj)]
    assert len(matches) <= 1, f"ambiguous admission for {type(obj).__name__}: {matches}"
    return matches[0] if matches else None
