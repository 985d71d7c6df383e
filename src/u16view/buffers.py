"""Buffers of 16-bit code units and positions inside them.

A ``Utf16Pointer`` plays the part of a raw ``const char16_t *``: it names a
code unit inside a buffer and supports the usual pointer arithmetic. The
buffer is always a one-dimensional memoryview with format ``'H'``; nothing
here copies the units.
"""

import ctypes
import sys
from array import array

# Codec that reads and writes code units in the machine byte order
NATIVE_UTF16 = 'utf-16-le' if sys.byteorder == 'little' else 'utf-16-be'


def as_units(buffer) -> memoryview:
    """Return a memoryview with format 'H' over buffer without copying.

    The buffer must be C-contiguous and its size a multiple of two bytes.
    """
    mv = memoryview(buffer)
    if mv.format == 'H' and mv.ndim == 1:
        return mv
    return mv.cast('B').cast('H')


def _buffer_key(units: memoryview):
    """Identity of the memory behind units, stable across memoryviews."""
    owner = units.obj
    try:
        return ('address', ctypes.addressof(owner))
    except TypeError:
        return ('object', id(owner))


class Utf16Pointer:
    """Position of a code unit inside a 16-bit buffer."""

    __slots__ = ('_units', '_offset')

    def __init__(self, buffer, offset: int = 0):
        self._units = as_units(buffer)
        assert 0 <= offset <= len(self._units), f"offset {offset} outside buffer"
        self._offset = offset

    @classmethod
    def _at(cls, units: memoryview, offset: int) -> 'Utf16Pointer':
        ptr = cls.__new__(cls)
        ptr._units = units
        ptr._offset = offset
        return ptr

    @property
    def units(self) -> memoryview:
        return self._units

    @property
    def offset(self) -> int:
        return self._offset

    def remaining(self) -> int:
        """Number of code units between this position and the buffer end."""
        return len(self._units) - self._offset

    def same_buffer(self, other: 'Utf16Pointer') -> bool:
        return _buffer_key(self._units) == _buffer_key(other._units)

    def __add__(self, n: int) -> 'Utf16Pointer':
        return Utf16Pointer._at(self._units, self._offset + n)

    def __sub__(self, other):
        if isinstance(other, Utf16Pointer):
            assert self.same_buffer(other), "pointers into different buffers"
            return self._offset - other._offset
        return Utf16Pointer._at(self._units, self._offset - other)

    def __getitem__(self, n: int) -> int:
        return self._units[self._offset + n]

    def __eq__(self, other):
        if not isinstance(other, Utf16Pointer):
            return NotImplemented
        return self._offset == other._offset and self.same_buffer(other)

    def __hash__(self):
        return hash((_buffer_key(self._units), self._offset))

    def __repr__(self):
        return f"Utf16Pointer(offset={self._offset}, buffer_units={len(self._units)})"


def units_from_str(text: str) -> array:
    """Encode text as native-order UTF-16 into a new owning array('H')."""
    units = array('H')
    units.frombytes(text.encode(NATIVE_UTF16, 'surrogatepass'))
    return units


def literal(text: str):
    """Build a terminated ctypes array of c_uint16 holding text.

    The result has one slot more than the encoded text, like a u"..." literal,
    so a view made from it covers exactly the text.
    """
    units = units_from_str(text)
    lit = (ctypes.c_uint16 * (len(units) + 1))()
    for i, unit in enumerate(units):
        lit[i] = unit
    return lit


def pointer_from_ctypes(ptr, length: int) -> Utf16Pointer:
    """Wrap length units at a ctypes pointer in a Utf16Pointer.

    The memory is not owned; it must outlive every view made from it.
    """
    address = ctypes.cast(ptr, ctypes.c_void_p).value
    block = (ctypes.c_uint16 * length).from_address(address)
    return Utf16Pointer._at(as_units(block), 0)


def ctypes_strlen(ptr) -> int:
    """Count code units before the 0 terminator at a ctypes pointer."""
    n = 0
    while True:
        unit = ptr[n]
        # c_wchar pointers yield 1-character strings
        if isinstance(unit, str):
            unit = ord(unit)
        if not unit:
            return n
        n += 1
