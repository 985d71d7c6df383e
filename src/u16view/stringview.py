"""Non-owning, read-only view over a run of 16-bit code units.

A Utf16View is a (buffer, offset, size) triple. It never copies, allocates or
frees the units it refers to: constructing, slicing and trimming a view only
move offsets around the same memoryview.

Lifetime contract: a view borrows. Holding a view keeps the exporting object
alive and stops resizable exporters (bytearray, array.array) from being
resized, but nothing checks that the units are left unmodified, and memory
reached through a ctypes pointer must outlive every view made from it. That
part of the contract is the caller's obligation.

Preconditions (negative lengths, out of range positions, front() of an empty
view) are checked with assert, so they disappear under ``python -O``.
Recoverable misses are reported as -1 or as an (value, ok) tuple.
"""

import ctypes
import functools
from typing import List, Optional, Tuple, Union

import u16view.algorithms as algorithms
import u16view.conversions as conversions
import u16view.numeric as numeric
from u16view.admission import Admission, classify, is_compatible_pointer
from u16view.buffers import Utf16Pointer, as_units, ctypes_strlen, pointer_from_ctypes
from u16view.flags import CaseSensitivity, SplitBehavior
from u16view.unicode_utils import encode_units, from_ucs4_units, single_unit

Char = Union[str, int]

NOT_FOUND = algorithms.NOT_FOUND


def _is_char(arg) -> bool:
    """A single code unit given as an int or a one-character BMP str."""
    if isinstance(arg, int):
        return True
    return isinstance(arg, str) and len(arg) == 1 and ord(arg) <= 0xFFFF


def _unit_of(c: Char) -> int:
    unit = c if isinstance(c, int) else ord(c)
    assert 0 <= unit <= 0xFFFF, f"{c!r} is not a single code unit"
    return unit


def _needle_span(needle) -> Optional[memoryview]:
    """Span for a search argument: a view, a str, a character or anything viewable."""
    if isinstance(needle, Utf16View):
        return needle._span()
    if isinstance(needle, int):
        return single_unit(_unit_of(needle))
    if isinstance(needle, str):
        return encode_units(needle)
    return Utf16View(needle)._span()


def _sensitivity(cs: Optional[CaseSensitivity]) -> CaseSensitivity:
    return CaseSensitivity.CASE_SENSITIVE if cs is None else cs


def _ctypes_address(ptr) -> int:
    return ctypes.cast(ptr, ctypes.c_void_p).value or 0


@functools.total_ordering
class Utf16View:
    """Read-only window onto externally owned UTF-16 code units.

    Utf16View()                  null view
    Utf16View(ptr, length)       ptr is a Utf16Pointer or ctypes pointer
    Utf16View(first, last)       pointer pair into the same buffer
    Utf16View(ptr)               scan for the 0 terminator
    Utf16View(ctypes_array)      extent minus the terminator slot
    Utf16View(owning_string)     null stays null, empty stays empty
    Utf16View(container)         any flat buffer of 16-bit units with len()
    Utf16View(view)              copy
    """

    __slots__ = ('_units', '_offset', '_size')

    def __init__(self, source=None, length=None):
        self._units = None
        self._offset = 0
        self._size = 0
        if length is not None:
            self._init_from_pointer(source, length)
        elif source is None:
            return
        elif isinstance(source, Utf16View):
            self._units, self._offset, self._size = source._units, source._offset, source._size
        else:
            self._init_admitted(source)

    def _init_from_pointer(self, ptr, length):
        if is_compatible_pointer(length):
            length = self._pointer_distance(ptr, length)
        assert length >= 0, f"negative length {length}"
        assert ptr is not None or length == 0, "null pointer with non-zero length"
        if ptr is None:
            return
        if isinstance(ptr, Utf16Pointer):
            assert length <= ptr.remaining(), "length runs past the end of the buffer"
            self._units, self._offset, self._size = ptr.units, ptr.offset, length
        elif is_compatible_pointer(ptr):
            if not ptr:
                assert length == 0, "null pointer with non-zero length"
                return
            wrapped = pointer_from_ctypes(ptr, length)
            self._units, self._offset, self._size = wrapped.units, 0, length
        else:
            raise TypeError(f"cannot view {type(ptr).__name__} as a pointer to 16-bit code units")

    @staticmethod
    def _pointer_distance(first, last) -> int:
        if isinstance(first, Utf16Pointer) and isinstance(last, Utf16Pointer):
            return last - first
        if isinstance(first, Utf16Pointer) or isinstance(last, Utf16Pointer):
            raise TypeError("pointer pair must be of the same kind")
        return (_ctypes_address(last) - _ctypes_address(first)) // ctypes.sizeof(type(first)._type_)

    def _init_admitted(self, source):
        kind = classify(source)
        if kind is Admission.POINTER:
            if isinstance(source, Utf16Pointer):
                self._init_from_pointer(source, algorithms.ustrlen(source.units, source.offset))
            elif source:
                self._init_from_pointer(source, ctypes_strlen(source))
        elif kind is Admission.ARRAY:
            size = type(source)._length_ - 1
            assert size >= 0, "array has no room for a terminator"
            self._units, self._offset, self._size = as_units(source), 0, size
        elif kind is Admission.STRING_LIKE:
            if source.is_null():
                return
            self._init_from_string_data(source.data(), source.size())
        elif kind is Admission.CONTAINER:
            self._units, self._offset, self._size = as_units(source), 0, len(source)
        else:
            raise TypeError(f"cannot view {type(source).__name__} as 16-bit code units")

    def _init_from_string_data(self, data, size: int):
        if data is not None and not is_compatible_pointer(data):
            data = Utf16Pointer(data)
        self._init_from_pointer(data, size)

    @classmethod
    def _make(cls, units: Optional[memoryview], offset: int, size: int) -> 'Utf16View':
        view = cls.__new__(cls)
        view._units = units
        view._offset = offset if units is not None else 0
        view._size = size if units is not None else 0
        return view

    def _span(self) -> Optional[memoryview]:
        if self._units is None:
            return None
        return self._units[self._offset:self._offset + self._size]

    def _sub(self, pos: int, n: int) -> 'Utf16View':
        return Utf16View._make(self._units, self._offset + pos, n)

    def _unit(self, n: int) -> int:
        assert 0 <= n < self._size, f"index {n} out of range for size {self._size}"
        return self._units[self._offset + n]

    # Accessors

    def size(self) -> int:
        return self._size

    def length(self) -> int:
        assert self._size < 2 ** 31, "size does not fit in an int"
        return self._size

    def data(self) -> Optional[Utf16Pointer]:
        if self._units is None:
            return None
        return Utf16Pointer._at(self._units, self._offset)

    const_data = data

    def utf16(self) -> Optional[memoryview]:
        """The referenced units as a memoryview, without copying."""
        return self._span()

    def is_null(self) -> bool:
        return self._units is None

    def empty(self) -> bool:
        return self._size == 0

    is_empty = empty

    def at(self, n: int) -> str:
        return chr(self._unit(n))

    def front(self) -> str:
        assert not self.empty(), "front() of an empty view"
        return chr(self._units[self._offset])

    def back(self) -> str:
        assert not self.empty(), "back() of an empty view"
        return chr(self._units[self._offset + self._size - 1])

    def copy(self) -> 'Utf16View':
        return Utf16View._make(self._units, self._offset, self._size)

    def __len__(self):
        return self._size

    def __getitem__(self, key):
        if isinstance(key, slice):
            start, stop, step = key.indices(self._size)
            if step != 1:
                raise ValueError("Utf16View does not support a step when slicing")
            return self._sub(start, max(stop - start, 0))
        return self.at(key)

    def __iter__(self):
        span = self._span()
        if span is None:
            return
        for unit in span:
            yield chr(unit)

    def __reversed__(self):
        span = self._span()
        if span is None:
            return
        for i in range(len(span) - 1, -1, -1):
            yield chr(span[i])

    # Sub-ranges. left/right/mid clamp; first/last/sliced/chopped assert.

    def mid(self, pos: int, n: int = -1) -> 'Utf16View':
        size = self._size
        if pos > size:
            return Utf16View()
        if pos < 0:
            if n < 0 or n + pos >= size:
                return self._sub(0, size)
            if n + pos <= 0:
                return Utf16View()
            n += pos
            pos = 0
        elif n < 0 or n > size - pos:
            n = size - pos
        return self._sub(pos, n)

    def left(self, n: int) -> 'Utf16View':
        # A negative n wraps to a huge unsigned value and is clamped too
        if n < 0 or n >= self._size:
            n = self._size
        return self._sub(0, n)

    def right(self, n: int) -> 'Utf16View':
        if n < 0 or n >= self._size:
            n = self._size
        return self._sub(self._size - n, n)

    def first(self, n: Optional[int] = None):
        """First n units as a view; with no argument, the first character."""
        if n is None:
            return self.front()
        assert 0 <= n <= self._size, f"first({n}) out of range for size {self._size}"
        return self._sub(0, n)

    def last(self, n: Optional[int] = None):
        """Last n units as a view; with no argument, the last character."""
        if n is None:
            return self.back()
        assert 0 <= n <= self._size, f"last({n}) out of range for size {self._size}"
        return self._sub(self._size - n, n)

    def sliced(self, pos: int, n: Optional[int] = None) -> 'Utf16View':
        assert 0 <= pos <= self._size, f"sliced({pos}) out of range for size {self._size}"
        if n is None:
            return self._sub(pos, self._size - pos)
        assert n >= 0 and pos + n <= self._size, f"sliced({pos}, {n}) out of range for size {self._size}"
        return self._sub(pos, n)

    def chopped(self, n: int) -> 'Utf16View':
        assert 0 <= n <= self._size, f"chopped({n}) out of range for size {self._size}"
        return self._sub(0, self._size - n)

    def truncate(self, n: int) -> None:
        assert 0 <= n <= self._size, f"truncate({n}) out of range for size {self._size}"
        self._size = n

    def chop(self, n: int) -> None:
        assert 0 <= n <= self._size, f"chop({n}) out of range for size {self._size}"
        self._size -= n

    def trimmed(self) -> 'Utf16View':
        if self._units is None:
            return Utf16View()
        begin, end = algorithms.trimmed_positions(self._span())
        return self._sub(begin, end - begin)

    # Comparison and search

    def compare(self, other, cs: Optional[CaseSensitivity] = None) -> int:
        if cs is None and _is_char(other):
            return self._compare_single_char(_unit_of(other))
        return algorithms.compare_strings(self._span(), _needle_span(other),
                                          _sensitivity(cs))

    def _compare_single_char(self, unit: int) -> int:
        if not self._size:
            return -1
        diff = self._units[self._offset] - unit
        if diff:
            return diff
        return 1 if self._size > 1 else 0

    def starts_with(self, needle, cs: Optional[CaseSensitivity] = None) -> bool:
        if cs is None and _is_char(needle):
            return not self.empty() and self._units[self._offset] == _unit_of(needle)
        return algorithms.starts_with(self._span(), _needle_span(needle),
                                      _sensitivity(cs))

    def ends_with(self, needle, cs: Optional[CaseSensitivity] = None) -> bool:
        if cs is None and _is_char(needle):
            return not self.empty() and self._units[self._offset + self._size - 1] == _unit_of(needle)
        return algorithms.ends_with(self._span(), _needle_span(needle),
                                    _sensitivity(cs))

    def index_of(self, needle, from_: int = 0,
                 cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
        return algorithms.find_string(self._span(), from_, _needle_span(needle), cs)

    def last_index_of(self, needle, from_: int = -1,
                      cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
        return algorithms.last_index_of(self._span(), from_, _needle_span(needle), cs)

    def contains(self, needle, cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> bool:
        return self.index_of(needle, 0, cs) != NOT_FOUND

    def count(self, needle, cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> int:
        if _is_char(needle):
            return algorithms.count_char(self._span(), _unit_of(needle), cs)
        return algorithms.count_string(self._span(), _needle_span(needle), cs)

    def is_right_to_left(self) -> bool:
        return algorithms.is_right_to_left(self._span())

    def is_valid_utf16(self) -> bool:
        return algorithms.is_valid_utf16(self._span())

    def split(self, sep, behavior: SplitBehavior = SplitBehavior.KEEP_EMPTY_PARTS,
              cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> List['Utf16View']:
        positions = algorithms.split_positions(self._span(), _needle_span(sep), behavior, cs)
        return [self._sub(start, n) for start, n in positions]

    def tokenize(self, sep, behavior: SplitBehavior = SplitBehavior.KEEP_EMPTY_PARTS,
                 cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE):
        from u16view.tokenizer import Utf16Tokenizer
        return Utf16Tokenizer(self, sep, behavior, cs)

    # Numbers

    def to_short(self, base: int = 10) -> Tuple[int, bool]:
        return numeric.to_integer(self._span(), base, 'short')

    def to_ushort(self, base: int = 10) -> Tuple[int, bool]:
        return numeric.to_integer(self._span(), base, 'ushort')

    def to_int(self, base: int = 10) -> Tuple[int, bool]:
        return numeric.to_integer(self._span(), base, 'int')

    def to_uint(self, base: int = 10) -> Tuple[int, bool]:
        return numeric.to_integer(self._span(), base, 'uint')

    def to_long(self, base: int = 10) -> Tuple[int, bool]:
        return numeric.to_integer(self._span(), base, 'long')

    def to_ulong(self, base: int = 10) -> Tuple[int, bool]:
        return numeric.to_integer(self._span(), base, 'ulong')

    def to_longlong(self, base: int = 10) -> Tuple[int, bool]:
        return numeric.to_integer(self._span(), base, 'longlong')

    def to_ulonglong(self, base: int = 10) -> Tuple[int, bool]:
        return numeric.to_integer(self._span(), base, 'ulonglong')

    def to_float(self) -> Tuple[float, bool]:
        return numeric.to_float(self._span())

    def to_double(self) -> Tuple[float, bool]:
        return numeric.to_double(self._span())

    # Encodings

    def to_string(self) -> str:
        return conversions.to_string(self._span())

    def to_latin1(self) -> bytes:
        return conversions.to_latin1(self._span())

    def to_utf8(self) -> bytes:
        return conversions.to_utf8(self._span())

    def to_local8bit(self) -> bytes:
        return conversions.to_local8bit(self._span())

    def to_ucs4(self) -> List[int]:
        return conversions.to_ucs4(self._span())

    def to_wchar_array(self, array) -> int:
        return conversions.to_wchar_array(self._span(), array)

    # Python protocol

    def __eq__(self, other):
        if not isinstance(other, (Utf16View, str)):
            return NotImplemented
        return algorithms.compare_strings(self._span(), _needle_span(other)) == 0

    def __lt__(self, other):
        if not isinstance(other, (Utf16View, str)):
            return NotImplemented
        return algorithms.compare_strings(self._span(), _needle_span(other)) < 0

    def __hash__(self):
        return hash(self.to_string())

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        if self.is_null():
            return "Utf16View(null)"
        return f"Utf16View({self.to_string()!r})"


def to_view_ignoring_null(string_like) -> Utf16View:
    """View of an owning string taking data() as is, even for a null string."""
    view = Utf16View()
    view._init_from_string_data(string_like.data(), string_like.size())
    return view


def from_ucs4(code_point: int) -> Utf16View:
    """View of the one or two units encoding code_point, over a fresh buffer."""
    return Utf16View(from_ucs4_units(code_point))
