"""Lazy, restartable tokenizer over a Utf16View."""

from typing import List

import u16view.algorithms as algorithms
from u16view.flags import CaseSensitivity, SplitBehavior
from u16view.stringview import Utf16View, _needle_span


class Utf16Tokenizer:
    """Split a view on a separator one token at a time.

    Tokens are views into the haystack's buffer. Nothing is searched until
    iteration starts, and every new iteration starts again from the
    beginning, so a tokenizer can be walked any number of times. The parts
    produced are the same as Utf16View.split with the same arguments.
    """

    def __init__(self, haystack, needle,
                 behavior: SplitBehavior = SplitBehavior.KEEP_EMPTY_PARTS,
                 cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE):
        self.haystack = haystack if isinstance(haystack, Utf16View) else Utf16View(haystack)
        self._needle = _needle_span(needle)
        self.behavior = behavior
        self.cs = cs

    def __iter__(self):
        hay = algorithms.searchable(self.haystack.utf16(), self.cs)
        sep = algorithms.searchable(self._needle, self.cs)
        sep_len = len(sep)
        skip_empty = self.behavior is SplitBehavior.SKIP_EMPTY_PARTS

        start = 0
        extra = 0
        while start is not None:
            end = algorithms.find_string(hay, start + extra, sep)
            if end == algorithms.NOT_FOUND:
                token = self.haystack.sliced(start)
                start = None
            else:
                token = self.haystack.sliced(start, end - start)
                start = end + sep_len
                extra = 1 if sep_len == 0 else 0
            if skip_empty and token.empty():
                continue
            yield token

    def to_container(self) -> List[Utf16View]:
        return list(self)

    def __repr__(self):
        return f"Utf16Tokenizer({self.haystack!r}, behavior={self.behavior.name}, cs={self.cs.name})"


def tokenize(haystack, needle,
             behavior: SplitBehavior = SplitBehavior.KEEP_EMPTY_PARTS,
             cs: CaseSensitivity = CaseSensitivity.CASE_SENSITIVE) -> Utf16Tokenizer:
    return Utf16Tokenizer(haystack, needle, behavior, cs)
