"""Behaviour switches accepted by the search and split operations."""

from enum import Enum


class CaseSensitivity(Enum):
    CASE_INSENSITIVE = 0
    CASE_SENSITIVE = 1


class SplitBehavior(Enum):
    KEEP_EMPTY_PARTS = 0
    SKIP_EMPTY_PARTS = 1


CASE_SENSITIVE = CaseSensitivity.CASE_SENSITIVE
CASE_INSENSITIVE = CaseSensitivity.CASE_INSENSITIVE
KEEP_EMPTY_PARTS = SplitBehavior.KEEP_EMPTY_PARTS
SKIP_EMPTY_PARTS = SplitBehavior.SKIP_EMPTY_PARTS
