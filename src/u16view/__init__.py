"""Non-owning, read-only views over UTF-16 code unit buffers."""

from u16view.admission import (
    Admission,
    StringLike,
    classify,
    is_compatible_array,
    is_compatible_char_type,
    is_compatible_container,
    is_compatible_pointer,
    is_compatible_string_like,
)
from u16view.buffers import Utf16Pointer, literal, units_from_str
from u16view.flags import (
    CASE_INSENSITIVE,
    CASE_SENSITIVE,
    KEEP_EMPTY_PARTS,
    SKIP_EMPTY_PARTS,
    CaseSensitivity,
    SplitBehavior,
)
from u16view.stringview import NOT_FOUND, Utf16View, from_ucs4, to_view_ignoring_null
from u16view.tokenizer import Utf16Tokenizer, tokenize

__version__ = "0.1.0"
