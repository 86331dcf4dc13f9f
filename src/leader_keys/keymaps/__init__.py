"""Hotkeys, trigger sequences, the mapping table and its resolver."""

from .models import Hotkey, KeySequence, Mapping, PRIMARY_MODIFIER, SPACE, canonical_key
from .normalizer import (
    NON_KEY,
    RawKeyEvent,
    format_hotkey,
    is_apple_platform,
    normalize,
    parse_hotkey,
)
from .sequences import (
    display_sort_key,
    format_sequence,
    hotkeys_equal,
    is_prefix,
    sequences_equal,
)
from .table import MappingConflictError, MappingTable
from .resolver import ResolutionResult, SequenceResolver

__all__ = [
    "Hotkey",
    "KeySequence",
    "Mapping",
    "PRIMARY_MODIFIER",
    "SPACE",
    "canonical_key",
    "NON_KEY",
    "RawKeyEvent",
    "format_hotkey",
    "is_apple_platform",
    "normalize",
    "parse_hotkey",
    "display_sort_key",
    "format_sequence",
    "hotkeys_equal",
    "is_prefix",
    "sequences_equal",
    "MappingConflictError",
    "MappingTable",
    "ResolutionResult",
    "SequenceResolver",
]
