"""Public model exports for the project.

Keep the package namespace clean: other modules should import
``from code_lang_check.models import Diagnostic, SegmentKind``.
"""

from __future__ import annotations

from .check_match import MAX_REPLACEMENTS, CheckMatch
from .diagnostic import Diagnostic
from .enums import DiagnosticCategory, NamingConvention, SegmentKind
from .source import Block, DelimiterPair, Segment, SourceLine, stable_hash

__all__ = [
    "Block",
    "CheckMatch",
    "DelimiterPair",
    "Diagnostic",
    "DiagnosticCategory",
    "MAX_REPLACEMENTS",
    "NamingConvention",
    "Segment",
    "SegmentKind",
    "SourceLine",
    "stable_hash",
]
