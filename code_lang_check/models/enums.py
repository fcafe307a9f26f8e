"""Enumerations shared by the tokenizer, reconciler and report builders.

``DiagnosticCategory`` values mirror the LanguageTool rule category ids so a
checker response can be mapped onto them without a lookup table.
"""

from __future__ import annotations

from enum import Enum


class SegmentKind(str, Enum):
    """Kind of text span extracted from a source file."""

    CODE = "CODE"
    COMMENT = "COMMENT"
    STRING = "STRING"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class DiagnosticCategory(str, Enum):
    """LanguageTool rule categories surfaced to the editor.

    Unknown category ids coerce to ``OTHER`` rather than failing validation.
    """

    TYPOS = "TYPOS"
    PUNCTUATION = "PUNCTUATION"
    CONFUSED_WORDS = "CONFUSED_WORDS"
    REDUNDANCY = "REDUNDANCY"
    CASING = "CASING"
    GRAMMAR = "GRAMMAR"
    MISC = "MISC"
    SEMANTICS = "SEMANTICS"
    TYPOGRAPHY = "TYPOGRAPHY"
    STYLE = "STYLE"
    OTHER = "OTHER"

    @classmethod
    def _missing_(cls, value: object) -> "DiagnosticCategory":
        if isinstance(value, str):
            normalised = value.strip().upper()
            for member in cls:
                if member.value == normalised:
                    return member
        return cls.OTHER

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class NamingConvention(str, Enum):
    """Identifier naming conventions a language commonly uses."""

    CAMEL_CASE = "CAMEL_CASE"
    PASCAL_CASE = "PASCAL_CASE"
    SNAKE_CASE = "SNAKE_CASE"
    NONE = "NONE"
