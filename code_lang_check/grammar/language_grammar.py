"""Static per-language lexical descriptor that drives the tokenizer.

A grammar only lists delimiters, keywords and operator tokens; it is never
mutated after import and is shared read-only between worker threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from code_lang_check.models import DelimiterPair, NamingConvention

__all__ = ["DelimiterPair", "LanguageGrammar", "StringSyntax"]


@dataclass(frozen=True)
class StringSyntax:
    """A single-line string delimiter plus the escape sequences inside it.

    ``ignore_patterns`` are matched before the delimiter at every position, so
    an escaped delimiter (``\\"``) is never treated as a boundary.
    """

    delimiter: str
    ignore_patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class LanguageGrammar:
    """Delimiter/keyword table for one programming language."""

    name: str
    extensions: tuple[str, ...]
    comment_delimiter: str
    block_comments: tuple[DelimiterPair, ...] = ()
    strings: tuple[StringSyntax, ...] = ()
    block_strings: tuple[DelimiterPair, ...] = ()
    reserved_keywords: frozenset[str] = frozenset()
    operators: tuple[str, ...] = ()
    naming_conventions: tuple[NamingConvention, ...] = (NamingConvention.NONE,)
    # Tokens removed from a line before string peeling (e.g. Rust lifetimes).
    prefilter_tokens: tuple[str, ...] = ()
    _sorted_operators: tuple[str, ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self) -> None:
        ordered = tuple(sorted(set(self.operators), key=len, reverse=True))
        object.__setattr__(self, "_sorted_operators", ordered)

    @property
    def sorted_operators(self) -> tuple[str, ...]:
        """Operator tokens, longest first."""

        return self._sorted_operators

    @property
    def splits_case(self) -> bool:
        """True when identifiers should be decomposed at case boundaries."""

        return any(
            convention in (NamingConvention.CAMEL_CASE, NamingConvention.PASCAL_CASE)
            for convention in self.naming_conventions
        )

    def is_reserved_keyword(self, token: str) -> bool:
        return token in self.reserved_keywords

    def escape_patterns(self) -> tuple[str, ...]:
        """All string escape patterns declared by the grammar, longest first."""

        patterns = {pattern for syntax in self.strings for pattern in syntax.ignore_patterns}
        return tuple(sorted(patterns, key=len, reverse=True))
