"""Language grammar tables used by the tokenizer."""

from __future__ import annotations

from .language_grammar import DelimiterPair, LanguageGrammar, StringSyntax
from .languages import GRAMMARS, JAVASCRIPT, LUA, PYTHON, RUST, grammar_by_name, grammar_for_path

__all__ = [
    "DelimiterPair",
    "GRAMMARS",
    "JAVASCRIPT",
    "LUA",
    "LanguageGrammar",
    "PYTHON",
    "RUST",
    "StringSyntax",
    "grammar_by_name",
    "grammar_for_path",
]
