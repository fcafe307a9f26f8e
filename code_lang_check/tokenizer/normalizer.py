"""Turn a line of code into prose the grammar checker can read.

``normalize_code`` replaces operator tokens with spaces, drops short tokens and
reserved keywords and splits camelCase/PascalCase identifiers into words::

    >>> normalize_code("pub struct MainFoldr {", RUST)
    'Main Foldr'

The transform is idempotent: normalizing its own output returns it unchanged.
"""

from __future__ import annotations

import re

from code_lang_check.grammar import LanguageGrammar

MIN_TOKEN_LENGTH = 3

# lower/digit -> Upper, and the last capital of an acronym run before a lower
# case letter ("HTTPServer" -> "HTTP", "Server").
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def split_identifier(token: str) -> list[str]:
    """Split ``token`` at ASCII case boundaries."""

    if not token:
        return []
    return [part for part in _CASE_BOUNDARY.split(token) if part]


def _keep(token: str, grammar: LanguageGrammar) -> bool:
    return len(token) >= MIN_TOKEN_LENGTH and not grammar.is_reserved_keyword(token)


def _replace_operators(text: str, grammar: LanguageGrammar) -> str:
    for operator in grammar.sorted_operators:
        if operator in text:
            text = text.replace(operator, " ")
    return text


def normalize_code(text: str, grammar: LanguageGrammar) -> str:
    """Return the checker-ready prose for a code fragment."""

    words: list[str] = []
    for token in _replace_operators(text, grammar).split():
        if not _keep(token, grammar):
            continue
        parts = split_identifier(token) if grammar.splits_case else [token]
        words.extend(part for part in parts if _keep(part, grammar))
    return " ".join(words)
