"""Delimiter search helpers shared by the block scanner and line extractor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from code_lang_check.grammar import DelimiterPair, LanguageGrammar
from code_lang_check.models import SegmentKind


def find_unescaped(
    text: str,
    needle: str,
    start: int = 0,
    ignore_patterns: Iterable[str] = (),
) -> int:
    """Return the index of the first ``needle`` at or after ``start``.

    At every position the ignore patterns are tested first; a matching pattern
    is skipped as a whole so a delimiter inside it (``\\"``) is never reported.
    Returns ``-1`` when ``needle`` does not occur.
    """

    if not needle:
        return -1
    patterns = tuple(pattern for pattern in ignore_patterns if pattern)
    if not patterns:
        return text.find(needle, start)

    index = max(start, 0)
    limit = len(text)
    while index < limit:
        skipped = False
        for pattern in patterns:
            if text.startswith(pattern, index):
                index += len(pattern)
                skipped = True
                break
        if skipped:
            continue
        if text.startswith(needle, index):
            return index
        index += 1
    return -1


@dataclass(frozen=True)
class BlockStart:
    """Location of a block start delimiter inside a line."""

    kind: SegmentKind
    delimiter: DelimiterPair
    offset: int

    @property
    def content_start(self) -> int:
        return self.offset + len(self.delimiter.start)


def _first_declared(
    line: str,
    pairs: tuple[DelimiterPair, ...],
    kind: SegmentKind,
    ignore_patterns: tuple[str, ...],
) -> Optional[BlockStart]:
    for pair in pairs:
        offset = find_unescaped(line, pair.start, 0, ignore_patterns)
        if offset >= 0:
            return BlockStart(kind=kind, delimiter=pair, offset=offset)
    return None


def block_ignore_patterns(kind: SegmentKind, grammar: LanguageGrammar) -> tuple[str, ...]:
    """Escape patterns that apply inside a block of ``kind``."""

    if kind is SegmentKind.STRING:
        return grammar.escape_patterns()
    return ()


def _mask_prefilter_tokens(line: str, grammar: LanguageGrammar) -> str:
    # Same-length blanks keep every offset valid for the original line.
    for token in grammar.prefilter_tokens:
        line = line.replace(token, " " * len(token))
    return line


def _is_shadowed(line: str, limit: int, grammar: LanguageGrammar) -> bool:
    """True when ``limit`` lies inside a line comment or an open string.

    Strings that close before ``limit`` are skipped. A comment or string
    starting exactly at ``limit`` does not shadow it, so a block token that
    begins with one of those delimiters wins the tie.
    """

    position = 0
    while position < limit:
        comment = (
            line.find(grammar.comment_delimiter, position) if grammar.comment_delimiter else -1
        )
        opener = None
        opener_offset = -1
        for syntax in grammar.strings:
            offset = find_unescaped(line, syntax.delimiter, position, syntax.ignore_patterns)
            if offset >= 0 and (opener_offset < 0 or offset < opener_offset):
                opener, opener_offset = syntax, offset

        if 0 <= comment < limit and (opener_offset < 0 or comment < opener_offset):
            return True
        if opener is None or not 0 <= opener_offset < limit:
            return False

        content_start = opener_offset + len(opener.delimiter)
        close = find_unescaped(line, opener.delimiter, content_start, opener.ignore_patterns)
        if close < 0 or close >= limit:
            return True
        position = close + len(opener.delimiter)
    return False


def find_block_start(line: str, grammar: LanguageGrammar) -> Optional[BlockStart]:
    """Return the block start that opens on ``line``, if any.

    Block comments are tried before block strings, each in declaration order.
    The earlier of the two wins (a comment wins a tie). The winner must not sit
    inside a line comment or inside a string that is still open at its
    offset; strings closed earlier on the line do not count.
    """

    line = _mask_prefilter_tokens(line, grammar)
    escapes = grammar.escape_patterns()
    comment = _first_declared(line, grammar.block_comments, SegmentKind.COMMENT, ())
    string = _first_declared(line, grammar.block_strings, SegmentKind.STRING, escapes)

    candidates = [candidate for candidate in (comment, string) if candidate is not None]
    if not candidates:
        return None
    chosen = min(candidates, key=lambda candidate: candidate.offset)
    if _is_shadowed(line, chosen.offset, grammar):
        return None
    return chosen


def find_block_end(
    line: str,
    start: BlockStart | None,
    delimiter: DelimiterPair,
    kind: SegmentKind,
    grammar: LanguageGrammar,
) -> int:
    """Return the offset of ``delimiter.end`` on ``line`` or ``-1``.

    When ``start`` is given the search begins after the start delimiter, which
    is how a self-terminating one-line block is recognised.
    """

    begin = start.content_start if start is not None else 0
    return find_unescaped(line, delimiter.end, begin, block_ignore_patterns(kind, grammar))
