"""Single-line extraction of comments and string literals.

A line is peeled repeatedly: the earliest comment or string candidate is cut
out of a working copy and emitted as a segment, then whatever code is left is
normalized into a Code segment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from code_lang_check.grammar import DelimiterPair, LanguageGrammar
from code_lang_check.language_check.language_check_config import MAX_PEELS_PER_LINE
from code_lang_check.models import Segment, SegmentKind, SourceLine

from .delimiters import block_ignore_patterns, find_unescaped
from .normalizer import normalize_code

LOGGER = logging.getLogger(__name__)

MAX_DISCARDED_FRAGMENT = 2


@dataclass(frozen=True)
class _Candidate:
    kind: SegmentKind
    start: int
    end: int
    content_start: int
    content_end: int
    delimiter_length: int
    order: int
    pair: Optional[DelimiterPair] = None

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.start, -self.delimiter_length, self.order)


def trim_block_text(text: str, delimiter: DelimiterPair, grammar: LanguageGrammar) -> str:
    """Trim ``text`` and drop one trailing repeat of the end or comment delimiter."""

    text = text.strip()
    for token in (delimiter.end, grammar.comment_delimiter):
        if token and text.endswith(token):
            return text[: -len(token)].rstrip()
    return text


def _comment_text(content: str, grammar: LanguageGrammar) -> str:
    # "///" and "---" style comments repeat the delimiter characters.
    return content.lstrip(grammar.comment_delimiter).strip()


def _candidates(working: str, grammar: LanguageGrammar) -> list[_Candidate]:
    found: list[_Candidate] = []
    order = 0

    if grammar.comment_delimiter:
        index = working.find(grammar.comment_delimiter)
        if index >= 0:
            found.append(
                _Candidate(
                    kind=SegmentKind.COMMENT,
                    start=index,
                    end=len(working),
                    content_start=index + len(grammar.comment_delimiter),
                    content_end=len(working),
                    delimiter_length=len(grammar.comment_delimiter),
                    order=order,
                )
            )
    order += 1

    for syntax in grammar.strings:
        start = find_unescaped(working, syntax.delimiter, 0, syntax.ignore_patterns)
        if start >= 0:
            content_start = start + len(syntax.delimiter)
            end = find_unescaped(working, syntax.delimiter, content_start, syntax.ignore_patterns)
            if end >= 0:
                found.append(
                    _Candidate(
                        kind=SegmentKind.STRING,
                        start=start,
                        end=end + len(syntax.delimiter),
                        content_start=content_start,
                        content_end=end,
                        delimiter_length=len(syntax.delimiter),
                        order=order,
                    )
                )
        order += 1

    block_pairs = [(SegmentKind.COMMENT, pair) for pair in grammar.block_comments]
    block_pairs.extend((SegmentKind.STRING, pair) for pair in grammar.block_strings)
    for kind, pair in block_pairs:
        ignore = block_ignore_patterns(kind, grammar)
        start = find_unescaped(working, pair.start, 0, ignore)
        if start >= 0:
            content_start = start + len(pair.start)
            end = find_unescaped(working, pair.end, content_start, ignore)
            if end >= 0:
                found.append(
                    _Candidate(
                        kind=kind,
                        start=start,
                        end=end + len(pair.end),
                        content_start=content_start,
                        content_end=end,
                        delimiter_length=len(pair.start),
                        order=order,
                        pair=pair,
                    )
                )
        order += 1

    return found


def _fragment_text(candidate: _Candidate, working: str, grammar: LanguageGrammar) -> str:
    content = working[candidate.content_start : candidate.content_end]
    if candidate.pair is not None:
        return trim_block_text(content, candidate.pair, grammar)
    if candidate.kind is SegmentKind.COMMENT:
        return _comment_text(content, grammar)
    return content.strip()


def _code_segment(line: SourceLine, working: str, grammar: LanguageGrammar) -> list[Segment]:
    normalized = normalize_code(working, grammar)
    if not normalized:
        return []
    return [Segment.create(SegmentKind.CODE, line, normalized)]


def extract_line_segments(
    line: SourceLine,
    grammar: LanguageGrammar,
    *,
    text: str | None = None,
    max_peels: int = MAX_PEELS_PER_LINE,
) -> list[Segment]:
    """Split one line into Comment/String segments plus a trailing Code segment.

    ``text`` overrides the portion of ``line`` that is examined (used for the
    code that precedes a block opening on the same line); segments still
    reference ``line`` so positions are recovered from the original text.
    """

    working = line.text if text is None else text
    for token in grammar.prefilter_tokens:
        working = working.replace(token, " ")

    segments: list[Segment] = []
    peels = 0
    while True:
        candidates = _candidates(working, grammar)
        if not candidates:
            break
        if peels >= max_peels:
            LOGGER.error(
                "Line %d exceeded %d extraction passes; keeping code only",
                line.line_number,
                max_peels,
            )
            return _code_segment(line, working, grammar)

        candidate = min(candidates, key=lambda item: item.sort_key)
        fragment = _fragment_text(candidate, working, grammar)
        working = f"{working[: candidate.start]} {working[candidate.end :]}"
        peels += 1
        if len(fragment) <= MAX_DISCARDED_FRAGMENT:
            continue
        segments.append(Segment.create(candidate.kind, line, fragment))

    segments.extend(_code_segment(line, working, grammar))
    return segments
