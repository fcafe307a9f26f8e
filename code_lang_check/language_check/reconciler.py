"""Map checker matches back onto the original source lines.

The checker only sees extracted text: a comment body, a string literal or a
normalized code line such as ``Main Foldr``. Reconciliation takes the flagged
literal out of that text and searches the original line for it.

Known limitation: when the flagged word occurs verbatim twice on one line
(for example inside a string literal and again in code) both occurrences are
reported. The checker response carries no column metadata that could tell
them apart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from pydantic import ValidationError

from code_lang_check.models import Block, CheckMatch, Diagnostic, Segment, SegmentKind, SourceLine

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckedText:
    """A segment or block together with the exact text its offsets refer to.

    For Code segments ``text`` is the normalized line after sentinel decoding
    and, when the word-repetition repair ran, after the repair rewrite.
    """

    source: Union[Segment, Block]
    text: str

    @property
    def kind(self) -> SegmentKind:
        return self.source.kind

    @classmethod
    def of(cls, source: Union[Segment, Block]) -> "CheckedText":
        return cls(source=source, text=source.text)


def _is_boundary(line: str, index: int) -> bool:
    """True when ``index`` sits between two identifier parts of ``line``."""

    if index <= 0 or index >= len(line):
        return True
    before = line[index - 1]
    after = line[index]
    if not before.isalpha() or not after.isalpha():
        return True
    if before.islower() and after.isupper():
        return True
    # "HTTPServer": boundary before the capital that starts "Server".
    if (
        before.isupper()
        and after.isupper()
        and index + 1 < len(line)
        and line[index + 1].islower()
    ):
        return True
    return False


def find_occurrences(line: str, literal: str) -> Iterator[int]:
    """Yield each start index of ``literal`` in ``line`` bounded on both sides."""

    if not literal:
        return
    start = line.find(literal)
    while start >= 0:
        end = start + len(literal)
        if _is_boundary(line, start) and _is_boundary(line, end):
            yield start
        start = line.find(literal, start + 1)


def _target_line(match: CheckMatch, checked: CheckedText) -> Optional[SourceLine]:
    source = checked.source
    if isinstance(source, Block):
        return source.line_for_offset(match.offset)
    return source.line


def reconcile_match(match: CheckMatch, checked: CheckedText) -> list[Diagnostic]:
    """Return one ``Diagnostic`` per original-line occurrence of the flagged text."""

    literal = checked.text[match.offset : match.end]
    if not literal.strip():
        LOGGER.warning(
            "Empty flagged text for rule %s at offset %d; skipping",
            match.rule_id or "UNKNOWN",
            match.offset,
        )
        return []

    line = _target_line(match, checked)
    if line is None:
        LOGGER.warning(
            "No source line for offset %d in %s block; skipping",
            match.offset,
            checked.kind.value,
        )
        return []

    diagnostics: list[Diagnostic] = []
    for start in find_occurrences(line.text, literal):
        try:
            diagnostics.append(
                Diagnostic(
                    line_number=line.line_number,
                    start_column=line.byte_column(start),
                    end_column=line.byte_column(start + len(literal)),
                    original=literal,
                    options=match.replacements,
                    category=match.category,
                    segment_kind=checked.kind,
                    rule_id=match.rule_id,
                    message=match.message,
                )
            )
        except ValidationError:
            LOGGER.warning("Invalid span for %r on line %d", literal, line.line_number)

    if not diagnostics:
        LOGGER.warning(
            "Could not locate %r on line %d (rule=%s)",
            literal,
            line.line_number,
            match.rule_id or "UNKNOWN",
        )
    return diagnostics


def reconcile_matches(matches: list[CheckMatch], checked: CheckedText) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for match in matches:
        diagnostics.extend(reconcile_match(match, checked))
    return diagnostics
