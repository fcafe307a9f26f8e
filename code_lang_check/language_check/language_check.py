"""Language checks for comments, strings and identifiers in source files.

This module drives the pipeline for one file: tokenize, send every segment
and block to the checker concurrently, reconcile each match back to the
original lines and aggregate the result.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Container, Optional, Sequence, Union

from code_lang_check.grammar import LanguageGrammar
from code_lang_check.models import Block, CheckMatch, Diagnostic, Segment, SegmentKind
from code_lang_check.tokenizer import CodeFile, tokenize_file

from .aggregator import aggregate_diagnostics
from .checker_gateway import CheckerGateway, decode_offsets, encode_for_checker, split_matches
from .language_check_config import REPETITION_RULE_IDS, REPETITION_SHORT_MESSAGE
from .reconciler import CheckedText, reconcile_matches

LOGGER = logging.getLogger(__name__)

Checkable = Union[Segment, Block]


@dataclass
class FileReport:
    """Diagnostics collected for a single source file."""

    path: Path
    language: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: Optional[str] = None


def is_word_repetition(match: CheckMatch) -> bool:
    return match.rule_id in REPETITION_RULE_IDS or match.short_message == REPETITION_SHORT_MESSAGE


def repair_word_repetition(text: str, matches: Sequence[CheckMatch]) -> str:
    """Insert a comma after the first word of each repeated-word span.

    The checker stops reporting spelling on a word it has already flagged as
    repeated, so the separated text is checked again. Spans are rewritten
    right to left so earlier offsets stay valid.
    """

    repeats = sorted(
        (match for match in matches if is_word_repetition(match)),
        key=lambda match: match.offset,
        reverse=True,
    )
    for match in repeats:
        words = text[match.offset : match.end].split()
        if words:
            length = len(words[0])
        elif match.replacements:
            length = len(match.replacements[0])
        else:
            LOGGER.error("Unable to separate repeated word at offset %d", match.offset)
            continue
        cut = match.offset + length
        text = f"{text[:cut]},{text[cut:]}"
    return text


def _check_one(gateway: CheckerGateway, text: str, kind: SegmentKind) -> list[CheckMatch]:
    return decode_offsets(gateway.check(encode_for_checker(text, kind)), kind)


def check_text(
    source: Checkable, gateway: CheckerGateway
) -> tuple[CheckedText, list[CheckMatch]]:
    """Check one segment or block, applying the word-repetition repair to Code."""

    checked = CheckedText.of(source)
    if not checked.text.strip():
        return checked, []

    matches = _check_one(gateway, checked.text, checked.kind)
    if checked.kind is not SegmentKind.CODE or not any(map(is_word_repetition, matches)):
        return checked, matches

    repaired = repair_word_repetition(checked.text, matches)
    if repaired == checked.text:
        return checked, matches
    LOGGER.debug("Re-checking %r after separating repeated words", repaired)
    return CheckedText(source=source, text=repaired), _check_one(gateway, repaired, checked.kind)


def _diagnostics_for(source: Checkable, gateway: CheckerGateway) -> list[Diagnostic]:
    checked, matches = check_text(source, gateway)
    return reconcile_matches(matches, checked)


def _diagnostics_for_batch(batch: Sequence[Checkable], gateway: CheckerGateway) -> list[Diagnostic]:
    texts = [item.text for item in batch]
    buckets = split_matches(gateway.check_many(texts), texts)
    diagnostics: list[Diagnostic] = []
    for item, matches in zip(batch, buckets):
        diagnostics.extend(reconcile_matches(matches, CheckedText.of(item)))
    return diagnostics


def _work_units(sources: Sequence[Checkable], batch_size: int) -> list[list[Checkable]]:
    """Group sources into units; Code is always checked on its own."""

    units: list[list[Checkable]] = []
    pending: list[Checkable] = []
    for source in sources:
        if not source.text.strip():
            continue
        if batch_size <= 1 or source.kind is SegmentKind.CODE:
            units.append([source])
            continue
        pending.append(source)
        if len(pending) >= batch_size:
            units.append(pending)
            pending = []
    if pending:
        units.append(pending)
    return units


def _run_unit(unit: list[Checkable], gateway: CheckerGateway) -> list[Diagnostic]:
    if len(unit) == 1:
        return _diagnostics_for(unit[0], gateway)
    return _diagnostics_for_batch(unit, gateway)


def check_segments(
    sources: Sequence[Checkable],
    gateway: CheckerGateway,
    *,
    max_workers: int | None = None,
    batch_size: int = 1,
) -> list[Diagnostic]:
    """Check every segment/block concurrently and reconcile the matches.

    All checker calls complete before this returns. Diagnostics keep the
    order of ``sources`` so the first-wins dedup is deterministic.
    """

    units = _work_units(sources, batch_size)
    if not units:
        return []

    results: dict[int, list[Diagnostic]] = {}
    executor_kwargs = {"max_workers": max_workers} if max_workers else {}
    with ThreadPoolExecutor(**executor_kwargs) as executor:
        futures = {
            executor.submit(_run_unit, unit, gateway): index
            for index, unit in enumerate(units)
        }
        for future in as_completed(futures):
            index = futures[future]
            try:
                results[index] = future.result()
            except Exception:
                first = units[index][0]
                LOGGER.exception(
                    "Language check failed for %s text starting at line %d",
                    first.kind.value,
                    _first_line_number(first),
                )
                results[index] = []

    diagnostics: list[Diagnostic] = []
    for index in range(len(units)):
        diagnostics.extend(results.get(index, []))
    return diagnostics


def _first_line_number(source: Checkable) -> int:
    if isinstance(source, Block):
        return source.lines[0].line_number if source.lines else 0
    return source.line.line_number


def check_code_file(
    code_file: CodeFile,
    gateway: CheckerGateway,
    dictionary: Container[str] | None = None,
    *,
    max_workers: int | None = None,
    batch_size: int = 1,
) -> list[Diagnostic]:
    """Return the aggregated diagnostics for an already tokenized file."""

    sources: list[Checkable] = [*code_file.segments, *code_file.blocks]
    raw = check_segments(sources, gateway, max_workers=max_workers, batch_size=batch_size)
    diagnostics = aggregate_diagnostics(raw, dictionary)
    LOGGER.info(
        "Checked %s: %d segment(s), %d block(s), %d diagnostic(s)",
        code_file.path or "<text>",
        len(code_file.segments),
        len(code_file.blocks),
        len(diagnostics),
    )
    return diagnostics


def check_file(
    path: Path,
    grammar: LanguageGrammar,
    gateway: CheckerGateway,
    dictionary: Container[str] | None = None,
    *,
    max_workers: int | None = None,
    batch_size: int = 1,
) -> list[Diagnostic]:
    """Tokenize ``path`` with ``grammar`` and check it.

    An unreadable file yields an empty list.
    """

    code_file = tokenize_file(path, grammar, max_workers=max_workers)
    if code_file.is_empty:
        return []
    return check_code_file(
        code_file,
        gateway,
        dictionary,
        max_workers=max_workers,
        batch_size=batch_size,
    )
