"""Filter, de-duplicate and cap reconciled diagnostics."""

from __future__ import annotations

import logging
from typing import Container, Iterable

from code_lang_check.models import Diagnostic, SegmentKind

from .language_check_config import MAX_OPTIONS, SPELLING_CATEGORIES

LOGGER = logging.getLogger(__name__)


def _filter_ignored(diagnostics: Iterable[Diagnostic], words_to_ignore: Container[str]) -> Iterable[Diagnostic]:
    # Case-sensitive: dictionary entries such as acronyms keep their casing.
    for diagnostic in diagnostics:
        if diagnostic.original in words_to_ignore:
            continue
        yield diagnostic


def _filter_code_categories(diagnostics: Iterable[Diagnostic]) -> Iterable[Diagnostic]:
    for diagnostic in diagnostics:
        if (
            diagnostic.segment_kind is SegmentKind.CODE
            and diagnostic.category.value not in SPELLING_CATEGORIES
        ):
            continue
        yield diagnostic


def aggregate_diagnostics(
    diagnostics: Iterable[Diagnostic],
    dictionary: Container[str] | None = None,
    *,
    max_options: int = MAX_OPTIONS,
) -> list[Diagnostic]:
    """Apply the dictionary and category filters, then dedup by span.

    The first diagnostic seen for a ``(line, start, end)`` span wins.
    """

    words_to_ignore = dictionary if dictionary is not None else frozenset()
    seen: set[tuple[int, int, int]] = set()
    results: list[Diagnostic] = []
    dropped = 0
    for diagnostic in _filter_code_categories(_filter_ignored(diagnostics, words_to_ignore)):
        if diagnostic.key in seen:
            dropped += 1
            continue
        seen.add(diagnostic.key)
        results.append(diagnostic.with_options_limit(max_options))
    if dropped:
        LOGGER.debug("Dropped %d duplicate diagnostic(s)", dropped)
    return results


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Return ``diagnostics`` in display order (line, then column)."""

    return sorted(diagnostics, key=lambda item: (item.line_number, item.start_column, item.end_column))
