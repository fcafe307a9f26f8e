"""Segment a source file into Code/Comment/String segments and blocks.

Block detection runs line by line through a small state machine because each
line's state depends on the line before it. Lines outside a block do not
depend on each other and are handed to a thread pool for extraction.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, NamedTuple, Optional, Union

from code_lang_check.grammar import DelimiterPair, LanguageGrammar
from code_lang_check.models import Block, Segment, SegmentKind, SourceLine

from .delimiters import find_block_end, find_block_start
from .line_extractor import extract_line_segments, trim_block_text

LOGGER = logging.getLogger(__name__)


@dataclass
class CodeFile:
    """Everything extracted from one source file."""

    path: Optional[Path]
    grammar: LanguageGrammar
    lines: list[SourceLine] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.segments and not self.blocks


@dataclass(frozen=True)
class _Scanning:
    pass


@dataclass(frozen=True)
class _InBlock:
    kind: SegmentKind
    delimiter: DelimiterPair
    lines: tuple[SourceLine, ...]
    contents: tuple[str, ...]


_State = Union[_Scanning, _InBlock]

_SCANNING = _Scanning()


class _Step(NamedTuple):
    state: _State
    # (line, text to extract) handed to the single-line extractor.
    dispatch: Optional[tuple[SourceLine, str]]
    block: Optional[Block]


def _close_block(
    kind: SegmentKind,
    delimiter: DelimiterPair,
    lines: tuple[SourceLine, ...],
    contents: tuple[str, ...],
    grammar: LanguageGrammar,
) -> Block:
    # Each body is trimmed so indentation inside the block never reaches the checker.
    bodies = [content.strip() for content in contents]
    joined = "\n".join(bodies)
    bases: list[int] = []
    position = 0
    for content in bodies:
        bases.append(position)
        position += len(content) + 1
    leading = len(joined) - len(joined.lstrip())
    text = trim_block_text(joined, delimiter, grammar)
    return Block.create(
        kind=kind,
        lines=lines,
        text=text,
        delimiter=delimiter,
        line_offsets=tuple(base - leading for base in bases),
    )


def _advance(state: _State, line: SourceLine, grammar: LanguageGrammar) -> _Step:
    """Apply one line to the scanner state."""

    if isinstance(state, _InBlock):
        end = find_block_end(line.text, None, state.delimiter, state.kind, grammar)
        if end < 0:
            grown = _InBlock(
                kind=state.kind,
                delimiter=state.delimiter,
                lines=state.lines + (line,),
                contents=state.contents + (line.text,),
            )
            return _Step(grown, None, None)
        block = _close_block(
            state.kind,
            state.delimiter,
            state.lines + (line,),
            state.contents + (line.text[:end],),
            grammar,
        )
        return _Step(_SCANNING, None, block)

    if not line.text.strip():
        return _Step(state, None, None)

    start = find_block_start(line.text, grammar)
    if start is None:
        return _Step(state, (line, line.text), None)
    if find_block_end(line.text, start, start.delimiter, start.kind, grammar) >= 0:
        # Opens and closes on the same line.
        return _Step(state, (line, line.text), None)

    opened = _InBlock(
        kind=start.kind,
        delimiter=start.delimiter,
        lines=(line,),
        contents=(line.text[start.content_start :],),
    )
    prefix = line.text[: start.offset]
    dispatch = (line, prefix) if prefix.strip() else None
    return _Step(opened, dispatch, None)


def split_source_lines(text: str) -> list[SourceLine]:
    """Split file content into 1-based ``SourceLine`` objects."""

    raw_lines = text.split("\n")
    if raw_lines and raw_lines[-1] == "":
        raw_lines.pop()
    return [
        SourceLine.create(number, raw.rstrip("\r"))
        for number, raw in enumerate(raw_lines, start=1)
    ]


def _extract_all(
    work: list[tuple[SourceLine, str]],
    grammar: LanguageGrammar,
    max_workers: int | None,
) -> list[Segment]:
    if not work:
        return []

    results: dict[int, list[Segment]] = {}
    executor_kwargs = {"max_workers": max_workers} if max_workers else {}
    with ThreadPoolExecutor(**executor_kwargs) as executor:
        futures = {
            executor.submit(extract_line_segments, line, grammar, text=text): (index, line)
            for index, (line, text) in enumerate(work)
        }
        for future in as_completed(futures):
            index, line = futures[future]
            try:
                results[index] = future.result()
            except Exception:
                LOGGER.exception("Failed to extract segments from line %d", line.line_number)
                results[index] = []

    segments: list[Segment] = []
    for index in range(len(work)):
        segments.extend(results.get(index, []))
    return segments


def tokenize_lines(
    lines: Iterable[SourceLine],
    grammar: LanguageGrammar,
    *,
    path: Optional[Path] = None,
    max_workers: int | None = None,
) -> CodeFile:
    """Tokenize already-split source lines."""

    code_file = CodeFile(path=path, grammar=grammar, lines=list(lines))
    state: _State = _SCANNING
    work: list[tuple[SourceLine, str]] = []

    for line in code_file.lines:
        step = _advance(state, line, grammar)
        state = step.state
        if step.dispatch is not None:
            work.append(step.dispatch)
        if step.block is not None:
            code_file.blocks.append(step.block)

    if isinstance(state, _InBlock):
        LOGGER.warning(
            "Dropping unclosed %s block starting at line %d of %s",
            state.kind.value,
            state.lines[0].line_number,
            path or "<text>",
        )

    code_file.segments = _extract_all(work, grammar, max_workers)
    return code_file


def tokenize_text(
    text: str,
    grammar: LanguageGrammar,
    *,
    path: Optional[Path] = None,
    max_workers: int | None = None,
) -> CodeFile:
    return tokenize_lines(
        split_source_lines(text), grammar, path=path, max_workers=max_workers
    )


def tokenize_file(
    path: Path,
    grammar: LanguageGrammar,
    *,
    max_workers: int | None = None,
) -> CodeFile:
    """Read ``path`` as UTF-8 and tokenize it.

    A file that cannot be read is logged and yields an empty ``CodeFile``.
    """

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        LOGGER.exception("Unable to read %s", path)
        return CodeFile(path=Path(path), grammar=grammar)
    return tokenize_text(text, grammar, path=Path(path), max_workers=max_workers)
