"""Source-side data model: lines, single-line segments and multi-line blocks.

All text held here is an owned copy of the original file content. Hashes are
pure functions of each object's own content so segments can be built on any
worker thread without sharing a hashing accumulator.
"""

from __future__ import annotations

import hashlib
from bisect import bisect_right
from dataclasses import dataclass, field

from .enums import SegmentKind


def stable_hash(*parts: str) -> int:
    """Return a non-zero 64-bit hash of ``parts`` that is stable across runs."""

    digest = hashlib.blake2b(digest_size=8)
    for part in parts:
        digest.update(part.encode("utf-8"))
        digest.update(b"\x00")
    return int.from_bytes(digest.digest(), "big") or 1


@dataclass(frozen=True)
class DelimiterPair:
    """Start/end delimiters bounding a block comment or block string."""

    start: str
    end: str


@dataclass(frozen=True)
class SourceLine:
    """A single 1-based line of the original file."""

    line_number: int
    text: str
    # Reserved for a result cache keyed by line content.
    content_hash: int = field(default=0, compare=False)

    @classmethod
    def create(cls, line_number: int, text: str) -> "SourceLine":
        return cls(line_number=line_number, text=text, content_hash=stable_hash(text))

    def byte_column(self, index: int) -> int:
        """Convert a character index in ``text`` into a UTF-8 byte column."""

        return len(self.text[:index].encode("utf-8"))


@dataclass(frozen=True)
class Segment:
    """A contiguous span of one kind extracted from a single source line."""

    kind: SegmentKind
    line: SourceLine
    text: str
    hash: int = field(default=0, compare=False)

    @classmethod
    def create(cls, kind: SegmentKind, line: SourceLine, text: str) -> "Segment":
        return cls(kind=kind, line=line, text=text, hash=stable_hash(kind.value, text))


@dataclass(frozen=True)
class Block:
    """A multi-line comment or string bounded by a delimiter pair.

    ``line_offsets[i]`` is the offset in ``text`` where the content of
    ``lines[i]`` begins. Offsets of leading lines that were trimmed away can be
    negative.
    """

    kind: SegmentKind
    lines: tuple[SourceLine, ...]
    text: str
    delimiter: DelimiterPair
    line_offsets: tuple[int, ...]
    hash: int = field(default=0, compare=False)

    @classmethod
    def create(
        cls,
        kind: SegmentKind,
        lines: tuple[SourceLine, ...],
        text: str,
        delimiter: DelimiterPair,
        line_offsets: tuple[int, ...],
    ) -> "Block":
        return cls(
            kind=kind,
            lines=lines,
            text=text,
            delimiter=delimiter,
            line_offsets=line_offsets,
            hash=stable_hash(kind.value, text),
        )

    def line_for_offset(self, offset: int) -> SourceLine | None:
        """Return the constituent line whose range contains ``offset``."""

        if not self.lines or offset < 0 or offset > len(self.text):
            return None
        index = bisect_right(self.line_offsets, offset) - 1
        if index < 0:
            return None
        return self.lines[index]
