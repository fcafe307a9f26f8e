"""User dictionary of words the checker should never report.

``UserDictionary`` is the writable store edited by add/remove-word commands.
A processing run only ever sees a ``ReadonlyDictionary`` snapshot taken with
``freeze()`` before the run starts, so later edits cannot leak into it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadonlyDictionary:
    """Immutable word set handed to a single processing run."""

    words: frozenset[str] = frozenset()

    def __contains__(self, word: object) -> bool:
        return word in self.words

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __len__(self) -> int:
        return len(self.words)


class UserDictionary:
    """Case-sensitive word list, optionally persisted one word per line."""

    def __init__(self, path: Optional[Path] = None, words: Iterable[str] | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._words: set[str] = set()
        if self.path is not None:
            self._words.update(self._read(self.path))
        if words:
            self._words.update(_clean(word) for word in words if _clean(word))

    @staticmethod
    def _read(path: Path) -> set[str]:
        if not path.exists():
            return set()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            LOGGER.exception("Unable to read dictionary %s", path)
            return set()
        return {line.strip() for line in text.splitlines() if line.strip()}

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = "".join(f"{word}\n" for word in sorted(self._words))
        self.path.write_text(content, encoding="utf-8")

    def add_word(self, word: str) -> bool:
        """Add ``word``; returns False when it was already present or blank."""

        cleaned = _clean(word)
        if not cleaned:
            return False
        with self._lock:
            if cleaned in self._words:
                return False
            self._words.add(cleaned)
            self._save()
        LOGGER.info("Added %r to the dictionary", cleaned)
        return True

    def remove_word(self, word: str) -> bool:
        """Remove ``word``; returns False when it was not present."""

        cleaned = _clean(word)
        with self._lock:
            if cleaned not in self._words:
                return False
            self._words.discard(cleaned)
            self._save()
        LOGGER.info("Removed %r from the dictionary", cleaned)
        return True

    def words(self) -> list[str]:
        with self._lock:
            return sorted(self._words)

    def __contains__(self, word: object) -> bool:
        with self._lock:
            return word in self._words

    def freeze(self, extra_words: Iterable[str] | None = None) -> ReadonlyDictionary:
        """Snapshot the current words (plus ``extra_words``) for one run."""

        with self._lock:
            snapshot = set(self._words)
        if extra_words:
            snapshot.update(_clean(word) for word in extra_words if _clean(word))
        return ReadonlyDictionary(frozenset(snapshot))


def _clean(word: str | None) -> str:
    return (word or "").strip()
