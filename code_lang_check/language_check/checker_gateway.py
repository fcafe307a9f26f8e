"""Gateway between extracted source text and the LanguageTool checker.

The gateway hides the transport: callers hand it plain text and receive
``CheckMatch`` models whose offsets refer to that text. Failures never
propagate; they are logged and reported as "no matches".
"""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence

import requests
from language_tool_python.exceptions import LanguageToolError
from pydantic import ValidationError

from code_lang_check.models import CheckMatch, SegmentKind

from .language_check_config import CHECK_MANY_SEPARATOR, CODE_SENTINEL

LOGGER = logging.getLogger(__name__)


# Transient errors that should trigger a retry
TRANSIENT_ERRORS = (
    ConnectionError,
    TimeoutError,
    OSError,  # Covers socket.error and other OS-level issues
    requests.RequestException,
)

# language_tool_python wraps connection-level errors in LanguageToolError, so
# retry those as well.
TRANSIENT_ERRORS = TRANSIENT_ERRORS + (LanguageToolError,)


class CheckerGateway(Protocol):
    """Anything that can grammar-check text."""

    def check(self, text: str) -> list[CheckMatch]:
        ...

    def check_many(self, texts: Sequence[str]) -> list[CheckMatch]:
        ...


def encode_for_checker(text: str, kind: SegmentKind) -> str:
    """Prefix Code text with the sentinel word before it is sent."""

    if kind is SegmentKind.CODE:
        return f"{CODE_SENTINEL}{text}"
    return text


def decode_offsets(matches: Iterable[CheckMatch], kind: SegmentKind) -> list[CheckMatch]:
    """Map offsets from encoded text back onto the text before encoding.

    Matches that start inside the sentinel are dropped.
    """

    if kind is not SegmentKind.CODE:
        return list(matches)
    shift = len(CODE_SENTINEL)
    return [match.shifted(-shift) for match in matches if match.offset >= shift]


def join_texts(texts: Sequence[str]) -> tuple[str, list[int]]:
    """Join ``texts`` for one request and return each text's base offset."""

    bases: list[int] = []
    position = 0
    for text in texts:
        bases.append(position)
        position += len(text) + len(CHECK_MANY_SEPARATOR)
    return CHECK_MANY_SEPARATOR.join(texts), bases


def split_matches(matches: Iterable[CheckMatch], texts: Sequence[str]) -> list[list[CheckMatch]]:
    """Partition ``check_many`` matches back onto the texts they came from.

    Offsets are rebased onto each text. A match that spans the separator is
    dropped.
    """

    _, bases = join_texts(texts)
    buckets: list[list[CheckMatch]] = [[] for _ in texts]
    for match in matches:
        for index in range(len(texts) - 1, -1, -1):
            if match.offset >= bases[index]:
                local = match.shifted(-bases[index])
                if local.end <= len(texts[index]):
                    buckets[index].append(local)
                else:
                    LOGGER.debug("Dropping match spanning texts at offset %d", match.offset)
                break
    return buckets


def match_from_language_tool(match: Any) -> Optional[CheckMatch]:
    """Convert a ``language_tool_python`` match into a ``CheckMatch``."""

    try:
        return CheckMatch(
            offset=int(getattr(match, "offset", 0) or 0),
            length=int(getattr(match, "errorLength", 0) or 0),
            replacements=list(getattr(match, "replacements", []) or []),
            category=getattr(match, "category", "") or "",
            rule_id=getattr(match, "ruleId", "") or "",
            message=getattr(match, "message", "") or "",
            short_message=getattr(match, "shortMessage", "") or "",
        )
    except (TypeError, ValueError, ValidationError):
        LOGGER.warning(
            "Skipping malformed checker match (rule=%s)",
            getattr(match, "ruleId", "UNKNOWN"),
        )
        return None


def _retry_with_backoff(
    func: Callable[[str], Any],
    func_arg: str,
    max_retries: int = 3,
    base_delay: float = 3.0,
    max_delay: float = 60.0,
) -> Any:
    """Execute ``func(func_arg)`` with exponential backoff on transient errors.

    Raises:
            The last exception if all retries fail
    """

    for attempt in range(max_retries + 1):
        try:
            return func(func_arg)
        except TRANSIENT_ERRORS as exc:
            if attempt >= max_retries:
                LOGGER.error(
                    "Language check failed after %d attempt(s): %s",
                    attempt + 1,
                    exc,
                )
                raise

            delay = base_delay * (2**attempt)
            # Jitter avoids every worker retrying at the same instant.
            jitter = random.uniform(0.75, 1.25)
            delay = min(delay * jitter, max_delay)

            LOGGER.warning(
                "Language check attempt %d failed (transient error: %s); "
                "retrying in %.1f second(s)...",
                attempt + 1,
                type(exc).__name__,
                delay,
            )
            time.sleep(delay)

    raise RuntimeError("Retry logic completed without returning or raising")


class _WorkerResources:
    """Thread-local pool for LanguageTool instances."""

    def __init__(self, factory: Callable[[], Any]) -> None:
        self._factory = factory
        self._local = threading.local()
        self._lock = threading.Lock()
        self._created: list[Any] = []

    def language_tool(self) -> Any:
        if not hasattr(self._local, "tool"):
            tool = self._factory()
            self._local.tool = tool
            with self._lock:
                self._created.append(tool)
        return self._local.tool

    def close(self) -> None:
        with self._lock:
            created, self._created = self._created, []
        for tool in created:
            if hasattr(tool, "close"):
                tool.close()


class LanguageToolGateway:
    """``CheckerGateway`` backed by ``language_tool_python``.

    Either pass one ``tool`` shared by every caller (the remote server client
    is safe to share) or a ``tool_factory`` that builds one tool per worker
    thread.
    """

    def __init__(
        self,
        tool: Any | None = None,
        *,
        tool_factory: Callable[[], Any] | None = None,
        owns_tool: bool = False,
        max_retries: int = 3,
        base_delay: float = 3.0,
        max_delay: float = 60.0,
    ) -> None:
        if tool is None and tool_factory is None:
            raise ValueError("LanguageToolGateway needs a tool or a tool_factory")
        self._tool = tool
        self._owns_tool = owns_tool
        self._resources = _WorkerResources(tool_factory) if tool_factory is not None else None
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

    def _language_tool(self) -> Any:
        if self._tool is not None:
            return self._tool
        assert self._resources is not None  # for type checkers
        return self._resources.language_tool()

    def check(self, text: str) -> list[CheckMatch]:
        if not text or not text.strip():
            return []

        try:
            tool = self._language_tool()
            raw_matches = _retry_with_backoff(
                tool.check,
                text,
                max_retries=self.max_retries,
                base_delay=self.base_delay,
                max_delay=self.max_delay,
            )
        except TRANSIENT_ERRORS:
            LOGGER.exception("Language check failed after all retries (%d chars)", len(text))
            return []
        except Exception:
            LOGGER.exception("Language check failed (%d chars)", len(text))
            return []

        if not raw_matches:
            LOGGER.debug("Checker returned no matches for %d chars", len(text))
            return []

        matches: list[CheckMatch] = []
        for raw in raw_matches:
            converted = match_from_language_tool(raw)
            if converted is not None:
                matches.append(converted)
        return matches

    def check_many(self, texts: Sequence[str]) -> list[CheckMatch]:
        """Check ``texts`` in one request; offsets refer to the joined text."""

        if not any(text.strip() for text in texts):
            return []
        joined, _ = join_texts(texts)
        return self.check(joined)

    def close(self) -> None:
        """Close tools built by the factory, and the shared tool when owned."""

        if self._resources is not None:
            self._resources.close()
        if self._owns_tool and self._tool is not None and hasattr(self._tool, "close"):
            self._tool.close()
