"""LanguageTool setup helpers.

This module centralises LanguageTool instantiation so that custom spellings,
disabled rules and server configuration stay in one place.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Iterable
import logging

import language_tool_python

# Default configuration for a locally spawned LanguageTool server. Source
# files produce many short requests, so the request limit is the setting that
# matters; the check time only guards against pathological block comments.
_DEFAULT_CONFIG = {
    "requestLimitPeriodInSeconds": 60,
    "maxCheckTimeMillis": 60000,
}


class LanguageToolManager:
    """Factory class responsible for configuring LanguageTool instances."""

    def __init__(
        self,
        *,
        ignored_words: Iterable[str] | None = None,
        disabled_rules: Iterable[str] | None = None,
        base_language: str = "en-US",
        remote_server: str | None = None,
        config: dict[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.base_language = base_language
        self.remote_server = remote_server or None
        self.logger = logger or logging.getLogger(__name__)
        self.config = dict(config) if config is not None else dict(_DEFAULT_CONFIG)
        self.disabled_rules = set(disabled_rules or [])
        self._ignored_words = self._prepare_ignored_words(ignored_words)
        self._spellings_registered = False

    @staticmethod
    def _prepare_ignored_words(words: Iterable[str] | None) -> tuple[str, ...]:
        if not words:
            return tuple()
        cleaned = {word.strip() for word in words if word is not None and word.strip()}
        # LanguageTool spellings are single tokens.
        return tuple(sorted(word for word in cleaned if " " not in word))

    def _prepare_new_spellings(self) -> list[str] | None:
        if not self._ignored_words or self.remote_server:
            return None
        if self._spellings_registered:
            return None
        self._spellings_registered = True
        self.logger.info(
            "Registering %d custom spellings with LanguageTool",
            len(self._ignored_words),
        )
        return list(self._ignored_words)

    def build_tool(
        self,
        language: str | None = None,
        *,
        extra_disabled_rules: Iterable[str] | None = None,
    ) -> Any:
        """Build a LanguageTool instance for ``language`` (default: base language)."""

        language = language or self.base_language
        kwargs: dict[str, Any] = {}
        if self.remote_server:
            kwargs["remote_server"] = self.remote_server
        elif self.config:
            # A remote server is configured on its own side.
            kwargs["config"] = self.config
        new_spellings = self._prepare_new_spellings()
        if new_spellings:
            kwargs["newSpellings"] = new_spellings
            kwargs["new_spellings_persist"] = False

        tool = language_tool_python.LanguageTool(language, **kwargs)

        rules = set(self.disabled_rules)
        if extra_disabled_rules:
            rules.update(extra_disabled_rules)
        if rules:
            tool.disabled_rules = set(rules)
        self.logger.info(
            "Created LanguageTool for language: %s (%s)",
            language,
            self.remote_server or "local server",
        )
        return tool

    def tool_factory(self, language: str | None = None) -> Callable[[], Any]:
        """Return a zero-argument callable that builds a configured tool."""

        return partial(self.build_tool, language)
