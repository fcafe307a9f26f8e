"""Session facade used by editor bindings and the CLI.

``CodeLanguageCore`` owns the checker gateway and the writable user
dictionary. Every ``process_file`` call freezes the dictionary first, so an
``add_word`` issued while a run is in flight only affects later runs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from code_lang_check.config import LanguageCheckSettings
from code_lang_check.grammar import LanguageGrammar, grammar_for_path
from code_lang_check.language_check.aggregator import sort_diagnostics
from code_lang_check.language_check.checker_gateway import CheckerGateway, LanguageToolGateway
from code_lang_check.language_check.dictionary import UserDictionary
from code_lang_check.language_check.language_check import FileReport, check_code_file, check_file
from code_lang_check.language_check.language_check_config import (
    DEFAULT_DISABLED_RULES,
    DEFAULT_IGNORED_WORDS,
)
from code_lang_check.language_check.language_tool_manager import LanguageToolManager
from code_lang_check.models import Diagnostic
from code_lang_check.tokenizer import tokenize_text

LOGGER = logging.getLogger(__name__)


class CodeLanguageCore:
    """Check source files against a grammar checker with a user dictionary."""

    def __init__(
        self,
        gateway: CheckerGateway,
        *,
        dictionary: UserDictionary | None = None,
        extra_ignored_words: Iterable[str] | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.gateway = gateway
        self.dictionary = dictionary or UserDictionary()
        self.extra_ignored_words = frozenset(extra_ignored_words or ())
        self.max_workers = max_workers

    @classmethod
    def from_settings(
        cls,
        settings: LanguageCheckSettings,
        *,
        ignored_words: Iterable[str] | None = None,
        use_default_words: bool = True,
    ) -> "CodeLanguageCore":
        """Build a core backed by LanguageTool.

        With a remote server every worker thread gets its own client; a local
        server is started once and shared.
        """

        words = set(DEFAULT_IGNORED_WORDS) if use_default_words else set()
        words.update(ignored_words or ())
        manager = LanguageToolManager(
            ignored_words=words,
            disabled_rules=DEFAULT_DISABLED_RULES,
            base_language=settings.language,
            remote_server=settings.server_url,
            logger=LOGGER,
        )
        if settings.server_url:
            gateway = LanguageToolGateway(tool_factory=manager.tool_factory())
        else:
            gateway = LanguageToolGateway(manager.build_tool(), owns_tool=True)
        return cls(
            gateway,
            dictionary=UserDictionary(settings.dictionary_path),
            extra_ignored_words=words,
            max_workers=settings.max_workers,
        )

    def add_word(self, word: str) -> bool:
        return self.dictionary.add_word(word)

    def remove_word(self, word: str) -> bool:
        return self.dictionary.remove_word(word)

    def words(self) -> list[str]:
        return self.dictionary.words()

    def process_file(self, path: Path, grammar: Optional[LanguageGrammar] = None) -> list[Diagnostic]:
        """Return the diagnostics for ``path``.

        The grammar is resolved from the file extension unless given; an
        unsupported extension yields an empty list.
        """

        grammar = grammar or grammar_for_path(path)
        if grammar is None:
            LOGGER.warning("No grammar registered for %s", path)
            return []
        snapshot = self.dictionary.freeze(self.extra_ignored_words)
        diagnostics = check_file(
            Path(path), grammar, self.gateway, snapshot, max_workers=self.max_workers
        )
        return sort_diagnostics(diagnostics)

    def process_text(self, text: str, grammar: LanguageGrammar) -> list[Diagnostic]:
        """Check unsaved buffer content."""

        snapshot = self.dictionary.freeze(self.extra_ignored_words)
        code_file = tokenize_text(text, grammar, max_workers=self.max_workers)
        if code_file.is_empty:
            return []
        diagnostics = check_code_file(
            code_file, self.gateway, snapshot, max_workers=self.max_workers
        )
        return sort_diagnostics(diagnostics)

    def report_for(self, path: Path, grammar: Optional[LanguageGrammar] = None) -> FileReport:
        grammar = grammar or grammar_for_path(path)
        if grammar is None:
            return FileReport(
                path=Path(path),
                language="unknown",
                error=f"Unsupported file type: {Path(path).suffix or '(none)'}",
            )
        return FileReport(path=Path(path), language=grammar.name, diagnostics=self.process_file(path, grammar))

    def close(self) -> None:
        close = getattr(self.gateway, "close", None)
        if callable(close):
            close()
