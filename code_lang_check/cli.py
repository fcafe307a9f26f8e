"""Command-line entry point: check source files and write a report."""

from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from code_lang_check.config import LanguageCheckSettings, load_settings
from code_lang_check.core import CodeLanguageCore
from code_lang_check.grammar import GRAMMARS, LanguageGrammar, grammar_by_name, grammar_for_path
from code_lang_check.language_check.dictionary import UserDictionary
from code_lang_check.language_check.language_check import FileReport
from code_lang_check.language_check.report_utils import build_report_csv, build_report_markdown

LOGGER = logging.getLogger(__name__)


def _supported_extensions() -> str:
    return ", ".join(ext for grammar in GRAMMARS for ext in grammar.extensions)


def build_core(
    settings: LanguageCheckSettings,
    *,
    ignored_words: set[str] | None = None,
    use_default_words: bool = True,
) -> CodeLanguageCore:
    return CodeLanguageCore.from_settings(
        settings,
        ignored_words=ignored_words,
        use_default_words=use_default_words,
    )


def write_reports(reports: Sequence[FileReport], report_path: Path) -> Path:
    """Write the Markdown report and a sibling CSV; return the CSV path."""

    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(build_report_markdown(reports), encoding="utf-8")

    csv_path = report_path.with_suffix(".csv")
    with csv_path.open("w", encoding="utf-8", newline="") as csv_file:
        writer = csv.writer(csv_file)
        writer.writerows(build_report_csv(reports))
    return csv_path


def run_language_checks(
    core: CodeLanguageCore,
    paths: Iterable[Path],
    grammar: Optional[LanguageGrammar] = None,
) -> list[FileReport]:
    """Check each path in turn, logging a running total.

    ``grammar`` overrides the extension lookup for every path.
    """

    reports: list[FileReport] = []
    running_total = 0
    for path in paths:
        LOGGER.info("Checking %s", path)
        report = core.report_for(path, grammar)
        running_total += len(report.diagnostics)
        LOGGER.info(
            "Completed %s: %d issue(s) (running total: %d)",
            path,
            len(report.diagnostics),
            running_total,
        )
        reports.append(report)
    return reports


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Check comments, strings and identifiers in source files with LanguageTool."
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help=f"Source files to check (supported: {_supported_extensions()})",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Path to write the Markdown report; a CSV is written next to it. "
        "Prints the Markdown to stdout when omitted.",
    )
    parser.add_argument(
        "--grammar",
        choices=[grammar.name for grammar in GRAMMARS],
        default=None,
        help="Tokenize every file with this grammar instead of choosing by extension",
    )
    parser.add_argument(
        "--language",
        default=None,
        help="LanguageTool language code (default: LANGUAGETOOL_LANGUAGE or en-US)",
    )
    parser.add_argument(
        "--server-url",
        default=None,
        help="Remote LanguageTool server URL (default: LANGUAGETOOL_URL or a local server)",
    )
    parser.add_argument(
        "--dictionary",
        type=Path,
        default=None,
        help="User dictionary file, one word per line (default: CODE_LANG_CHECK_DICTIONARY)",
    )
    parser.add_argument(
        "--dotenv",
        type=Path,
        default=None,
        help="Optional .env file to load before reading settings",
    )
    parser.add_argument(
        "--ignore-word",
        action="append",
        dest="ignored_words",
        help="Add a word to the ignore list for this run (case-sensitive, can be specified multiple times)",
    )
    parser.add_argument(
        "--no-default-words",
        action="store_true",
        help="Don't apply default ignored words (only use words specified with --ignore-word)",
    )
    parser.add_argument(
        "--add-word",
        action="append",
        default=[],
        help="Add a word to the user dictionary file (can be specified multiple times)",
    )
    parser.add_argument(
        "--remove-word",
        action="append",
        default=[],
        help="Remove a word from the user dictionary file (can be specified multiple times)",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def _resolve_settings(args: argparse.Namespace) -> LanguageCheckSettings:
    settings = load_settings(args.dotenv)
    return LanguageCheckSettings(
        server_url=args.server_url or settings.server_url,
        language=args.language or settings.language,
        dictionary_path=args.dictionary or settings.dictionary_path,
        max_workers=settings.max_workers,
    )


def _edit_dictionary(settings: LanguageCheckSettings, args: argparse.Namespace) -> bool:
    if not args.add_word and not args.remove_word:
        return True
    if settings.dictionary_path is None:
        LOGGER.error("--add-word/--remove-word need --dictionary or CODE_LANG_CHECK_DICTIONARY")
        return False
    dictionary = UserDictionary(settings.dictionary_path)
    for word in args.add_word:
        dictionary.add_word(word)
    for word in args.remove_word:
        dictionary.remove_word(word)
    return True


def _validate_files(files: Sequence[Path], grammar: Optional[LanguageGrammar] = None) -> bool:
    valid = True
    for path in files:
        if not path.is_file():
            LOGGER.error("File not found: %s", path)
            valid = False
        elif grammar is None and grammar_for_path(path) is None:
            LOGGER.error("Unsupported file type: %s", path)
            valid = False
    return valid


def main(argv: Optional[Iterable[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = parse_args(argv)
    settings = _resolve_settings(args)

    if not _edit_dictionary(settings, args):
        return 1
    if not args.files:
        if args.add_word or args.remove_word:
            return 0
        LOGGER.error("No files given")
        return 1
    grammar = grammar_by_name(args.grammar) if args.grammar else None
    if not _validate_files(args.files, grammar):
        return 1

    core = build_core(
        settings,
        ignored_words=set(args.ignored_words or []),
        use_default_words=not args.no_default_words,
    )
    try:
        reports = run_language_checks(core, args.files, grammar)
    finally:
        core.close()

    if args.report is None:
        print(build_report_markdown(reports))
        return 0

    csv_path = write_reports(reports, args.report)
    print(f"Language check report written to {args.report.resolve()}")
    print(f"CSV report written to {csv_path.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
