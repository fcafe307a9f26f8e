"""Language check package exports.

This package exposes the checking pipeline so callers can import from
``code_lang_check.language_check``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .aggregator import aggregate_diagnostics, sort_diagnostics
    from .checker_gateway import (
        CheckerGateway,
        LanguageToolGateway,
        decode_offsets,
        encode_for_checker,
        split_matches,
    )
    from .dictionary import ReadonlyDictionary, UserDictionary
    from .language_check import (
        FileReport,
        check_code_file,
        check_file,
        check_segments,
    )
    from .language_check_config import DEFAULT_DISABLED_RULES, DEFAULT_IGNORED_WORDS
    from .language_tool_manager import LanguageToolManager
    from .reconciler import CheckedText, reconcile_match
    from .report_utils import build_report_csv, build_report_markdown

__all__ = [
    "aggregate_diagnostics",
    "sort_diagnostics",
    "CheckerGateway",
    "LanguageToolGateway",
    "decode_offsets",
    "encode_for_checker",
    "split_matches",
    "ReadonlyDictionary",
    "UserDictionary",
    "FileReport",
    "check_code_file",
    "check_file",
    "check_segments",
    "DEFAULT_DISABLED_RULES",
    "DEFAULT_IGNORED_WORDS",
    "LanguageToolManager",
    "CheckedText",
    "reconcile_match",
    "build_report_csv",
    "build_report_markdown",
]

_LAZY_EXPORTS = {
    # attribute -> (module, attribute)
    "aggregate_diagnostics": (".aggregator", "aggregate_diagnostics"),
    "sort_diagnostics": (".aggregator", "sort_diagnostics"),
    "CheckerGateway": (".checker_gateway", "CheckerGateway"),
    "LanguageToolGateway": (".checker_gateway", "LanguageToolGateway"),
    "decode_offsets": (".checker_gateway", "decode_offsets"),
    "encode_for_checker": (".checker_gateway", "encode_for_checker"),
    "split_matches": (".checker_gateway", "split_matches"),
    "ReadonlyDictionary": (".dictionary", "ReadonlyDictionary"),
    "UserDictionary": (".dictionary", "UserDictionary"),
    "FileReport": (".language_check", "FileReport"),
    "check_code_file": (".language_check", "check_code_file"),
    "check_file": (".language_check", "check_file"),
    "check_segments": (".language_check", "check_segments"),
    "DEFAULT_DISABLED_RULES": (".language_check_config", "DEFAULT_DISABLED_RULES"),
    "DEFAULT_IGNORED_WORDS": (".language_check_config", "DEFAULT_IGNORED_WORDS"),
    "LanguageToolManager": (".language_tool_manager", "LanguageToolManager"),
    "CheckedText": (".reconciler", "CheckedText"),
    "reconcile_match": (".reconciler", "reconcile_match"),
    "build_report_csv": (".report_utils", "build_report_csv"),
    "build_report_markdown": (".report_utils", "build_report_markdown"),
}


def __getattr__(name: str):
    """Lazily import and return exported attributes.

    The tokenizer imports ``language_check_config`` from this package, so
    nothing here may import the tokenizer eagerly.
    """

    if name in _LAZY_EXPORTS:
        module_name, attr = _LAZY_EXPORTS[name]
        from importlib import import_module

        mod = import_module(f"code_lang_check.language_check{module_name}")
        value = getattr(mod, attr)
        globals()[name] = value
        return value
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_EXPORTS.keys()))
