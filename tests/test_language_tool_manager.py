from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import code_lang_check.language_check.language_tool_manager as manager_mod
from code_lang_check.language_check.language_tool_manager import LanguageToolManager


class DummyLanguageTool:
    def __init__(self, language, *args, **kwargs) -> None:
        self.language = language
        self.kwargs = kwargs
        self.disabled_rules: set[str] = set()


def _patch(monkeypatch) -> None:
    # Patch the class on the module imported by the manager so no Java server starts.
    monkeypatch.setattr(manager_mod.language_tool_python, "LanguageTool", DummyLanguageTool)


def test_local_tool_gets_config_and_spellings(monkeypatch) -> None:
    _patch(monkeypatch)
    manager = LanguageToolManager(
        ignored_words=["Foldr", " systim ", "two words", ""],
        disabled_rules=["WHITESPACE_RULE"],
    )

    tool = manager.build_tool()

    assert tool.language == "en-US"
    assert tool.kwargs["config"]["requestLimitPeriodInSeconds"] == 60
    assert tool.kwargs["newSpellings"] == ["Foldr", "systim"]
    assert tool.kwargs["new_spellings_persist"] is False
    assert "remote_server" not in tool.kwargs
    assert tool.disabled_rules == {"WHITESPACE_RULE"}


def test_spellings_are_registered_once(monkeypatch) -> None:
    _patch(monkeypatch)
    manager = LanguageToolManager(ignored_words=["Foldr"])

    first = manager.build_tool()
    second = manager.build_tool("en-GB")

    assert "newSpellings" in first.kwargs
    assert "newSpellings" not in second.kwargs
    assert second.language == "en-GB"


def test_remote_server_skips_local_settings(monkeypatch) -> None:
    _patch(monkeypatch)
    manager = LanguageToolManager(
        ignored_words=["Foldr"],
        remote_server="http://localhost:8081",
    )

    tool = manager.build_tool()

    assert tool.kwargs == {"remote_server": "http://localhost:8081"}


def test_extra_disabled_rules_are_merged(monkeypatch) -> None:
    _patch(monkeypatch)
    manager = LanguageToolManager(disabled_rules=["A_RULE"])

    tool = manager.build_tool(extra_disabled_rules=["B_RULE"])

    assert tool.disabled_rules == {"A_RULE", "B_RULE"}
    assert manager.disabled_rules == {"A_RULE"}


def test_tool_factory_builds_on_call(monkeypatch) -> None:
    _patch(monkeypatch)
    manager = LanguageToolManager(base_language="en-GB")

    factory = manager.tool_factory()

    assert factory().language == "en-GB"
    assert factory() is not factory()
