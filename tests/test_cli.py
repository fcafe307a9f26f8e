from __future__ import annotations

import csv
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import code_lang_check.cli as cli
from code_lang_check.config import LanguageCheckSettings
from code_lang_check.core import CodeLanguageCore
from code_lang_check.models import CheckMatch


class FakeGateway:
    def __init__(self) -> None:
        self.closed = False

    def check(self, text: str) -> list[CheckMatch]:
        if "simle" not in text:
            return []
        return [
            CheckMatch(
                offset=text.index("simle"),
                length=5,
                replacements=["simple", "smile"],
                category="TYPOS",
                rule_id="MORFOLOGIK_RULE_EN_US",
                message="Possible spelling mistake found.",
            )
        ]

    def check_many(self, texts) -> list[CheckMatch]:  # pragma: no cover - batching unused
        return []

    def close(self) -> None:
        self.closed = True


def _patch(monkeypatch, settings: LanguageCheckSettings | None = None) -> dict:
    captured: dict = {}
    gateway = FakeGateway()
    captured["gateway"] = gateway

    def fake_build_core(settings, *, ignored_words=None, use_default_words=True):
        captured["settings"] = settings
        captured["ignored_words"] = ignored_words
        captured["use_default_words"] = use_default_words
        return CodeLanguageCore(gateway)

    monkeypatch.setattr(cli, "load_settings", lambda _path=None: settings or LanguageCheckSettings())
    monkeypatch.setattr(cli, "build_core", fake_build_core)
    return captured


def _source(tmp_path: Path) -> Path:
    path = tmp_path / "example.rs"
    path.write_text("//This is simle one line comment test case.\nfn main() {}\n", encoding="utf-8")
    return path


def test_main_writes_markdown_and_csv(tmp_path: Path, monkeypatch) -> None:
    captured = _patch(monkeypatch)
    source = _source(tmp_path)
    report_path = tmp_path / "reports" / "report.md"

    exit_code = cli.main([str(source), "--report", str(report_path), "--ignore-word", "Foldr"])

    assert exit_code == 0
    assert captured["ignored_words"] == {"Foldr"}
    assert captured["use_default_words"] is True
    assert captured["gateway"].closed

    markdown = report_path.read_text(encoding="utf-8")
    assert "# Code Language Check Report" in markdown
    assert "- rust: 1 issue(s) across 1 file(s)" in markdown
    assert "| 1 | 10-15 | comment | TYPOS | `MORFOLOGIK_RULE_EN_US` | simle |" in markdown

    with report_path.with_suffix(".csv").open(encoding="utf-8", newline="") as handle:
        rows = list(csv.reader(handle))
    assert rows[0][0] == "File"
    assert rows[1][2:5] == ["1", "10", "15"]
    assert rows[1][-1] == "simple, smile"


def test_main_prints_markdown_without_report(tmp_path: Path, monkeypatch, capsys) -> None:
    _patch(monkeypatch)

    assert cli.main([str(_source(tmp_path)), "--no-default-words"]) == 0

    out = capsys.readouterr().out
    assert "## File Details" in out
    assert "simle" in out


def test_missing_file_fails(tmp_path: Path, monkeypatch) -> None:
    captured = _patch(monkeypatch)

    assert cli.main([str(tmp_path / "absent.rs")]) == 1
    assert "settings" not in captured


def test_unsupported_file_fails(tmp_path: Path, monkeypatch) -> None:
    _patch(monkeypatch)
    path = tmp_path / "notes.txt"
    path.write_text("simle", encoding="utf-8")

    assert cli.main([str(path)]) == 1


def test_no_files_fails(monkeypatch) -> None:
    _patch(monkeypatch)

    assert cli.main([]) == 1


def test_add_and_remove_words(tmp_path: Path, monkeypatch) -> None:
    _patch(monkeypatch)
    dictionary = tmp_path / "words.txt"

    assert cli.main(["--dictionary", str(dictionary), "--add-word", "Foldr", "--add-word", "systim"]) == 0
    assert dictionary.read_text(encoding="utf-8") == "Foldr\nsystim\n"

    assert cli.main(["--dictionary", str(dictionary), "--remove-word", "Foldr"]) == 0
    assert dictionary.read_text(encoding="utf-8") == "systim\n"


def test_dictionary_edit_needs_a_path(monkeypatch) -> None:
    _patch(monkeypatch)

    assert cli.main(["--add-word", "Foldr"]) == 1


def test_command_line_overrides_settings(tmp_path: Path, monkeypatch) -> None:
    captured = _patch(
        monkeypatch,
        LanguageCheckSettings(server_url="http://env:8010", language="en-US", max_workers=2),
    )

    cli.main([str(_source(tmp_path)), "--language", "en-GB", "--report", str(tmp_path / "r.md")])

    settings = captured["settings"]
    assert settings.language == "en-GB"
    assert settings.server_url == "http://env:8010"
    assert settings.max_workers == 2


def test_grammar_flag_checks_unlisted_extension(tmp_path: Path, monkeypatch) -> None:
    _patch(monkeypatch)
    path = tmp_path / "build.rs.in"
    path.write_text("//This is simle one line comment test case.\n", encoding="utf-8")
    report_path = tmp_path / "report.md"

    assert cli.main([str(path)]) == 1
    assert cli.main([str(path), "--grammar", "rust", "--report", str(report_path)]) == 0

    markdown = report_path.read_text(encoding="utf-8")
    assert "- rust: 1 issue(s) across 1 file(s)" in markdown
    assert "| 1 | 10-15 | comment |" in markdown
