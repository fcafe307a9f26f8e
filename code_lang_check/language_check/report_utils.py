"""Utilities for generating language check reports.

This module centralises the Markdown and CSV report builders used by the
command-line workflow. Keeping this logic separate makes it easier to reuse
and test independently from the checking pipeline.
"""

from __future__ import annotations

from typing import Iterable, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .language_check import FileReport


def _format_suggestions(replacements: list[str] | None, max_suggestions: int = 3) -> str:
    """Return a human-friendly, truncated suggestions string.

    If there are no replacements returns "—". If there are more than
    ``max_suggestions`` replacements, the first ``max_suggestions`` are shown
    followed by "(+N more)".
    """
    if not replacements:
        return "—"
    if len(replacements) <= max_suggestions:
        return ", ".join(replacements)
    visible = ", ".join(replacements[:max_suggestions])
    remaining = len(replacements) - max_suggestions
    return f"{visible} (+{remaining} more)"


def _escape(value: str) -> str:
    return value.replace("|", "\\|")


def build_report_markdown(reports: Iterable["FileReport"]) -> str:
    """Convert the collected file reports into Markdown output."""

    report_list = list(reports)
    total_files = len(report_list)
    total_issues = sum(len(report.diagnostics) for report in report_list)

    language_totals: dict[str, int] = {}
    language_files: dict[str, int] = {}
    for report in report_list:
        language_totals[report.language] = language_totals.get(report.language, 0) + len(report.diagnostics)
        language_files[report.language] = language_files.get(report.language, 0) + 1

    lines: list[str] = []
    lines.append("# Code Language Check Report")
    lines.append("")
    lines.append(f"- Checked {total_files} file(s)")
    lines.append(f"- Total issues found: {total_issues}")

    lines.append("")
    lines.append("## Totals by Language")
    if language_totals:
        for language in sorted(language_totals):
            lines.append(
                f"- {language}: {language_totals[language]} issue(s) across "
                f"{language_files[language]} file(s)"
            )
    else:
        lines.append("- No files checked.")

    lines.append("")
    lines.append("---")
    lines.append("")
    lines.append("## File Details")
    if not report_list:
        lines.append("")
        lines.append("_No files found for checking._")
        return "\n".join(lines)

    for report in sorted(report_list, key=lambda item: str(item.path).lower()):
        lines.append("")
        lines.append(f"### {report.path}")
        lines.append("")
        if report.error:
            lines.append(f"_{report.error}_")
            continue
        if not report.diagnostics:
            lines.append("_No issues found._")
            continue

        lines.append(f"Found {len(report.diagnostics)} issue(s).")
        lines.append("")
        lines.append("| Line | Columns | Kind | Category | Rule | Issue | Message | Suggestions |")
        lines.append("| --- | --- | --- | --- | --- | --- | --- | --- |")
        for diagnostic in report.diagnostics:
            lines.append(
                f"| {diagnostic.line_number} "
                f"| {diagnostic.start_column}-{diagnostic.end_column} "
                f"| {diagnostic.segment_kind.value.lower()} "
                f"| {diagnostic.category.value} "
                f"| `{diagnostic.rule_id or '—'}` "
                f"| {_escape(diagnostic.original)} "
                f"| {_escape(diagnostic.message) or '—'} "
                f"| {_escape(_format_suggestions(diagnostic.options))} |"
            )

    return "\n".join(lines)


def build_report_csv(reports: Iterable["FileReport"]) -> list[list[str]]:
    """Convert the collected file reports into CSV data.

    Returns a list of rows, where each row is a list of string values.
    The first row contains the column headers.
    """

    rows: list[list[str]] = []

    rows.append([
        "File",
        "Language",
        "Line",
        "Start Column",
        "End Column",
        "Kind",
        "Category",
        "Rule ID",
        "Issue",
        "Message",
        "Suggestions",
    ])

    for report in sorted(reports, key=lambda item: str(item.path).lower()):
        for diagnostic in report.diagnostics:
            txt = _format_suggestions(diagnostic.options)
            suggestions = "" if txt == "—" else txt
            rows.append([
                str(report.path),
                report.language,
                str(diagnostic.line_number),
                str(diagnostic.start_column),
                str(diagnostic.end_column),
                diagnostic.segment_kind.value,
                diagnostic.category.value,
                diagnostic.rule_id,
                diagnostic.original,
                diagnostic.message,
                suggestions,
            ])

    return rows
