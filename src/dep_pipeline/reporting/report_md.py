"""Markdown report generation for batch parse runs."""

from __future__ import annotations

from typing import Iterable, Sequence

from dep_pipeline.models import ParseReport


def _markdown_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render a deterministic GitHub-flavored markdown table.

    Args:
        headers: Table header labels.
        rows: Table body rows as string sequences.

    Returns:
        Markdown table text.
    """

    line_header = "| " + " | ".join(headers) + " |"
    line_sep = "| " + " | ".join("---" for _ in headers) + " |"
    body = ["| " + " | ".join(row) + " |" for row in rows]
    return "\n".join([line_header, line_sep, *body])


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def build_report_md(report: ParseReport) -> str:
    """Build the markdown report for one pipeline run.

    Args:
        report: Batch diagnostics from ``run_pipeline``.

    Returns:
        Full markdown content with summary tables.
    """

    outcomes = report.outcomes
    single = sum(1 for item in outcomes if item.is_single_tree and item.root_found)
    forests = sum(1 for item in outcomes if item.remaining_nodes > 1)
    rootless = sum(1 for item in outcomes if not item.root_found)

    summary_rows = [
        ("sentences", str(len(outcomes))),
        ("tokens", str(sum(item.token_count for item in outcomes))),
        ("recursion_limit", str(report.recursion_limit)),
    ]
    outcome_rows = [
        ("single rooted tree", str(single)),
        ("forest", str(forests)),
        ("no root", str(rootless)),
    ]
    label_rows = [
        (label, str(report.label_counts[label]))
        for label in sorted(
            report.label_counts, key=lambda item: (-report.label_counts[item], item)
        )
    ]
    unresolved_rows = [
        (
            str(item.sentence_number),
            "yes" if item.root_found else "no",
            str(item.remaining_nodes),
            _escape_cell(item.text),
        )
        for item in sorted(outcomes, key=lambda item: item.sentence_number)
        if item.remaining_nodes > 1 or not item.root_found
    ]

    sections = [
        "# Dependency Parse Report",
        "",
        "## Totals",
        _markdown_table(["metric", "value"], summary_rows),
        "",
        "## Outcomes",
        _markdown_table(["outcome", "sentences"], outcome_rows),
        "",
        "## Relation labels",
        _markdown_table(["label", "count"], label_rows),
        "",
        "## Unresolved sentences",
        _markdown_table(["sentence", "root_found", "remaining_nodes", "text"], unresolved_rows),
    ]

    return "\n".join(sections) + "\n"
