"""CLI entrypoint for the chunk dependency pipeline."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from dep_pipeline.io.jsonl_io import write_trees
from dep_pipeline.pipeline import DEFAULT_RECURSION_LIMIT, run_pipeline
from dep_pipeline.reporting.report_md import build_report_md
from dep_pipeline.rules.repository import DEFAULT_RULES_PATH

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _format_table(headers: Sequence[str], data_rows: Sequence[Sequence[str]]) -> str:
    """Format rows as an ASCII table for terminal output.

    Args:
        headers: Table headers.
        data_rows: Row values.

    Returns:
        Monospace table string.
    """

    widths = [len(header) for header in headers]
    for row in data_rows:
        for idx, value in enumerate(row):
            widths[idx] = max(widths[idx], len(value))

    header_line = " | ".join(header.ljust(widths[idx]) for idx, header in enumerate(headers))
    separator_line = "-+-".join("-" * width for width in widths)
    body_lines = [
        " | ".join(value.ljust(widths[idx]) for idx, value in enumerate(row)) for row in data_rows
    ]
    return "\n".join([header_line, separator_line, *body_lines])


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct CLI argument parser.

    Returns:
        Configured parser for the parse command.
    """

    parser = argparse.ArgumentParser(
        description="Build dependency trees from chunked, POS-tagged sentences."
    )
    parser.add_argument(
        "--input", required=True, type=Path, help="JSON Lines file, one node array per sentence."
    )
    parser.add_argument("--output", required=True, type=Path, help="Destination JSON Lines path.")
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Markdown report output path (default: report.md next to output).",
    )
    parser.add_argument(
        "--rules",
        type=Path,
        default=DEFAULT_RULES_PATH,
        help="Path to the relationship rule table TSV.",
    )
    parser.add_argument(
        "--recursion-limit",
        type=int,
        default=DEFAULT_RECURSION_LIMIT,
        help="Maximum reduction passes per sentence (0 marks roots only).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run CLI workflow from arguments through artifact generation.

    Returns:
        Zero exit status on success.
    """

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    if not args.input.exists():
        raise SystemExit(f"Input not found: {args.input}")
    if not args.rules.exists():
        raise SystemExit(f"Rule table not found: {args.rules}")

    report_path = args.report if args.report is not None else args.output.parent / "report.md"

    result = run_pipeline(
        input_path=args.input,
        recursion_limit=args.recursion_limit,
        rules_path=args.rules,
    )

    write_trees(result.forests, output_path=args.output)
    report_path.write_text(build_report_md(result.report), encoding="utf-8")

    print(f"Wrote {len(result.forests)} sentences to {args.output}")
    print(f"Wrote report to {report_path}")

    label_counts = result.report.label_counts
    if label_counts:
        label_rows = [
            [label, str(count)]
            for label, count in sorted(label_counts.items(), key=lambda item: (-item[1], item[0]))
        ]
        print("\nRelation labels assigned:")
        print(_format_table(["label", "count"], label_rows))

    outcomes = result.report.outcomes
    print(
        "\nOutcome summary: "
        f"single_tree={sum(1 for item in outcomes if item.is_single_tree)}, "
        f"forest={sum(1 for item in outcomes if item.remaining_nodes > 1)}, "
        f"no_root={sum(1 for item in outcomes if not item.root_found)}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
