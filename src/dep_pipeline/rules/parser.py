"""Parsing utilities for the tab-separated relationship rule table."""

from __future__ import annotations

from typing import Iterable

from dep_pipeline.models import DIRECTIONS, ROOT_LABEL, Rule

RULE_COLUMNS = (
    "left",
    "right",
    "left_tokens",
    "right_tokens",
    "direction",
    "label",
    "delay",
    "max_distance",
)
WILDCARD = "*"


def parse_set_cell(cell: str) -> frozenset[str]:
    """Parse a comma-separated set cell, treating ``*`` or blank as a wildcard.

    Args:
        cell: Raw cell text such as ``VP,VB`` or ``*``.

    Returns:
        Frozen set of members; empty for a wildcard.
    """

    cell = cell.strip()
    if not cell or cell == WILDCARD:
        return frozenset()
    return frozenset(item.strip() for item in cell.split(",") if item.strip())


def _parse_int_cell(cell: str, column: str, line_no: int) -> int:
    try:
        return int(cell.strip())
    except ValueError:
        raise ValueError(f"Line {line_no}: invalid {column} '{cell.strip()}'") from None


def parse_rule_lines(lines: Iterable[str]) -> list[Rule]:
    """Parse rule table lines into ordered ``Rule`` records.

    Comment lines (``#``), blank lines and a header row naming the columns are
    skipped. Row order is preserved because it is the matching priority.

    Args:
        lines: Raw TSV lines.

    Returns:
        Rules in table order.

    Raises:
        ValueError: If a data row has the wrong column count, an unknown
            direction, an empty or ROOT label, or a non-integer
            delay/distance.
    """

    rules: list[Rule] = []
    for line_no, line in enumerate(lines, start=1):
        stripped = line.rstrip("\n")
        if not stripped.strip() or stripped.lstrip().startswith("#"):
            continue
        cells = stripped.split("\t")
        if tuple(cell.strip() for cell in cells) == RULE_COLUMNS:
            continue
        if len(cells) != len(RULE_COLUMNS):
            raise ValueError(
                f"Line {line_no}: expected {len(RULE_COLUMNS)} columns, got {len(cells)}"
            )

        left, right, left_tokens, right_tokens, direction, label, delay, max_distance = cells
        direction = direction.strip()
        if direction not in DIRECTIONS:
            raise ValueError(f"Line {line_no}: invalid direction '{direction}'")
        label = label.strip()
        if not label:
            raise ValueError(f"Line {line_no}: empty label")
        if label == ROOT_LABEL:
            raise ValueError(
                f"Line {line_no}: label {ROOT_LABEL} is reserved for root identification"
            )

        rules.append(
            Rule(
                left=parse_set_cell(left),
                right=parse_set_cell(right),
                left_tokens=parse_set_cell(left_tokens),
                right_tokens=parse_set_cell(right_tokens),
                direction=direction,
                label=label,
                delay=_parse_int_cell(delay, "delay", line_no),
                max_distance=_parse_int_cell(max_distance, "max_distance", line_no),
            )
        )

    return rules
