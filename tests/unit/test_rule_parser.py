"""Unit tests for rule table parsing and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from dep_pipeline.models import HEAD_LEFT, HEAD_RIGHT, NSUBJ, Rule
from dep_pipeline.rules.parser import parse_rule_lines, parse_set_cell
from dep_pipeline.rules.repository import RuleRepository, default_rule_repository


def test_parse_set_cell_treats_star_and_blank_as_wildcard() -> None:
    assert parse_set_cell("*") == frozenset()
    assert parse_set_cell("  ") == frozenset()
    assert parse_set_cell("VP, VB,") == frozenset({"VP", "VB"})


def test_parse_rule_lines_skips_comments_header_and_keeps_order() -> None:
    rules = parse_rule_lines(
        iter(
            [
                "# comment\n",
                "left\tright\tleft_tokens\tright_tokens\tdirection\tlabel\tdelay\tmax_distance\n",
                "\n",
                "NP\tVP,VB\t*\t*\t->\tNSUBJ\t-1\t-1\n",
                "VP\tNP\t*\tbe,have\t<-\tDOBJ\t0\t2\n",
            ]
        )
    )

    assert rules == [
        Rule(
            left=frozenset({"NP"}),
            right=frozenset({"VP", "VB"}),
            left_tokens=frozenset(),
            right_tokens=frozenset(),
            direction=HEAD_RIGHT,
            label=NSUBJ,
            delay=-1,
            max_distance=-1,
        ),
        Rule(
            left=frozenset({"VP"}),
            right=frozenset({"NP"}),
            left_tokens=frozenset(),
            right_tokens=frozenset({"be", "have"}),
            direction=HEAD_LEFT,
            label="DOBJ",
            delay=0,
            max_distance=2,
        ),
    ]


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("NP\tVP\t*\t*\t->\tNSUBJ\t-1\n", "expected 8 columns"),
        ("NP\tVP\t*\t*\t=>\tNSUBJ\t-1\t-1\n", "invalid direction"),
        ("NP\tVP\t*\t*\t->\t \t-1\t-1\n", "empty label"),
        ("NP\tVP\t*\t*\t->\tNSUBJ\tsoon\t-1\n", "invalid delay"),
        ("VP\tVP\t*\t*\t<-\tROOT\t-1\t-1\n", "label ROOT is reserved"),
    ],
)
def test_parse_rule_lines_rejects_malformed_rows(line: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_rule_lines(iter(["# header comment\n", line]))


def test_rule_repository_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        _ = RuleRepository(tmp_path / "missing.tsv").rules


def test_rule_repository_loads_file_once(tmp_path: Path) -> None:
    path = tmp_path / "rules.tsv"
    path.write_text("NP\tVP\t*\t*\t->\tNSUBJ\t-1\t-1\n", encoding="utf-8")
    repo = RuleRepository(path)

    first = repo.rules
    path.write_text("", encoding="utf-8")

    assert repo.rules is first
    assert repo.labels == frozenset({NSUBJ})


def test_default_rule_table_is_packaged_and_ends_with_fallbacks() -> None:
    rules = default_rule_repository().rules

    assert rules
    assert {NSUBJ, "NSUBJPASS", "DOBJ", "AUX", "PUNCT"} <= default_rule_repository().labels
    assert rules[-1].label == "DEP"
    assert not rules[-1].left and not rules[-1].right
