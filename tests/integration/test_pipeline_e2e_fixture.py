"""Integration tests running the packaged rule table over fixture sentences."""

from __future__ import annotations

import json
from pathlib import Path

from dep_pipeline.cli import main
from dep_pipeline.pipeline import run_pipeline

FIXTURE_SENTENCES = [
    # the cat ate the fish .
    [
        {"type": "NP", "tags": ["DT", "NN"], "tokens": ["the", "cat"], "index": [0, 1]},
        {"type": "VP", "tags": ["VBD"], "tokens": ["ate"], "index": [2, 2]},
        {"type": "NP", "tags": ["DT", "NN"], "tokens": ["the", "fish"], "index": [3, 4]},
        {"type": "PUNCT", "tags": ["."], "tokens": ["."], "index": [5, 5]},
    ],
    # the cake was eaten
    [
        {"type": "NP", "tags": ["DT", "NN"], "tokens": ["the", "cake"], "index": [0, 1]},
        {"type": "VP", "tags": ["VBD"], "tokens": ["was"], "index": [2, 2]},
        {"type": "VBN", "tags": ["VBN"], "tokens": ["eaten"], "index": [3, 3]},
    ],
    # she sat on the mat
    [
        {"type": "NP", "tags": ["PRP"], "tokens": ["she"], "index": [0, 0]},
        {"type": "VP", "tags": ["VBD"], "tokens": ["sat"], "index": [1, 1]},
        {"type": "IN", "tags": ["IN"], "tokens": ["on"], "index": [2, 2]},
        {"type": "NP", "tags": ["DT", "NN"], "tokens": ["the", "mat"], "index": [3, 4]},
    ],
    # you will not run
    [
        {"type": "NP", "tags": ["PRP"], "tokens": ["you"], "index": [0, 0]},
        {"type": "VP", "tags": ["MD"], "tokens": ["will"], "index": [1, 1]},
        {"type": "RB", "tags": ["RB"], "tokens": ["not"], "index": [2, 2]},
        {"type": "VB", "tags": ["VB"], "tokens": ["run"], "index": [3, 3]},
    ],
    # hello
    [
        {"type": "UH", "tags": ["UH"], "tokens": ["hello"], "index": [0, 0]},
    ],
]


def _write_fixture(path: Path) -> Path:
    path.write_text(
        "\n".join(json.dumps(sentence) for sentence in FIXTURE_SENTENCES) + "\n",
        encoding="utf-8",
    )
    return path


def _shape(node) -> tuple:
    """Compact (token, label, left, right) view of a tree."""

    return (
        " ".join(node.tokens),
        node.label,
        [_shape(child) for child in node.left],
        [_shape(child) for child in node.right],
    )


def test_run_pipeline_builds_expected_trees(tmp_path: Path) -> None:
    result = run_pipeline(_write_fixture(tmp_path / "in.jsonl"), recursion_limit=20)

    assert [len(forest) for forest in result.forests] == [1, 1, 1, 1, 1]
    active, passive, prepositional, modal, interjection = (
        forest[0] for forest in result.forests
    )

    assert _shape(active) == (
        "ate",
        "ROOT",
        [("the cat", "NSUBJ", [], [])],
        [("the fish", "DOBJ", [], []), (".", "PUNCT", [], [])],
    )
    assert _shape(passive) == (
        "eaten",
        "ROOT",
        [("was", "AUXPASS", [], []), ("the cake", "NSUBJPASS", [], [])],
        [],
    )
    assert _shape(prepositional) == (
        "sat",
        "ROOT",
        [("she", "NSUBJ", [], [])],
        [("on", "PREP", [], [("the mat", "POBJ", [], [])])],
    )
    assert _shape(modal) == (
        "run",
        "ROOT",
        [("not", "NEG", [], []), ("will", "AUX", [], []), ("you", "NSUBJ", [], [])],
        [],
    )
    assert _shape(interjection) == ("hello", None, [], [])

    outcomes = result.report.outcomes
    assert [item.root_found for item in outcomes] == [True, True, True, True, False]
    assert outcomes[0].token_count == 6
    assert outcomes[0].text == "the cat ate the fish ."
    assert result.report.label_counts["ROOT"] == 4
    assert result.report.label_counts["NSUBJ"] == 3


def test_run_pipeline_with_low_limit_returns_forests(tmp_path: Path) -> None:
    result = run_pipeline(_write_fixture(tmp_path / "in.jsonl"), recursion_limit=1)

    # Punctuation and prepositions attach only on later passes.
    assert len(result.forests[0]) == 2
    assert len(result.forests[2]) == 2
    assert len(result.forests[1]) == 1
    assert [item.remaining_nodes for item in result.report.outcomes] == [2, 1, 2, 1, 1]


def test_run_pipeline_uses_custom_rule_table(tmp_path: Path) -> None:
    rules = tmp_path / "rules.tsv"
    rules.write_text("NP\tVP\t*\t*\t->\tSUBJECT\t-1\t-1\n", encoding="utf-8")

    result = run_pipeline(
        _write_fixture(tmp_path / "in.jsonl"), recursion_limit=5, rules_path=rules
    )

    # "was" is a VP chunk, so the passive subject attaches to it here.
    assert result.report.label_counts == {"ROOT": 4, "SUBJECT": 4}


def test_cli_writes_trees_and_report(tmp_path: Path, capsys) -> None:
    source = _write_fixture(tmp_path / "in.jsonl")
    output = tmp_path / "out" / "trees.jsonl"
    output.parent.mkdir()

    exit_code = main(["--input", str(source), "--output", str(output)])

    assert exit_code == 0
    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 5
    assert json.loads(lines[0])[0]["label"] == "ROOT"

    report = (output.parent / "report.md").read_text(encoding="utf-8")
    assert "| sentences | 5 |" in report
    assert "| 5 | no | 1 | hello |" in report

    stdout = capsys.readouterr().out
    assert "Wrote 5 sentences" in stdout
    assert "single_tree=5, forest=0, no_root=1" in stdout


def test_cli_exits_for_missing_input(tmp_path: Path) -> None:
    missing = tmp_path / "missing.jsonl"
    try:
        main(["--input", str(missing), "--output", str(tmp_path / "out.jsonl")])
    except SystemExit as exc:
        assert "Input not found" in str(exc)
    else:
        raise AssertionError("expected SystemExit")


def test_run_pipeline_accepts_nodes_typed_by_single_tag(tmp_path: Path) -> None:
    source = tmp_path / "in.jsonl"
    sentence = [
        {"type": "NP", "tags": ["DT", "NN"], "tokens": ["the", "cat"], "index": [0, 1]},
        {"type": "VBZ", "tags": ["VBZ"], "tokens": ["sits"], "index": [2, 2]},
    ]
    source.write_text(json.dumps(sentence) + "\n", encoding="utf-8")
    rules = tmp_path / "rules.tsv"
    rules.write_text("NP\tVBZ\t*\t*\t->\tNSUBJ\t-1\t-1\n", encoding="utf-8")

    result = run_pipeline(source, recursion_limit=1, rules_path=rules)

    assert len(result.forests) == 1
    assert [_shape(node) for node in result.forests[0]] == [
        ("sits", None, [("the cat", "NSUBJ", [], [])], []),
    ]
    # Root candidates are verb chunks, not bare verb tags.
    assert result.report.outcomes[0].root_found is False
    assert result.report.label_counts == {"NSUBJ": 1}
