"""Top-level orchestration: root identification followed by reduction."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Sequence

from dep_pipeline.io.jsonl_io import read_sentences
from dep_pipeline.models import Node, ParseReport, Rule, Sentence, SentenceOutcome
from dep_pipeline.morphology.conjugator import Conjugator, canonical_present
from dep_pipeline.rules.repository import RuleRepository, default_rule_repository
from dep_pipeline.stages.reduce import build_relationships
from dep_pipeline.stages.root import identify_root
from dep_pipeline.validation import (
    collect_label_counts,
    validate_nodes,
    validate_rules,
    validate_tree_invariants,
)

logger = logging.getLogger(__name__)

DEFAULT_RECURSION_LIMIT = 20


def build_dependencies(
    nodes: Sequence[Node],
    recursion_limit: int,
    rules: Sequence[Rule] | None = None,
    conjugate: Conjugator | None = None,
) -> list[Node]:
    """Build a dependency tree for one tagged sentence.

    Args:
        nodes: Chunker output in sentence order. Nodes are labeled and nested
            in place.
        recursion_limit: Maximum number of reduction passes; ``0`` or less only
            marks the root.
        rules: Rule table in priority order; the packaged table when ``None``.
        conjugate: Token normalizer; :func:`canonical_present` when ``None``.

    Returns:
        Remaining top-level nodes: one tree on full reduction, otherwise a forest.

    Raises:
        ValueError: If a caller-supplied rule is malformed or assigns the
            reserved root label.
    """

    if not nodes:
        return []
    if rules is None:
        rules = default_rule_repository().rules
    else:
        validate_rules(rules)
    if conjugate is None:
        conjugate = canonical_present

    sentence = Sentence(nodes)
    identify_root(sentence, conjugate)
    return build_relationships(sentence, recursion_limit, rules, conjugate)


@dataclass(frozen=True)
class PipelineResult:
    """Result bundle returned by :func:`run_pipeline`.

    Attributes:
        forests: Reduced top-level nodes, one entry per input sentence.
        report: Per-sentence outcomes and label counts.
    """

    forests: tuple[tuple[Node, ...], ...]
    report: ParseReport


def run_pipeline(
    input_path: Path,
    recursion_limit: int = DEFAULT_RECURSION_LIMIT,
    rules_path: Path | None = None,
) -> PipelineResult:
    """Parse every sentence of a JSON Lines file.

    Args:
        input_path: Chunker output, one JSON array of nodes per line.
        recursion_limit: Maximum reduction passes per sentence.
        rules_path: Rule table TSV; the packaged table when ``None``.

    Returns:
        ``PipelineResult`` with trees and diagnostics.

    Raises:
        ValueError: If any input sentence or parsed tree is malformed.
    """

    repo = RuleRepository(rules_path) if rules_path is not None else default_rule_repository()
    rules = repo.rules
    validate_rules(rules)

    sentences = read_sentences(input_path)
    logger.info("Read %d sentences from %s", len(sentences), input_path)

    forests: list[tuple[Node, ...]] = []
    outcomes: list[SentenceOutcome] = []
    for number, nodes in enumerate(sentences, start=1):
        try:
            validate_nodes(nodes)
        except ValueError as exc:
            raise ValueError(f"Sentence {number}: {exc}") from exc

        text = " ".join(token for node in nodes for token in node.tokens)
        forest = build_dependencies(nodes, recursion_limit, rules=rules)
        validate_tree_invariants(forest)

        forests.append(tuple(forest))
        outcomes.append(
            SentenceOutcome(
                sentence_number=number,
                token_count=sum(len(node.tokens) for node in nodes),
                root_found=any(node.is_root for node in nodes),
                remaining_nodes=len(forest),
                text=text,
            )
        )
        if len(forest) > 1:
            logger.warning(
                "Sentence %d left %d unattached nodes after %d passes",
                number,
                len(forest),
                recursion_limit,
            )

    report = ParseReport(
        recursion_limit=recursion_limit,
        outcomes=tuple(outcomes),
        label_counts=collect_label_counts(forests),
    )
    return PipelineResult(forests=tuple(forests), report=report)
