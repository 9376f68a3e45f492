"""Validation helpers for input node sequences, rule tables and parsed trees."""

from __future__ import annotations

from collections import Counter
from typing import Iterator, Sequence

from dep_pipeline.models import (
    DIRECTIONS,
    NODE_TYPES,
    ROOT_LABEL,
    SINGLE_SUBJECT_LABELS,
    Node,
    Rule,
)


def _raise_if_errors(stage: str, errors: list[str]) -> None:
    if errors:
        preview = "\n".join(f"- {item}" for item in errors[:25])
        rest = len(errors) - min(25, len(errors))
        more = f"\n- ... and {rest} more" if rest > 0 else ""
        raise ValueError(f"{stage} validation failed with {len(errors)} errors:\n{preview}{more}")


def validate_nodes(nodes: Sequence[Node]) -> None:
    """Validate one tagged sentence before reduction.

    Args:
        nodes: Nodes in sentence order.

    Raises:
        ValueError: If a node has an unknown type, empty tags or tokens, a
            reversed span, or overlaps/precedes the previous node's span.
    """

    errors: list[str] = []
    previous_end: int | None = None
    for idx, node in enumerate(nodes, start=1):
        if node.type not in NODE_TYPES:
            errors.append(f"Node {idx}: invalid type '{node.type}'")
        if not node.tags:
            errors.append(f"Node {idx}: empty tags")
        if not node.tokens:
            errors.append(f"Node {idx}: empty tokens")

        start, end = node.index
        if start < 0 or end < start:
            errors.append(f"Node {idx}: invalid index span [{start}, {end}]")
        elif previous_end is not None and start <= previous_end:
            errors.append(
                f"Node {idx}: span [{start}, {end}] overlaps or precedes "
                f"previous end {previous_end}"
            )
        previous_end = end

    _raise_if_errors("Input", errors)


def validate_rules(rules: Sequence[Rule]) -> None:
    """Validate rule records constructed outside the TSV parser.

    Args:
        rules: Rule table in priority order.

    Raises:
        ValueError: If a rule has an unknown direction, an empty or reserved
            label, or a constraint below ``-1``.
    """

    errors: list[str] = []
    for idx, rule in enumerate(rules, start=1):
        if rule.direction not in DIRECTIONS:
            errors.append(f"Rule {idx}: invalid direction '{rule.direction}'")
        if not rule.label:
            errors.append(f"Rule {idx}: empty label")
        if rule.label == ROOT_LABEL:
            errors.append(f"Rule {idx}: label {ROOT_LABEL} is reserved for root identification")
        if rule.delay < -1:
            errors.append(f"Rule {idx}: invalid delay {rule.delay}")
        if rule.max_distance < -1:
            errors.append(f"Rule {idx}: invalid max_distance {rule.max_distance}")

    _raise_if_errors("Rule table", errors)


def iter_nodes(forest: Sequence[Node]) -> Iterator[Node]:
    """Walk every node in ``forest`` in pre-order, left children first."""

    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def count_roots(forest: Sequence[Node]) -> int:
    return sum(1 for node in iter_nodes(forest) if node.is_root)


def validate_tree_invariants(forest: Sequence[Node]) -> None:
    """Check structural invariants of a reduced sentence.

    Args:
        forest: Top-level nodes returned by reduction.

    Raises:
        ValueError: If more than one root exists, the root was absorbed as a
            child, or a head holds two left subjects with the same label.
    """

    errors: list[str] = []
    roots = count_roots(forest)
    if roots > 1:
        errors.append(f"{roots} nodes labeled {ROOT_LABEL}")

    for node in iter_nodes(forest):
        for child in node.children:
            if child.is_root:
                errors.append(f"{ROOT_LABEL} node {child.index} is a child of {node.index}")
        for label in SINGLE_SUBJECT_LABELS:
            count = sum(1 for child in node.left if child.label == label)
            if count > 1:
                errors.append(f"Node {node.index} has {count} left children labeled {label}")

    _raise_if_errors("Tree", errors)


def collect_label_counts(forests: Sequence[Sequence[Node]]) -> dict[str, int]:
    """Count assigned labels across parsed sentences.

    Args:
        forests: One list of top-level nodes per sentence.

    Returns:
        Dictionary of label to count; unlabeled nodes are not counted.
    """

    counter: Counter[str] = Counter()
    for forest in forests:
        for node in iter_nodes(forest):
            if node.label:
                counter[node.label] += 1
    return dict(counter)
