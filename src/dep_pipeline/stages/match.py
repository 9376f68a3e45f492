"""Stage 2: match an adjacent node pair against the ordered rule table."""

from __future__ import annotations

from typing import Sequence

from dep_pipeline.models import (
    HEAD_LEFT,
    HEAD_RIGHT,
    SINGLE_SUBJECT_LABELS,
    MatchResult,
    Node,
    Rule,
)
from dep_pipeline.morphology.conjugator import Conjugator, canonical_present


def gap_between(left: Node, right: Node) -> int:
    """Return the number of original token positions strictly between two spans."""

    return right.index[0] - left.index[1] - 1


def has_label(label: str, nodes: Sequence[Node]) -> bool:
    return any(node.label == label for node in nodes)


def rule_applies(
    rule: Rule,
    left: Node,
    right: Node,
    iteration: int,
    conjugate: Conjugator = canonical_present,
) -> bool:
    """Check every condition of one rule, cheapest first.

    Args:
        rule: Candidate rule.
        left: Left node of the adjacent pair.
        right: Right node of the adjacent pair.
        iteration: Current reduction pass, starting at 0.
        conjugate: Token normalizer for token-constrained rules.

    Returns:
        ``True`` when the pair satisfies the rule.
    """

    if rule.left and left.type not in rule.left:
        return False
    if rule.right and right.type not in rule.right:
        return False
    if rule.delay != -1 and iteration <= rule.delay:
        return False
    if rule.max_distance != -1 and gap_between(left, right) > rule.max_distance:
        return False

    # The root never becomes a dependent.
    if rule.direction == HEAD_LEFT and right.is_root:
        return False
    if rule.direction == HEAD_RIGHT and left.is_root:
        return False

    if (
        rule.label in SINGLE_SUBJECT_LABELS
        and rule.direction == HEAD_RIGHT
        and has_label(rule.label, right.left)
    ):
        return False

    if rule.left_tokens and conjugate(left.first_token) not in rule.left_tokens:
        return False
    if rule.right_tokens and conjugate(right.first_token) not in rule.right_tokens:
        return False
    return True


def match_nodes(
    left: Node,
    right: Node,
    iteration: int,
    rules: Sequence[Rule],
    conjugate: Conjugator = canonical_present,
) -> MatchResult | None:
    """Return the direction and label of the first rule the pair satisfies.

    Args:
        left: Left node of the adjacent pair.
        right: Right node of the adjacent pair.
        iteration: Current reduction pass, starting at 0.
        rules: Rule table in priority order.
        conjugate: Token normalizer for token-constrained rules.

    Returns:
        ``MatchResult`` for the first satisfied rule, or ``None``.
    """

    for rule in rules:
        if rule_applies(rule, left, right, iteration, conjugate):
            return MatchResult(direction=rule.direction, label=rule.label)
    return None
