"""Stage 3: reduce the live node sequence into a dependency tree."""

from __future__ import annotations

import logging
from typing import Sequence

from dep_pipeline.models import HEAD_LEFT, HEAD_RIGHT, Node, Rule, Sentence
from dep_pipeline.morphology.conjugator import Conjugator, canonical_present
from dep_pipeline.stages.match import match_nodes

logger = logging.getLogger(__name__)


def reduce_pass(
    sentence: Sentence,
    iteration: int,
    rules: Sequence[Rule],
    conjugate: Conjugator = canonical_present,
) -> int:
    """Run one right-to-left scan over adjacent live pairs.

    Scanning from the rightmost pair means a removal only shifts positions that
    have already been visited.

    Args:
        sentence: Sentence to mutate.
        iteration: Pass number handed to the matcher for delayed rules.
        rules: Rule table in priority order.
        conjugate: Token normalizer for token-constrained rules.

    Returns:
        Number of attachments made during the pass.
    """

    attached = 0
    for position in range(len(sentence.live) - 2, -1, -1):
        left_handle = sentence.live[position]
        right_handle = sentence.live[position + 1]
        left = sentence.node(left_handle)
        right = sentence.node(right_handle)

        match = match_nodes(left, right, iteration, rules, conjugate)
        if match is None:
            continue

        if match.direction == HEAD_LEFT:
            right.label = match.label
            sentence.attach(left_handle, right_handle, "right")
        elif match.direction == HEAD_RIGHT:
            left.label = match.label
            sentence.attach(right_handle, left_handle, "left")
        else:
            continue

        attached += 1
        logger.debug(
            "pass %d: %r %s %r as %s",
            iteration,
            left.first_token,
            match.direction,
            right.first_token,
            match.label,
        )

    return attached


def build_relationships(
    sentence: Sentence,
    recursion_limit: int,
    rules: Sequence[Rule],
    conjugate: Conjugator = canonical_present,
) -> list[Node]:
    """Repeat reduction passes until one node is left or the limit is reached.

    A non-positive ``recursion_limit`` performs no passes. Running out of passes
    with several nodes left is not an error: the remaining nodes are returned as
    a forest.

    Args:
        sentence: Sentence to reduce in place.
        recursion_limit: Maximum number of passes.
        rules: Rule table in priority order.
        conjugate: Token normalizer for token-constrained rules.

    Returns:
        Live top-level nodes after the final pass.
    """

    iteration = 0
    while iteration < recursion_limit and len(sentence) > 1:
        reduce_pass(sentence, iteration, rules, conjugate)
        logger.debug("pass %d: %d nodes remain", iteration, len(sentence))
        iteration += 1

    return sentence.live_nodes()
