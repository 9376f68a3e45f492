"""Stage 1: mark the sentence root.

The root is the first verb chunk that is not acting as an auxiliary. A verb is
treated as an auxiliary when it could be one (its primary tag allows it) and one
of these lookahead patterns follows it:

- another verb chunk;
- an adverb, then a verb chunk;
- an adverb, a noun phrase, then a verb chunk;
- at sentence start only: a noun phrase then a verb chunk, or a noun phrase, an
  adverb, then a verb chunk (questions such as "does he really know");
- its own lemma is a known auxiliary and a verb chunk sits two positions ahead.
"""

from __future__ import annotations

import logging

from dep_pipeline.models import ROOT_LABEL, Node, Sentence
from dep_pipeline.morphology.conjugator import Conjugator, canonical_present

logger = logging.getLogger(__name__)

VERB_TYPES = frozenset({"VP", "VB", "VBN"})
POSSIBLE_AUXILIARY_TAGS = frozenset({"VBZ", "VB", "VBP", "VBD", "MD", "VBN"})
AUXILIARY_LEMMAS = frozenset({"be", "have", "do", "will", "shall", "may", "can"})
ADVERB_TAG = "RB"
NOUN_PHRASE = "NP"


def _is_verb(node: Node | None) -> bool:
    return node is not None and node.type in VERB_TYPES


def is_auxiliary(
    nodes: list[Node],
    position: int,
    conjugate: Conjugator = canonical_present,
) -> bool:
    """Decide whether the verb chunk at ``position`` only supports a later verb.

    Args:
        nodes: Top-level nodes in sentence order.
        position: Index of a verb chunk in ``nodes``.
        conjugate: Token normalizer used for the auxiliary lemma check.

    Returns:
        ``True`` when the chunk should be skipped as an auxiliary.
    """

    node = nodes[position]
    nx1, nx2, nx3 = (
        nodes[i] if i < len(nodes) else None for i in range(position + 1, position + 4)
    )

    if node.first_tag not in POSSIBLE_AUXILIARY_TAGS or nx1 is None:
        return False

    if _is_verb(nx1):
        return True
    if nx1.first_tag == ADVERB_TAG and nx2 is not None:
        if _is_verb(nx2):
            return True
        return nx2.type == NOUN_PHRASE and _is_verb(nx3)
    if nx2 is not None and node.index[0] == 0:
        if nx1.type == NOUN_PHRASE and _is_verb(nx2):
            return True
        return nx1.type == NOUN_PHRASE and nx2.first_tag == ADVERB_TAG and _is_verb(nx3)
    if nx2 is not None and conjugate(node.first_token) in AUXILIARY_LEMMAS:
        return _is_verb(nx2)
    return False


def identify_root(sentence: Sentence, conjugate: Conjugator = canonical_present) -> Node | None:
    """Label the first non-auxiliary verb chunk as the sentence root.

    Scanning stops at the first label written, so at most one node is ever marked.
    Finding no root is a normal outcome for verbless fragments.

    Args:
        sentence: Sentence whose live nodes are scanned left to right.
        conjugate: Token normalizer used for the auxiliary lemma check.

    Returns:
        The node labeled as root, or ``None`` when no node qualifies.
    """

    nodes = sentence.live_nodes()
    for position, node in enumerate(nodes):
        if node.type not in VERB_TYPES:
            continue
        if is_auxiliary(nodes, position, conjugate):
            logger.debug("Skipping auxiliary %r at %s", node.first_token, node.index)
            continue
        node.label = ROOT_LABEL
        return node

    logger.debug("No root found in sentence of %d nodes", len(nodes))
    return None
