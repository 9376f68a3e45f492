"""Canonical present-tense verb forms used for token comparisons.

Rule token lists and the auxiliary lemma set are written in base form
(``be``, ``have``, ``will``). Surface tokens are normalized to that form before
comparison so ``was``, ``'s`` and ``Is`` all compare equal to ``be``.
"""

from __future__ import annotations

import functools
from typing import Callable

from lemminflect import getLemma

Conjugator = Callable[[str], str]

CONTRACTIONS = {
    "'m": "am",
    "'s": "is",
    "'d": "would",
    "'ll": "will",
    "'re": "are",
    "'ve": "have",
    "n't": "not",
}

# Modals and negation particles have no inflected forms to undo.
UNINFLECTED = frozenset(
    {"will", "shall", "may", "can", "would", "should", "might", "could", "must", "not", "never"}
)


def de_contract(token: str) -> str:
    """Expand a clitic contraction such as ``'ll`` back to its full word.

    Args:
        token: Surface token, possibly a contraction split off by the tokenizer.

    Returns:
        The expanded word, or ``token`` unchanged when it is not a contraction.
    """

    return CONTRACTIONS.get(token, token)


@functools.lru_cache(maxsize=4096)
def canonical_present(token: str) -> str:
    """Return the canonical present-tense form of ``token``.

    The form is the verb lemma, lower-cased. Unknown or non-verbal tokens come
    back lower-cased rather than raising, so the function is safe on any chunk's
    first token.

    Args:
        token: Surface word form.

    Returns:
        Canonical lemma used for rule and auxiliary comparisons.
    """

    word = de_contract(token.strip().lower())
    if not word or word in UNINFLECTED:
        return word
    lemmas = getLemma(word, upos="VERB")
    if not lemmas:
        return word
    return lemmas[0]
