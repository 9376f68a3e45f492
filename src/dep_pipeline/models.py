"""Data models shared by the root, match and reduce stages.

Nodes are the only mutable records: reduction assigns labels and moves nodes into
their parent's child lists. Rules and match results are immutable and can be shared
freely between sentences.
"""

from __future__ import annotations

from dataclasses import dataclass, field

ROOT_LABEL = "ROOT"
NSUBJ = "NSUBJ"
NSUBJPASS = "NSUBJPASS"

# Labels a head may receive at most once from its left side.
SINGLE_SUBJECT_LABELS = (NSUBJ, NSUBJPASS)

# Right node is attached under the left node.
HEAD_LEFT = "<-"
# Left node is attached under the right node.
HEAD_RIGHT = "->"
DIRECTIONS = (HEAD_LEFT, HEAD_RIGHT)

CHUNK_TYPES = frozenset({"NP", "VP", "PP", "ADJP", "ADVP", "WH", "PUNCT"})

PENN_TAGS = frozenset(
    {
        "CC", "CD", "DT", "EX", "FW", "IN", "JJ", "JJR", "JJS", "LS", "MD",
        "NN", "NNS", "NNP", "NNPS", "PDT", "POS", "PRP", "PRP$", "RB", "RBR",
        "RBS", "RP", "SYM", "TO", "UH", "VB", "VBD", "VBG", "VBN", "VBP",
        "VBZ", "WDT", "WP", "WP$", "WRB",
    }
)

# A node is typed either by its chunk or, for single-token chunks, by its tag.
NODE_TYPES = CHUNK_TYPES | PENN_TAGS


@dataclass(eq=False)
class Node:
    """One chunk of a sentence, as produced by an upstream tagger/chunker.

    ``index`` is the ``(start, end)`` span in the original, unreduced sentence and
    never changes after creation, so distances stay meaningful after a node has
    been spliced into a tree. ``left`` and ``right`` hold the children absorbed
    from each side, in attachment order.

    Nodes compare by identity: two chunks with equal fields are still distinct
    positions in the sentence.
    """

    type: str
    tags: tuple[str, ...]
    tokens: tuple[str, ...]
    index: tuple[int, int]
    label: str | None = None
    left: list[Node] = field(default_factory=list)
    right: list[Node] = field(default_factory=list)

    @property
    def first_tag(self) -> str:
        """Return the primary POS tag."""

        return self.tags[0]

    @property
    def first_token(self) -> str:
        """Return the first surface token."""

        return self.tokens[0]

    @property
    def is_root(self) -> bool:
        return self.label == ROOT_LABEL

    @property
    def children(self) -> list[Node]:
        """Return direct children, left side first."""

        return [*self.left, *self.right]


@dataclass(frozen=True)
class Rule:
    """One entry of the ordered rule table.

    Empty ``left``/``right`` or token sets act as wildcards. ``delay`` and
    ``max_distance`` use ``-1`` for "no constraint".
    """

    left: frozenset[str]
    right: frozenset[str]
    left_tokens: frozenset[str]
    right_tokens: frozenset[str]
    direction: str
    label: str
    delay: int = -1
    max_distance: int = -1


@dataclass(frozen=True)
class MatchResult:
    """Direction and label of the first rule satisfied by an adjacent pair."""

    direction: str
    label: str


class Sentence:
    """Arena of nodes plus the ordered handles still present at top level.

    Handles are positions in the arena and stay valid for the whole reduction;
    detaching a handle from ``live`` never shifts another node's handle. All
    parent/child edges are created through :meth:`attach`, which only accepts a
    dependent that is still live, so a node is attached at most once.
    """

    def __init__(self, nodes: list[Node] | tuple[Node, ...]) -> None:
        self.arena: tuple[Node, ...] = tuple(nodes)
        self.live: list[int] = list(range(len(self.arena)))

    def __len__(self) -> int:
        return len(self.live)

    def node(self, handle: int) -> Node:
        return self.arena[handle]

    def live_nodes(self) -> list[Node]:
        """Return the current top-level nodes in sentence order."""

        return [self.arena[handle] for handle in self.live]

    def attach(self, head: int, dependent: int, side: str) -> None:
        """Move ``dependent`` from the live sequence into a child list of ``head``.

        Args:
            head: Handle of the absorbing node.
            dependent: Handle of the absorbed node.
            side: ``"left"`` or ``"right"``, the child list of ``head`` to append to.

        Raises:
            ValueError: If the dependent is no longer live, the head is not live,
                both handles are the same, or ``side`` is unknown.
        """

        if head == dependent:
            raise ValueError(f"Node {head} cannot be attached to itself")
        if dependent not in self.live:
            raise ValueError(f"Node {dependent} is not live and cannot be attached")
        if head not in self.live:
            raise ValueError(f"Node {head} is not live and cannot absorb children")
        if side not in ("left", "right"):
            raise ValueError(f"Unknown child side '{side}'")

        getattr(self.arena[head], side).append(self.arena[dependent])
        self.live.remove(dependent)


@dataclass(frozen=True)
class SentenceOutcome:
    """Per-sentence diagnostics captured by the batch pipeline."""

    sentence_number: int
    token_count: int
    root_found: bool
    remaining_nodes: int
    text: str

    @property
    def is_single_tree(self) -> bool:
        return self.remaining_nodes == 1


@dataclass(frozen=True)
class ParseReport:
    """Batch diagnostics for reporting.

    ``outcomes`` keeps input order; report builders decide their own sorting.
    """

    recursion_limit: int
    outcomes: tuple[SentenceOutcome, ...] = field(default_factory=tuple)
    label_counts: dict[str, int] = field(default_factory=dict)
