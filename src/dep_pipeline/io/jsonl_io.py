"""JSON Lines read/write helpers for tagged sentences and parsed trees."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from dep_pipeline.models import Node


def node_from_dict(payload: dict[str, Any]) -> Node:
    """Build an unlabeled leaf node from one chunker record.

    Args:
        payload: Mapping with ``type``, ``tags``, ``tokens`` and ``index`` keys.

    Returns:
        New node with no label and no children.

    Raises:
        ValueError: If a required key is missing, ``tags``, ``tokens`` or
            ``index`` is not a JSON array, or ``index`` is not a pair.
    """

    missing = [key for key in ("type", "tags", "tokens", "index") if key not in payload]
    if missing:
        raise ValueError(f"Node record missing keys: {', '.join(missing)}")
    for key in ("tags", "tokens", "index"):
        if not isinstance(payload[key], list):
            raise ValueError(f"Node {key} must be a list, got {payload[key]!r}")
    index = payload["index"]
    if len(index) != 2:
        raise ValueError(f"Node index must have two items, got {index!r}")
    return Node(
        type=str(payload["type"]),
        tags=tuple(payload["tags"]),
        tokens=tuple(payload["tokens"]),
        index=(int(index[0]), int(index[1])),
    )


def node_to_dict(node: Node) -> dict[str, Any]:
    """Serialize a node and its children recursively."""

    return {
        "type": node.type,
        "tags": list(node.tags),
        "tokens": list(node.tokens),
        "index": list(node.index),
        "label": node.label,
        "left": [node_to_dict(child) for child in node.left],
        "right": [node_to_dict(child) for child in node.right],
    }


def read_sentences(input_path: Path) -> list[list[Node]]:
    """Read one node sequence per non-blank JSON line.

    Args:
        input_path: JSON Lines file produced by the chunker.

    Returns:
        Sentences in file order.

    Raises:
        ValueError: If a line is not a JSON array of node records.
    """

    sentences: list[list[Node]] = []
    with input_path.open("r", encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                records = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Line {line_no}: invalid JSON ({exc.msg})") from exc
            if not isinstance(records, list):
                raise ValueError(f"Line {line_no}: expected a JSON array of nodes")
            sentences.append([node_from_dict(record) for record in records])
    return sentences


def write_trees(forests: Sequence[Sequence[Node]], output_path: Path) -> None:
    """Write one JSON array of top-level trees per sentence.

    Args:
        forests: Reduced sentences in input order.
        output_path: Destination JSON Lines path.
    """

    with output_path.open("w", encoding="utf-8") as handle:
        for forest in forests:
            handle.write(json.dumps([node_to_dict(node) for node in forest], ensure_ascii=False))
            handle.write("\n")
