"""Graphviz export of a ternary search tree, for debugging tree shape."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, BinaryIO, Iterator, Optional

if TYPE_CHECKING:
    from .tst import _Node

logger = logging.getLogger(__name__)

FILLED = "●"
EMPTY = "○"

_RECORD_SPECIALS = '\\"|{}<> '


def _escape(char: str) -> str:
    if char in _RECORD_SPECIALS:
        return "\\" + char
    if char == "\n":
        return "\\n"
    return char


def dot_lines(root: Optional[_Node]) -> Iterator[str]:
    """Yield the DOT description of the tree under *root*, line by line.

    Nodes are numbered in discovery order.  Each node is a two-field record
    ``<char>|<marker>`` and edges are labelled ``l``, ``m`` or ``r``.
    """
    yield "digraph {"
    yield "node [shape=record]"
    if root is not None:
        ids = {id(root): 0}
        stack = [root]
        while stack:
            node = stack.pop()
            node_id = ids[id(node)]
            marker = FILLED if node.is_end else EMPTY
            yield f'N{node_id} [label="{_escape(node.char)}|{marker}"]'
            children = []
            for label, child in (("l", node.left), ("m", node.middle), ("r", node.right)):
                if child is None:
                    continue
                ids[id(child)] = len(ids)
                style = ", style=bold" if label == "m" else ""
                yield f"N{node_id} -> N{ids[id(child)]} [label={label}{style}]"
                children.append(child)
            stack.extend(reversed(children))
    yield "}"


def write_dot(root: Optional[_Node], sink: BinaryIO) -> None:
    count = 0
    for line in dot_lines(root):
        sink.write(line.encode("utf-8") + b"\n")
        count += 1
    logger.debug("Wrote %d DOT lines", count)
