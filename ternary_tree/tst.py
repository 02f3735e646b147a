"""
Ternary Search Tree — an ordered map from string keys to values.

Each node holds one character and three links: ``left`` and ``right`` lead
to alternative characters at the same position (smaller and greater), and
``middle`` leads to the next character of the same key.  Tree shape depends
on insertion order; nothing rebalances it.

Techniques used:
  - Iterative descent: insert, lookup and remove walk the tree in a loop,
    so key length never touches the interpreter recursion limit.
  - One traversal engine: the visit family and the external iterators both
    run on the explicit-stack cursors of :mod:`ternary_tree.cursor`.
  - Runtime borrow check: live iterators are tracked in a weak set and any
    structural change while one is alive raises :class:`BorrowError`.

Complexity (n = key length, m = number of matches):
  insert / get / remove       — O(n) average on random insertion order
  visit_complete_values       — O(n + m)
  neighbor / crossword        — bounded by the nodes the pattern can reach
"""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from .cursor import AllValues, Completion, Crossword, Neighbor, TstIterator
from .dot import write_dot

logger = logging.getLogger(__name__)


class BorrowError(RuntimeError):
    """The tree was changed while an iterator or visit was still running."""


@dataclass(eq=False)
class _Node:
    """Internal node of the ternary search tree."""

    char: str
    value: Any = None
    # ``value`` is meaningful only when the node terminates a key.
    is_end: bool = False
    left: Optional[_Node] = None
    middle: Optional[_Node] = None
    right: Optional[_Node] = None


@dataclass
class DistStat:
    matches: int = 0
    sides: int = 0
    depth: int = 0


@dataclass
class KeyLenStat:
    min: int = 0
    max: int = 0


@dataclass
class CountStat:
    nodes: int = 0
    values: int = 0


@dataclass
class TreeStats:
    """Shape metrics, mostly useful for tuning insertion order.

    ``dist[n].matches`` counts keys of length *n*, ``dist[n].sides`` counts
    values reached through *n* left/right links and ``dist[n].depth``
    counts values whose node sits *n* links below the root (plus one).
    """

    dist: list[DistStat] = field(default_factory=list)
    key_len: KeyLenStat = field(default_factory=KeyLenStat)
    count: CountStat = field(default_factory=CountStat)


class Tst:
    """A ternary search tree that maps string keys to arbitrary values.

    >>> t = Tst()
    >>> for word in ["cat", "cap", "car", "bat", "cab"]:
    ...     t.insert(word, word.upper())
    >>> t.get("car")
    'CAR'
    >>> list(t.iter_complete("ca"))
    ['CAB', 'CAP', 'CAR', 'CAT']
    >>> list(t.iter_neighbor("cot", 1))
    ['CAT']
    >>> list(t.iter_crossword("?at", "?"))
    ['BAT', 'CAT']
    """

    def __init__(self) -> None:
        self._root: Optional[_Node] = None
        self._size = 0
        self._cursors: weakref.WeakSet[TstIterator] = weakref.WeakSet()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def insert(self, key: str, value: Any) -> Any:
        """Store *value* under *key*; return the value it replaced, if any."""
        _check_key(key)
        if not key:
            raise ValueError("key must not be empty")
        self._check_unborrowed()
        if self._root is None:
            self._root = _Node(key[0])
        node = self._root
        i = 0
        while True:
            char = key[i]
            if char < node.char:
                if node.left is None:
                    node.left = _Node(char)
                node = node.left
            elif char > node.char:
                if node.right is None:
                    node.right = _Node(char)
                node = node.right
            else:
                i += 1
                if i == len(key):
                    break
                if node.middle is None:
                    node.middle = _Node(key[i])
                node = node.middle
        old_value = node.value if node.is_end else None
        if not node.is_end:
            self._size += 1
        node.value = value
        node.is_end = True
        return old_value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for *key*, or *default* if absent."""
        node = self._find_node(key)
        if node is not None and node.is_end:
            return node.value
        return default

    def get_mut(self, key: str, action: Callable[[Any], Any]) -> Any:
        """Replace the value for *key* by ``action(value)`` and return it.

        Returns ``None`` without calling *action* when *key* is absent.
        """
        node = self._find_node(key)
        if node is None or not node.is_end:
            return None
        node.value = action(node.value)
        return node.value

    def contains_key(self, key: str) -> bool:
        node = self._find_node(key)
        return node is not None and node.is_end

    def remove(self, key: str) -> Any:
        """Remove *key*; return its value, or ``None`` if it was absent.

        Nodes left on no key path are unlinked, deepest first.
        """
        _check_key(key)
        if not key:
            return None
        self._check_unborrowed()
        # (owner, attribute) of every link that led to a matching character.
        path: list[tuple[Any, str]] = []
        owner: Any = self
        attr = "_root"
        i = 0
        while True:
            node = getattr(owner, attr)
            if node is None:
                return None
            char = key[i]
            if char < node.char:
                owner, attr = node, "left"
            elif char > node.char:
                owner, attr = node, "right"
            else:
                path.append((owner, attr))
                i += 1
                if i == len(key):
                    break
                owner, attr = node, "middle"
        if not node.is_end:
            return None
        old_value = node.value
        node.value = None
        node.is_end = False
        self._size -= 1
        pruned = 0
        while path:
            owner, attr = path.pop()
            node = getattr(owner, attr)
            if node.is_end or node.middle is not None:
                break
            _unlink(owner, attr, node)
            pruned += 1
        logger.debug("Removed key=%r, pruned %d node(s)", key, pruned)
        return old_value

    def clear(self) -> None:
        self._check_unborrowed()
        self._root = None
        self._size = 0

    def is_empty(self) -> bool:
        return self._size == 0

    def stats(self) -> TreeStats:
        """Walk the whole tree once and collect :class:`TreeStats`."""
        stats = TreeStats()
        if self._root is None:
            return stats
        # (node, middle links so far, side links so far, depth so far)
        stack: list[tuple[_Node, int, int, int]] = [(self._root, 0, 0, 0)]
        while stack:
            node, matches, sides, depth = stack.pop()
            stats.count.nodes += 1
            if node.is_end:
                key_len = matches + 1
                while len(stats.dist) <= depth + 1:
                    stats.dist.append(DistStat())
                stats.dist[key_len].matches += 1
                stats.dist[sides].sides += 1
                stats.dist[depth + 1].depth += 1
                if stats.key_len.min == 0 or key_len < stats.key_len.min:
                    stats.key_len.min = key_len
                stats.key_len.max = max(stats.key_len.max, key_len)
                stats.count.values += 1
            if node.right is not None:
                stack.append((node.right, matches, sides + 1, depth + 1))
            if node.middle is not None:
                stack.append((node.middle, matches + 1, sides, depth + 1))
            if node.left is not None:
                stack.append((node.left, matches, sides + 1, depth + 1))
        return stats

    def pretty_print(self, sink) -> None:
        """Write a Graphviz description of the tree to the binary *sink*."""
        write_dot(self._root, sink)

    # ── Visitation ──────────────────────────────────────────────────────

    def visit_values(self, action: Callable[[Any], Any]) -> None:
        """Call *action* on every value, in key order."""
        self.iter().visit(action)

    def visit_values_mut(self, action: Callable[[Any], Any]) -> None:
        """Replace every value by ``action(value)``, in key order."""
        self.iter().visit_mut(action)

    def visit_complete_values(self, prefix: str, action: Callable[[Any], Any]) -> None:
        """Call *action* on the value of every key starting with *prefix*."""
        self.iter_complete(prefix).visit(action)

    def visit_complete_values_mut(self, prefix: str, action: Callable[[Any], Any]) -> None:
        self.iter_complete(prefix).visit_mut(action)

    def visit_neighbor_values(
        self, key: str, max_distance: int, action: Callable[[Any], Any]
    ) -> None:
        """Call *action* on every same-length key at most *max_distance*
        characters away from *key* (Hamming distance)."""
        self.iter_neighbor(key, max_distance).visit(action)

    def visit_neighbor_values_mut(
        self, key: str, max_distance: int, action: Callable[[Any], Any]
    ) -> None:
        self.iter_neighbor(key, max_distance).visit_mut(action)

    def visit_crossword_values(
        self, pattern: str, joker: str, action: Callable[[Any], Any]
    ) -> None:
        """Call *action* on every same-length key matching *pattern*, where
        *joker* stands for any character."""
        self.iter_crossword(pattern, joker).visit(action)

    def visit_crossword_values_mut(
        self, pattern: str, joker: str, action: Callable[[Any], Any]
    ) -> None:
        self.iter_crossword(pattern, joker).visit_mut(action)

    # ── Iteration ───────────────────────────────────────────────────────

    def iter(self) -> TstIterator:
        return TstIterator(self, self._root, AllValues())

    def iter_complete(self, prefix: str) -> TstIterator:
        _check_key(prefix)
        if not prefix:
            return self.iter()
        anchor = self._find_node(prefix)
        return TstIterator(self, anchor, Completion(), key_prefix=prefix[:-1])

    def iter_neighbor(self, key: str, max_distance: int) -> TstIterator:
        _check_key(key)
        if isinstance(max_distance, bool) or not isinstance(max_distance, int):
            raise ValueError(f"max_distance must be an integer, got {max_distance!r}")
        if max_distance < 0:
            raise ValueError(f"max_distance must be non-negative, got {max_distance}")
        root = self._root if key else None
        return TstIterator(self, root, Neighbor(key, max_distance))

    def iter_crossword(self, pattern: str, joker: str) -> TstIterator:
        _check_key(pattern)
        if not isinstance(joker, str) or len(joker) != 1:
            raise ValueError(f"joker must be a single character, got {joker!r}")
        root = self._root if pattern else None
        return TstIterator(self, root, Crossword(pattern, joker))

    def keys(self) -> Iterator[str]:
        return self.keys_with_prefix("")

    def keys_with_prefix(self, prefix: str) -> Iterator[str]:
        """Yield all keys that begin with *prefix*, lazily."""
        it = self.iter_complete(prefix)
        for _ in it:
            yield it.current_key()

    def items(self) -> Iterator[tuple[str, Any]]:
        it = self.iter()
        for value in it:
            yield it.current_key(), value

    # ── Mapping protocol ────────────────────────────────────────────────

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    def __iter__(self) -> TstIterator:
        return self.iter()

    def __getitem__(self, key: str) -> Any:
        node = self._find_node(key)
        if node is None or not node.is_end:
            raise KeyError(key)
        return node.value

    def __setitem__(self, key: str, value: Any) -> None:
        self.insert(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.contains_key(key):
            raise KeyError(key)
        self.remove(key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(len={self._size})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find_node(self, key: str) -> Optional[_Node]:
        """Walk the tree following *key*; return the node of its last
        character (whether or not it holds a value) or None."""
        _check_key(key)
        if not key:
            return None
        node = self._root
        i = 0
        while node is not None:
            char = key[i]
            if char < node.char:
                node = node.left
            elif char > node.char:
                node = node.right
            else:
                i += 1
                if i == len(key):
                    return node
                node = node.middle
        return None

    def _borrow(self, cursor: TstIterator) -> None:
        self._cursors.add(cursor)

    def _release(self, cursor: TstIterator) -> None:
        self._cursors.discard(cursor)

    def _check_unborrowed(self) -> None:
        if len(self._cursors):
            raise BorrowError(
                f"tree changed while {len(self._cursors)} iterator(s) are still alive"
            )


def _check_key(key: object) -> None:
    if not isinstance(key, str):
        raise TypeError(f"keys must be str, not {type(key).__name__}")


def _unlink(owner: Any, attr: str, node: _Node) -> None:
    """Take *node* out of its sibling tree, keeping sibling order."""
    if node.left is None:
        setattr(owner, attr, node.right)
    elif node.right is None:
        setattr(owner, attr, node.left)
    else:
        # Pull the in-order successor up into node's place.
        parent, successor = node, node.right
        while successor.left is not None:
            parent, successor = successor, successor.left
        if parent is node:
            node.right = successor.right
        else:
            parent.left = successor.right
        node.char = successor.char
        node.value = successor.value
        node.is_end = successor.is_end
        node.middle = successor.middle
