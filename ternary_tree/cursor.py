"""
Double-ended cursors over a ternary search tree.

Techniques used:
  - Manual coroutines: each direction keeps an explicit stack of
    ``(node, pending action, search state)`` frames standing in for the
    suspended calls of a recursive in-order walk, so iteration can stop and
    resume between calls and never grows the Python call stack.
  - Search policies: the plain walk, prefix completion, Hamming-distance
    neighbours and crossword patterns only differ in which branches they
    take and which values they accept.  A small policy object answers those
    questions; the frame machine is shared.
  - Meeting point: the forward cursor stops as soon as it reaches the node
    last returned by the backward cursor (and vice versa), which gives the
    half-open semantics of a double-ended sequence.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, Protocol

if TYPE_CHECKING:
    from .tst import Tst, _Node


class _Action(enum.Enum):
    GO_LEFT = 0
    VISIT = 1
    GO_MIDDLE = 2
    GO_RIGHT = 3


_GO_LEFT = _Action.GO_LEFT
_VISIT = _Action.VISIT
_GO_MIDDLE = _Action.GO_MIDDLE
_GO_RIGHT = _Action.GO_RIGHT


# ---------------------------------------------------------------------------
# Search policies
# ---------------------------------------------------------------------------


class SearchPolicy(Protocol):
    """Which branches a cursor may take and which values it reports."""

    def start(self) -> Any: ...

    def go_left(self, node: _Node, state: Any) -> bool: ...

    def go_right(self, node: _Node, state: Any) -> bool: ...

    def descend(self, node: _Node, state: Any) -> Any: ...

    def accept(self, node: _Node, state: Any) -> bool: ...


class AllValues:
    """Unrestricted walk: every branch, every stored value."""

    def start(self) -> Any:
        return 0

    def go_left(self, node: _Node, state: Any) -> bool:
        return True

    def go_right(self, node: _Node, state: Any) -> bool:
        return True

    def descend(self, node: _Node, state: Any) -> Any:
        """State for the middle child, or ``None`` to prune it."""
        return 0

    def accept(self, node: _Node, state: Any) -> bool:
        return True


class Completion(AllValues):
    """Walk rooted at the node of a prefix's last character.

    The anchor frame only contributes its own value and its middle subtree;
    its left and right siblings belong to other prefixes.
    """

    def start(self) -> bool:
        return True

    def go_left(self, node: _Node, anchored: bool) -> bool:
        return not anchored

    def go_right(self, node: _Node, anchored: bool) -> bool:
        return not anchored

    def descend(self, node: _Node, anchored: bool) -> bool:
        return False


class Neighbor:
    """Same-length keys within a Hamming distance of *key*.

    State is ``(position in key, remaining budget)``.  Moving left or right
    tries another character at the same position and costs nothing; moving
    through the middle commits to the node's character.
    """

    def __init__(self, key: str, max_distance: int) -> None:
        self._key = key
        self._max_distance = max_distance

    def start(self) -> tuple[int, int]:
        return 0, self._max_distance

    def go_left(self, node: _Node, state: tuple[int, int]) -> bool:
        i, budget = state
        return budget > 0 or self._key[i] < node.char

    def go_right(self, node: _Node, state: tuple[int, int]) -> bool:
        i, budget = state
        return budget > 0 or self._key[i] > node.char

    def _remaining(self, node: _Node, state: tuple[int, int]) -> int:
        i, budget = state
        return budget if node.char == self._key[i] else budget - 1

    def descend(self, node: _Node, state: tuple[int, int]) -> Optional[tuple[int, int]]:
        i = state[0]
        if i + 1 >= len(self._key):
            return None
        remaining = self._remaining(node, state)
        if remaining < 0:
            return None
        return i + 1, remaining

    def accept(self, node: _Node, state: tuple[int, int]) -> bool:
        return state[0] + 1 == len(self._key) and self._remaining(node, state) >= 0


class Crossword:
    """Same-length keys matching *pattern*, where *joker* matches anything."""

    def __init__(self, pattern: str, joker: str) -> None:
        self._pattern = pattern
        self._joker = joker

    def start(self) -> int:
        return 0

    def go_left(self, node: _Node, i: int) -> bool:
        char = self._pattern[i]
        return char == self._joker or char < node.char

    def go_right(self, node: _Node, i: int) -> bool:
        char = self._pattern[i]
        return char == self._joker or char > node.char

    def _matches(self, node: _Node, i: int) -> bool:
        char = self._pattern[i]
        return char == self._joker or char == node.char

    def descend(self, node: _Node, i: int) -> Optional[int]:
        if i + 1 < len(self._pattern) and self._matches(node, i):
            return i + 1
        return None

    def accept(self, node: _Node, i: int) -> bool:
        return i + 1 == len(self._pattern) and self._matches(node, i)


# ---------------------------------------------------------------------------
# Iterator
# ---------------------------------------------------------------------------


class TstIterator:
    """Pull-based, double-ended iterator over the values of a tree.

    ``next(it)`` walks from the smallest key upwards, ``it.next_back()``
    from the largest key downwards.  Both raise ``StopIteration`` once the
    two cursors have met.  ``current_key()`` / ``current_key_back()`` give
    the key of the value last returned by each cursor.

    The iterator borrows its tree: while it is alive and not exhausted, the
    tree refuses structural changes.  Exhaust it, ``close()`` it, or drop
    it to give the borrow back.
    """

    def __init__(
        self,
        tree: Tst,
        root: Optional[_Node],
        policy: SearchPolicy,
        key_prefix: str = "",
    ) -> None:
        self._tree = tree
        self._policy = policy
        self._key_prefix = key_prefix
        self._front: list[tuple[_Node, _Action, Any]] = []
        self._back: list[tuple[_Node, _Action, Any]] = []
        self._last_front: Optional[_Node] = None
        self._last_back: Optional[_Node] = None
        self._front_key: Optional[str] = None
        self._back_key: Optional[str] = None
        if root is not None:
            state = self._policy.start()
            self._front.append((root, _GO_LEFT, state))
            self._back.append((root, _GO_RIGHT, state))
            tree._borrow(self)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def __iter__(self) -> TstIterator:
        return self

    def __next__(self) -> Any:
        node = self._advance_front()
        if node is None:
            raise StopIteration
        return node.value

    def next_back(self) -> Any:
        """Return the next value from the high end."""
        node = self._advance_back()
        if node is None:
            raise StopIteration
        return node.value

    def __reversed__(self) -> Iterator[Any]:
        while True:
            node = self._advance_back()
            if node is None:
                return
            yield node.value

    def current_key(self) -> Optional[str]:
        return self._front_key

    def current_key_back(self) -> Optional[str]:
        return self._back_key

    def close(self) -> None:
        """Drop the traversal state and give the tree borrow back."""
        self._front.clear()
        self._back.clear()
        self._tree._release(self)

    def visit(self, action: Callable[[Any], Any]) -> None:
        """Call *action* on every remaining value front to back, then close."""
        try:
            node = self._advance_front()
            while node is not None:
                action(node.value)
                node = self._advance_front()
        finally:
            self.close()

    def visit_mut(self, action: Callable[[Any], Any]) -> None:
        """Replace every remaining value by ``action(value)``, then close."""
        try:
            node = self._advance_front()
            while node is not None:
                node.value = action(node.value)
                node = self._advance_front()
        finally:
            self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _path(self, stack: list[tuple[_Node, _Action, Any]], on_path: tuple[_Action, ...]) -> str:
        # Frames whose pending action comes after VISIT (forward) or before
        # it (backward) are the characters of the current key.
        chars = [node.char for node, action, _ in stack if action in on_path]
        return self._key_prefix + "".join(chars)

    def _advance_front(self) -> Optional[_Node]:
        stack = self._front
        policy = self._policy
        while stack:
            node, action, state = stack.pop()
            if action is _GO_LEFT:
                stack.append((node, _VISIT, state))
                if node.left is not None and policy.go_left(node, state):
                    stack.append((node.left, _GO_LEFT, state))
            elif action is _VISIT:
                if node is self._last_back:
                    break
                stack.append((node, _GO_MIDDLE, state))
                if node.is_end and policy.accept(node, state):
                    self._last_front = node
                    self._front_key = self._path(stack, (_GO_MIDDLE, _GO_RIGHT))
                    return node
            elif action is _GO_MIDDLE:
                stack.append((node, _GO_RIGHT, state))
                if node.middle is not None:
                    child_state = policy.descend(node, state)
                    if child_state is not None:
                        stack.append((node.middle, _GO_LEFT, child_state))
            elif node.right is not None and policy.go_right(node, state):
                stack.append((node.right, _GO_LEFT, state))
        self.close()
        return None

    def _advance_back(self) -> Optional[_Node]:
        stack = self._back
        policy = self._policy
        while stack:
            node, action, state = stack.pop()
            if action is _GO_RIGHT:
                stack.append((node, _GO_MIDDLE, state))
                if node.right is not None and policy.go_right(node, state):
                    stack.append((node.right, _GO_RIGHT, state))
            elif action is _GO_MIDDLE:
                stack.append((node, _VISIT, state))
                if node.middle is not None:
                    child_state = policy.descend(node, state)
                    if child_state is not None:
                        stack.append((node.middle, _GO_RIGHT, child_state))
            elif action is _VISIT:
                if node is self._last_front:
                    break
                stack.append((node, _GO_LEFT, state))
                if node.is_end and policy.accept(node, state):
                    self._last_back = node
                    self._back_key = self._path(stack, (_VISIT, _GO_LEFT))
                    return node
            elif node.left is not None and policy.go_left(node, state):
                stack.append((node.left, _GO_RIGHT, state))
        self.close()
        return None
