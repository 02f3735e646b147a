import pytest

from ternary_tree import Tst

# Insertion order matters for tree shape; keep it unsorted.
RANDOM_KEYS = [
    "aba", "ab", "bc", "ac", "abc", "a", "b", "aca",
    "caa", "cbc", "bac", "c", "cca", "aab", "abb", "aa",
]

SORTED_KEYS = sorted(RANDOM_KEYS)


@pytest.fixture
def abc_tree():
    """Sample tree whose values are their own keys."""
    t = Tst()
    for key in RANDOM_KEYS:
        assert t.insert(key, key) is None
    return t


@pytest.fixture
def count_tree():
    """Sample tree whose values are insertion ranks, starting at 1."""
    t = Tst()
    for rank, key in enumerate(RANDOM_KEYS, start=1):
        t.insert(key, rank)
    return t
