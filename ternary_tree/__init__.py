"""Ternary search tree: an ordered map from string keys to values."""

from .cursor import SearchPolicy, TstIterator
from .tst import BorrowError, CountStat, DistStat, KeyLenStat, Tst, TreeStats

__all__ = [
    "BorrowError",
    "CountStat",
    "DistStat",
    "KeyLenStat",
    "SearchPolicy",
    "Tst",
    "TreeStats",
    "TstIterator",
]
