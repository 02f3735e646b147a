import pytest

from ternary_tree import Tst, TstIterator

from conftest import SORTED_KEYS


def _drain_back(it):
    values = []
    while True:
        try:
            values.append(it.next_back())
        except StopIteration:
            return values


def test_iterate_over_empty_tree():
    it = Tst().iter()
    for _ in range(2):
        with pytest.raises(StopIteration):
            next(it)
        with pytest.raises(StopIteration):
            it.next_back()
    assert it.current_key() is None
    assert it.current_key_back() is None


def test_iterate_forward(abc_tree):
    it = abc_tree.iter()
    assert next(it) == "a"
    assert next(it) == "aa"
    assert next(it) == "aab"
    assert list(it) == SORTED_KEYS[3:]
    with pytest.raises(StopIteration):
        next(it)


def test_iterate_backward(abc_tree):
    it = abc_tree.iter()
    assert it.next_back() == "cca"
    assert it.next_back() == "cbc"
    assert it.next_back() == "caa"
    assert _drain_back(it) == SORTED_KEYS[::-1][3:]
    with pytest.raises(StopIteration):
        it.next_back()


def test_reversed(abc_tree):
    assert list(reversed(abc_tree.iter())) == SORTED_KEYS[::-1]


def test_sum_of_ranks(count_tree):
    n = len(count_tree)
    assert sum(count_tree) == n * (n + 1) // 2


def test_iterate_from_both_ends(abc_tree):
    it = abc_tree.iter()
    front = [next(it) for _ in range(8)]
    back = [it.next_back() for _ in range(8)]
    assert front == SORTED_KEYS[:8]
    assert back == SORTED_KEYS[8:][::-1]
    with pytest.raises(StopIteration):
        next(it)
    with pytest.raises(StopIteration):
        it.next_back()


def test_alternating_ends_meet_in_the_middle(abc_tree):
    it = abc_tree.iter()
    front, back = [], []
    while True:
        try:
            front.append(next(it))
            back.append(it.next_back())
        except StopIteration:
            break
    assert front + back[::-1] == SORTED_KEYS


def test_backward_exhaustion_ends_forward_too(abc_tree):
    it = abc_tree.iter()
    assert _drain_back(it) == SORTED_KEYS[::-1]
    with pytest.raises(StopIteration):
        next(it)


def test_current_key_forward(abc_tree):
    it = abc_tree.iter()
    assert it.current_key() is None
    for value in it:
        assert it.current_key() == value


def test_current_key_backward(abc_tree):
    it = abc_tree.iter()
    assert it.current_key_back() is None
    for value in reversed(it):
        assert it.current_key_back() == value


def test_iterate_with_complete(abc_tree):
    assert list(Tst().iter_complete("")) == []
    assert list(abc_tree.iter_complete("x")) == []
    assert list(abc_tree.iter_complete("")) == SORTED_KEYS
    assert list(abc_tree.iter_complete("ab")) == ["ab", "aba", "abb", "abc"]

    it = abc_tree.iter_complete("b")
    assert it.next_back() == "bc"
    assert it.current_key_back() == "bc"
    assert next(it) == "b"
    assert it.current_key() == "b"
    assert it.next_back() == "bac"
    assert it.current_key_back() == "bac"
    with pytest.raises(StopIteration):
        next(it)
    with pytest.raises(StopIteration):
        it.next_back()


def test_complete_keys_include_prefix(abc_tree):
    it = abc_tree.iter_complete("ac")
    assert [(v, it.current_key()) for v in it] == [("ac", "ac"), ("aca", "aca")]


def test_iterate_with_neighbor(abc_tree):
    assert list(abc_tree.iter_neighbor("abc", 0)) == ["abc"]
    assert list(abc_tree.iter_neighbor("abc", 1)) == ["aba", "abb", "abc", "cbc"]
    assert list(abc_tree.iter_neighbor("", 2)) == []
    assert list(Tst().iter_neighbor("abc", 2)) == []

    it = abc_tree.iter_neighbor("abc", 2)
    values = list(reversed(it))
    assert values == ["cbc", "bac", "aca", "abc", "abb", "aba", "aab"]


def test_neighbor_keys_from_both_ends(abc_tree):
    it = abc_tree.iter_neighbor("abc", 1)
    assert next(it) == "aba"
    assert it.current_key() == "aba"
    assert it.next_back() == "cbc"
    assert it.current_key_back() == "cbc"
    assert it.next_back() == "abc"
    assert next(it) == "abb"
    with pytest.raises(StopIteration):
        next(it)


def test_iterate_with_crossword(abc_tree):
    assert list(abc_tree.iter_crossword("?a?", "?")) == ["aab", "bac", "caa"]
    assert list(abc_tree.iter_crossword("", "?")) == []
    assert list(abc_tree.iter_crossword("????", "?")) == []

    it = abc_tree.iter_crossword("???", "?")
    assert it.next_back() == "cca"
    assert it.current_key_back() == "cca"
    assert [(v, it.current_key()) for v in it] == [
        (k, k) for k in ["aab", "aba", "abb", "abc", "aca", "bac", "caa", "cbc"]
    ]


def test_iterator_rejects_bad_arguments(abc_tree):
    with pytest.raises(ValueError):
        abc_tree.iter_neighbor("abc", -1)
    with pytest.raises(ValueError):
        abc_tree.iter_crossword("abc", "")
    with pytest.raises(TypeError):
        abc_tree.iter_complete(None)


def test_iterator_needs_a_policy(abc_tree):
    with pytest.raises(TypeError):
        TstIterator(abc_tree, None)


def test_visit_drains_the_remaining_values(abc_tree):
    it = abc_tree.iter_complete("a")
    assert next(it) == "a"
    seen = []
    it.visit(seen.append)
    assert seen == [k for k in SORTED_KEYS if k.startswith("a")][1:]
    with pytest.raises(StopIteration):
        next(it)
    abc_tree.insert("zz", "zz")


def test_visit_mut_replaces_values_and_closes(count_tree):
    it = count_tree.iter_crossword("?", "?")
    it.visit_mut(lambda v: -v)
    assert [count_tree.get(k) for k in ["a", "b", "c"]] == [-6, -7, -12]
    count_tree.insert("zz", 0)


def test_visit_closes_when_action_raises(abc_tree):
    it = abc_tree.iter()

    def fail(value):
        raise LookupError(value)

    with pytest.raises(LookupError):
        it.visit(fail)
    abc_tree.insert("zz", "zz")
    assert len(abc_tree) == 17
