import io

from ternary_tree import Tst


def _render(tree):
    buf = io.BytesIO()
    tree.pretty_print(buf)
    return buf.getvalue().decode("utf-8")


def test_empty_tree():
    assert _render(Tst()) == "digraph {\nnode [shape=record]\n}\n"


def test_single_key():
    t = Tst()
    t.insert("ab", 1)
    assert _render(t).splitlines() == [
        "digraph {",
        "node [shape=record]",
        'N0 [label="a|○"]',
        "N0 -> N1 [label=m, style=bold]",
        'N1 [label="b|●"]',
        "}",
    ]


def test_sibling_edges():
    t = Tst()
    for key in ["b", "a", "c"]:
        t.insert(key, key)
    lines = _render(t).splitlines()
    assert "N0 -> N1 [label=l]" in lines
    assert "N0 -> N2 [label=r]" in lines
    assert 'N1 [label="a|●"]' in lines
    assert 'N2 [label="c|●"]' in lines


def test_one_record_per_node(abc_tree):
    text = _render(abc_tree)
    nodes = abc_tree.stats().count.nodes
    assert text.count('[label="') == nodes
    assert text.count(" -> ") == nodes - 1
    assert text.count("●") == len(abc_tree)


def test_record_specials_are_escaped():
    t = Tst()
    t.insert("|", 1)
    t.insert('"', 2)
    text = _render(t)
    assert 'label="\\||●"' in text
    assert 'label="\\"|●"' in text


def test_space_and_newline_are_escaped():
    t = Tst()
    t.insert(" ", 1)
    t.insert("\n", 2)
    lines = _render(t).splitlines()
    assert 'N0 [label="\\ |●"]' in lines
    assert 'N1 [label="\\n|●"]' in lines
