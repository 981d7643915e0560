from datetime import datetime, timedelta
from types import SimpleNamespace

from navtree.domain.hierarchy import build_hierarchy

T0 = datetime(2024, 1, 1)


def item(id, parent_id=None, order=0, minutes=0):
    return SimpleNamespace(id=id, parent_id=parent_id, order=order, created_at=T0 + timedelta(minutes=minutes))


def ids(nodes):
    return [node.id for node in nodes]


def test_parent_child_nesting():
    roots = build_hierarchy([item("c", parent_id="a"), item("a")])

    assert ids(roots) == ["a"]
    assert ids(roots[0].children) == ["c"]
    assert roots[0].children[0].children == []


def test_siblings_sorted_by_order_then_created_at():
    roots = build_hierarchy([
        item("late", order=1, minutes=5),
        item("early", order=1, minutes=1),
        item("first", order=0, minutes=9),
    ])

    assert ids(roots) == ["first", "early", "late"]


def test_orphans_are_dropped_with_their_subtree():
    # "hidden" was filtered out upstream, its child and grandchild go with it
    roots = build_hierarchy([
        item("root"),
        item("child", parent_id="hidden"),
        item("grandchild", parent_id="child"),
    ])

    assert ids(roots) == ["root"]
    assert roots[0].children == []


def test_every_item_appears_once_and_under_its_parent():
    items = [item("a"), item("b", "a"), item("c", "a", order=1), item("d", "b"), item("e")]
    roots = build_hierarchy(items)

    seen = []

    def walk(nodes, parent_id):
        for node in nodes:
            assert node.item.parent_id == parent_id
            seen.append(node.id)
            walk(node.children, node.id)

    walk(roots, None)
    assert sorted(seen) == ["a", "b", "c", "d", "e"]


def test_custom_order_attribute():
    pages = [
        SimpleNamespace(id="x", parent_id=None, display_order=2, created_at=T0),
        SimpleNamespace(id="y", parent_id=None, display_order=1, created_at=T0),
    ]

    assert ids(build_hierarchy(pages, order_attr="display_order")) == ["y", "x"]


def test_empty_input():
    assert build_hierarchy([]) == []
