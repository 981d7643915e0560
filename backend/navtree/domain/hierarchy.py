from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional


@dataclass
class TreeNode:
    item: Any
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def id(self):
        return self.item.id


def sibling_sort_key(item, order_attr: str = "order"):
    """
    Stable sibling ordering: order, then creation time, then id.
    """
    created_at = getattr(item, "created_at", None) or datetime.min
    if created_at.tzinfo is not None:
        created_at = created_at.replace(tzinfo=None)
    return (getattr(item, order_attr) or 0, created_at, str(item.id))


def index_children(items: Iterable[Any]) -> Dict[Optional[str], List[Any]]:
    """
    Group items by parent_id in a single pass.
    """
    groups: Dict[Optional[str], List[Any]] = {}
    for item in items:
        groups.setdefault(item.parent_id, []).append(item)
    return groups


def build_hierarchy(items: Iterable[Any], *, order_attr: str = "order") -> List[TreeNode]:
    """
    Turn a flat list of entities into an ordered forest.

    Items must expose id, parent_id, created_at and the order attribute.
    The input is expected to be access-filtered already: an item whose
    parent is not part of the input is an orphan and is dropped together
    with its subtree.
    """
    groups = index_children(items)

    for siblings in groups.values():
        siblings.sort(key=lambda item: sibling_sort_key(item, order_attr))

    roots = [TreeNode(item) for item in groups.get(None, [])]

    # Iterative walk so deep trees cannot hit the recursion limit
    stack = list(roots)
    seen = set()
    while stack:
        node = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        node.children = [TreeNode(child) for child in groups.get(node.id, [])]
        stack.extend(node.children)

    return roots
