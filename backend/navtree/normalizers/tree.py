from typing import Any, Callable, Dict, List

from navtree.domain.hierarchy import TreeNode


def normalize_tree(
    nodes: List[TreeNode],
    normalize_fn: Callable[[Any], Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Serialize a forest; every node gets a (possibly empty) children list.
    """
    def convert(node: TreeNode) -> Dict[str, Any]:
        data = normalize_fn(node.item)
        data["children"] = [convert(child) for child in node.children]
        return data

    return [convert(node) for node in nodes]
