from typing import Dict, List, Mapping, Optional, Set

from navtree.domain.exceptions import CircularReferenceError, SelfParentError

ParentMap = Mapping[str, Optional[str]]


def ancestor_ids(entity_id: str, parent_of: ParentMap) -> List[str]:
    """
    Ancestors of entity_id, nearest first.

    The walk is bounded by the number of known entities so a graph that is
    already corrupt cannot loop forever.
    """
    chain: List[str] = []
    current = parent_of.get(entity_id)
    steps = 0
    while current is not None:
        if steps > len(parent_of):
            raise CircularReferenceError(
                f"Existing circular reference detected above '{entity_id}'"
            )
        chain.append(current)
        current = parent_of.get(current)
        steps += 1
    return chain


def descendant_ids(entity_id: str, parent_of: ParentMap) -> Set[str]:
    children: Dict[Optional[str], List[str]] = {}
    for child_id, parent_id in parent_of.items():
        children.setdefault(parent_id, []).append(child_id)

    found: Set[str] = set()
    stack = list(children.get(entity_id, []))
    while stack:
        current = stack.pop()
        if current in found or current == entity_id:
            continue
        found.add(current)
        stack.extend(children.get(current, []))
    return found


def depth_of(entity_id: str, parent_of: ParentMap) -> int:
    return len(ancestor_ids(entity_id, parent_of))


def assert_parent_assignment(
    *,
    entity_id: Optional[str],
    proposed_parent_id: Optional[str],
    parent_of: ParentMap,
    label: str = "Item",
) -> None:
    """
    Guards parent_id changes. Must run before anything is written.

    - None parent (move to root) is always allowed
    - an entity cannot be its own parent
    - the proposed parent cannot sit below the entity, which is checked by
      walking up from the proposed parent and, independently, by collecting
      the entity's descendants
    """
    if proposed_parent_id is None or entity_id is None:
        return

    if proposed_parent_id == entity_id:
        raise SelfParentError(f"{label} cannot be its own parent")

    if entity_id in ancestor_ids(proposed_parent_id, parent_of):
        raise CircularReferenceError(
            "Cannot set parent because it would create a circular reference"
        )

    if proposed_parent_id in descendant_ids(entity_id, parent_of):
        raise CircularReferenceError(
            "Cannot set parent because it would create a circular reference"
        )


def assert_forest(parent_of: ParentMap) -> None:
    """Every parent chain terminates at a root within len(parent_of) steps."""
    for entity_id in parent_of:
        ancestor_ids(entity_id, parent_of)
