import pytest

from navtree.domain.exceptions import CircularReferenceError, SelfParentError
from navtree.domain.invariants.tree import (
    ancestor_ids,
    assert_forest,
    assert_parent_assignment,
    depth_of,
    descendant_ids,
)

# a -> b -> c, d is a separate root
PARENTS = {"a": None, "b": "a", "c": "b", "d": None}


def test_ancestors_nearest_first():
    assert ancestor_ids("c", PARENTS) == ["b", "a"]
    assert depth_of("c", PARENTS) == 2
    assert depth_of("a", PARENTS) == 0


def test_descendants():
    assert descendant_ids("a", PARENTS) == {"b", "c"}
    assert descendant_ids("c", PARENTS) == set()


def test_self_parent_rejected():
    with pytest.raises(SelfParentError):
        assert_parent_assignment(entity_id="a", proposed_parent_id="a", parent_of=PARENTS)


@pytest.mark.parametrize("proposed", ["b", "c"])
def test_moving_under_own_descendant_is_circular(proposed):
    with pytest.raises(CircularReferenceError) as exc:
        assert_parent_assignment(entity_id="a", proposed_parent_id=proposed, parent_of=PARENTS)

    assert "circular reference" in exc.value.message


@pytest.mark.parametrize("proposed", [None, "d"])
def test_legal_moves(proposed):
    assert_parent_assignment(entity_id="a", proposed_parent_id=proposed, parent_of=PARENTS)


def test_new_entity_skips_cycle_check():
    assert_parent_assignment(entity_id=None, proposed_parent_id="c", parent_of=PARENTS)


def test_existing_cycle_is_detected_not_looped():
    corrupt = {"x": "y", "y": "x", "z": "x"}

    with pytest.raises(CircularReferenceError):
        ancestor_ids("z", corrupt)

    with pytest.raises(CircularReferenceError):
        assert_forest(corrupt)


def test_accepted_moves_keep_a_forest():
    parents = dict(PARENTS)
    moves = [("d", "c"), ("a", "d"), ("b", None), ("a", "b"), ("c", "a"), ("b", "c")]

    for entity_id, parent_id in moves:
        try:
            assert_parent_assignment(entity_id=entity_id, proposed_parent_id=parent_id, parent_of=parents)
        except (CircularReferenceError, SelfParentError):
            continue
        parents[entity_id] = parent_id
        assert_forest(parents)
