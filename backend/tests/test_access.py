import pytest

from navtree.domain.access import (
    ANONYMOUS,
    AccessRule,
    CallerContext,
    filter_visible,
    has_permission,
    is_visible,
)


def caller(**kwargs):
    kwargs.setdefault("user_id", "u1")
    return CallerContext(**kwargs)


@pytest.mark.parametrize("held, required, expected", [
    ({"pages:read"}, "pages:read", True),
    ({"pages:*"}, "pages:delete", True),
    ({"*:*"}, "menus:write", True),
    ({"menus:*"}, "pages:read", False),
    (set(), "pages:read", False),
])
def test_has_permission(held, required, expected):
    assert has_permission(held, required) is expected


def test_unrestricted_live_entity_is_visible_to_anyone():
    assert is_visible(AccessRule(), ANONYMOUS)


def test_status_gate():
    draft = AccessRule(live=False)

    assert not is_visible(draft, caller())
    assert is_visible(draft, caller().with_admin_read())


def test_private_requires_authentication():
    private = AccessRule(requires_auth=True)

    assert not is_visible(private, ANONYMOUS)
    assert is_visible(private, caller())


def test_any_listed_permission_passes():
    rule = AccessRule(permissions=frozenset({"reports:read", "billing:read"}))

    assert is_visible(rule, caller(permissions=frozenset({"billing:read"})))
    assert is_visible(rule, caller(permissions=frozenset({"*:*"})))
    assert not is_visible(rule, caller(permissions=frozenset({"pages:read"})))


def test_role_gate():
    managers_only = AccessRule(roles=frozenset({"Manager"}))

    assert is_visible(managers_only, caller(roles=frozenset({"Manager"})))
    assert not is_visible(managers_only, caller(roles=frozenset({"User"})))


def test_feature_flag_gate_uses_supplied_lookup():
    rule = AccessRule(feature_flag="beta")

    assert is_visible(rule, caller(feature_enabled=lambda name: name == "beta"))
    assert not is_visible(rule, caller(feature_enabled=lambda name: False))
    assert not is_visible(rule, ANONYMOUS)


def test_gates_are_a_conjunction():
    rule = AccessRule(
        requires_auth=True,
        permissions=frozenset({"menus:read"}),
        roles=frozenset({"Manager"}),
    )
    good = caller(permissions=frozenset({"menus:read"}), roles=frozenset({"Manager"}))

    assert is_visible(rule, good)
    assert not is_visible(rule, caller(permissions=frozenset({"menus:read"}), roles=frozenset({"User"})))
    assert not is_visible(rule, caller(roles=frozenset({"Manager"})))


def test_predicate_is_pure():
    rule = AccessRule(roles=frozenset({"Manager"}))
    who = caller(roles=frozenset({"Manager"}))

    assert [is_visible(rule, who) for _ in range(3)] == [True, True, True]
    assert rule == AccessRule(roles=frozenset({"Manager"}))


def test_filter_keeps_input_order():
    rules = [AccessRule(), AccessRule(live=False), AccessRule(requires_auth=True)]

    assert filter_visible(rules, ANONYMOUS) == [rules[0]]
    assert filter_visible(rules, caller()) == [rules[0], rules[2]]
