"""REST scenarios for dashboard menus."""

API = "/api/v1/dashboard-menus"


def labels(items):
    return [item["key"] for item in items]


def test_role_gated_menu_hidden_from_other_roles(client, headers, make_menu):
    make_menu(key="home")
    make_menu(key="reports", required_roles=["Manager"])

    r = client.get(f"{API}/user-menus", headers=headers("user"))
    assert r.status_code == 200
    assert labels(r.json["items"]) == ["home"]

    r = client.get(f"{API}/user-menus", headers=headers("manager"))
    assert labels(r.json["items"]) == ["home", "reports"]


def test_permission_and_feature_gates(app, client, headers, tenant_id, make_menu):
    make_menu(key="pages-admin", required_permissions=["pages:write"])
    make_menu(key="shop", feature_flag="ecommerce")

    r = client.get(f"{API}/user-menus", headers=headers("user"))
    assert labels(r.json["items"]) == []

    r = client.get(f"{API}/user-menus", headers=headers("editor"))
    assert labels(r.json["items"]) == ["pages-admin"]

    from navtree.extensions import db
    from navtree.models.tenant import Tenant

    with app.app_context():
        db.session.get(Tenant, tenant_id).enable_ecommerce = True
        db.session.commit()

    r = client.get(f"{API}/user-menus", headers=headers("editor"))
    assert labels(r.json["items"]) == ["pages-admin", "shop"]


def test_children_nest_and_follow_hidden_parent(client, headers, make_menu):
    settings = make_menu(key="settings-menu")
    make_menu(key="billing", parent_id=settings["id"])
    admin = make_menu(key="admin-tools", required_roles=["Admin"])
    make_menu(key="audit", parent_id=admin["id"])

    r = client.get(f"{API}/user-menus", headers=headers("user"))

    items = r.json["items"]
    assert labels(items) == ["settings-menu"]
    assert labels(items[0]["children"]) == ["billing"]


def test_reorder_swaps_siblings(client, headers, make_menu):
    m1 = make_menu(key="m1")
    m2 = make_menu(key="m2")

    r = client.post(
        f"{API}/reorder",
        json={"updates": [{"id": m1["id"], "order": 1}, {"id": m2["id"], "order": 0}]},
        headers=headers("admin"),
    )
    assert r.status_code == 200

    r = client.get(f"{API}/user-menus", headers=headers("admin"))
    assert labels(r.json["items"]) == ["m2", "m1"]


def test_reorder_with_unknown_id_changes_nothing(client, headers, make_menu):
    m1 = make_menu(key="m1")
    m2 = make_menu(key="m2")

    r = client.post(
        f"{API}/reorder",
        json={"updates": [{"id": m2["id"], "order": 0}, {"id": "ghost", "order": 1}]},
        headers=headers("admin"),
    )
    assert r.status_code == 404

    r = client.get(f"{API}/{m2['id']}", headers=headers("admin"))
    assert r.json["order"] == m2["order"]
    assert m1["order"] < m2["order"]


def test_cycle_guard_on_menus(client, headers, make_menu):
    top = make_menu(key="top")
    mid = make_menu(key="mid", parent_id=top["id"])
    leaf = make_menu(key="leaf", parent_id=mid["id"])

    r = client.patch(f"{API}/{top['id']}", json={"parent_id": leaf["id"]}, headers=headers("admin"))
    assert r.status_code == 400
    assert "circular reference" in r.json["message"]

    r = client.patch(f"{API}/{leaf['id']}", json={"parent_id": None}, headers=headers("admin"))
    assert r.status_code == 200
    assert r.json["parent_id"] is None


def test_delete_blocked_while_children_exist(client, headers, make_menu):
    parent = make_menu(key="parent")
    make_menu(key="child", parent_id=parent["id"])

    r = client.delete(f"{API}/{parent['id']}", headers=headers("admin"))
    assert r.status_code == 400
    assert r.json["error"] == "ChildrenExist"


def test_status_actions(client, headers, make_menu):
    menu = make_menu(key="toggle-me")

    r = client.patch(f"{API}/{menu['id']}/unpublish", headers=headers("admin"))
    assert r.json["status"] == "INACTIVE"

    r = client.get(f"{API}/user-menus", headers=headers("admin"))
    assert labels(r.json["items"]) == []

    r = client.get(f"{API}/hierarchy?preview=true", headers=headers("admin"))
    assert labels(r.json["items"]) == ["toggle-me"]

    r = client.patch(f"{API}/{menu['id']}/toggle", headers=headers("admin"))
    assert r.json["status"] == "ACTIVE"

    # Already active: succeeds without change
    r = client.patch(f"{API}/{menu['id']}/publish", headers=headers("admin"))
    assert r.status_code == 200
    assert r.json["status"] == "ACTIVE"

    r = client.patch(f"{API}/{menu['id']}/explode", headers=headers("admin"))
    assert r.status_code == 400


def test_bulk_deactivate_partial(client, headers, make_menu):
    active = make_menu(key="active")
    inactive = make_menu(key="inactive", status="INACTIVE")

    r = client.post(
        f"{API}/bulk",
        json={"ids": [active["id"], inactive["id"], "ghost"], "action": "unpublish"},
        headers=headers("admin"),
    )

    assert r.json["succeeded"] == [active["id"], inactive["id"]]
    assert [item["id"] for item in r.json["failed"]] == ["ghost"]
    assert r.json["failed"][0]["error"] == "NotFound"

    r = client.get(f"{API}?status=INACTIVE", headers=headers("admin"))
    assert sorted(labels(r.json["items"])) == ["active", "inactive"]


def test_key_rules(client, headers, make_menu):
    make_menu(key="reports")

    # Reserved page routes are fine as menu keys
    make_menu(key="dashboard")

    r = client.post(API, json={"key": "reports", "label": "Again", "route": "/x", "page_type": "CUSTOM"}, headers=headers("admin"))
    assert r.status_code == 409
    assert r.json["suggested_slug"] == "reports-2"

    r = client.post(f"{API}/validate-key", json={"key": "reports"}, headers=headers("admin"))
    assert r.json["is_valid"] is False
    assert r.json["suggested_key"] == "reports-2"

    r = client.post(f"{API}/validate-key", json={"key": "Bad Key"}, headers=headers("admin"))
    assert r.json["is_valid"] is False


def test_page_type_requirements(client, headers):
    body = {"key": "widgets", "label": "Widgets", "route": "/dashboard/widgets", "page_type": "WIDGET_BASED"}

    r = client.post(API, json=body, headers=headers("admin"))
    assert r.status_code == 400
    assert "page_identifier" in r.json["message"]

    body["page_identifier"] = "sales-overview"
    assert client.post(API, json=body, headers=headers("admin")).status_code == 201


def test_route_lookup(client, headers, make_menu):
    make_menu(key="sales", route="/dashboard/sales", page_type="WIDGET_BASED", page_identifier="sales")
    make_menu(key="payroll", route="/dashboard/payroll", required_roles=["Manager"])

    r = client.get(f"{API}/route?path=/dashboard/sales", headers=headers("user"))
    assert r.status_code == 200
    assert r.json["config"]["page_identifier"] == "sales"

    r = client.get(f"{API}/route?path=/dashboard/payroll", headers=headers("user"))
    assert r.status_code == 403

    r = client.get(f"{API}/route?path=/nowhere", headers=headers("user"))
    assert r.status_code == 404


def test_admin_list_requires_read_permission(client, headers, make_menu):
    make_menu(key="one")
    make_menu(key="two", status="INACTIVE")

    r = client.get(API, headers=headers("manager"))
    assert r.status_code == 200
    assert r.json["pagination"]["total"] == 2

    r = client.get(f"{API}?status=INACTIVE", headers=headers("manager"))
    assert labels(r.json["items"]) == ["two"]

    assert client.get(API, headers=headers("editor")).status_code == 403
    assert client.get(f"{API}/user-menus", headers=headers()).status_code == 401
