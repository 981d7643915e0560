"""REST scenarios for custom pages."""

API = "/api/v1/pages"


def test_hierarchy_nests_child_under_parent(client, headers, make_page):
    about = make_page(title="About", slug="about")
    team = make_page(title="Team", slug="team", parent_id=about["id"])

    r = client.get(f"{API}/hierarchy", headers=headers())

    assert r.status_code == 200
    items = r.json["items"]
    assert [node["id"] for node in items] == [about["id"]]
    assert [node["id"] for node in items[0]["children"]] == [team["id"]]
    assert items[0]["children"][0]["children"] == []


def test_hierarchy_hides_drafts_and_their_children(client, headers, make_page):
    make_page(title="Live", slug="live")
    draft = make_page(title="Draft", slug="draft", status="DRAFT")
    make_page(title="Under Draft", slug="under-draft", parent_id=draft["id"])

    r = client.get(f"{API}/hierarchy", headers=headers())
    assert [node["slug"] for node in r.json["items"]] == ["live"]

    r = client.get(f"{API}/hierarchy?preview=true", headers=headers("editor"))
    assert sorted(node["slug"] for node in r.json["items"]) == ["draft", "live"]


def test_private_page_needs_login(client, headers, make_page):
    make_page(title="Members", slug="members", visibility="PRIVATE")

    assert client.get(f"{API}/slug/members", headers=headers()).status_code == 404
    assert client.get(f"{API}/slug/members", headers=headers("user")).status_code == 200


def test_reparenting_under_own_child_is_rejected(client, headers, make_page):
    parent = make_page(title="Parent", slug="parent")
    child = make_page(title="Child", slug="child", parent_id=parent["id"])

    r = client.patch(f"{API}/{parent['id']}", json={"parent_id": child["id"]}, headers=headers("admin"))

    assert r.status_code == 400
    assert r.json["error"] == "CircularReference"
    assert "circular reference" in r.json["message"]

    r = client.get(f"{API}/{parent['id']}", headers=headers("admin"))
    assert r.json["parent_id"] is None


def test_page_cannot_be_its_own_parent(client, headers, make_page):
    page = make_page(title="Solo", slug="solo")

    r = client.patch(f"{API}/{page['id']}", json={"parent_id": page["id"]}, headers=headers("admin"))

    assert r.status_code == 400
    assert r.json["error"] == "SelfParent"


def test_unknown_parent_is_not_found(client, headers):
    r = client.post(API, json={"title": "Lost", "parent_id": "missing"}, headers=headers("admin"))
    assert r.status_code == 404


def test_slug_change_leaves_redirect(client, headers, make_page):
    page = make_page(title="About", slug="about")

    r = client.patch(f"{API}/{page['id']}", json={"slug": "about-us"}, headers=headers("admin"))
    assert r.status_code == 200
    assert r.json["slug"] == "about-us"

    r = client.get(f"{API}/slug/about", headers=headers())
    assert r.status_code == 200
    assert r.json["id"] == page["id"]
    assert r.json["slug"] == "about-us"
    assert r.json["redirected_from"] == "about"

    r = client.get(f"{API}/slug/about-us", headers=headers())
    assert r.json["redirected_from"] is None


def test_chained_renames_resolve_to_current_slug(client, headers, make_page):
    page = make_page(title="About", slug="about")

    for slug in ("about-us", "company"):
        r = client.patch(f"{API}/{page['id']}", json={"slug": slug}, headers=headers("admin"))
        assert r.status_code == 200

    for old in ("about", "about-us"):
        r = client.get(f"{API}/slug/{old}", headers=headers())
        assert r.status_code == 200
        assert r.json["slug"] == "company"


def test_never_published_page_leaves_no_redirect(client, headers, make_page):
    page = make_page(title="Draft", slug="draft-one", status="DRAFT")

    client.patch(f"{API}/{page['id']}", json={"slug": "draft-two"}, headers=headers("admin"))

    r = client.get(f"{API}/slug/draft-one?preview=true", headers=headers("admin"))
    assert r.status_code == 404


def test_publishing_and_renaming_together_leaves_no_redirect(client, headers, make_page):
    page = make_page(title="Secret", slug="secret-draft", status="DRAFT")

    r = client.patch(
        f"{API}/{page['id']}",
        json={"status": "PUBLISHED", "slug": "launch"},
        headers=headers("admin"),
    )
    assert r.status_code == 200
    assert r.json["slug"] == "launch"

    assert client.get(f"{API}/slug/secret-draft", headers=headers()).status_code == 404
    assert client.get(f"{API}/slug/launch", headers=headers()).status_code == 200


def test_failed_redirect_write_does_not_block_slug_change(client, headers, make_page, monkeypatch, caplog):
    from contextlib import contextmanager

    from sqlalchemy.exc import SQLAlchemyError

    from navtree.application.pages import redirects

    @contextmanager
    def broken_savepoint():
        raise SQLAlchemyError("redirect table unavailable")
        yield

    page = make_page(title="About", slug="about")
    monkeypatch.setattr(redirects, "savepoint", broken_savepoint)

    with caplog.at_level("WARNING"):
        r = client.patch(f"{API}/{page['id']}", json={"slug": "about-us"}, headers=headers("admin"))

    assert r.status_code == 200
    assert r.json["slug"] == "about-us"
    assert any(
        record.levelname == "WARNING" and "Redirect bookkeeping failed" in record.getMessage()
        for record in caplog.records
    )

    assert client.get(f"{API}/slug/about-us", headers=headers()).status_code == 200
    assert client.get(f"{API}/slug/about", headers=headers()).status_code == 404


def test_claiming_an_old_slug_replaces_the_redirect(client, headers, make_page):
    page = make_page(title="About", slug="about")
    client.patch(f"{API}/{page['id']}", json={"slug": "about-us"}, headers=headers("admin"))

    newcomer = make_page(title="About", slug="about")

    r = client.get(f"{API}/slug/about", headers=headers())
    assert r.json["id"] == newcomer["id"]
    assert r.json["redirected_from"] is None


def test_delete_blocked_while_children_exist(client, headers, make_page):
    parent = make_page(title="Parent", slug="parent")
    child = make_page(title="Child", slug="child", parent_id=parent["id"])

    r = client.delete(f"{API}/{parent['id']}", headers=headers("admin"))
    assert r.status_code == 400
    assert "child pages" in r.json["message"]

    assert client.delete(f"{API}/{child['id']}", headers=headers("admin")).status_code == 200
    assert client.delete(f"{API}/{parent['id']}", headers=headers("admin")).status_code == 200
    assert client.get(f"{API}/{parent['id']}", headers=headers("admin")).status_code == 404


def test_reorder_is_all_or_nothing(client, headers, make_page):
    first = make_page(title="First", slug="first")
    second = make_page(title="Second", slug="second")

    r = client.post(
        f"{API}/reorder",
        json={"updates": [{"id": first["id"], "order": 5}, {"id": "missing", "order": 0}]},
        headers=headers("admin"),
    )
    assert r.status_code == 404

    r = client.get(f"{API}/{first['id']}", headers=headers("admin"))
    assert r.json["display_order"] == first["display_order"]

    r = client.post(
        f"{API}/reorder",
        json={"updates": [{"id": first["id"], "order": 1}, {"id": second["id"], "order": 0}]},
        headers=headers("admin"),
    )
    assert r.status_code == 200

    r = client.get(f"{API}/hierarchy", headers=headers())
    assert [node["slug"] for node in r.json["items"]] == ["second", "first"]


def test_reorder_rejects_negative_order(client, headers, make_page):
    page = make_page(title="Page", slug="page-a")

    r = client.post(f"{API}/reorder", json={"updates": [{"id": page["id"], "order": -1}]}, headers=headers("admin"))
    assert r.status_code == 400


def test_bulk_reports_partial_success(client, headers, make_page):
    draft = make_page(title="Draft", slug="bulk-draft", status="DRAFT")
    live = make_page(title="Live", slug="bulk-live")
    archived = make_page(title="Old", slug="bulk-old", status="ARCHIVED")

    r = client.post(
        f"{API}/bulk",
        json={"ids": [draft["id"], live["id"], archived["id"], "missing"], "action": "publish"},
        headers=headers("admin"),
    )

    assert r.status_code == 200
    assert r.json["action"] == "publish"
    # Already-live pages count as published, not as failures
    assert r.json["succeeded"] == [draft["id"], live["id"]]
    failed = {item["id"]: item for item in r.json["failed"]}
    assert set(failed) == {archived["id"], "missing"}
    assert failed[archived["id"]]["error"] == "ValidationError"
    assert failed["missing"]["error"] == "NotFound"

    r = client.get(f"{API}/{draft['id']}", headers=headers("admin"))
    assert r.json["status"] == "PUBLISHED"


def test_bulk_delete_handles_parent_with_children(client, headers, make_page):
    parent = make_page(title="Parent", slug="bulk-parent")
    child = make_page(title="Child", slug="bulk-child", parent_id=parent["id"])

    r = client.post(
        f"{API}/bulk",
        json={"ids": [parent["id"], child["id"]], "action": "delete"},
        headers=headers("admin"),
    )

    assert sorted(r.json["succeeded"]) == sorted([parent["id"], child["id"]])
    assert r.json["failed"] == []


def test_bulk_delete_requires_delete_permission(client, headers, make_page):
    page = make_page(title="Keep", slug="keep")

    r = client.post(f"{API}/bulk", json={"ids": [page["id"]], "action": "delete"}, headers=headers("editor"))
    assert r.status_code == 403


def test_validate_slug(client, headers, make_page):
    make_page(title="About", slug="about")

    def check(slug, **extra):
        return client.post(f"{API}/validate-slug", json={"slug": slug, **extra}, headers=headers("admin")).json

    assert check("contact") == {"is_valid": True, "message": "Slug is available"}

    taken = check("about")
    assert taken["is_valid"] is False
    assert taken["suggested_slug"] == "about-2"

    reserved = check("dashboard")
    assert reserved["is_valid"] is False
    assert "conflicts with system route" in reserved["message"]

    assert check("Not Valid")["is_valid"] is False


def test_create_rejects_reserved_and_duplicate_slugs(client, headers, make_page):
    r = client.post(API, json={"title": "Admin", "slug": "admin"}, headers=headers("admin"))
    assert r.status_code == 400
    assert r.json["error"] == "ReservedRoute"

    make_page(title="About", slug="about")
    r = client.post(API, json={"title": "About", "slug": "about"}, headers=headers("admin"))
    assert r.status_code == 409
    assert r.json["suggested_slug"] == "about-2"


def test_slug_generated_from_title(client, headers):
    r = client.post(API, json={"title": "Our Story!"}, headers=headers("admin"))

    assert r.status_code == 201
    assert r.json["slug"] == "our-story"
    assert r.json["status"] == "DRAFT"


def test_stale_update_is_rejected(client, headers, make_page):
    page = make_page(title="Page", slug="locked")

    h = headers("admin")
    h["If-Unmodified-Since"] = "Mon, 01 Jan 2001 00:00:00 GMT"
    r = client.patch(f"{API}/{page['id']}", json={"title": "New"}, headers=h)

    assert r.status_code == 409
    assert r.json["error"] == "ConcurrencyConflict"


def test_lifecycle_routes(client, headers, make_page):
    page = make_page(title="Page", slug="cycle", status="DRAFT")

    r = client.patch(f"{API}/{page['id']}/publish", headers=headers("admin"))
    assert r.json["status"] == "PUBLISHED"
    assert r.json["published_at"] is not None

    r = client.patch(f"{API}/{page['id']}/publish", headers=headers("admin"))
    assert r.status_code == 200
    assert r.json["status"] == "PUBLISHED"
    assert r.json["published_at"] is not None

    r = client.patch(f"{API}/{page['id']}/archive", headers=headers("admin"))
    assert r.json["status"] == "ARCHIVED"

    r = client.patch(f"{API}/{page['id']}/publish", headers=headers("admin"))
    assert r.status_code == 400


def test_list_filters_for_readers_and_anonymous(client, headers, make_page):
    make_page(title="Live", slug="live")
    make_page(title="Draft", slug="draft", status="DRAFT")

    r = client.get(API, headers=headers("editor"))
    assert r.json["pagination"]["total"] == 2

    r = client.get(f"{API}?status=DRAFT", headers=headers("editor"))
    assert [p["slug"] for p in r.json["items"]] == ["draft"]

    r = client.get(API, headers=headers())
    assert [p["slug"] for p in r.json["items"]] == ["live"]


def test_writes_require_authentication_and_permission(client, headers):
    body = {"title": "Nope", "slug": "nope"}

    assert client.post(API, json=body, headers=headers()).status_code == 401
    assert client.post(API, json=body, headers=headers("user")).status_code == 403


def test_disabled_cms_feature_is_forbidden(app, client, headers, tenant_id):
    from navtree.extensions import db
    from navtree.models.tenant import Tenant

    with app.app_context():
        db.session.get(Tenant, tenant_id).enable_cms = False
        db.session.commit()

    r = client.post(API, json={"title": "Blocked"}, headers=headers("admin"))
    assert r.status_code == 403
