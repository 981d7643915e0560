"""Shared fixtures: an app on in-memory SQLite with one seeded tenant."""
import pytest
from flask_jwt_extended import create_access_token

from navtree import create_app
from navtree.extensions import db
from navtree.models.role import Role
from navtree.models.tenant import Tenant
from navtree.models.user import User

ROLES = {
    "Admin": ["*:*"],
    "Manager": ["pages:read", "pages:write", "menus:read", "menus:write"],
    "Editor": ["pages:read", "pages:write"],
    "User": ["menus:read"],
}

USERS = {
    "admin": "Admin",
    "manager": "Manager",
    "editor": "Editor",
    "user": "User",
}


@pytest.fixture()
def app():
    app = create_app("testing")

    with app.app_context():
        db.create_all()

        tenant = Tenant(name="Acme", slug="acme")
        db.session.add(tenant)
        db.session.flush()

        for name, permissions in ROLES.items():
            db.session.add(Role(tenant_id=tenant.id, name=name, permissions=permissions))

        users = {}
        for handle, role in USERS.items():
            user = User(tenant_id=tenant.id, email=f"{handle}@example.com", role=role)
            user.set_password("pw")
            db.session.add(user)
            users[handle] = user

        db.session.commit()

        app.config["SEED"] = {
            "tenant_id": tenant.id,
            "users": {handle: (user.id, user.role) for handle, user in users.items()},
        }

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def tenant_id(app):
    return app.config["SEED"]["tenant_id"]


@pytest.fixture()
def headers(app, tenant_id):
    """headers("admin") -> tenant + bearer headers, headers() -> tenant only."""
    def build(handle=None):
        result = {"X-Tenant-ID": tenant_id}
        if handle is None:
            return result

        user_id, role = app.config["SEED"]["users"][handle]
        with app.app_context():
            token = create_access_token(
                identity=user_id,
                additional_claims={"tenant_id": tenant_id, "role": role},
            )
        result["Authorization"] = f"Bearer {token}"
        return result

    return build


@pytest.fixture()
def make_page(client, headers):
    def create(**data):
        data.setdefault("status", "PUBLISHED")
        r = client.post("/api/v1/pages", json=data, headers=headers("admin"))
        assert r.status_code == 201, r.json
        return r.json

    return create


@pytest.fixture()
def make_menu(client, headers):
    def create(**data):
        data.setdefault("label", data.get("key", "Menu").title())
        data.setdefault("route", f"/dashboard/{data.get('key', 'menu')}")
        data.setdefault("page_type", "CUSTOM")
        r = client.post("/api/v1/dashboard-menus", json=data, headers=headers("admin"))
        assert r.status_code == 201, r.json
        return r.json

    return create
