# navtree/api/v1/pages.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required

from navtree.application.pages.bulk_action import bulk_page_action
from navtree.application.pages.create_page import create_page
from navtree.application.pages.delete_page import delete_page
from navtree.application.pages.publish_page import archive_page, publish_page, unpublish_page
from navtree.application.pages.queries import (
    get_page,
    get_page_hierarchy,
    list_pages,
    resolve_page_by_slug,
    validate_page_slug,
)
from navtree.application.pages.reorder_pages import reorder_pages
from navtree.application.pages.update_page import update_page
from navtree.domain.exceptions import PermissionDeniedError
from navtree.normalizers.page import normalize_page, normalize_page_node
from navtree.normalizers.pagination import normalize_pagination
from navtree.normalizers.tree import normalize_tree
from navtree.utils.caller import load_caller, load_viewer
from navtree.utils.decorators import tenant_required, permission_required, feature_enabled
from navtree.utils.optimistic_lock import enforce_optimistic_lock
from navtree.utils.pagination import bool_arg, pagination_args
from . import v1_bp


# ------------------------
# Reads
# ------------------------

@v1_bp.route("/pages", methods=["GET"])
@tenant_required
@feature_enabled("cms")
def list_pages_route():
    tenant = g.current_tenant
    caller = load_caller()
    admin = caller.can("pages:read")
    page, per_page = pagination_args()

    filters = {
        "status": request.args.get("status"),
        "visibility": request.args.get("visibility"),
        "parent_id": request.args.get("parent_id"),
        "show_in_navigation": bool_arg("show_in_navigation"),
        "search": request.args.get("search"),
        "sort_by": request.args.get("sort_by"),
        "sort_order": request.args.get("sort_order"),
    }

    items, total = list_pages(
        tenant_id=tenant.id,
        caller=caller,
        filters=filters,
        page=page,
        per_page=per_page,
        admin=admin,
    )

    return jsonify(normalize_pagination(
        items,
        lambda p: normalize_page(p, admin=admin),
        page=page,
        per_page=per_page,
        total=total,
    ))


@v1_bp.route("/pages/hierarchy", methods=["GET"])
@tenant_required
@feature_enabled("cms")
def page_hierarchy():
    tenant = g.current_tenant
    viewer = load_viewer("pages:read", preview=bool_arg("preview") or False)

    tree = get_page_hierarchy(tenant_id=tenant.id, caller=viewer)
    return jsonify({"items": normalize_tree(tree, normalize_page_node)})


@v1_bp.route("/pages/slug/<slug>", methods=["GET"])
@tenant_required
@feature_enabled("cms")
def get_page_by_slug(slug):
    tenant = g.current_tenant
    viewer = load_viewer("pages:read", preview=bool_arg("preview") or False)

    page, redirected_from = resolve_page_by_slug(tenant_id=tenant.id, slug=slug, caller=viewer)

    data = normalize_page(page, admin=viewer.admin_read)
    data["redirected_from"] = redirected_from
    return jsonify(data)


@v1_bp.route("/pages/<page_id>", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required("pages:read")
@feature_enabled("cms")
def get_page_by_id(page_id):
    tenant = g.current_tenant
    page = get_page(tenant_id=tenant.id, page_id=page_id)
    return jsonify(normalize_page(page, admin=True))


# ------------------------
# Writes
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required("pages:write")
@feature_enabled("cms")
def create_page_route():
    tenant = g.current_tenant
    data = request.get_json(silent=True) or {}

    page = create_page(tenant_id=tenant.id, actor_id=load_caller().user_id, data=data)
    return jsonify(normalize_page(page, admin=True)), 201


@v1_bp.route("/pages/<page_id>", methods=["PATCH"])
@jwt_required()
@tenant_required
@permission_required("pages:write")
@feature_enabled("cms")
def update_page_route(page_id):
    tenant = g.current_tenant
    page = get_page(tenant_id=tenant.id, page_id=page_id)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(page)

    data = request.get_json(silent=True) or {}
    page = update_page(
        tenant_id=tenant.id,
        page_id=page_id,
        actor_id=load_caller().user_id,
        data=data,
    )
    return jsonify(normalize_page(page, admin=True))


@v1_bp.route("/pages/<page_id>/publish", methods=["PATCH"])
@jwt_required()
@tenant_required
@permission_required("pages:publish")
@feature_enabled("cms")
def publish_page_route(page_id):
    page = publish_page(tenant_id=g.current_tenant.id, page_id=page_id, actor_id=load_caller().user_id)
    return jsonify(normalize_page(page, admin=True))


@v1_bp.route("/pages/<page_id>/unpublish", methods=["PATCH"])
@jwt_required()
@tenant_required
@permission_required("pages:publish")
@feature_enabled("cms")
def unpublish_page_route(page_id):
    page = unpublish_page(tenant_id=g.current_tenant.id, page_id=page_id, actor_id=load_caller().user_id)
    return jsonify(normalize_page(page, admin=True))


@v1_bp.route("/pages/<page_id>/archive", methods=["PATCH"])
@jwt_required()
@tenant_required
@permission_required("pages:publish")
@feature_enabled("cms")
def archive_page_route(page_id):
    page = archive_page(tenant_id=g.current_tenant.id, page_id=page_id, actor_id=load_caller().user_id)
    return jsonify(normalize_page(page, admin=True))


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@permission_required("pages:delete")
@feature_enabled("cms")
def delete_page_route(page_id):
    delete_page(tenant_id=g.current_tenant.id, page_id=page_id, actor_id=load_caller().user_id)
    return jsonify({"message": "Page deleted successfully"}), 200


@v1_bp.route("/pages/reorder", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required("pages:write")
@feature_enabled("cms")
def reorder_pages_route():
    data = request.get_json(silent=True) or {}

    pages = reorder_pages(
        tenant_id=g.current_tenant.id,
        updates=data.get("updates"),
        actor_id=load_caller().user_id,
    )
    return jsonify({
        "message": "Pages reordered successfully",
        "items": [{"id": p.id, "display_order": p.display_order} for p in pages],
    })


@v1_bp.route("/pages/bulk", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required("pages:write")
@feature_enabled("cms")
def bulk_pages_route():
    data = request.get_json(silent=True) or {}
    caller = load_caller()
    action = data.get("action")

    if action == "delete" and not caller.can("pages:delete"):
        raise PermissionDeniedError("Missing required permission: pages:delete")

    result = bulk_page_action(
        tenant_id=g.current_tenant.id,
        page_ids=data.get("ids"),
        action=action,
        actor_id=caller.user_id,
    )
    return jsonify(result)


@v1_bp.route("/pages/validate-slug", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required("pages:write")
@feature_enabled("cms")
def validate_slug_route():
    data = request.get_json(silent=True) or {}

    result = validate_page_slug(
        tenant_id=g.current_tenant.id,
        slug=data.get("slug"),
        exclude_id=data.get("exclude_id"),
    )
    return jsonify(result)
