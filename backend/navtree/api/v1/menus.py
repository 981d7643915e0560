# navtree/api/v1/menus.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required

from navtree.application.menus.bulk_action import bulk_menu_action
from navtree.application.menus.create_menu import create_menu
from navtree.application.menus.delete_menu import delete_menu
from navtree.application.menus.menu_key import validate_menu_key
from navtree.application.menus.queries import find_menu_by_route, get_menu, get_user_menus, list_menus
from navtree.application.menus.reorder_menus import reorder_menus
from navtree.application.menus.set_menu_status import set_menu_status
from navtree.application.menus.update_menu import update_menu
from navtree.domain.access import is_visible
from navtree.domain.exceptions import PermissionDeniedError, ValidationError
from navtree.normalizers.menu import normalize_menu, normalize_route_config
from navtree.normalizers.pagination import normalize_pagination
from navtree.normalizers.tree import normalize_tree
from navtree.utils.caller import load_caller, load_viewer
from navtree.utils.decorators import tenant_required, permission_required
from navtree.utils.optimistic_lock import enforce_optimistic_lock
from navtree.utils.pagination import bool_arg, pagination_args
from . import v1_bp


@v1_bp.route("/dashboard-menus", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required("menus:read")
def list_menus_route():
    page, per_page = pagination_args()

    items, total = list_menus(
        tenant_id=g.current_tenant.id,
        filters={
            "status": request.args.get("status"),
            "parent_id": request.args.get("parent_id"),
        },
        page=page,
        per_page=per_page,
    )

    return jsonify(normalize_pagination(
        items,
        lambda m: normalize_menu(m, admin=True),
        page=page,
        per_page=per_page,
        total=total,
    ))


@v1_bp.route("/dashboard-menus/user-menus", methods=["GET"])
@jwt_required()
@tenant_required
def user_menus():
    tree = get_user_menus(tenant_id=g.current_tenant.id, caller=load_caller())
    return jsonify({"items": normalize_tree(tree, normalize_menu)})


@v1_bp.route("/dashboard-menus/hierarchy", methods=["GET"])
@jwt_required()
@tenant_required
def menu_hierarchy():
    viewer = load_viewer("menus:read", preview=bool_arg("preview") or False)

    tree = get_user_menus(tenant_id=g.current_tenant.id, caller=viewer)
    return jsonify({
        "items": normalize_tree(tree, lambda m: normalize_menu(m, admin=viewer.admin_read)),
    })


@v1_bp.route("/dashboard-menus/route", methods=["GET"])
@jwt_required()
@tenant_required
def menu_for_route():
    path = request.args.get("path")
    if not path:
        raise ValidationError("path query parameter is required")

    menu = find_menu_by_route(tenant_id=g.current_tenant.id, route=path)

    if not is_visible(menu, load_caller()):
        raise PermissionDeniedError("You do not have access to this page")

    return jsonify({
        "menu": normalize_menu(menu),
        "config": normalize_route_config(menu),
    })


@v1_bp.route("/dashboard-menus/<menu_id>", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required("menus:read")
def get_menu_route(menu_id):
    menu = get_menu(tenant_id=g.current_tenant.id, menu_id=menu_id)
    return jsonify(normalize_menu(menu, admin=True))


@v1_bp.route("/dashboard-menus", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required("menus:write")
def create_menu_route():
    data = request.get_json(silent=True) or {}

    menu = create_menu(tenant_id=g.current_tenant.id, actor_id=load_caller().user_id, data=data)
    return jsonify(normalize_menu(menu, admin=True)), 201


@v1_bp.route("/dashboard-menus/<menu_id>", methods=["PATCH"])
@jwt_required()
@tenant_required
@permission_required("menus:write")
def update_menu_route(menu_id):
    tenant = g.current_tenant
    enforce_optimistic_lock(get_menu(tenant_id=tenant.id, menu_id=menu_id))

    data = request.get_json(silent=True) or {}
    menu = update_menu(
        tenant_id=tenant.id,
        menu_id=menu_id,
        actor_id=load_caller().user_id,
        data=data,
    )
    return jsonify(normalize_menu(menu, admin=True))


@v1_bp.route("/dashboard-menus/<menu_id>/<action>", methods=["PATCH"])
@jwt_required()
@tenant_required
@permission_required("menus:write")
def menu_status_route(menu_id, action):
    if action not in ("publish", "unpublish", "toggle"):
        raise ValidationError(f"Invalid action: {action}")

    menu = set_menu_status(
        tenant_id=g.current_tenant.id,
        menu_id=menu_id,
        action=action,
        actor_id=load_caller().user_id,
    )
    return jsonify(normalize_menu(menu, admin=True))


@v1_bp.route("/dashboard-menus/<menu_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@permission_required("menus:delete")
def delete_menu_route(menu_id):
    delete_menu(tenant_id=g.current_tenant.id, menu_id=menu_id, actor_id=load_caller().user_id)
    return jsonify({"message": "Menu deleted successfully"}), 200


@v1_bp.route("/dashboard-menus/reorder", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required("menus:write")
def reorder_menus_route():
    data = request.get_json(silent=True) or {}

    menus = reorder_menus(
        tenant_id=g.current_tenant.id,
        updates=data.get("updates"),
        actor_id=load_caller().user_id,
    )
    return jsonify({
        "message": "Menus reordered successfully",
        "items": [{"id": m.id, "order": m.order} for m in menus],
    })


@v1_bp.route("/dashboard-menus/bulk", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required("menus:write")
def bulk_menus_route():
    data = request.get_json(silent=True) or {}
    caller = load_caller()
    action = data.get("action")

    if action == "delete" and not caller.can("menus:delete"):
        raise PermissionDeniedError("Missing required permission: menus:delete")

    result = bulk_menu_action(
        tenant_id=g.current_tenant.id,
        menu_ids=data.get("ids"),
        action=action,
        actor_id=caller.user_id,
    )
    return jsonify(result)


@v1_bp.route("/dashboard-menus/validate-key", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required("menus:write")
def validate_key_route():
    data = request.get_json(silent=True) or {}

    result = validate_menu_key(
        tenant_id=g.current_tenant.id,
        key=data.get("key"),
        exclude_id=data.get("exclude_id"),
    )
    return jsonify(result)
