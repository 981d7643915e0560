from flask import current_app, request, jsonify, g
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token
)
from navtree.models.user import User
from . import v1_bp


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "ValidationError", "message": "Invalid request body"}), 400

    email = data.get("email")
    password = data.get("password")

    if not email or not password:
        return jsonify({"error": "ValidationError", "message": "Email and password required"}), 400

    tenant = g.current_tenant

    user = User.query.filter_by(
        email=email,
        tenant_id=tenant.id
    ).first()

    if not user or not user.check_password(password):
        current_app.logger.info("Failed login for %s on tenant %s", email, tenant.id)
        return jsonify({"error": "AuthenticationRequired", "message": "Invalid credentials"}), 401

    if not user.is_active:
        return jsonify({"error": "PermissionDenied", "message": "User account disabled"}), 403

    # JWT subjects must be strings; tenant and role ride along as claims
    claims = {
        "tenant_id": tenant.id,
        "role": user.role
    }

    access_token = create_access_token(identity=user.id, additional_claims=claims)
    refresh_token = create_refresh_token(identity=user.id, additional_claims=claims)

    return jsonify({
        "access_token": access_token,
        "refresh_token": refresh_token
    }), 200
