from flask import request, g, jsonify
from navtree.models.tenant import Tenant

# Routes that are served without a tenant
TENANT_EXEMPT_ENDPOINTS = {"v1.health_check", "openapi_navigation", "static"}


def tenant_middleware(app):
    @app.before_request
    def load_tenant():
        if request.endpoint in TENANT_EXEMPT_ENDPOINTS:
            return None
        if request.blueprint == "swagger_ui":
            return None

        tenant_id = request.headers.get('X-Tenant-ID')
        if not tenant_id:
            return jsonify({"error": "TenantMissing", "message": "X-Tenant-ID header is missing"}), 400

        tenant = Tenant.query.filter_by(id=tenant_id, is_active=True).first()
        if not tenant:
            return jsonify({"error": "TenantNotFound", "message": "Invalid tenant"}), 404

        # Attach tenant to global context
        g.current_tenant = tenant
