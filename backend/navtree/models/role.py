from navtree.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class Role(BaseModel, TenantMixin):
    __tablename__ = "roles"

    name = db.Column(db.String(50), nullable=False)
    description = db.Column(db.String(255), nullable=True)

    # e.g. ["pages:read", "pages:write", "menus:*"]
    permissions = db.Column(db.JSON, nullable=False, default=list)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "name", name="uq_role_name_per_tenant"),
    )
