from navtree.extensions import db
from navtree.domain.access import AccessRule
from navtree.domain.lifecycle.menu import ACTIVE, HARDCODED
from .base import BaseModel
from .tenant_mixin import TenantMixin


class DashboardMenu(BaseModel, TenantMixin):
    __tablename__ = "dashboard_menus"

    ORDER_FIELD = "order"
    SLUG_FIELD = "key"

    key = db.Column(db.String(200), nullable=False, index=True)
    label = db.Column(db.String(200), nullable=False)
    icon = db.Column(db.String(100), nullable=True)
    route = db.Column(db.String(512), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    badge = db.Column(db.String(50), nullable=True)

    parent_id = db.Column(db.String(36), db.ForeignKey("dashboard_menus.id"), nullable=True, index=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default=ACTIVE, index=True)

    # How the dashboard renders the route
    page_type = db.Column(db.String(30), nullable=False, default=HARDCODED)
    page_identifier = db.Column(db.String(200), nullable=True)
    component_path = db.Column(db.String(512), nullable=True)

    required_permissions = db.Column(db.JSON, nullable=False, default=list)
    required_roles = db.Column(db.JSON, nullable=False, default=list)
    feature_flag = db.Column(db.String(100), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "key", name="uq_menu_key_per_tenant"),
        db.Index("idx_menu_parent_order", "tenant_id", "parent_id", "order"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE

    def access_rule(self) -> AccessRule:
        return AccessRule(
            live=self.is_active,
            permissions=frozenset(self.required_permissions or ()),
            roles=frozenset(self.required_roles or ()),
            feature_flag=self.feature_flag or None,
        )
