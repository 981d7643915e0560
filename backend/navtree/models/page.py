from navtree.extensions import db
from navtree.domain.access import AccessRule
from navtree.domain.lifecycle.page import DRAFT, PUBLISHED
from .base import BaseModel
from .tenant_mixin import TenantMixin

PUBLIC = "PUBLIC"
PRIVATE = "PRIVATE"
PAGE_VISIBILITIES = (PUBLIC, PRIVATE)


class Page(BaseModel, TenantMixin):
    __tablename__ = 'pages'

    ORDER_FIELD = "display_order"
    SLUG_FIELD = "slug"

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    content = db.Column(db.Text, nullable=True)
    excerpt = db.Column(db.String(500), nullable=True)
    meta_title = db.Column(db.String(200), nullable=True)
    meta_description = db.Column(db.String(500), nullable=True)
    custom_css = db.Column(db.Text, nullable=True)

    parent_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=True, index=True)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    status = db.Column(db.String(20), nullable=False, default=DRAFT, index=True)
    visibility = db.Column(db.String(20), nullable=False, default=PUBLIC)
    published_at = db.Column(db.DateTime(timezone=True), nullable=True)
    show_in_navigation = db.Column(db.Boolean, nullable=False, default=True)

    required_permissions = db.Column(db.JSON, nullable=False, default=list)
    required_roles = db.Column(db.JSON, nullable=False, default=list)
    feature_flag = db.Column(db.String(100), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_page_slug_per_tenant"),
        db.Index("idx_page_nav", "tenant_id", "status", "show_in_navigation", "display_order"),
    )

    def access_rule(self) -> AccessRule:
        return AccessRule(
            live=self.status == PUBLISHED,
            requires_auth=self.visibility == PRIVATE,
            permissions=frozenset(self.required_permissions or ()),
            roles=frozenset(self.required_roles or ()),
            feature_flag=self.feature_flag or None,
        )
