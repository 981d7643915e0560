from navtree.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class PageRedirect(BaseModel, TenantMixin):
    """
    Old slug -> page id. Pointing at the id (not the new slug) makes a
    chain of renames resolve straight to the page's current slug.
    """
    __tablename__ = "page_redirects"

    from_slug = db.Column(db.String(200), nullable=False, index=True)
    to_page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=False, index=True)
    redirect_type = db.Column(db.Integer, nullable=False, default=301)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "from_slug", name="uq_redirect_slug_per_tenant"),
    )
