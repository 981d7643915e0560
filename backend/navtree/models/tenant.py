from navtree.extensions import db
from .base import BaseModel

class Tenant(BaseModel):
    __tablename__ = "tenants"

    # Basic info
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True)

    # Feature toggles
    enable_cms = db.Column(db.Boolean, default=True)
    enable_blog = db.Column(db.Boolean, default=True)
    enable_ecommerce = db.Column(db.Boolean, default=False)
    enable_inventory = db.Column(db.Boolean, default=False)
    enable_shipping = db.Column(db.Boolean, default=False)
    enable_coaching = db.Column(db.Boolean, default=False)
    enable_calendar = db.Column(db.Boolean, default=False)
    enable_messaging = db.Column(db.Boolean, default=False)
    enable_member_portal = db.Column(db.Boolean, default=False)

    # JSON field for flags that have no column (menu/page feature_flag names)
    features = db.Column(db.JSON, default=dict)

    def has_feature(self, feature_name: str) -> bool:
        """
        Check if a feature is enabled for this tenant.

        Accepts both "ecommerce" and "enable_ecommerce" spellings.
        """
        features = self.features or {}

        # Check JSON overrides first
        if features.get(feature_name) is not None:
            return bool(features.get(feature_name))

        # Fallback to attribute toggles
        attr_name = feature_name if feature_name.startswith("enable_") else f"enable_{feature_name}"
        return bool(getattr(self, attr_name, False))
