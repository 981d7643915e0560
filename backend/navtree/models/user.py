from werkzeug.security import generate_password_hash, check_password_hash
from navtree.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class User(BaseModel, TenantMixin):
    __tablename__ = 'users'

    email = db.Column(db.String(120), nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)

    # Name of a Role in the same tenant
    role = db.Column(db.String(50), nullable=False, default='User')
    is_active = db.Column(db.Boolean, default=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "email", name="uq_user_email_per_tenant"),
    )

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)
