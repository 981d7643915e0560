from .tenant import Tenant
from .role import Role
from .user import User
from .page import Page
from .page_redirect import PageRedirect
from .menu import DashboardMenu
from .audit_log import AuditLog

__all__ = [
    "Tenant",
    "Role",
    "User",
    "Page",
    "PageRedirect",
    "DashboardMenu",
    "AuditLog",
]
