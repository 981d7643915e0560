from sqlalchemy.exc import IntegrityError

from navtree.application.tree_ops import conflict_from_integrity_error
from navtree.domain.exceptions import ConcurrencyConflictError, SlugConflictError
from navtree.models.menu import DashboardMenu
from navtree.models.page import Page


def integrity_error(detail):
    return IntegrityError("UPDATE pages SET ...", {}, Exception(detail))


def test_sqlite_slug_violation_is_a_slug_conflict():
    exc = integrity_error("UNIQUE constraint failed: pages.tenant_id, pages.slug")

    error = conflict_from_integrity_error(Page, exc, value="about", label="Slug")

    assert isinstance(error, SlugConflictError)
    assert error.message == 'Slug "about" is already in use'


def test_postgres_key_violation_is_a_key_conflict():
    exc = integrity_error('duplicate key value violates unique constraint "uq_menu_key_per_tenant"')

    error = conflict_from_integrity_error(DashboardMenu, exc, value="reports", label="Menu key")

    assert isinstance(error, SlugConflictError)
    assert "reports" in error.message


def test_conflict_without_a_submitted_slug_has_a_plain_message():
    exc = integrity_error("UNIQUE constraint failed: pages.tenant_id, pages.slug")

    error = conflict_from_integrity_error(Page, exc, value=None, label="Slug")

    assert error.message == "Slug is already in use"
    assert "object at" not in error.message


def test_other_constraints_are_concurrency_conflicts():
    exc = integrity_error("FOREIGN KEY constraint failed")

    error = conflict_from_integrity_error(Page, exc, value=None, label="Slug")

    assert isinstance(error, ConcurrencyConflictError)
    assert error.status_code == 409
