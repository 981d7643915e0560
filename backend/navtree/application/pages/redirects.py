from typing import Optional

from flask import current_app
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from navtree.extensions import db
from navtree.models.page import Page
from navtree.models.page_redirect import PageRedirect
from navtree.utils.transaction import savepoint


def record_redirect(*, tenant_id: str, from_slug: str, page_id: str) -> bool:
    """
    Point `from_slug` at `page_id`, replacing any older mapping for it.

    Runs in a savepoint: on failure only the redirect is rolled back, the
    caller's slug change stands. Returns False when bookkeeping failed.
    """
    try:
        with savepoint():
            existing = db.session.execute(
                select(PageRedirect).where(
                    PageRedirect.tenant_id == tenant_id,
                    PageRedirect.from_slug == from_slug,
                )
            ).scalar_one_or_none()

            if existing:
                existing.to_page_id = page_id
            else:
                redirect = PageRedirect()
                redirect.tenant_id = tenant_id
                redirect.from_slug = from_slug
                redirect.to_page_id = page_id
                redirect.redirect_type = 301
                db.session.add(redirect)
        return True
    except SQLAlchemyError as exc:
        current_app.logger.warning(
            "Redirect bookkeeping failed for %s -> %s: %s", from_slug, page_id, exc
        )
        return False


def release_redirect(*, tenant_id: str, slug: str) -> None:
    """A page now owns `slug` directly, so no redirect may shadow it."""
    db.session.execute(
        delete(PageRedirect).where(
            PageRedirect.tenant_id == tenant_id,
            func.lower(PageRedirect.from_slug) == slug.lower(),
        )
    )


def drop_redirects_for_page(*, tenant_id: str, page_id: str) -> int:
    result = db.session.execute(
        delete(PageRedirect).where(
            PageRedirect.tenant_id == tenant_id,
            PageRedirect.to_page_id == page_id,
        )
    )
    return result.rowcount or 0


def resolve_redirect(*, tenant_id: str, slug: str) -> Optional[Page]:
    return db.session.execute(
        select(Page)
        .join(PageRedirect, PageRedirect.to_page_id == Page.id)
        .where(
            PageRedirect.tenant_id == tenant_id,
            Page.tenant_id == tenant_id,
            func.lower(PageRedirect.from_slug) == slug.lower(),
        )
    ).scalar_one_or_none()
