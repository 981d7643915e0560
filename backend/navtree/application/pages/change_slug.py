from typing import Optional

from flask import current_app

from navtree.extensions import db
from navtree.application.tree_ops import is_slug_taken
from navtree.application.pages.redirects import record_redirect, release_redirect
from navtree.domain.slugs import assert_slug
from navtree.models.page import Page


def assert_page_slug(*, tenant_id: str, slug: Optional[str], exclude_id: Optional[str] = None) -> None:
    assert_slug(
        slug,
        is_taken=lambda candidate: is_slug_taken(
            Page, tenant_id=tenant_id, slug=candidate, exclude_id=exclude_id
        ),
        check_reserved=True,
        reserved_extra=current_app.config.get("RESERVED_SLUGS_EXTRA", ()),
    )


def change_page_slug(
    *,
    tenant_id: str,
    page: Page,
    new_slug: str,
    was_published: Optional[bool] = None,
) -> Optional[str]:
    """
    Move a page to a new slug inside the caller's transaction.

    Responsibilities:
    - Format / reserved route / conflict validation (raises, nothing written)
    - Drop any redirect that would shadow the new slug
    - Keep the old slug resolving when the page has ever been published

    was_published is the state before the caller's own changes; it
    defaults to the page's current published_at.

    Returns the old slug, or None when the slug did not change.
    """
    old_slug = page.slug
    if was_published is None:
        was_published = page.published_at is not None

    if new_slug == old_slug:
        return None

    assert_page_slug(tenant_id=tenant_id, slug=new_slug, exclude_id=page.id)

    release_redirect(tenant_id=tenant_id, slug=new_slug)
    page.slug = new_slug
    # Surface slug write errors here, not from inside the redirect savepoint
    db.session.flush()

    # Links to unpublished pages never went out, nothing to preserve
    if was_published:
        record_redirect(tenant_id=tenant_id, from_slug=old_slug, page_id=page.id)

    current_app.logger.info("Page %s slug changed %s -> %s", page.id, old_slug, new_slug)
    return old_slug
