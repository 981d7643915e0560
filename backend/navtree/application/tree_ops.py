"""
Operations shared by every tree-shaped entity (pages, dashboard menus).

Models plug in through two class attributes:
- ORDER_FIELD: name of the sibling order column
- SLUG_FIELD: name of the unique routing key column
"""
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy import UniqueConstraint, func, select
from sqlalchemy.exc import IntegrityError

from navtree.extensions import db
from navtree.domain.exceptions import (
    ChildrenExistError,
    ConcurrencyConflictError,
    NavigationError,
    NotFoundError,
    SelfParentError,
    SlugConflictError,
    ValidationError,
)
from navtree.domain.invariants.tree import assert_parent_assignment, depth_of
from navtree.utils.transaction import savepoint


def get_entity(model, *, tenant_id: str, entity_id: str, label: str, lock: bool = False):
    stmt = select(model).where(model.id == entity_id, model.tenant_id == tenant_id)
    if lock:
        stmt = stmt.with_for_update()

    entity = db.session.execute(stmt).scalar_one_or_none()
    if not entity:
        raise NotFoundError(f"{label} with ID {entity_id} not found")
    return entity


def load_parent_map(model, *, tenant_id: str) -> Dict[str, Optional[str]]:
    """id -> parent_id for every row of the tenant (the arena the cycle guard walks)."""
    rows = db.session.execute(
        select(model.id, model.parent_id).where(model.tenant_id == tenant_id)
    ).all()
    return {row.id: row.parent_id for row in rows}


def validate_parent(
    model,
    *,
    tenant_id: str,
    entity_id: Optional[str],
    parent_id: Optional[str],
    label: str,
) -> None:
    """
    Parent must exist in the same tenant and must not close a cycle.
    entity_id is None on create, where no cycle is possible.
    """
    if parent_id is None:
        return

    if entity_id is not None and parent_id == entity_id:
        raise SelfParentError(f"{label} cannot be its own parent")

    exists = db.session.execute(
        select(model.id).where(model.id == parent_id, model.tenant_id == tenant_id)
    ).first()
    if not exists:
        raise NotFoundError(f"Parent {label.lower()} with ID {parent_id} not found")

    assert_parent_assignment(
        entity_id=entity_id,
        proposed_parent_id=parent_id,
        parent_of=load_parent_map(model, tenant_id=tenant_id),
        label=label,
    )


def sibling_count(model, *, tenant_id: str, parent_id: Optional[str]) -> int:
    stmt = select(func.count(model.id)).where(model.tenant_id == tenant_id)
    if parent_id is None:
        stmt = stmt.where(model.parent_id.is_(None))
    else:
        stmt = stmt.where(model.parent_id == parent_id)
    return db.session.execute(stmt).scalar_one()


def child_count(model, *, tenant_id: str, entity_id: str) -> int:
    return db.session.execute(
        select(func.count(model.id)).where(
            model.tenant_id == tenant_id,
            model.parent_id == entity_id,
        )
    ).scalar_one()


def assert_no_children(model, *, tenant_id: str, entity_id: str, message: str) -> None:
    if child_count(model, tenant_id=tenant_id, entity_id=entity_id):
        raise ChildrenExistError(message)


def is_slug_taken(model, *, tenant_id: str, slug: str, exclude_id: Optional[str] = None) -> bool:
    """Case-insensitive uniqueness check on the model's SLUG_FIELD."""
    column = getattr(model, model.SLUG_FIELD)
    stmt = select(model.id).where(
        model.tenant_id == tenant_id,
        func.lower(column) == slug.lower(),
    )
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    return db.session.execute(stmt.limit(1)).first() is not None


def conflict_from_integrity_error(model, exc: IntegrityError, *, value: Optional[str], label: str) -> NavigationError:
    """
    Translate a failed write on `model` into a domain error.

    Only a unique violation on the SLUG_FIELD is a slug/key conflict.
    Anything else (e.g. a parent deleted by a concurrent request) means
    the write raced another one.
    """
    column = model.SLUG_FIELD
    markers = {f"{model.__tablename__}.{column}"}
    for constraint in model.__table__.constraints:
        if isinstance(constraint, UniqueConstraint) and constraint.name and column in constraint.columns.keys():
            markers.add(constraint.name)

    detail = str(exc.orig)
    if any(marker in detail for marker in markers):
        if value:
            return SlugConflictError(f'{label} "{value}" is already in use')
        return SlugConflictError(f"{label} is already in use")

    return ConcurrencyConflictError("Concurrent update detected. Refresh and try again.")


def parse_reorder_payload(updates: Any) -> List[Dict[str, Any]]:
    if not isinstance(updates, list) or not updates:
        raise ValidationError("updates must be a non-empty list of {id, order}")

    parsed = []
    seen = set()
    for item in updates:
        if not isinstance(item, dict) or not isinstance(item.get("id"), str):
            raise ValidationError("Each update needs a string id")

        order = item.get("order")
        if isinstance(order, bool) or not isinstance(order, int) or order < 0:
            raise ValidationError(f"Invalid order for {item['id']}: {order!r}")

        if item["id"] in seen:
            raise ValidationError(f"Duplicate id in reorder batch: {item['id']}")
        seen.add(item["id"])

        parsed.append({"id": item["id"], "order": order})
    return parsed


def apply_reorder(model, *, tenant_id: str, updates: Any, label: str) -> List[Any]:
    """
    Validate then write every order change. Must run inside one transaction:
    an unknown id raises before any row is touched.
    """
    parsed = parse_reorder_payload(updates)
    ids = [item["id"] for item in parsed]

    rows = db.session.execute(
        select(model)
        .where(model.id.in_(ids), model.tenant_id == tenant_id)
        .with_for_update()
    ).scalars().all()

    by_id = {row.id: row for row in rows}
    missing = [entity_id for entity_id in ids if entity_id not in by_id]
    if missing:
        raise NotFoundError(
            f"One or more {label.lower()} IDs not found: {', '.join(missing)}"
        )

    for item in parsed:
        setattr(by_id[item["id"]], model.ORDER_FIELD, item["order"])

    db.session.flush()
    return [by_id[entity_id] for entity_id in ids]


def deepest_first(model, *, tenant_id: str, ids: Iterable[str]) -> List[str]:
    """
    Order ids so children come before their ancestors. Lets a bulk delete
    of a parent together with its children succeed.
    """
    parent_of = load_parent_map(model, tenant_id=tenant_id)
    ids = list(ids)
    position = {entity_id: index for index, entity_id in enumerate(ids)}

    def key(entity_id):
        depth = depth_of(entity_id, parent_of) if entity_id in parent_of else 0
        return (-depth, position[entity_id])

    return sorted(ids, key=key)


def parse_bulk_ids(ids: Any) -> List[str]:
    if not isinstance(ids, list) or not ids or not all(isinstance(i, str) for i in ids):
        raise ValidationError("ids must be a non-empty list of strings")
    # Dedupe, keep request order
    return list(dict.fromkeys(ids))


def run_bulk(
    *,
    ids: List[str],
    action: str,
    apply: Callable[[str], None],
) -> Dict[str, Any]:
    """
    Run `apply` for each id in its own savepoint.

    One item failing never undoes or blocks another; failures are collected
    with their error code and message.
    """
    succeeded: List[str] = []
    failed: List[Dict[str, str]] = []

    for entity_id in ids:
        try:
            with savepoint():
                apply(entity_id)
            succeeded.append(entity_id)
        except NavigationError as exc:
            failed.append({"id": entity_id, "error": exc.code, "message": exc.message})
        except IntegrityError as exc:
            failed.append({
                "id": entity_id,
                "error": "IntegrityError",
                "message": str(exc.orig),
            })

    return {"action": action, "succeeded": succeeded, "failed": failed}
