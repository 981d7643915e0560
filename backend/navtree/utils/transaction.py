from contextlib import contextmanager
from navtree.extensions import db


@contextmanager
def transactional():
    """Context manager for database transactions."""
    try:
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


@contextmanager
def savepoint():
    """
    Nested transaction for work that may fail without taking the
    surrounding transaction down with it.
    """
    with db.session.begin_nested():
        yield
