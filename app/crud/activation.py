"""
Single-active-row activation shared by job postings and the CV library.

Deactivating the old row and activating the new one happen inside one
transaction, so no reader ever observes two active rows, and a failure leaves
the previous active row untouched.

On PostgreSQL concurrent activations of the same table are serialized with a
transaction-scoped advisory lock. Without it, two READ COMMITTED transactions
could each deactivate the rows they can see and then collide on the partial
unique index when both insert an active row. SQLite serializes writers itself.
"""

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session


def lock_activation(db: Session, model) -> None:
    """Block until no other transaction is activating a row of `model`'s table."""
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(select(func.pg_advisory_xact_lock(func.hashtext(model.__tablename__))))


def deactivate_all(db: Session, model) -> None:
    """Clear the active flag on every row, without committing."""
    db.execute(
        update(model)
        .where(model.is_active.is_(True))
        .values(is_active=False)
        .execution_options(synchronize_session="fetch")
    )


def activate_exclusive(db: Session, record) -> None:
    """
    Make `record` the only active row of its table and commit.

    `record` may be new (not yet flushed) or already persisted. The last
    activation to commit wins.
    """
    model = type(record)
    try:
        # Released automatically at commit or rollback
        lock_activation(db, model)
        deactivate_all(db, model)
        record.is_active = True
        db.add(record)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
