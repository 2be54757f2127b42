"""
Persistence helpers shared by every ORM model.

save() validates first and only then writes; a failed validation never
reaches the database. Store failures are rolled back and surfaced as
StoreError with the driver exception chained. Nothing is retried.
"""
import logging

from sqlalchemy import delete, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from domain.errors import StoreError, ValidationError
from domain.validation import check_rules

logger = logging.getLogger(__name__)


def discard_changes(instance) -> None:
    """
    Put a stored instance back to its last committed values.

    Rejected edits must not stay dirty in the session, or the next flush
    would write them. Transient and pending instances are left as they are.
    """
    state = inspect(instance)
    if not state.persistent:
        return
    unknown = []
    for attr in state.attrs:
        history = attr.history
        if not history.has_changes():
            continue
        if history.deleted:
            set_committed_value(instance, attr.key, history.deleted[0])
        else:
            unknown.append(attr.key)
    if unknown:
        state.session.expire(instance, unknown)


def validate(instance) -> None:
    """Raise ValidationError if any of the instance's rules is violated."""
    violations = check_rules(instance)
    if violations:
        discard_changes(instance)
        raise ValidationError.from_violations(violations, resource_type=type(instance).__name__)


async def _store_failure(db: AsyncSession, operation: str, exc: SQLAlchemyError) -> StoreError:
    try:
        await db.rollback()
    except SQLAlchemyError as rollback_exc:
        logger.warning(f"Rollback after failed {operation} also failed: {rollback_exc}")
    logger.error(f"Store failure during {operation}: {exc}")
    return StoreError(f"Store rejected {operation}: {exc.__class__.__name__}", operation=operation)


async def save(db: AsyncSession, instance):
    """
    Validate, then insert (new instance) or update (persistent instance).

    Args:
        db: Database session
        instance: ORM instance carrying __validation_rules__

    Returns:
        The same instance, with its primary key assigned

    Raises:
        ValidationError: a rule failed; no I/O was attempted
        StoreError: the store was unreachable or rejected the write
    """
    validate(instance)

    name = type(instance).__name__
    db.add(instance)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        raise await _store_failure(db, f"save {name}", e) from e

    logger.info(f"Saved {name} id={instance.id}")
    return instance


async def remove(db: AsyncSession, instance) -> None:
    """
    Delete a single instance.

    An instance that was never stored, or was already removed, matches no
    row, so there is nothing to delete and no error.
    """
    name = type(instance).__name__
    state = inspect(instance)
    if state.transient or state.pending or (state.detached and state.was_deleted):
        if state.pending:
            db.expunge(instance)
        logger.debug(f"Remove {name}: no stored row, nothing to delete")
        return
    try:
        await db.delete(instance)
        await db.commit()
    except SQLAlchemyError as e:
        raise await _store_failure(db, f"remove {name}", e) from e
    logger.info(f"Removed {name} id={instance.id}")


async def bulk_remove(db: AsyncSession, model, *criteria) -> int:
    """
    Delete every row of ``model`` matching ``criteria`` (all rows if none).

    Matching zero rows is not an error.

    Returns:
        int: number of rows removed
    """
    stmt = delete(model)
    if criteria:
        stmt = stmt.where(*criteria)
    try:
        result = await db.execute(stmt)
        await db.commit()
    except SQLAlchemyError as e:
        raise await _store_failure(db, f"bulk remove {model.__name__}", e) from e

    removed = result.rowcount or 0
    logger.info(f"Bulk removed {removed} {model.__tablename__} row(s)")
    return removed


async def get(db: AsyncSession, model, ident, *options):
    """Load one row by primary key, or None."""
    return await find_one(db, model, model.id == ident, options=options)


async def find_one(db: AsyncSession, model, *criteria, options=()):
    stmt = select(model).where(*criteria).options(*options)
    try:
        res = await db.execute(stmt)
    except SQLAlchemyError as e:
        raise await _store_failure(db, f"find {model.__name__}", e) from e
    return res.scalar_one_or_none()


async def find_all(db: AsyncSession, model, *criteria, options=(), order_by=()) -> list:
    """All rows matching criteria, in order_by order."""
    stmt = select(model).options(*options).order_by(*order_by)
    if criteria:
        stmt = stmt.where(*criteria)
    try:
        res = await db.execute(stmt)
    except SQLAlchemyError as e:
        raise await _store_failure(db, f"find {model.__name__}", e) from e
    return list(res.scalars().all())


async def count(db: AsyncSession, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    try:
        res = await db.execute(stmt)
    except SQLAlchemyError as e:
        raise await _store_failure(db, f"count {model.__name__}", e) from e
    return res.scalar_one()
