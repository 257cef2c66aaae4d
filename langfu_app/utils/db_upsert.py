"""
Dialect-aware atomic upserts.

SQLite (3.24+) and PostgreSQL both support ``INSERT ... ON CONFLICT``; the
statement is executed as a single row operation, so counters expressed as
``column + n`` in the update branch are applied by the database and never
lost between concurrent requests.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from sqlalchemy import insert, update

from ..core.extensions import db


def _dialect_insert(model):
    dialect = db.session.get_bind().dialect.name
    if dialect == 'sqlite':
        from sqlalchemy.dialects.sqlite import insert as dialect_insert
    elif dialect == 'postgresql':
        from sqlalchemy.dialects.postgresql import insert as dialect_insert
    else:
        return None
    return dialect_insert(model)


def _key_filter(model, values: Dict[str, Any], conflict_columns: Sequence[str]):
    return [getattr(model, column) == values[column] for column in conflict_columns]


def upsert(
    model,
    conflict_columns: Sequence[str],
    insert_values: Dict[str, Any],
    update_values: Optional[Dict[str, Any]] = None,
) -> None:
    """Insert a row, or apply ``update_values`` to the existing one.

    With ``update_values`` empty/None the existing row is left untouched
    (insert-if-absent).
    """
    stmt = _dialect_insert(model)
    if stmt is not None:
        stmt = stmt.values(**insert_values)
        if update_values:
            stmt = stmt.on_conflict_do_update(index_elements=list(conflict_columns), set_=update_values)
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
        db.session.execute(stmt)
        return

    # Generic dialects: update first, insert when nothing matched
    where = _key_filter(model, insert_values, conflict_columns)
    if update_values:
        result = db.session.execute(
            update(model).where(*where).values(**update_values).execution_options(synchronize_session=False)
        )
        if result.rowcount:
            return
    elif db.session.query(model).filter(*where).first() is not None:
        return
    db.session.execute(insert(model).values(**insert_values))
