"""Row store backed by Protean repositories.

Table names resolve to the aggregates in ``storefront.rowstore.tables``; the
configured Protean provider (memory in development and tests, PostgreSQL in
production) does the actual storage. Calls must run inside the storefront
domain context.

Provider failures (lost connections, constraint violations, failed commits)
surface as ``RowStoreError`` so callers handle one error type whatever the
backend.
"""

from contextlib import contextmanager

import structlog
from protean.core.unit_of_work import UnitOfWork
from protean.exceptions import DatabaseError, ObjectNotFoundError, TransactionError, ValidationError
from protean.utils.globals import current_domain
from protean.utils.reflection import declared_fields
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storefront.rowstore.port import RowConflictError, RowNotFoundError, RowStore, RowStoreError
from storefront.rowstore.tables import TABLES, utcnow

logger = structlog.get_logger(__name__)

# Same cap the hosted backend applies to a single read
MAX_ROWS = 1000

BACKEND_ERRORS = (SQLAlchemyError, DatabaseError, TransactionError)


def _is_conflict(exc: Exception) -> bool:
    # Outside an explicit unit of work Protean commits on its own and reports
    # a unique-index violation as a failed commit
    if isinstance(exc, IntegrityError):
        return True
    extra_info = getattr(exc, "extra_info", None) or {}
    return isinstance(exc, TransactionError) and extra_info.get("original_exception") == "IntegrityError"


@contextmanager
def backend_call(table: str, action: str):
    """Re-raise provider failures inside the block as ``RowStoreError``."""
    try:
        yield
    except BACKEND_ERRORS as exc:
        if _is_conflict(exc):
            logger.info("Row store write conflicted", table=table, action=action, error=str(exc))
            raise RowConflictError(f"Could not {action} {table}: {exc}", table=table) from exc
        logger.warning("Row store call failed", table=table, action=action, error=str(exc))
        raise RowStoreError(f"Could not {action} {table}: {exc}", table=table) from exc


class ProteanRowStore(RowStore):
    """Row-store adapter that persists tables as Protean aggregates."""

    def query(self, table, filters=None, order=None, limit=None):
        cls = self._table(table)
        with backend_call(table, "read"):
            queryset = current_domain.repository_for(cls)._dao.query
            if filters:
                queryset = queryset.filter(**filters)
            if order:
                queryset = queryset.order_by(order)
            queryset = queryset.limit(limit if limit is not None else MAX_ROWS)
            return [record.to_dict() for record in queryset.all().items]

    def insert(self, table, record):
        row = self._build(table, record)
        with backend_call(table, "insert into"):
            current_domain.repository_for(self._table(table)).add(row)
        stored = row.to_dict()
        self._notify_inserted(table, [stored])
        return stored

    def insert_many(self, table, records):
        rows = [self._build(table, record) for record in records]
        cls = self._table(table)
        # The unit of work rolls back before the error leaves the block
        with backend_call(table, "insert into"):
            repo = current_domain.repository_for(cls)
            with UnitOfWork():
                for row in rows:
                    repo.add(row)
        stored = [row.to_dict() for row in rows]
        self._notify_inserted(table, stored)
        return stored

    def update(self, table, row_id, patch):
        cls = self._table(table)
        self._check_columns(table, cls, patch)
        with backend_call(table, "update"):
            repo = current_domain.repository_for(cls)
            try:
                row = repo.get(row_id)
            except ObjectNotFoundError as exc:
                raise RowNotFoundError(f"No row with id {row_id} in {table}", table=table) from exc

        try:
            for column, value in patch.items():
                setattr(row, column, value)
        except ValidationError as exc:
            raise RowStoreError(f"Invalid update for {table}: {exc.messages}", table=table) from exc

        if "updated_at" in declared_fields(cls) and "updated_at" not in patch:
            row.updated_at = utcnow()
        with backend_call(table, "update"):
            repo.add(row)
        return row.to_dict()

    def delete(self, table, filters):
        cls = self._table(table)
        with backend_call(table, "delete from"):
            repo = current_domain.repository_for(cls)
            records = repo._dao.query.filter(**filters).limit(MAX_ROWS).all().items
            for record in records:
                repo._dao.delete(record)
        return len(records)

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @staticmethod
    def _table(table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise RowStoreError(f"Unknown table: {table}", table=table) from None

    @staticmethod
    def _check_columns(table: str, cls, record: dict) -> None:
        unknown = set(record) - set(declared_fields(cls))
        if unknown:
            raise RowStoreError(f"Unknown columns for {table}: {sorted(unknown)}", table=table)

    def _build(self, table: str, record: dict):
        cls = self._table(table)
        self._check_columns(table, cls, record)
        try:
            return cls(**record)
        except ValidationError as exc:
            logger.warning("Rejected row for table", table=table, errors=exc.messages)
            raise RowStoreError(f"Invalid row for {table}: {exc.messages}", table=table) from exc
